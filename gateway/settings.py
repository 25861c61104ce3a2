from __future__ import annotations

"""Application-level configuration helpers (env → constants).

Only generic utilities that may be imported *anywhere* in the code-base
should live in this module.  Connection settings for the time-series backend
live in the package ``__init__`` next to ``load_dotenv()``.
"""

# Standard library
import os

__all__ = ["ALLOWED_ORIGINS", "RATE_LIMIT", "LOG_LEVEL", "PORT"]


def _collect_origins() -> list[str]:
    """Collect allowed CORS origins from the environment.

    Unlike a dashboard backend the gateway is mostly called server-to-server,
    so no origin is allowed unless one is configured explicitly.
    """
    origins: list[str] = []
    for name in ("FRONTEND_ORIGIN", "EXTRA_ORIGIN"):
        if (val := os.getenv(name)):
            origins.append(val)
    return origins


ALLOWED_ORIGINS: list[str] = _collect_origins()

# slowapi limit string applied per client address
RATE_LIMIT: str = os.getenv("RATE_LIMIT", "600/minute")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

PORT: int = int(os.getenv("PORT", "8080"))
