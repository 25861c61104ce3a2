"""Relative period parsing ("10m", "2h", "3d", "1w" → seconds)."""

from __future__ import annotations

import re

from gateway.utils.errors import ParseError

__all__ = ["parse_period"]

_UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400, "w": 604800}

# Results are int64 seconds, so no digit group can be longer than 19.
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1

# Searched, not full-matched: "last 10m" still yields 600.  The lookbehind
# keeps an over-long number from matching on its trailing digits.
_PERIOD_RE = re.compile(r"(?<![0-9])([0-9]{1,19})(minutes|minute|m|hours|hour|h|days|day|d|weeks|week|w)")
_INTEGER_RE = re.compile(r"[+-]?[0-9]{1,19}")


def _int64(value: str, seconds: int) -> int:
    if not _INT64_MIN <= seconds <= _INT64_MAX:
        raise ParseError(f"period out of range: {value!r}")
    return seconds


def parse_period(value: str) -> int:
    """Return the number of seconds described by ``value``.

    ``value`` is either a relative period (``<digits><unit>``, units m/h/d/w
    with their long forms) or a plain signed integer taken as seconds.
    Empty input is rejected; callers substitute their own default first.
    Anything outside the int64 range raises ``ParseError``.
    """
    match = _PERIOD_RE.search(value)
    if match:
        amount, unit = match.groups()
        return _int64(value, int(amount) * _UNIT_SECONDS[unit[0]])

    if _INTEGER_RE.fullmatch(value):
        return _int64(value, int(value))

    raise ParseError(f"invalid period: {value!r}")
