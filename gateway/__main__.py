"""Run the gateway with uvicorn: ``python -m gateway``."""

import uvicorn

from gateway.settings import PORT


def main() -> None:
    # log_config=None keeps the JSON handler installed by create_app()
    uvicorn.run("gateway.main:app", host="0.0.0.0", port=PORT, log_config=None)


if __name__ == "__main__":
    main()
