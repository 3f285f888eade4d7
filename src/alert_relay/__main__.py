"""Run the relay with uvicorn: ``python -m alert_relay``."""

import uvicorn

from alert_relay.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "alert_relay.app:app",
        host="0.0.0.0",
        port=settings.port or 8080,
        log_config=None,
    )


if __name__ == "__main__":
    main()
