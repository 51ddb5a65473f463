"""Run the service with uvicorn: `python -m src`."""

import uvicorn

from src.config import get_settings


def main() -> None:
    settings = get_settings()
    # Logging is configured in the app lifespan.
    uvicorn.run(
        "src.api.app:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
