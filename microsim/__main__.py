"""Run the MicroSim API server: `python -m microsim`."""

import logging

import uvicorn

from microsim.config import Settings
from microsim.logging_setup import configure_logging

logger = logging.getLogger("MicroSimAPI")


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("MicroSim server starting on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        "microsim.api.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
