import logging

import uvicorn

from taskflow.app import create_app
from taskflow.config import load_settings
from taskflow.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging()
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)

    app = create_app(settings)
    logger.info("Listening on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
