import logging

import uvicorn

from portfolio_api.config.settings import get_settings
from portfolio_api.logging_conf import setup_logging

logger = logging.getLogger("portfolio_api")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    logger.info("server listening on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(
        "portfolio_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
