"""Launch the Hostmate API server: ``python -m hostmate``."""
import logging

import uvicorn

from hostmate.core.config import get_settings
from hostmate.core.logging_utils import configure_logging

logger = logging.getLogger("hostmate")


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting %s on http://%s:%s", settings.app_name, settings.api_host, settings.api_port)
    uvicorn.run(
        "hostmate.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
