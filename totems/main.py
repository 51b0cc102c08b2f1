"""
Main entry point for the Totems registry service.
"""

import structlog
import uvicorn

from .config import settings
from .database.connection import engine, init_db
from .utils.logging import setup_logging


def main(init_only=False, debug=False):
    """Create the schema, then serve the read API unless init_only is set"""
    setup_logging(level="DEBUG" if debug else None)
    logger = structlog.get_logger()
    logger.info(
        "Starting Totems registry",
        version=settings.REGISTRY_VERSION,
        api_host=settings.API_HOST,
        api_port=settings.API_PORT,
    )

    try:
        init_db(engine)
        logger.info("Database schema ready")

        if init_only:
            return

        from .api.main import app

        uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
    except Exception as e:
        logger.error("Unhandled exception", error=str(e))
        raise


if __name__ == "__main__":
    main()
