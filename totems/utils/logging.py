import structlog
import logging

from totems.config import settings


def setup_logging(level: str = None, log_format: str = None):
    """Setup structured logging configuration"""
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    renderer = (
        structlog.dev.ConsoleRenderer()
        if (log_format or settings.LOG_FORMAT) == "console"
        else structlog.processors.JSONRenderer()
    )

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )


def log_operation(operation: str, ticker: str = None, level: str = "INFO", **kwargs):
    """Emit one registry operation record"""
    logger = structlog.get_logger()
    log_method = getattr(logger, level.lower(), logger.info)
    log_method(operation, ticker=ticker, **kwargs)
