import sys

from loguru import logger

from teamsorter.core.settings import Settings, config_settings


def setup_logger(settings: Settings = config_settings) -> None:
    """Configure loguru sinks: colorized stdout, plus a rotating file if LOG_FILE is set."""
    logger.remove()

    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.LOG_LEVEL,
        colorize=True,
    )

    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            rotation="50 MB",
            retention="10 days",
            compression="zip",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=settings.LOG_LEVEL,
        )

    logger.debug("Logging configured at level {}", settings.LOG_LEVEL)
