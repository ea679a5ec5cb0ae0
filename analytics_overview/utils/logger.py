"""
Logging configuration
"""
from loguru import logger
import sys
from typing import Optional
from analytics_overview.config import Settings, get_settings


def setup_logger(settings: Optional[Settings] = None):
    """Configure console, daily update log and error log sinks"""
    settings = settings or get_settings()
    logger.remove()  # Remove default handler

    # Console logging
    logger.add(
        sys.stdout,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=settings.log_level
    )

    # One file per day of update runs
    logger.add(
        f"{settings.log_dir}/analytics_overview_{{time:YYYY-MM-DD}}.log",
        rotation="00:00",
        retention=settings.log_retention,
        compression="zip",
        level="INFO"
    )

    # Failed runs and remote API errors
    logger.add(
        f"{settings.log_dir}/errors_{{time:YYYY-MM-DD}}.log",
        rotation="00:00",
        retention=settings.error_log_retention,
        level=settings.error_log_level
    )

    return logger


# Initialize logger
log = setup_logger()
