"""
Logging configuration using Loguru.

Provides structured, colorized logging with automatic rotation and retention.
"""
import sys
from pathlib import Path
from loguru import logger

from design_service.config import settings


def setup_logging() -> None:
    """
    Configure loguru logger with appropriate handlers and formatting.

    Development mode:
    - Colorized console output
    - Detailed format with file:line info

    Production mode:
    - Plain console output (for container logs)
    - File output with rotation
    """

    # Remove default handler
    logger.remove()

    # Development format: colorized, detailed
    dev_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[logger_name]}</cyan> | "
        "<level>{message}</level>"
    )

    # Production format: structured, parseable
    prod_format = (
        "{time:YYYY-MM-DD HH:mm:ss} | "
        "{level: <8} | "
        "{extra[logger_name]} | "
        "{message}"
    )

    logger.configure(extra={"logger_name": "design_service"})

    # Console handler (always enabled)
    logger.add(
        sys.stderr,
        format=dev_format if settings.debug else prod_format,
        level=settings.log_level,
        colorize=settings.debug,
        backtrace=settings.debug,
        diagnose=settings.debug,
    )

    # File handler (production only)
    if not settings.debug:
        log_dir = Path(settings.log_directory)
        log_dir.mkdir(exist_ok=True)

        logger.add(
            log_dir / "design-service.log",
            format=prod_format,
            level="INFO",
            rotation="100 MB",
            retention="10 days",
            compression="zip",
            enqueue=True,
        )

    logger.info(f"Logging configured - Level: {settings.log_level}")
    logger.debug(f"Debug mode: {settings.debug}")
