"""
Centralized logging configuration.
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(
    log_file: Optional[Path] = None,
    log_level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "30 days",
    console_output: bool = True
):
    """
    Configure logging for the entire application.

    Args:
        log_file: Path to log file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        rotation: When to rotate logs (e.g., "1 day", "10 MB")
        retention: How long to keep old logs
        console_output: Whether to output to console
    """
    # Remove default handler
    logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<magenta>{extra[environment]}</magenta> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    # Records logged without a bound environment still need the key
    logger.configure(extra={"environment": "-"})

    # Console goes to stderr so command output on stdout stays parseable
    if console_output:
        logger.add(
            sys.stderr,
            format=log_format,
            level=log_level,
            colorize=True
        )

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=log_format,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip"
        )

    logger.debug(f"Logging configured: level={log_level}, file={log_file}")


def get_logger(environment: Optional[str] = None):
    """
    Get logger instance, bound to a deployment environment when given.
    """
    if environment:
        return logger.bind(environment=environment)
    return logger
