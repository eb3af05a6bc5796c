"""Loguru setup shared by the API server and the CLI."""

import sys
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | <cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[request_id]} | {name}:{function}:{line} | {message}"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    json_file: bool = False,
) -> None:
    """
    Configure console logging and an optional rotating log file.

    Records without a bound ``request_id`` show ``-`` in that column, so
    startup messages and per-render messages share one layout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to log file
        rotation: Log rotation size
        retention: Log retention period
        json_file: Write the file sink as JSON lines instead of text
    """
    logger.remove()
    logger.configure(extra={"request_id": "-"})

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level.upper(), colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=log_level.upper(),
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=json_file,
            enqueue=True,
        )


def get_logger(name: str, **context: Any) -> Any:
    """
    Get a logger bound to a module name and optional context.

    Args:
        name: Logger name (typically __name__)
        **context: Extra fields (request_id, scenes, ...)

    Returns:
        Bound loguru logger
    """
    return logger.bind(name=name, **context)


setup_logging()
