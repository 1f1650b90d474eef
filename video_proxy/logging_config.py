"""
Logging setup via loguru.

Console output is colored and human readable. When a log file is configured,
a second sink writes JSON lines with rotation.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def configure_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Replace loguru's default sink with ours. The file sink is added only when a path is given."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level="DEBUG",
            format="{message}",
            serialize=True,
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )
