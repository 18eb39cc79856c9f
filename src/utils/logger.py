"""loguru sinks for launch-radar.

Two sinks: the console, where launch reports and stats blocks are read live,
and a daily file under ``log_dir`` that keeps DEBUG detail (skipped accounts,
RPC retries, reconnect attempts) for later inspection.
"""

import os
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - "
    "<level>{message}</level>"
)
LOG_FILE_PATTERN = "launch_radar_{time:YYYY-MM-DD}.log"


def setup_logger(
    *,
    json_logs: bool = False,
    level: str = "INFO",
    log_dir: str | Path = "logs",
) -> None:
    """Replace loguru's default handler with the console and file sinks.

    LOG_LEVEL in the environment wins over ``level`` for the console only.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    logger.add(
        Path(log_dir) / LOG_FILE_PATTERN,
        rotation="20 MB",
        retention="7 days",
        compression="gz",
        level="DEBUG",
        serialize=json_logs,
    )
