"""
loguru setup for relaykit.

Environment Variables:
    RELAYKIT_MACHINE_MODE: Drop the stderr sink (tests, embedding tools)
    RELAYKIT_FILE_LOGGING: Add a rotating file sink
    RELAYKIT_LOG_DIR: Directory of the file sink (default: ~/.relaykit/logs)
"""

import os
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)

_configured = False


def _env_flag(key: str) -> bool:
    return os.getenv(key, "").lower() in ("1", "true", "yes")


def log_directory() -> Path:
    return Path(os.getenv("RELAYKIT_LOG_DIR", str(Path.home() / ".relaykit" / "logs")))


def setup_logging(level="INFO", suppress_console=None, enable_file_logging=None, force=False):
    """
    Replace loguru's sinks with the relaykit ones.

    Runs once per process unless force is given. Arguments left as None
    are read from RELAYKIT_MACHINE_MODE and RELAYKIT_FILE_LOGGING.
    """
    global _configured

    if _configured and not force:
        return
    _configured = True

    if suppress_console is None:
        suppress_console = _env_flag("RELAYKIT_MACHINE_MODE")
    if enable_file_logging is None:
        enable_file_logging = _env_flag("RELAYKIT_FILE_LOGGING")

    logger.remove()

    if not suppress_console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if enable_file_logging:
        directory = log_directory()
        directory.mkdir(parents=True, exist_ok=True)
        logger.add(
            directory / "relaykit.log",
            level="INFO",
            rotation="5 MB",
            retention=3,
            catch=True,
        )


setup_logging()
