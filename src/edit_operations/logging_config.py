"""Logging setup for applications embedding the editing engine."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)8s] %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Name given to handlers installed here, so a second call replaces them
HANDLER_NAME = "elementor-editor"


def configure_logging(verbosity: int, logdir: Optional[str] = None) -> Optional[Path]:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger so third-party libraries
    keep their own settings. The root logger is left unchanged. Handlers
    from an earlier call are closed and replaced, so calling this again
    (e.g. to change verbosity) never duplicates output.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)

    Returns:
        Path of the log file, if one was created
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    _remove_handlers(app_logger)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.set_name(HANDLER_NAME)
    app_logger.addHandler(console_handler)

    if not logdir:
        return None

    log_path = Path(logdir)
    log_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_path / f"elementor-editor_{timestamp}.log"

    file_formatter = logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(file_formatter)
    file_handler.set_name(HANDLER_NAME)
    app_logger.addHandler(file_handler)

    logger.info(f"Logging to file: {log_file}")
    return log_file


def _remove_handlers(app_logger: logging.Logger) -> None:
    """Detach and close handlers installed by a previous configure_logging."""
    for handler in list(app_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            app_logger.removeHandler(handler)
            handler.close()
