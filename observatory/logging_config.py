# one place that wires the "observatory" logger for the dashboard and the report.
# modules only ever do logging.getLogger(__name__) and leave handlers to this.

import logging
import sys
from typing import Optional

from observatory import config

LOGGER_NAME = "observatory"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

# chatty third-party loggers, one INFO line per request / rerun is noise here
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    attach stdout (and optionally file) handlers to the observatory logger.

    level / log_file default to OBSERVATORY_LOG_LEVEL / OBSERVATORY_LOG_FILE.
    safe to call again: streamlit reruns the script on every interaction,
    old handlers are closed and replaced instead of stacking up.
    """
    level = config.log_level() if level is None else level
    log_file = log_file or config.log_file()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.debug(f"logging at {logging.getLevelName(level)}" + (f", also to {log_file}" if log_file else ""))
    return logger
