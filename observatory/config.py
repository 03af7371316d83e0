"""
Runtime settings.

Everything here can be overridden from the environment so the dashboard and
the report script pick up the same values:

    OBSERVATORY_API_URL        graph endpoint (month -> matrix JSON)
    OBSERVATORY_FETCH_TIMEOUT  seconds before giving up on the endpoint
    OBSERVATORY_DATA_PATH      optional local JSON file, tried first
    OBSERVATORY_LOG_LEVEL      DEBUG / INFO / WARNING ...
    OBSERVATORY_LOG_FILE       optional file the log is appended to
    OBSERVATORY_FPS            simulator frame rate when free-running
"""
import logging
import os
from typing import Optional

from observatory.constants import DEFAULT_API_URL, DEFAULT_FETCH_TIMEOUT, DEFAULT_FPS

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, using {default}")
        return default


def api_url() -> str:
    return os.environ.get("OBSERVATORY_API_URL", DEFAULT_API_URL)


def fetch_timeout() -> float:
    return _env_float("OBSERVATORY_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT)


def data_path() -> Optional[str]:
    return os.environ.get("OBSERVATORY_DATA_PATH") or None


def frame_interval() -> float:
    fps = _env_float("OBSERVATORY_FPS", DEFAULT_FPS)
    if fps <= 0:
        fps = DEFAULT_FPS
    return 1.0 / fps


def log_level() -> int:
    name = os.environ.get("OBSERVATORY_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def log_file() -> Optional[str]:
    return os.environ.get("OBSERVATORY_LOG_FILE") or None
