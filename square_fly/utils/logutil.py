"""
Logging setup for square flight missions.

Console output always; a timestamped log file under <repo_root>/logs/
when requested.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_initialised = False


def default_log_dir() -> Path:
    # square_fly/utils/logutil.py -> repo_root = parents[2]
    return Path(__file__).resolve().parents[2] / "logs"


def setup_logging(level=None, log_to_file: bool = False, log_dir=None):
    """
    Initialise console (+ optional file) logging. Only the first call
    configures handlers.
    """
    global _initialised
    if _initialised:
        return
    _initialised = True

    root = logging.getLogger()
    root.setLevel(level or LOG_LEVEL)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root.addHandler(ch)

    if not log_to_file:
        return

    # File handler is best-effort; console stays usable without it
    log_dir = Path(log_dir) if log_dir else default_log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"square_fly_{timestamp}.log"
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(fh)
        logging.info("Logging initialised -> %s", log_file)
    except OSError:
        logging.warning("File logging unavailable, console only")


def get_logger(name: str) -> logging.Logger:
    """Return a named logger under the square_fly namespace."""
    return logging.getLogger(f"square_fly.{name}")
