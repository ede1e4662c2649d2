"""
Logging setup for the catalog service.

``setup_logging`` attaches a console handler to the root logger and,
when ``LOG_FILE`` is set, a size-rotated file handler.  Chatty library
loggers are capped so that ``LOG_LEVEL=DEBUG`` shows the catalog's own
service and store traces rather than every request line.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Library loggers and the most verbose level they may use.
LIBRARY_LEVELS = {
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
}


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    root: Optional[logging.Logger] = None,
) -> bool:
    """Configure the root logger once per process.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"``; unknown names fall back to
        ``INFO``.
    logfile : Optional[str]
        File to log to in addition to the console.  Rotated after
        ``max_bytes`` with ``backup_count`` old files kept.
    root : Optional[logging.Logger]
        Logger to configure, the root logger by default.

    Returns
    -------
    bool
        ``False`` if the logger already had handlers (pytest,
        uvicorn or an earlier ``create_app``) and was left alone.
    """
    root = root if root is not None else logging.getLogger()
    if root.handlers:
        return False

    root.setLevel(_level(level))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if logfile:
        path = Path(logfile).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name, ceiling in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(max(ceiling, root.level))
    return True
