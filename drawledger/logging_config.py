"""Logging setup for the drawledger command line.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are installed here, once per CLI run.
"""
import logging
from pathlib import Path

from drawledger.config import LOG_FORMAT, QUIET_LOGGERS


def configure_logging(level="WARNING", file_path=None):
    """Route drawledger logs to stderr and, optionally, a log file.

    Args:
        level: Level name such as ``"DEBUG"``; unknown names fall back to
            WARNING.
        file_path: Optional log file; missing parent folders are created.

    Returns:
        The numeric level applied to the root logger.
    """
    numeric_level = getattr(logging, str(level or "WARNING").upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    handlers = [logging.StreamHandler()]
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True)

    # --log-level DEBUG should not turn on library chatter
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return numeric_level
