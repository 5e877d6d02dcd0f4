"""
Logging setup for the archive service.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger the first time it is called.  Every module
logs through ``logging.getLogger(__name__)`` so records carry the
dotted module path, e.g. ``score_archive_api.app.services.score_service``.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, debug: bool = False) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : str
        Logging level name for the root logger (e.g. ``"DEBUG"``).
        Unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Optional path of a log file written in addition to the console.
    debug : bool
        When set, the ``score_archive_api`` loggers emit DEBUG records
        regardless of ``level`` (SQL statements, retry attempts).
    """
    root = logging.getLogger()
    if root.handlers:
        # pytest and repeated create_app calls install handlers first
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if debug:
        logging.getLogger("score_archive_api").setLevel(logging.DEBUG)
