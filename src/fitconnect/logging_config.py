"""Logging setup

Log level guideline
===================

logger.exception()
    - Inside an except block when the stack trace helps debugging
    - e.g. a resume handler or a per-client batch mutation raised

logger.error()
    - Expected failures where a stack trace adds nothing
    - e.g. a store write rejected, a timeout hit

logger.warning()
    - Recoverable situations that fell back to a default
    - e.g. display-name lookup failed, notifier/invalidation sink failed,
      handler registered with both platform gates

logger.info()
    - Major state changes, work started/finished
    - e.g. resume cycle accepted, batch finished with counts

logger.debug()
    - Detail needed only while troubleshooting
    - e.g. debounce drops, handler scheduling
"""

import logging
from datetime import datetime
from pathlib import Path

from fitconnect.config import Config


def setup_logging() -> logging.Logger:
    """Configure root logging and return the package logger."""
    log_dir = Path(Config.get_log_path())
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / f"fitconnect_{datetime.now().strftime('%Y%m%d')}.log"

    logging.basicConfig(
        level=logging.DEBUG if Config.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler()
        ]
    )

    # filelock logs every acquire/release at DEBUG
    if not Config.debug:
        logging.getLogger("filelock").setLevel(logging.WARNING)

    return logging.getLogger("fitconnect")
