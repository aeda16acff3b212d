# core/logging_setup.py

import logging
import os
from logging.handlers import RotatingFileHandler

from core import config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: str = config.LOG_LEVEL, log_dir: str = config.LOG_DIR) -> logging.Logger:
    """Attach rotating file and console handlers to the root logger. Safe to call twice."""
    global _configured
    root = logging.getLogger()
    if _configured:
        return root

    # Create logs directory if it doesn't exist
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "cryptofolio.log")

    root.setLevel(logging.DEBUG)  # Capture everything, filter in handlers

    # File handler - rotating logs (5 MB, keep 5 backups)
    file_handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=5)
    file_handler.setLevel(logging.DEBUG)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level.upper())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root.addHandler(file_handler)
    root.addHandler(console_handler)
    _configured = True
    return root

