# logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

import config

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _file_handler() -> RotatingFileHandler:
    os.makedirs(config.LOG_DIR, exist_ok=True)
    return RotatingFileHandler(
        os.path.join(config.LOG_DIR, config.LOG_FILE),
        maxBytes=5 * 1024 * 1024,   # 5 MB
        backupCount=5,
        encoding="utf-8",
    )


def get_logger(name: str) -> logging.Logger:
    """
    Module logger for the tool server. Always writes the rotating file;
    mirrors to stderr when LOG_STDERR is set. Never touches stdout, which
    carries the MCP stdio stream.
    """
    logger = logging.getLogger(f"zws.{name}")
    logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
    logger.propagate = False

    if logger.handlers:
        return logger

    handlers: list[logging.Handler] = [_file_handler()]
    if config.LOG_STDERR:
        handlers.append(logging.StreamHandler(sys.stderr))

    fmt = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger
