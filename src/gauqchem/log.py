from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "gauqchem"
FORMAT = "[gauqchem] %(message)s"


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(h)
        logger.setLevel(logging.INFO)
    return logger


def attach_message_file(path: Optional[Path]) -> Optional[logging.Handler]:
    """Mirror the log into Gaussian's message file."""
    if path is None:
        return None
    logger = get_logger()
    h = logging.FileHandler(path, mode="a")
    h.setFormatter(logging.Formatter(FORMAT))
    logger.addHandler(h)
    return h


def detach(handler: Optional[logging.Handler]) -> None:
    if handler is None:
        return
    get_logger().removeHandler(handler)
    handler.close()
