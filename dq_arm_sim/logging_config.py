"""
One-shot logging setup for demo.py and view.py.

Library modules only create module loggers; nothing under dq_arm_sim
configures handlers on import.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Route the dq_arm_sim loggers to stdout and, optionally, *log_file*.

    Calling it again replaces the previous handlers.
    """
    logger = logging.getLogger("dq_arm_sim")
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
