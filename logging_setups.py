# logging_setups.py

import logging
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def setup_logger(name: str, log_file: str | None = "app.log", level: int = logging.INFO,
                 console: bool = False) -> logging.Logger:
    """
    Configure and return a named logger with a rotating file handler and,
    optionally, a stderr console handler.

    Calling it again for the same name replaces the handlers instead of stacking them.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(LOG_FORMAT)
    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=5e6, backupCount=3)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    return logger
