import logging
import sys
from datetime import datetime


class PrewarmFormatter(logging.Formatter):
    """
    Formats records the way the prewarm dashboard tails them:
    [14:02:09] message
    Warnings and errors carry their level in front of the message.
    """
    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            message = f"{record.levelname}: {message}"
        return f"[{timestamp}] {message}"


def setup_logger(name="prewarm", log_file=None, level=logging.INFO):
    """Sets up a logger writing PrewarmFormatter lines to stdout."""
    logger = logging.getLogger(name)

    # Child loggers (walker, worker, ...) propagate to the root 'prewarm' logger
    if name != "prewarm":
        logger.propagate = True
        setup_logger("prewarm", log_file=log_file, level=level)
        return logger

    logger.setLevel(level)

    # Avoid duplicate handlers if setup_logger is called multiple times
    if logger.handlers:
        return logger

    formatter = PrewarmFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
