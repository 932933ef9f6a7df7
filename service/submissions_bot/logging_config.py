"""
Logging configuration for the submissions bot.
"""

import logging
import sys

LOGGER_NAME = "submissions_bot"


def setup_logging(level: int = logging.DEBUG) -> logging.Logger:
    """Console logger shared by the bot, the repository and the fetcher."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        '[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False

    # httpx logs every request URL at INFO, and Bot API URLs embed the token
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logger


# Global logger instance
bot_logger = setup_logging()
