"""
Logging setup
Colored console output for the app, uvicorn and the cache sweep scheduler
"""
import logging
import sys

import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s [%(name)s]%(reset)s %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def configure_logging(level: int = logging.INFO) -> None:
    """
    Route every logger through one colored stdout handler

    Args:
        level: Level for the root and uvicorn loggers
    """
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setFormatter(colorlog.ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    # one INFO line per sweep run otherwise
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
