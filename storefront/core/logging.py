# storefront/core/logging.py
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

# Third-party loggers that drown the storefront logs at INFO
NOISY_LOGGERS = ("pymongo", "httpx", "httpcore", "python_multipart", "multipart")


def configure_logging(level=logging.INFO, *, stream=None) -> None:
    """
    Install a single colored stdout handler on the root logger.
    Safe to call more than once (handlers are replaced, not stacked).
    """
    handler = colorlog.StreamHandler(stream or sys.stdout)
    handler.setFormatter(colorlog.ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # uvicorn follows the app level; libraries stay at WARNING
    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
