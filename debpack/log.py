import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Send the debpack loggers to stdout, and to log_file when given.

    Calling it again replaces (and closes) the handlers of the previous call.
    """
    level = logging.DEBUG if debug else logging.INFO
    logger = logging.getLogger("debpack")
    logger.setLevel(level)
    logger.propagate = False
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    file_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        except OSError as e:
            file_error = e

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if file_error is not None:
        logger.warning(f"Could not create log file: {file_error}")
    return logger
