import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%m/%d/%Y %I:%M:%S %p"


def setup_logger(
    level: int = logging.INFO, log_filename: Path | None = None, name: str = "tcrit"
) -> logging.Logger:
    """Configure the package logger with a stream handler and an optional log file.

    Calling this repeatedly replaces the handlers instead of stacking them.
    """
    log = logging.getLogger(name)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    log.addHandler(stream_handler)

    if log_filename is not None:
        file_handler = logging.FileHandler(log_filename, mode="w")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    log.setLevel(level)
    return log
