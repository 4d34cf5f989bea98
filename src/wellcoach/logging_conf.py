# src/wellcoach/logging_conf.py
import logging, sys, os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers that are too chatty at DEBUG.
_QUIET_LOGGERS = ("sqlalchemy.engine", "multipart", "httpx")


def setup_logging(level: int | None = None) -> logging.Logger:
    """Attach a stdout handler to the `wellcoach` logger tree (idempotent)."""
    logger = logging.getLogger("wellcoach")
    if logger.handlers:
        return logger
    if level is None:
        level = logging.INFO if os.getenv("ENV", "dev") != "dev" else logging.DEBUG
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logger
