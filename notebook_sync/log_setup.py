import logging
import os


def setup_logger(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure the ``notebook_sync`` logger.

    Module loggers propagate to it.  When *log_file* is given a file handler
    captures everything at *level* and above.
    """
    logger = logging.getLogger("notebook_sync")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if log_file and not any(
        isinstance(h, logging.FileHandler)
        and h.baseFilename == os.path.abspath(log_file)
        for h in logger.handlers
    ):
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
        ))
        logger.addHandler(fh)

    return logger
