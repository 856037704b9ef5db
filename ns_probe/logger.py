import logging
import sys

LOGGER_NAME = "ns"


def create_logger(verbose: bool = False) -> logging.Logger:
    """
    Console logger for the probe:
    - info/debug lines go to stdout as-is
    - warnings and errors go to stderr prefixed with the program name
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    # Rebuild on every call so the handlers follow the current sys streams
    for h in list(logger.handlers):
        logger.removeHandler(h)

    out = logging.StreamHandler(sys.stdout)
    out.setFormatter(logging.Formatter("%(message)s"))
    out.addFilter(lambda record: record.levelno < logging.WARNING)

    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.WARNING)
    err.setFormatter(logging.Formatter(f"{LOGGER_NAME}: %(message)s"))

    logger.addHandler(out)
    logger.addHandler(err)
    return logger
