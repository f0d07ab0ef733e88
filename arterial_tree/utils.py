import logging
import sys
import time
from contextlib import contextmanager
from typing import Optional

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configure the ``arterial_tree`` and ``generators`` loggers.

    Parameters
    ----------
    level : int
        Logging level (e.g. logging.DEBUG, logging.INFO)
    log_file : str, optional
        Path to also write the log to
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    for name in ("arterial_tree", "generators"):
        pkg_logger = logging.getLogger(name)
        pkg_logger.setLevel(level)

        # avoid duplicate output when called more than once
        if pkg_logger.handlers:
            pkg_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        pkg_logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            pkg_logger.addHandler(file_handler)


@contextmanager
def timed_stage(name: str, level: int = logging.DEBUG):
    """
    Context manager that logs the start and duration of a pipeline stage.
    """
    logger.log(level, f"[{name}] started...")
    t0 = time.time()
    try:
        yield
    finally:
        dt = time.time() - t0
        logger.log(level, f"[{name}] finished in {dt:.3f} s")
