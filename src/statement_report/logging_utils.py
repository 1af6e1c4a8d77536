from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] - %(message)s"


def get_logger(name: str = "statement_report", level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Package logger with one stream handler; report threads show in each line."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


@contextmanager
def timed(logger: logging.Logger, label: str) -> Iterator[None]:
    """Log START/END around a block, or FAILED when it raises."""
    start = time.time()
    logger.info(f"START {label}")
    try:
        yield
    except Exception:
        logger.warning(f"FAILED {label} - {time.time() - start:.2f}s")
        raise
    logger.info(f"END {label} - {time.time() - start:.2f}s")
