from __future__ import annotations

import functools
import logging
import time
from typing import Optional

logger = logging.getLogger(__name__)


def log_timing(tag: Optional[str] = None):
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            t0 = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                dt_ms = (time.perf_counter() - t0) * 1000.0
                logger.debug("[%s] %.3fms", tag or func.__name__, dt_ms)

        return wrapper

    return decorator
