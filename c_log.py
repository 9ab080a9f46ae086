# ============================================================
# FILE: c_log.py
# ROLE: Unified logger (RotatingFileHandler + stdout echo) and the
#       exception guard used around periodic monitor steps
# ============================================================

from __future__ import annotations

import pytz
from functools import wraps
from logging.handlers import RotatingFileHandler
from pprint import pformat
from typing import Any, Optional

from const import (
    LOG_DEBUG,
    LOG_INFO,
    LOG_WARNING,
    LOG_ERROR,
    LOG_DIR,
    MAX_LOG_LINES,
    TIME_ZONE,
)

import inspect
import logging
import os
import traceback


TZ = pytz.timezone(TIME_ZONE)

_ENABLED = {
    logging.DEBUG: LOG_DEBUG,
    logging.INFO: LOG_INFO,
    logging.WARNING: LOG_WARNING,
    logging.ERROR: LOG_ERROR,
}


def estimate_average_line_length(path: str, sample: int = 200) -> int:
    if not os.path.exists(path):
        return 300
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = [len(line) for _, line in zip(range(sample), f)]
        return sum(lines) // len(lines) if lines else 300
    except OSError:
        return 300


# ============================================================
# UNIFIED LOGGER
# ============================================================
class UnifiedLogger:
    """
    - one rotating file per logger name, sized to ~max_lines lines
    - every enabled record is also echoed to stdout
    - `total_exception_decor` keeps periodic steps alive on unexpected errors
    """

    def __init__(
        self,
        name: str,
        log_dir: str = LOG_DIR,
        max_lines: int = MAX_LOG_LINES,
        context: Optional[str] = None,
    ):
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, f"{name}.log")

        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        if not logger.handlers:
            handler = RotatingFileHandler(
                log_path,
                maxBytes=estimate_average_line_length(log_path) * max(1, int(max_lines)),
                backupCount=1,
                encoding="utf-8",
            )
            handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(context)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            ))
            logger.addHandler(handler)

        self.context = context or name
        self._logger = logger

    def _emit(self, level: int, msg: str, *, context: Optional[Any] = None, exc_info: bool = False) -> None:
        if not _ENABLED.get(level, True):
            return
        print(msg)
        self._logger.log(level, msg, exc_info=exc_info, extra={"context": context or self.context})

    def debug(self, msg: str):
        self._emit(logging.DEBUG, msg)

    def info(self, msg: str):
        self._emit(logging.INFO, msg)

    def warning(self, msg: str):
        self._emit(logging.WARNING, msg)

    def error(self, msg: str):
        self._emit(logging.ERROR, msg)

    def exception(self, msg: str):
        self._emit(logging.ERROR, msg, exc_info=True)

    # ======================================================
    # DECORATOR
    # ======================================================
    def total_exception_decor(self, func, context: Optional[Any] = None):
        """
        Catches every exception raised by ``func``, logs args + stack,
        returns None instead of crashing the caller's loop.
        """

        if getattr(func, "_is_wrapped", False):
            return func

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as ex:
                self._log_exception(func, ex, args, kwargs, context)
                return None

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as ex:
                self._log_exception(func, ex, args, kwargs, context)
                return None

        wrapper = async_wrapper if inspect.iscoroutinefunction(func) else sync_wrapper
        wrapper._is_wrapped = True
        return wrapper

    def _log_exception(self, func, ex, args, kwargs, context: Optional[Any] = None):
        msg = (
            f"[EXCEPTION] {func.__qualname__} -> {ex}\n"
            f"Args:\n{pformat({'args': args, 'kwargs': kwargs})}\n"
            f"Stack:\n{traceback.format_exc()}"
        )
        self._emit(logging.ERROR, msg, context=context)
