# config/logging_config.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  TrackLens - Logging Configuration                                        ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Loguru Sinks (console, rotating files, optional JSONL)                 ║
║  ✓ Stdlib Logging Interception                                           ║
║  ✓ Component-Bound Loggers                                               ║
║  ✓ Execution Timing Decorator                                            ║
╚════════════════════════════════════════════════════════════════════════════╝

Usage:
```python
    from config.logging_config import setup_logging, get_logger

    setup_logging()
    log = get_logger(__name__, component="loader")
    log.info("Loaded 1200 records")
```

Creates:
  • Console sink (colorized)
  • app.log (all logs)
  • errors.log (ERROR+ only)
  • app.jsonl (structured JSON, if enabled)

File sinks are skipped when `settings.TEST_MODE` is set.
"""

from __future__ import annotations

import inspect
import logging
import sys
import time
from functools import wraps
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple, Union

from loguru import logger

from config.settings import settings
from core.exceptions import ConfigurationError, TrackLensError

if TYPE_CHECKING:
    from loguru import Logger

__all__ = [
    "setup_logging",
    "get_logger",
    "log_execution_time",
    "set_log_level",
]


# ═══════════════════════════════════════════════════════════════════════════
# Stdlib Logging Interception
# ═══════════════════════════════════════════════════════════════════════════

class InterceptHandler(logging.Handler):
    """
    🔌 **Stdlib Logging Interceptor**

    Routes standard library logging (plotly, streamlit, asyncio) to loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller outside the logging module
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        logger.bind(component=record.name) \
              .opt(depth=depth, exception=record.exc_info) \
              .log(level, record.getMessage())


# ═══════════════════════════════════════════════════════════════════════════
# Log Formats
# ═══════════════════════════════════════════════════════════════════════════

LOG_FORMAT_HUMAN = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<blue>{extra[component]}</blue> | "
    "<level>{message}</level>"
)

LOG_FORMAT_COMPACT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]} | {message}"
)


# ═══════════════════════════════════════════════════════════════════════════
# Initialization State
# ═══════════════════════════════════════════════════════════════════════════

_INITIALIZED_FLAG = False
_SINK_IDS: List[int] = []
_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def _file_sinks(log_level: str, enable_json: bool) -> List[Tuple[str, Dict[str, Any]]]:
    """(filename, logger.add options) for each rotating file sink."""
    common: Dict[str, Any] = dict(
        rotation=settings.LOG_ROTATION,
        compression="zip",
        encoding="utf-8",
        enqueue=True,
    )
    sinks = [
        ("app.log", dict(common, format=LOG_FORMAT_HUMAN, level=log_level, retention=settings.LOG_RETENTION)),
        # Errors are kept longer than the regular log
        ("errors.log", dict(common, format=LOG_FORMAT_HUMAN, level="ERROR", retention="90 days")),
    ]
    if enable_json:
        sinks.append(("app.jsonl", dict(common, serialize=True, level=log_level, retention=settings.LOG_RETENTION)))
    return sinks


def setup_logging(
    app_name: Optional[str] = None,
    log_level: Optional[str] = None,
    *,
    enable_json: Optional[bool] = None,
    console_compact: Optional[bool] = None,
    logs_path: Optional[Union[str, Path]] = None,
    reset_existing: bool = False
) -> None:
    """
    🔧 **Setup Centralized Logging**

    Idempotent - repeated calls are no-ops unless `reset_existing` is set.

    Args:
        app_name: Application name bound as the default component
        log_level: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        enable_json: Enable JSONL sink
        console_compact: Use compact console format
        logs_path: Directory for log files
        reset_existing: Force re-initialization
    """
    global _INITIALIZED_FLAG

    if _INITIALIZED_FLAG and not reset_existing:
        return

    app_name = app_name or settings.APP_NAME
    log_level = (log_level or settings.LOG_LEVEL).upper()
    if log_level not in _LEVELS:
        raise ConfigurationError(
            f"Invalid log level: {log_level}",
            details={"allowed": sorted(_LEVELS)},
        )
    logs_dir = Path(logs_path or settings.LOGS_PATH).resolve()
    enable_json = settings.LOG_JSON_ENABLED if enable_json is None else enable_json
    console_compact = settings.LOG_CONSOLE_COMPACT if console_compact is None else console_compact

    logger.remove()
    _SINK_IDS.clear()
    logger.configure(extra={"component": app_name})

    _SINK_IDS.append(
        logger.add(
            sys.stderr,
            format=LOG_FORMAT_COMPACT if console_compact else LOG_FORMAT_HUMAN,
            level=log_level,
            colorize=True,
            backtrace=(log_level == "DEBUG"),
            diagnose=False,
        )
    )

    if not settings.TEST_MODE:
        logs_dir.mkdir(parents=True, exist_ok=True)
        for filename, options in _file_sinks(log_level, enable_json):
            _SINK_IDS.append(logger.add(logs_dir / filename, **options))

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    _INITIALIZED_FLAG = True
    logger.debug(f"Logging initialized (level={log_level}, sinks={len(_SINK_IDS)})")


def get_logger(name: Optional[str] = None, **binds: Any) -> "Logger":
    """
    📝 **Get Bound Logger**

    Example:
```python
        log = get_logger(__name__, component="charts")
        log.info("Rendering bar chart")
```
    """
    lgr = logger

    if name:
        lgr = lgr.bind(name=name)

    if binds:
        lgr = lgr.bind(**binds)

    return lgr


def set_log_level(level: str) -> None:
    """Change log level at runtime by rebuilding sinks."""
    setup_logging(log_level=level, reset_existing=True)


# ═══════════════════════════════════════════════════════════════════════════
# Decorators
# ═══════════════════════════════════════════════════════════════════════════

def log_execution_time(func: Callable) -> Callable:
    """
    ⏱️ **Log Execution Time Decorator**

    Logs function execution time at DEBUG level. Project errors are left to
    the caller to report; anything else is logged at ERROR.
    Supports both sync and async functions.
    """
    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                logger.debug(f"{func.__name__} completed in {time.perf_counter() - start:.3f}s")
                return result
            except TrackLensError as e:
                logger.debug(f"{func.__name__} failed after {time.perf_counter() - start:.3f}s: {e}")
                raise
            except Exception as e:
                logger.error(f"{func.__name__} failed after {time.perf_counter() - start:.3f}s: {e}")
                raise

        return async_wrapper

    @wraps(func)
    def sync_wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            logger.debug(f"{func.__name__} completed in {time.perf_counter() - start:.3f}s")
            return result
        except TrackLensError as e:
            logger.debug(f"{func.__name__} failed after {time.perf_counter() - start:.3f}s: {e}")
            raise
        except Exception as e:
            logger.error(f"{func.__name__} failed after {time.perf_counter() - start:.3f}s: {e}")
            raise

    return sync_wrapper
