# core/exceptions.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  TrackLens - Exception Hierarchy                                          ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Error Code Taxonomy                                                   ║
║  ✓ Severity Levels                                                       ║
║  ✓ Context & Cause Tracking                                              ║
║  ✓ Exception Wrapping Decorator                                          ║
╚════════════════════════════════════════════════════════════════════════════╝

Hierarchy:
```
    TrackLensError
    ├── DataSourceError          (source unreachable / unparseable)
    │   └── SchemaValidationError (required columns missing)
    ├── ConfigurationError
    └── RenderError
```

Degenerate statistics never raise: they produce a NaN sentinel. Row-level
invalidity never raises: those rows are filtered out.
"""

from __future__ import annotations

from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Optional, Tuple, Type

from loguru import logger

__all__ = [
    "ErrorSeverity",
    "ErrorCode",
    "TrackLensError",
    "DataSourceError",
    "SchemaValidationError",
    "ConfigurationError",
    "RenderError",
    "handle_exception",
    "wrap_exceptions",
]


# ═══════════════════════════════════════════════════════════════════════════
# Error Taxonomy
# ═══════════════════════════════════════════════════════════════════════════

class ErrorSeverity(str, Enum):
    """🚨 **Error Severity Levels**"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCode(str, Enum):
    """🏷️ **Error Code Taxonomy**"""
    UNKNOWN = "unknown_error"
    DATA_SOURCE = "data_source_error"
    SCHEMA = "schema_validation_error"
    CONFIG = "configuration_error"
    RENDER = "render_error"


# ═══════════════════════════════════════════════════════════════════════════
# Base Exception
# ═══════════════════════════════════════════════════════════════════════════

class TrackLensError(Exception):
    """
    🎯 **Base TrackLens Exception**

    Usage:
```python
        raise TrackLensError(
            "Operation failed",
            details={"reason": "invalid input"},
            error_code=ErrorCode.DATA_SOURCE,
        )
```
    """

    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        *,
        error_code: Optional[ErrorCode] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}
        self.error_code: ErrorCode = error_code or self.default_code
        self.severity: ErrorSeverity = severity
        self.context: Dict[str, Any] = context or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"{self.error_code.value}: {self.message}"]

        if self.details:
            parts.append(f"Details: {self.details}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.cause:
            parts.append(f"Cause: {type(self.cause).__name__}: {self.cause}")

        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.error_code.value,
                "message": self.message,
                "details": self.details,
                "context": self.context,
                "severity": self.severity.value,
                "cause": str(self.cause) if self.cause else None
            }
        }


# ═══════════════════════════════════════════════════════════════════════════
# Specific Exception Classes
# ═══════════════════════════════════════════════════════════════════════════

class DataSourceError(TrackLensError):
    """❌ Dataset missing, unreadable or malformed beyond row-level recovery."""
    default_code = ErrorCode.DATA_SOURCE


class SchemaValidationError(DataSourceError):
    """⚠️ Dataset does not carry the required column set."""
    default_code = ErrorCode.SCHEMA


class ConfigurationError(TrackLensError):
    """⚙️ Invalid configuration."""
    default_code = ErrorCode.CONFIG


class RenderError(TrackLensError):
    """🖼️ Figure construction failed."""
    default_code = ErrorCode.RENDER


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def handle_exception(e: Exception, context: str = "") -> str:
    """
    📝 **Format Exception for Display**

    Formats an exception for the dashboard.
    """
    if isinstance(e, TrackLensError):
        msg = f"❌ **Error**: {e.message}"
        if context:
            msg += f"\n\n**Context**: {context}"
        if e.details:
            msg += f"\n\n**Details**: {e.details}"
        return msg

    msg = f"❌ **Unexpected Error**: {e}"
    if context:
        msg += f"\n\n**Context**: {context}"
    return msg


def wrap_exceptions(
    *,
    to: Type[TrackLensError],
    message: str,
    catch: Tuple[Type[BaseException], ...] = (Exception,),
    context_builder: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
    log: bool = True
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    🎁 **Exception Wrapping Decorator**

    Re-raises `catch` exceptions as `to`, keeping the original as cause.
    Project exceptions pass through untouched.

    Example:
```python
        @wrap_exceptions(to=DataSourceError, message="Failed to read dataset")
        def read(path):
            ...
```
    """
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except TrackLensError:
                raise
            except catch as e:
                ctx = context_builder(args, kwargs) if context_builder else {}
                wrapped = to(
                    message,
                    details={"original_error": str(e)},
                    context=ctx,
                    cause=e
                )
                if log:
                    logger.error(str(wrapped))
                raise wrapped from e

        return wrapper
    return decorator
