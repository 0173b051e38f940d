# config/__init__.py
"""
TrackLens - Configuration Package

Lazy exports:
```
    config/
    ├── __init__.py          # Lazy exports (this file)
    ├── settings.py          # Environment-driven settings
    ├── constants.py         # Columns, tiers, chart limits, palettes
    └── logging_config.py    # Loguru setup
```

Usage:
```python
    from config import settings, setup_logging
```
"""

from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from typing import Any, Dict, List, Tuple

try:
    __version__ = _pkg_version("tracklens")
except PackageNotFoundError:
    # Development mode / uninstalled package
    __version__ = "1.0.0-dev"


_LAZY_EXPORTS: Dict[str, Tuple[str, str]] = {
    "settings": ("config.settings", "settings"),
    "get_settings": ("config.settings", "get_settings"),
    "Settings": ("config.settings", "Settings"),
    "setup_logging": ("config.logging_config", "setup_logging"),
    "get_logger": ("config.logging_config", "get_logger"),
}

__all__ = (
    "__version__",
    "settings",
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
)


def __getattr__(name: str) -> Any:
    """Resolve lazy exports on first access and cache them in globals."""
    if name in _LAZY_EXPORTS:
        module_name, symbol_name = _LAZY_EXPORTS[name]
        obj = getattr(import_module(module_name), symbol_name)
        globals()[name] = obj
        return obj

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> List[str]:
    return sorted(set(list(globals().keys()) + list(_LAZY_EXPORTS.keys())))
