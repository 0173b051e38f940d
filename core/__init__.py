# core/__init__.py
"""
TrackLens - Core Package

```
    core/
    ├── __init__.py          # Lazy exports (this file)
    ├── schema.py            # TrackRecord + field parsers
    ├── data_loader.py       # Record loader (sync/async)
    ├── data_validator.py    # Dataset quality report
    ├── reactive.py          # Observable / Debouncer
    ├── exceptions.py        # Exception hierarchy
    └── utils.py             # Shared helpers
```

Usage:
```python
    from core import load_records, TrackRecord
```
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, List, Tuple

_LAZY_EXPORTS: Dict[str, Tuple[str, str]] = {
    # Records
    "TrackRecord": ("core.schema", "TrackRecord"),
    "parse_genres": ("core.schema", "parse_genres"),

    # Loading
    "RecordLoader": ("core.data_loader", "RecordLoader"),
    "load_records": ("core.data_loader", "load_records"),
    "load_records_or_empty": ("core.data_loader", "load_records_or_empty"),
    "load_records_async": ("core.data_loader", "load_records_async"),

    # Validation
    "DataValidator": ("core.data_validator", "DataValidator"),
    "ValidationResult": ("core.data_validator", "ValidationResult"),

    # Reactivity
    "Observable": ("core.reactive", "Observable"),
    "Debouncer": ("core.reactive", "Debouncer"),

    # Errors
    "TrackLensError": ("core.exceptions", "TrackLensError"),
    "DataSourceError": ("core.exceptions", "DataSourceError"),
}

__all__ = tuple(_LAZY_EXPORTS)


def __getattr__(name: str) -> Any:
    """Load modules only when their exports are first accessed."""
    if name in _LAZY_EXPORTS:
        module_name, symbol_name = _LAZY_EXPORTS[name]
        obj = getattr(import_module(module_name), symbol_name)
        globals()[name] = obj
        return obj

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> List[str]:
    return sorted(set(list(globals().keys()) + list(_LAZY_EXPORTS.keys())))
