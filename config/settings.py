# config/settings.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  TrackLens - Settings                                                     ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Pydantic v2 Settings                                                  ║
║  ✓ Environment Variable Support                                          ║
║  ✓ Type Safety & Validation                                              ║
║  ✓ Path Expansion (directories are never created here)                  ║
╚════════════════════════════════════════════════════════════════════════════╝

Configuration Structure:
```
    Settings
    ├── Application (name, version, environment)
    ├── Logging (level, format, rotation)
    ├── Data (paths, dataset file)
    └── Charts (default viewport, resize debounce)
```

Usage:
```python
    from config.settings import settings

    print(settings.dataset_path)
    print(settings.RESIZE_DEBOUNCE_MS)
```

Environment Variables:
    All fields can be overridden from the environment or a `.env` file,
    e.g. `DATASET_FILE=spotify_tracks.csv`, `LOG_LEVEL=DEBUG`.

Dependencies:
    • pydantic
    • pydantic-settings
    • python-dotenv
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings", "get_settings"]


# Load environment variables
load_dotenv()

# Project root directory
ROOT_DIR = Path(__file__).resolve().parent.parent


# ═══════════════════════════════════════════════════════════════════════════
# Settings Class
# ═══════════════════════════════════════════════════════════════════════════

class Settings(BaseSettings):
    """
    🔧 **Central Configuration**

    Type-safe configuration with Pydantic v2.

    Only configuration lives here. Per-visualization limits and bucket
    thresholds are fixed constants in `config.constants`.
    """

    # ───────────────────────────────────────────────────────────────────
    # Application
    # ───────────────────────────────────────────────────────────────────

    APP_NAME: str = "TrackLens"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    TEST_MODE: bool = False

    # ───────────────────────────────────────────────────────────────────
    # Logging
    # ───────────────────────────────────────────────────────────────────

    LOG_LEVEL: str = "INFO"
    LOG_JSON_ENABLED: bool = False
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "30 days"
    LOG_CONSOLE_COMPACT: bool = False

    # ───────────────────────────────────────────────────────────────────
    # Paths
    # ───────────────────────────────────────────────────────────────────

    DATA_PATH: Path = ROOT_DIR / "data"
    LOGS_PATH: Path = ROOT_DIR / "logs"
    REPORTS_PATH: Path = ROOT_DIR / "reports"
    DATASET_FILE: str = "spotify_tracks.csv"

    # ───────────────────────────────────────────────────────────────────
    # Charts
    # ───────────────────────────────────────────────────────────────────

    RESIZE_DEBOUNCE_MS: int = 150
    DEFAULT_CHART_WIDTH: int = 960
    DEFAULT_CHART_HEIGHT: int = 540

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # ───────────────────────────────────────────────────────────────────
    # Computed Fields
    # ───────────────────────────────────────────────────────────────────

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == "production"

    @computed_field
    @property
    def dataset_path(self) -> Path:
        """Full path of the dataset file (absolute DATASET_FILE wins)."""
        candidate = Path(self.DATASET_FILE).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.DATA_PATH / candidate

    @property
    def resize_debounce_s(self) -> float:
        return self.RESIZE_DEBOUNCE_MS / 1000.0

    # ───────────────────────────────────────────────────────────────────
    # Field Validators
    # ───────────────────────────────────────────────────────────────────

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = (v or "").upper()

        if normalized not in allowed:
            raise ValueError(
                f"Invalid LOG_LEVEL '{v}'. "
                f"Allowed: {', '.join(sorted(allowed))}"
            )

        return normalized

    @field_validator("DATA_PATH", "LOGS_PATH", "REPORTS_PATH", mode="before")
    @classmethod
    def expand_paths(cls, v: Path | str) -> Path:
        """Expand user and resolve directory paths."""
        return Path(v).expanduser().resolve()

    @field_validator("RESIZE_DEBOUNCE_MS")
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        """Validate resize debounce window."""
        if not 0 <= v <= 1000:
            raise ValueError("RESIZE_DEBOUNCE_MS must be in range 0..1000")
        return v

    @field_validator("DEFAULT_CHART_WIDTH", "DEFAULT_CHART_HEIGHT")
    @classmethod
    def validate_dimension(cls, v: int) -> int:
        """Validate default chart dimensions."""
        if v <= 0:
            raise ValueError("Chart dimensions must be positive")
        return v


# ═══════════════════════════════════════════════════════════════════════════
# Global Instance
# ═══════════════════════════════════════════════════════════════════════════

settings = Settings()


def get_settings() -> Settings:
    """
    📋 **Get Settings Instance**

    Returns the global settings instance.
    """
    return settings
