"""
Application configuration using Pydantic Settings.

Centralizes all configuration with environment variable support
(prefix ``AFFIRM_``, optional ``.env`` file).
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Core settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="AFFIRM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Storage
    data_dir: Path = Path("~/.local/share/affirmations")
    database_filename: str = "affirmations.db"

    # Cross-process area shared with the companion renderer.
    # Defaults to <data_dir>/widget when unset.
    widget_dir: Optional[Path] = None
    widget_data_filename: str = "widget_data.json"
    widget_signal_filename: str = "widget_refresh.signal"
    # Seconds close() waits for background widget syncs
    sync_drain_timeout: float = 5.0

    # Secure credential store
    keyring_service: str = "affirmation_core"
    encryption_key_name: str = "store_encryption_key_v1"

    # Environment
    environment: str = "development"
    log_level: str = "INFO"
    log_to_file: bool = False
    # AffirmationCore.open() calls setup_logging when set
    configure_logging: bool = True

    @field_validator("data_dir", "widget_dir")
    @classmethod
    def expand_user(cls, v: Optional[Path]) -> Optional[Path]:
        if v is None:
            return v
        return Path(v).expanduser()

    @field_validator("log_level")
    @classmethod
    def log_level_upper(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{v}'")
        return level

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_filename

    @property
    def shared_widget_dir(self) -> Path:
        return self.widget_dir if self.widget_dir is not None else self.data_dir / "widget"

    @property
    def widget_data_path(self) -> Path:
        return self.shared_widget_dir / self.widget_data_filename

    @property
    def widget_signal_path(self) -> Path:
        return self.shared_widget_dir / self.widget_signal_filename

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"


@lru_cache()
def get_config() -> AppConfig:
    """Get cached config instance."""
    return AppConfig()
