"""Settings management using Pydantic for type validation and configuration."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..timezone.service import get_timezone_service

logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    # Console Logging
    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="WARNING",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    # File Logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(
        default="DEBUG",
        description="File log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    file_directory: Path = Field(
        default=Path.home() / ".local" / "share" / "calrecur" / "logs",
        description="Directory for log files",
    )
    file_prefix: str = Field(default="calrecur", description="Log file prefix")
    max_log_files: int = Field(default=5, description="Maximum number of log files to keep")

    # Third-party Libraries
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )


class RecurrenceSettings(BaseSettings):
    """Application settings with environment variable support."""

    default_timezone: str = Field(
        default="UTC", description="Zone for floating RDATE/EXDATE values and the CLI start date"
    )
    strict_parsing: bool = Field(
        default=False, description="Raise on the first bad recurrence line instead of dropping it"
    )
    max_occurrences: int = Field(
        default=1000, ge=1, description="Upper bound on occurrences printed by the CLI"
    )
    config_dir: Path = Field(
        default=Path.home() / ".config" / "calrecur", description="Directory holding config.yaml"
    )
    config_file: Optional[Path] = Field(
        default=None, description="Explicit YAML config file, overriding config_dir"
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="CALRECUR_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("default_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        if get_timezone_service().find(value) is None:
            raise ValueError(f"Unknown timezone: {value!r}")
        return value

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._load_yaml_config()

    def _find_config_file(self) -> Optional[Path]:
        """Find the config file: the explicit path first, then config_dir."""
        if self.config_file is not None:
            return self.config_file if self.config_file.exists() else None
        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config
        return None

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML if present; explicit values win over it."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load YAML config from {config_file}: {e}")
            return

        if not isinstance(config_data, dict):
            return

        explicit = self.model_fields_set
        try:
            for key in ("default_timezone", "strict_parsing", "max_occurrences"):
                if key in config_data and key not in explicit:
                    setattr(self, key, config_data[key])
            if isinstance(config_data.get("logging"), dict) and "logging" not in explicit:
                self.logging = LoggingSettings(
                    **{**self.logging.model_dump(), **config_data["logging"]}
                )
        except (ValidationError, ValueError) as e:
            logger.warning(f"Ignoring invalid values in {config_file}: {e}")
            return

        logger.debug(f"Loaded configuration from {config_file}")

    @property
    def default_tzinfo(self) -> Any:
        """Resolved tzinfo for default_timezone."""
        return get_timezone_service().resolve(self.default_timezone)


_settings: Optional[RecurrenceSettings] = None


def get_settings() -> RecurrenceSettings:
    """Get the global settings instance, creating it on first use."""
    if globals()["_settings"] is None:
        globals()["_settings"] = RecurrenceSettings()
    return globals()["_settings"]


def reset_settings() -> None:
    """Drop the global settings instance so the next get_settings() reloads."""
    globals()["_settings"] = None
