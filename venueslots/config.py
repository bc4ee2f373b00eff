"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .domain.exceptions import InvalidConfiguration, InvalidRequest
from .domain.models import OperatingHours
from .domain.timeutil import validate_timezone


class OperatingHoursConfig(BaseModel):
    """Opening window and slot size."""
    open_hour: int = 10
    close_hour: int = 22
    slot_duration_minutes: int = 30
    is_open_24_hours: bool = False

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_slot_duration(cls, value: int) -> int:
        """Slots must tile an hour exactly."""
        if value <= 0 or 60 % value:
            raise ValueError(f"slot_duration_minutes must evenly divide 60, got {value}")
        return value

    @field_validator("open_hour")
    @classmethod
    def validate_open_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"open_hour must be between 0 and 23, got {v}")
        return v

    @field_validator("close_hour")
    @classmethod
    def validate_close_hour(cls, v: int) -> int:
        """Validate hour is between 1 and 24 (24 means midnight)."""
        if not 1 <= v <= 24:
            raise ValueError(f"close_hour must be between 1 and 24, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "OperatingHoursConfig":
        """Ensure the configured window opens before it closes."""
        if not self.is_open_24_hours and self.close_hour <= self.open_hour:
            raise ValueError("close_hour must be later than open_hour")
        return self

    def to_operating_hours(self) -> OperatingHours:
        """Convert to the domain value object."""
        return OperatingHours(
            open_hour=self.open_hour,
            close_hour=self.close_hour,
            slot_duration_minutes=self.slot_duration_minutes,
            is_open_24_hours=self.is_open_24_hours,
        )


class StoreConfig(BaseModel):
    """Where reservation snapshots come from."""
    data_file: Optional[Path] = None
    api_url: Optional[str] = None
    timeout_seconds: float = 10.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Asia/Bangkok"
    days_ahead: int = 7
    operating_hours: OperatingHoursConfig = Field(default_factory=OperatingHoursConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    @field_validator("timezone")
    @classmethod
    def validate_shop_timezone(cls, value: str) -> str:
        """Only IANA zone names are accepted."""
        try:
            return validate_timezone(value)
        except InvalidRequest as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("days_ahead")
    @classmethod
    def validate_days_ahead(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"days_ahead must not be negative, got {value}")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            InvalidConfiguration: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise InvalidConfiguration("Config file must contain a mapping at the root level.")

        try:
            config = cls(**data)
        except ValidationError as exc:
            raise InvalidConfiguration(f"Invalid configuration in {config_path}: {exc}") from exc

        # Relative data files are resolved against the config file location
        data_file = config.store.data_file
        if data_file is not None and not data_file.is_absolute():
            config.store.data_file = config_path.parent / data_file

        return config

    def get_operating_hours(self) -> OperatingHours:
        return self.operating_hours.to_operating_hours()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
