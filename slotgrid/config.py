"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.clock import Clock
from .domain.date_arithmetic import DEFAULT_DATE_FORMAT, DEFAULT_TIME_FORMAT, DateArithmetic
from .domain.slot_engine import RemainderPolicy, SlotEngine
from .domain.timeparse import parse_period, parse_time


class FormatsConfig(BaseModel):
    """Canonical date and display time formats (pendulum tokens)."""
    date_format: str = DEFAULT_DATE_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT


class DefaultsConfig(BaseModel):
    """Default settings for slot generation."""
    period: str = "00:30:00"
    remainder_policy: RemainderPolicy = RemainderPolicy.TRUNCATE
    opens: str = "08:00"
    closes: str = "16:00"

    @field_validator("period")
    @classmethod
    def validate_period(cls, value: str) -> str:
        """Ensure the period parses and is positive."""
        parse_period(value)
        return value

    @field_validator("opens", "closes")
    @classmethod
    def validate_clock_time(cls, value: str) -> str:
        """Validate HH:mm wall-clock times."""
        parse_time(value, "HH:mm")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the opening hours open before they close."""
        if parse_time(self.closes).time() <= parse_time(self.opens).time():
            raise ValueError("closes must be later than opens")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: Optional[str] = None
    formats: FormatsConfig = Field(default_factory=FormatsConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    reservations_file: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        """Ensure the timezone is known to pendulum; None means system local."""
        if value is None:
            return value
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def build_engine(self) -> SlotEngine:
        """Create a slot engine from these settings."""
        return SlotEngine(
            time_format=self.formats.time_format,
            timezone=self.timezone,
            default_period=parse_period(self.defaults.period),
            remainder_policy=self.defaults.remainder_policy,
        )

    def build_date_arithmetic(self, clock: Optional[Clock] = None) -> DateArithmetic:
        """Create date helpers from these settings."""
        return DateArithmetic(
            date_format=self.formats.date_format,
            time_format=self.formats.time_format,
            timezone=self.timezone,
            clock=clock,
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative ``reservations_file`` paths are resolved against the
        directory of the config file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
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
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.reservations_file and not config.reservations_file.is_absolute():
            config.reservations_file = config_path.parent / config.reservations_file
        return config


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


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the given config file, or the default one if it exists.

    Without an explicit path and without a default file the built-in
    defaults are used.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()
