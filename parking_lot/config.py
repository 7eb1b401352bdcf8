# File: parking_lot/config.py
"""
Application configuration

Settings are pydantic models so values read from YAML are validated the same
way DTOs are. Every field has a default, so running without a config file
reproduces the standard tariff and quiet logging.

Example config.yaml:

    billing:
      base_charge: 10
      included_hours: 2
      hourly_rate: 10
      currency_symbol: "$"
    logging:
      level: INFO
      file: logs/parking_lot.log
"""

from decimal import Decimal
from pathlib import Path
from typing import Optional, Union
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid"""
    pass


class BillingConfig(BaseModel):
    """Tariff used when a car leaves"""
    model_config = ConfigDict(extra="forbid")

    base_charge: Decimal = Field(default=Decimal('10'), ge=0, description="Flat charge for short stays")
    included_hours: int = Field(default=2, ge=0, description="Hours covered by the flat charge")
    hourly_rate: Decimal = Field(default=Decimal('10'), ge=0, description="Charge per hour past the included hours")
    currency_symbol: str = Field(default="$", min_length=1, max_length=3)


class LoggingConfig(BaseModel):
    """Diagnostics settings; command output never goes through logging"""
    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="WARNING")
    file: Optional[Path] = Field(default=None, description="Optional log file path")
    format: str = Field(default=DEFAULT_LOG_FORMAT)

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard level names in any case"""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppConfig(BaseModel):
    """Top-level application settings"""
    model_config = ConfigDict(extra="forbid")

    billing: BillingConfig = Field(default_factory=BillingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Load configuration from a YAML file

    Returns defaults when no path is given. Raises ConfigError if the file
    cannot be read, is not valid YAML, or fails validation.
    """
    if path is None:
        return AppConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        return AppConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
