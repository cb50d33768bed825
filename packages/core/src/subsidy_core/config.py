"""Configuration for the subsidy core.

Settings are read from SUBSIDY_* environment variables and an optional .env
file.

Usage:
    from subsidy_core.config import SubsidySettings, configure_logging

    settings = SubsidySettings()
    configure_logging(settings)

    clock = settings.build_clock()
    region = settings.default_region_type
"""

import logging
from datetime import date
from typing import Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .clock import Clock, FixedClock, SystemClock
from .exceptions import ConfigurationError
from .models import RegionType, YouthType


class SubsidySettings(BaseSettings):
    """Root settings for subsidy analysis.

    Environment Variables:
        SUBSIDY_ENV: Environment name (development, staging, production, test)
        SUBSIDY_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        SUBSIDY_LOG_FORMAT: console or json
        SUBSIDY_DEFAULT_REGION: Region used when no business address is known
        SUBSIDY_REFERENCE_DATE: Fixed "today" (YYYY-MM-DD) for reproducible runs
        SUBSIDY_YOUTH_TYPE: Default youth type for Youth Job Leap
    """

    model_config = SettingsConfigDict(
        env_prefix="SUBSIDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="console",
        description="Log renderer: console or json",
    )
    default_region: str = Field(
        default=RegionType.CAPITAL.value,
        description="Region assumed when the business address is missing",
    )
    reference_date: Optional[date] = Field(
        default=None,
        description="Fixed reference date; the system date is used when unset",
    )
    youth_type: str = Field(
        default=YouthType.GENERAL.value,
        description="Default youth type for Youth Job Leap evaluation",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower().strip()
        if v_lower not in {"console", "json"}:
            raise ValueError(f"Invalid log format: {v}. Must be console or json")
        return v_lower

    @field_validator("default_region", "youth_type")
    @classmethod
    def normalize_enum_name(cls, v: str) -> str:
        return v.strip().upper().replace("-", "_")

    @property
    def default_region_type(self) -> RegionType:
        try:
            return RegionType(self.default_region)
        except ValueError:
            raise ConfigurationError(
                f"Unknown default region: {self.default_region}",
                config_key="SUBSIDY_DEFAULT_REGION",
                expected=", ".join(r.value for r in RegionType),
                actual=self.default_region,
            ) from None

    @property
    def default_youth_type(self) -> YouthType:
        try:
            return YouthType(self.youth_type)
        except ValueError:
            raise ConfigurationError(
                f"Unknown youth type: {self.youth_type}",
                config_key="SUBSIDY_YOUTH_TYPE",
                expected=", ".join(t.value for t in YouthType),
                actual=self.youth_type,
            ) from None

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"

    def build_clock(self) -> Clock:
        """Clock pinned to reference_date when set, otherwise the system clock."""
        if self.reference_date is not None:
            return FixedClock(self.reference_date)
        return SystemClock()


def configure_logging(settings: SubsidySettings) -> None:
    """Set the structlog level filter and renderer from settings."""
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level)
        ),
        cache_logger_on_first_use=False,
    )


__all__ = ["SubsidySettings", "configure_logging"]
