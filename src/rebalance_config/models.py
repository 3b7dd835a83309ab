"""Pydantic models for rebalancer configuration with validation."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from portfolio_base import Strategy


class EngineConfig(BaseModel):
    """Allocation and rounding engine parameters."""

    epsilon: float = Field(
        default=0.01,
        gt=0.0,
        le=1.0,
        description="Dollar tolerance used for every budget comparison"
    )
    noise_threshold_fraction: float = Field(
        default=0.0002,
        ge=0.0,
        le=0.01,
        description="Minimize-trades skips symbol deltas below this fraction of the portfolio"
    )
    min_capacity: float = Field(
        default=1.0,
        ge=0.0,
        le=100.0,
        description="Account capacity at or below this many dollars counts as exhausted"
    )
    target_percent_tolerance: float = Field(
        default=0.01,
        gt=0.0,
        le=5.0,
        description="Allowed distance of the target percent sum from 100"
    )
    strict_targets: bool = Field(
        default=False,
        description="Raise instead of warning when targets do not sum to 100"
    )
    default_strategy: Strategy = Field(
        default=Strategy.CONSOLIDATE,
        description="Strategy used when neither the CLI nor the input names one"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Log line format"
    )
    file_path: Optional[str] = Field(
        default=None,
        description="Optional log file, rotated daily and gzip-compressed"
    )
    backup_count: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Rotated log files to keep"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
        return level


class ExportConfig(BaseModel):
    """Trade output configuration."""

    default_format: Literal["markdown", "csv"] = Field(
        default="markdown",
        description="Format printed when --format is not given"
    )


class AppConfig(BaseModel):
    """Root application configuration."""

    engine: EngineConfig = Field(
        default_factory=EngineConfig,
        description="Engine parameters"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings"
    )
    export: ExportConfig = Field(
        default_factory=ExportConfig,
        description="Output settings"
    )
