"""Application configuration management for the portfolio rebalancer."""

from .models import (
    AppConfig,
    EngineConfig,
    LoggingConfig,
    ExportConfig,
)
from .loader import load_config

__all__ = [
    "AppConfig",
    "EngineConfig",
    "LoggingConfig",
    "ExportConfig",
    "load_config",
]
