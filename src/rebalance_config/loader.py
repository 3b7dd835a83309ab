"""Configuration loader with validation."""

import logging
import yaml
from pathlib import Path

from pydantic import ValidationError

from .models import AppConfig

logger = logging.getLogger(__name__)


def load_config(config_path: str | Path) -> AppConfig:
    """
    Load and validate rebalancer configuration from a YAML file.

    Missing sections and keys fall back to the model defaults, so an empty
    file yields AppConfig().

    Args:
        config_path: Path to the YAML config file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the YAML is malformed or validation fails
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid configuration: cannot parse {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ValueError(f"Invalid configuration: top level of {config_path} must be a mapping")

    try:
        config = AppConfig(**raw_config)
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    engine = config.engine
    logger.info(
        f"Configuration loaded: strategy={engine.default_strategy.value} "
        f"epsilon=${engine.epsilon} noise={engine.noise_threshold_fraction * 100}% "
        f"min_capacity=${engine.min_capacity} strict_targets={engine.strict_targets}"
    )
    logger.debug(f"Target percent tolerance: {engine.target_percent_tolerance}")
    logger.debug(f"Logging: level={config.logging.level} format={config.logging.format} "
                 f"file={config.logging.file_path or '-'}")
    logger.debug(f"Default output format: {config.export.default_format}")

    return config
