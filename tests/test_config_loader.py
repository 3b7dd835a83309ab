"""
Tests for YAML configuration loading.
"""

import pytest

from portfolio_base import Strategy
from rebalance_config import AppConfig, LoggingConfig, load_config


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_overrides_merge_with_defaults(self, tmp_path):
        path = _write(tmp_path, (
            "engine:\n"
            "  strict_targets: true\n"
            "  default_strategy: min_trades\n"
            "logging:\n"
            "  format: json\n"
        ))

        config = load_config(path)

        assert config.engine.strict_targets is True
        assert config.engine.default_strategy == Strategy.MIN_TRADES
        assert config.engine.epsilon == 0.01
        assert config.logging.format == "json"
        assert config.logging.level == "INFO"
        assert config.export.default_format == "markdown"

    def test_empty_file_gives_defaults(self, tmp_path):
        assert load_config(_write(tmp_path, "")) == AppConfig()

    def test_accepts_string_path(self, tmp_path):
        path = _write(tmp_path, "export:\n  default_format: csv\n")

        assert load_config(str(path)).export.default_format == "csv"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_value_raises_value_error(self, tmp_path):
        path = _write(tmp_path, "engine:\n  epsilon: -1\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_unknown_strategy_raises_value_error(self, tmp_path):
        path = _write(tmp_path, "engine:\n  default_strategy: fastest\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_malformed_yaml_raises_value_error(self, tmp_path):
        with pytest.raises(ValueError, match="cannot parse"):
            load_config(_write(tmp_path, "engine: [unclosed\n"))

    def test_non_mapping_top_level_raises(self, tmp_path):
        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(_write(tmp_path, "- engine\n- logging\n"))


class TestLoggingConfig:
    """Tests for log level validation."""

    def test_level_is_upper_cased(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="Invalid log level 'loud'"):
            LoggingConfig(level="loud")
