"""
Tests for configuration loading and environment overrides.

Run with: pytest tests/test_config.py -v
"""

import json
import logging

import pytest
import yaml

from vehicle_ocr.config import (
    EngineConfig,
    LoggingConfig,
    MileageRules,
    VINRules,
    get_config,
    reset_config,
)
from vehicle_ocr.exceptions import ConfigurationError


class TestDefaults:
    """Default rule tables."""

    def test_mileage_defaults(self):
        rules = MileageRules()
        assert rules.plausible_range == (100, 999_999)
        assert rules.high_confidence_range == (1_000, 500_000)
        assert rules.digit_bonus == {6: 40, 5: 30, 4: 15, 7: 15}
        assert rules.max_value == 2 ** 64 - 1

    def test_vin_defaults(self):
        rules = VINRules()
        assert (rules.min_length, rules.length, rules.max_length) == (15, 17, 19)

    def test_rules_are_frozen(self):
        with pytest.raises(AttributeError):
            MileageRules().ideal_bonus = 1

    def test_logging_env_override(self, monkeypatch):
        monkeypatch.setenv('VEHICLE_OCR_LOG_LEVEL', 'DEBUG')
        monkeypatch.setenv('VEHICLE_OCR_LOG_FILE', '/tmp/vehicle_ocr_test.log')
        config = LoggingConfig()
        assert config.level == 'DEBUG'
        assert config.log_file == '/tmp/vehicle_ocr_test.log'

    def test_logging_defaults(self):
        config = LoggingConfig()
        assert config.level == 'WARNING'
        assert config.log_file is None


class TestConfigFiles:
    """Loading and saving YAML/JSON config files."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            'mileage': {'plausible_range': [100, 2000000], 'digit_bonus': {7: 40}},
            'vin': {'min_distinct_chars': 8},
            'logging': {'level': 'INFO'},
            'line_separator': '\n',
        }))

        config = EngineConfig.load(path)

        assert config.mileage.plausible_range == (100, 2_000_000)
        assert config.mileage.digit_bonus == {7: 40}
        assert config.mileage.ideal_bonus == 100
        assert config.vin.min_distinct_chars == 8
        assert config.vin.length == 17
        assert config.logging.level == 'INFO'
        assert config.line_separator == '\n'

    def test_load_json_with_string_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({'mileage': {'digit_bonus': {'6': 50}}}))

        config = EngineConfig.load(path)
        assert config.mileage.digit_bonus == {6: 50}

    @pytest.mark.parametrize("suffix", [".yaml", ".json"])
    def test_save_then_load(self, tmp_path, suffix):
        original = EngineConfig(
            mileage=MileageRules(plausible_range=(50, 1_500_000)),
            vin=VINRules(min_distinct_chars=6),
        )
        path = tmp_path / f"config{suffix}"
        original.save(path)

        loaded = EngineConfig.load(path)
        assert loaded.mileage == original.mileage
        assert loaded.vin == original.vin
        assert loaded.line_separator == original.line_separator

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert EngineConfig.load(path).mileage == MileageRules()

    def test_unknown_key_ignored(self, tmp_path, caplog):
        path = tmp_path / "config.yaml"
        path.write_text(
            "mileage:\n  turbo_mode: 1\n"
            "milage:\n  ideal_bonus: 5\n"
            "logging:\n  levle: DEBUG\n"
        )
        with caplog.at_level(logging.WARNING, logger="vehicle_ocr.config"):
            config = EngineConfig.load(path)

        assert config.mileage == MileageRules()
        assert config.logging.level == "WARNING"
        assert "mileage.turbo_mode" in caplog.text
        assert "config key milage" in caplog.text
        assert "logging.levle" in caplog.text

    def test_logging_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("logging:\n  level: debug\n  log_file: null\n")
        config = EngineConfig.load(path)
        assert config.logging.level == "debug"
        assert config.logging.log_file is None

    def test_directory_path(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Could not read"):
            EngineConfig.load(tmp_path)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_bytes(b"mileage:\n  ideal_bonus: \xff\xfe\n")
        with pytest.raises(ConfigurationError, match="Could not read"):
            EngineConfig.load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            EngineConfig.load(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("mileage: [unclosed\n")
        with pytest.raises(ConfigurationError):
            EngineConfig.load(path)

    def test_top_level_not_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.load(path)
        assert exc_info.value.error_code == "CONFIG_ERROR"

    @pytest.mark.parametrize("section", [
        "mileage:\n  plausible_range: [1, 2, 3]\n",
        "mileage:\n  ideal_bonus: lots\n",
        "mileage:\n  digit_bonus: 5\n",
        "vin: 17\n",
        "logging:\n  - DEBUG\n",
        "logging:\n  level: 10\n",
        "logging:\n  level: LOUD\n",
        "logging:\n  log_file: [a, b]\n",
        "line_separator: [1]\n",
    ])
    def test_bad_values(self, tmp_path, section):
        path = tmp_path / "bad.yaml"
        path.write_text(section)
        with pytest.raises(ConfigurationError):
            EngineConfig.load(path)


class TestGlobalConfig:
    """Tests for the cached global configuration."""

    def test_cached(self):
        assert get_config() is get_config()

    def test_reset(self):
        first = get_config()
        reset_config()
        assert get_config() is not first

    def test_loads_file_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("vin:\n  min_distinct_chars: 9\n")
        monkeypatch.setenv('VEHICLE_OCR_CONFIG', str(path))
        reset_config()

        assert get_config().vin.min_distinct_chars == 9
