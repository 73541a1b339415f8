"""
Engine Configuration - Centralized Settings
===========================================

All tunable parameters in one place.
Supports environment variable overrides and YAML/JSON config files.

Usage:
    from vehicle_ocr.config import get_config
    config = get_config()
    print(config.mileage.plausible_range)

Environment Variables:
    VEHICLE_OCR_LOG_LEVEL=DEBUG
    VEHICLE_OCR_LOG_FILE=/tmp/vehicle_ocr.log
    VEHICLE_OCR_CONFIG=/etc/vehicle_ocr.yaml

The scoring tables default to the values the extractors are calibrated
against. The module-level ``extract_*`` functions always use these defaults;
custom tables only take effect through an explicit ``FieldExtractor``.
"""

import os
import json
import logging
from dataclasses import dataclass, field, asdict, fields, replace
from pathlib import Path
from typing import Tuple, Optional, Dict, Any, Union

import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _get_env_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


@dataclass(frozen=True)
class MileageRules:
    """Scoring table and thresholds for odometer readings."""

    # Range bonuses, checked in order; first hit wins
    ideal_range: Tuple[int, int] = (10_000, 200_000)
    ideal_bonus: int = 100
    common_range: Tuple[int, int] = (1_000, 500_000)
    common_bonus: int = 50
    plausible_range: Tuple[int, int] = (100, 999_999)
    plausible_bonus: int = 25

    # Digit count -> bonus
    digit_bonus: Dict[int, int] = field(
        default_factory=lambda: {6: 40, 5: 30, 4: 15, 7: 15}
    )

    small_threshold: int = 100
    small_penalty: int = 50
    large_threshold: int = 500_000
    large_penalty: int = 30

    # A lone plausible reading inside this range is trusted
    high_confidence_range: Tuple[int, int] = (1_000, 500_000)

    # Top score must beat runner-up by this ratio (numerator, denominator)
    dominance_ratio: Tuple[int, int] = (3, 2)

    # u64 ceiling; anything above is treated as a non-match
    max_value: int = 2 ** 64 - 1
    max_digits: int = 20


@dataclass(frozen=True)
class VINRules:
    """VIN candidate bounds and well-formedness thresholds."""

    length: int = 17
    min_length: int = 15
    max_length: int = 19
    min_distinct_chars: int = 5

    # Added to the length of an exact-length candidate when ranking near misses
    exact_rank_bonus: int = 100


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(
        default_factory=lambda: _get_env_str('VEHICLE_OCR_LOG_LEVEL', 'WARNING')
    )
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format: str = '%Y-%m-%d %H:%M:%S'

    # File logging (optional)
    log_file: Optional[str] = field(
        default_factory=lambda: os.environ.get('VEHICLE_OCR_LOG_FILE')
    )


@dataclass
class EngineConfig:
    """Complete engine configuration."""

    mileage: MileageRules = field(default_factory=MileageRules)
    vin: VINRules = field(default_factory=VINRules)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Separator used when joining OCR text lines for one frame
    line_separator: str = ' '

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    def save(self, path: Union[str, Path]):
        """Save configuration to a YAML or JSON file (by extension)."""
        path = Path(path)
        data = self.to_dict()
        with open(path, 'w') as f:
            if path.suffix.lower() in ('.yaml', '.yml'):
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(data, f, indent=2)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'EngineConfig':
        """
        Load configuration from a YAML or JSON file.

        Keys not present keep their defaults; unknown keys are logged and ignored.

        Raises:
            ConfigurationError: If the file is missing, unreadable or malformed
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}", config_key="path")

        try:
            with open(path, encoding='utf-8') as f:
                if path.suffix.lower() in ('.yaml', '.yml'):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not parse {path}: {e}", config_key="path") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Could not read {path}: {e}", config_key="path") from e

        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a mapping at top level of {path}",
                config_key="path",
                expected="mapping",
            )

        for key in data:
            if key not in _SECTIONS:
                logger.warning(f"Ignoring unknown config key {key}")

        config = cls()

        if 'mileage' in data:
            config.mileage = _merge_rules(config.mileage, data['mileage'], 'mileage')

        if 'vin' in data:
            config.vin = _merge_rules(config.vin, data['vin'], 'vin')

        if 'logging' in data:
            config.logging = _merge_logging(config.logging, data['logging'])

        if 'line_separator' in data:
            separator = data['line_separator']
            if not isinstance(separator, str):
                raise ConfigurationError(
                    f"Invalid value for line_separator: {separator!r}",
                    config_key="line_separator",
                    expected="str",
                )
            config.line_separator = separator

        return config


_SECTIONS = ('mileage', 'vin', 'logging', 'line_separator')


def _merge_logging(current: LoggingConfig, overrides: Any) -> LoggingConfig:
    """Apply a file's logging section; every value must be a string."""
    if overrides is None:
        return current
    if not isinstance(overrides, dict):
        raise ConfigurationError("Section 'logging' must be a mapping", config_key="logging", expected="mapping")

    known = {f.name for f in fields(current)}
    changes = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key logging.{key}")
            continue
        # log_file may be null to disable file logging
        if value is None and key == 'log_file':
            changes[key] = None
            continue
        if not isinstance(value, str):
            raise ConfigurationError(
                f"Invalid value for logging.{key}: {value!r}",
                config_key=f"logging.{key}",
                expected="str",
            )
        if key == 'level' and not isinstance(logging.getLevelName(value.upper()), int):
            raise ConfigurationError(
                f"Unknown log level: {value!r}",
                config_key="logging.level",
                expected="DEBUG, INFO, WARNING, ERROR or CRITICAL",
            )
        changes[key] = value

    return replace(current, **changes)


def _merge_rules(rules, overrides: Any, section: str):
    """Return a copy of a frozen rules table with file overrides applied."""
    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Section '{section}' must be a mapping", config_key=section, expected="mapping")

    known = {f.name: getattr(rules, f.name) for f in fields(rules)}
    changes = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key {section}.{key}")
            continue
        current = known[key]
        try:
            if isinstance(current, tuple):
                value = tuple(int(v) for v in value)
                if len(value) != len(current):
                    raise ValueError(f"expected {len(current)} values")
            elif isinstance(current, dict):
                value = {int(k): int(v) for k, v in value.items()}
            else:
                value = int(value)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(
                f"Invalid value for {section}.{key}: {value!r} ({e})",
                config_key=f"{section}.{key}",
                expected=type(current).__name__,
            ) from e
        changes[key] = value

    return replace(rules, **changes)


# Global configuration instance (singleton pattern)
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """
    Get the global configuration instance.

    Creates a new instance on first call (from VEHICLE_OCR_CONFIG when set),
    returns cached instance thereafter.
    """
    global _config
    if _config is None:
        config_path = _get_env_str('VEHICLE_OCR_CONFIG', '')
        _config = EngineConfig.load(config_path) if config_path else EngineConfig()
        _setup_logging(_config.logging)
    return _config


def reset_config():
    """Reset configuration to defaults (useful for testing)."""
    global _config
    _config = None


def _setup_logging(config: LoggingConfig):
    """Configure logging based on settings."""
    level = getattr(logging, config.level.upper(), logging.WARNING)

    handlers = [logging.StreamHandler()]

    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=level,
        format=config.format,
        datefmt=config.date_format,
        handlers=handlers,
    )
