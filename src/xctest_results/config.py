"""
Configuration management for XCTest results.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

# Module-level lock for thread-safe config loading
_config_lock = threading.Lock()

VALID_REPORT_FORMATS = ["console", "junit", "json"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


@dataclass
class ReporterConfig:
    """Main configuration for XCTest result reporting."""

    # Reporting configuration
    report_format: str = "console"  # console, junit, json

    # Raise on unrecognised status strings instead of mapping them to "unknown"
    strict_status: bool = False

    # Extra strptime formats accepted for finish-time tokens
    finish_time_formats: List[str] = field(default_factory=list)

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Post-initialization normalisation."""
        if isinstance(self.finish_time_formats, str):
            self.finish_time_formats = [self.finish_time_formats]
        elif self.finish_time_formats is None:
            self.finish_time_formats = []
        if isinstance(self.log_level, str):
            self.log_level = self.log_level.upper()


def _parse_env_bool(var_name: str) -> Optional[bool]:
    """
    Safely parse a boolean from an environment variable.

    Args:
        var_name: Name of the environment variable

    Returns:
        Parsed boolean value, or None if the variable is not set

    Raises:
        ConfigurationError: If the value is not a recognised boolean
    """
    value = os.environ.get(var_name)
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Environment variable {var_name} must be a boolean (true/false), got: '{value}'"
    )


def load_config(config_file: Optional[str] = None) -> ReporterConfig:
    """
    Load configuration from file and environment variables.

    Configuration precedence (highest to lowest):
    1. Environment variables
    2. Configuration file
    3. Default values

    Args:
        config_file: Path to YAML configuration file (optional)

    Returns:
        ReporterConfig object with merged configuration

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
        ConfigurationError: If config file has invalid YAML or env vars are invalid
    """
    with _config_lock:
        config_data: Dict[str, Any] = {}

        if config_file:
            logger.info("Loading configuration from %s", config_file)
            try:
                with open(config_file, "r") as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file '{config_file}': {e}")
            except FileNotFoundError:
                raise FileNotFoundError(f"Configuration file not found: {config_file}")
            except PermissionError:
                raise ConfigurationError(f"Permission denied reading config file '{config_file}'")
            except OSError as e:
                raise ConfigurationError(f"Unable to read config file '{config_file}': {e}")

            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    f"Config file '{config_file}' must contain a mapping at the top level"
                )
            config_data.update(file_config)

        env_overrides = _load_from_env()
        config_data.update(env_overrides)
        if env_overrides:
            logger.debug("Applied environment variable overrides: %s", list(env_overrides.keys()))

        try:
            return ReporterConfig(**config_data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")


def _load_from_env() -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Supported environment variables:
    - XCTEST_REPORT_FORMAT: Report format (console, junit, json)
    - XCTEST_STRICT_STATUS: Reject unrecognised status strings (true/false)
    - XCTEST_LOG_LEVEL: Logging level

    Returns:
        Dictionary of configuration values from environment

    Raises:
        ConfigurationError: If environment variable values are invalid
    """
    env_config: Dict[str, Any] = {}

    if "XCTEST_REPORT_FORMAT" in os.environ:
        env_config["report_format"] = os.environ["XCTEST_REPORT_FORMAT"]

    strict_status = _parse_env_bool("XCTEST_STRICT_STATUS")
    if strict_status is not None:
        env_config["strict_status"] = strict_status

    if "XCTEST_LOG_LEVEL" in os.environ:
        env_config["log_level"] = os.environ["XCTEST_LOG_LEVEL"]

    return env_config


def validate_config(config: ReporterConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: ReporterConfig to validate

    Returns:
        List of error messages (empty if valid)
    """
    errors: List[str] = []

    if config.report_format not in VALID_REPORT_FORMATS:
        errors.append(
            f"report_format must be one of {VALID_REPORT_FORMATS}: {config.report_format}"
        )

    if not isinstance(config.strict_status, bool):
        errors.append(f"strict_status must be a boolean: {config.strict_status!r}")

    if config.log_level not in VALID_LOG_LEVELS:
        errors.append(f"log_level must be one of {VALID_LOG_LEVELS}: {config.log_level}")

    if not isinstance(config.finish_time_formats, list):
        errors.append(
            f"finish_time_formats must be a list of strings: {config.finish_time_formats!r}"
        )
    else:
        for i, fmt in enumerate(config.finish_time_formats):
            if not isinstance(fmt, str) or not fmt:
                errors.append(f"finish_time_formats[{i}] must be a non-empty string")
            elif "%" not in fmt:
                errors.append(f"finish_time_formats[{i}] has no strptime directives: {fmt}")

    return errors
