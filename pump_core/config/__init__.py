"""Configuration management for pump_core."""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from pydantic import BaseModel, Field, field_validator

from pump_core.constants import (
    DEFAULT_CONFIG_PATH, DEFAULT_DATA_DIR, DEFAULT_LOG_LEVEL, DATA_DIR_ENV_VAR,
    DEFAULT_EXPORT_FILENAME, DEFAULT_EXPORT_INDENT,
    DEFAULT_MAIN_REST_SECONDS, DEFAULT_ACCESSORY_REST_SECONDS
)

logger = logging.getLogger(__name__)

class LoggingConfig(BaseModel):
    """Logging configuration model."""
    level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")
    file: Optional[str] = Field(default=None, description="Log file path")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            logger.warning(f"Invalid logging level: {v}. Using default: {DEFAULT_LOG_LEVEL}")
            return DEFAULT_LOG_LEVEL
        return v.upper()

class TimerConfig(BaseModel):
    """Rest timer configuration model."""
    main_rest_seconds: int = Field(default=DEFAULT_MAIN_REST_SECONDS,
                                   description="Rest after a set of the main lift")
    accessory_rest_seconds: int = Field(default=DEFAULT_ACCESSORY_REST_SECONDS,
                                        description="Rest after any other set")

    @field_validator('main_rest_seconds', 'accessory_rest_seconds')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Rest durations must be positive."""
        if v <= 0:
            raise ValueError(f"rest duration must be positive, got {v}")
        return v

class ExportConfig(BaseModel):
    """Export configuration model."""
    filename: str = Field(default=DEFAULT_EXPORT_FILENAME, description="Default export file name")
    indent: int = Field(default=DEFAULT_EXPORT_INDENT, description="JSON indentation")

class PumpConfig(BaseModel):
    """Main configuration model."""
    data_dir: str = Field(default=DEFAULT_DATA_DIR, description="Directory holding the persisted stores")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    timer: TimerConfig = Field(default_factory=TimerConfig, description="Rest timer configuration")
    export: ExportConfig = Field(default_factory=ExportConfig, description="Export configuration")

    @field_validator('data_dir')
    @classmethod
    def resolve_data_dir(cls, v: str) -> str:
        """Resolve data directory path."""
        return resolve_path(v)

def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from the YAML config file.

    Args:
        config_path: Path to the config file. If None, default is used.

    Returns:
        Dict with configuration values. Defaults are filled in for anything
        the file does not set.
    """
    path = str(config_path) if config_path else DEFAULT_CONFIG_PATH
    config: Dict[str, Any] = PumpConfig().model_dump()

    try:
        resolved_path = resolve_path(path)
        config_file = Path(resolved_path)
        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                raw_config = yaml.safe_load(f) or {}

            try:
                validated_config = PumpConfig(**raw_config)
                config = validated_config.model_dump()
                logger.debug(f"Loaded and validated configuration from {resolved_path}")
            except Exception as validation_error:
                logger.error(f"Configuration validation error: {validation_error}")
                logger.warning("Using default configuration with provided values where valid")
                # Use as much of the config as possible
                config.update(raw_config)
        else:
            logger.warning(f"Config file '{resolved_path}' not found. Using defaults.")
    except Exception as e:
        logger.error(f"Error loading config file '{path}': {e}")

    return config

def resolve_path(path: Optional[str]) -> Optional[str]:
    """Resolve path with environment variables and user home."""
    if path is None:
        return None
    return os.path.expanduser(os.path.expandvars(path))

def get_data_dir(config: Dict[str, Any], override: Optional[str] = None) -> str:
    """
    Get the data directory with precedence:
    1. Explicit override (command line)
    2. PUMP_DATA_DIR environment variable
    3. Configuration
    4. Default
    """
    data_dir = override or os.environ.get(DATA_DIR_ENV_VAR) or config.get("data_dir", DEFAULT_DATA_DIR)
    return resolve_path(data_dir)

def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get configuration value using a dot-separated path.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "timer.main_rest_seconds")
        default: Default value if path not found

    Returns:
        Configuration value or default if not found
    """
    keys = key_path.split('.')
    current = config

    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default

    return current
