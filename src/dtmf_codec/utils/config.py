# src/dtmf_codec/utils/config.py
"""
Configuration management for the DTMF codec.
Handles loading and validating configuration from YAML files and environment variables.
Provides type-safe access to configuration values with comprehensive error checking.
"""

import os
import yaml
import logging
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass
from pathlib import Path

from ..core.coefficients import SAMPLE_RATE

# Configure module logger
logger = logging.getLogger(__name__)

# Packaged defaults, always loaded first
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yml"

@dataclass
class ServerConfig:
    """Server configuration parameters"""
    host: str
    port: int

@dataclass
class DetectorSettings:
    """Detection session parameters"""
    sample_rate: int
    batch_size: int

@dataclass
class GeneratorSettings:
    """Generation session parameters"""
    frame_size: int
    tone_ms: int
    pause_ms: int

@dataclass
class LogConfig:
    """Logging configuration parameters"""
    level: str
    format: str
    output: Optional[str]

@dataclass
class StreamingConfig:
    """WebSocket streaming parameters"""
    max_chunk_bytes: int

@dataclass
class SecurityConfig:
    """Security configuration parameters"""
    allowed_origins: list[str]

class ConfigurationError(Exception):
    """Custom exception for configuration errors"""
    pass

class Config:
    """
    Central configuration management for the DTMF codec.
    Handles loading, validation, and access to configuration values.
    """
    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self.server = None
            self.detector = None
            self.generator = None
            self.logging = None
            self.streaming = None
            self.security = None
            self._config_path = None
            self._raw_config = {}
            self._initialized = True
            logger.debug("Configuration manager initialized")

    @property
    def loaded(self) -> bool:
        return self.server is not None

    def load(self, config_path: Union[str, Path]) -> None:
        """
        Load configuration from YAML file with environment variable overrides.

        Args:
            config_path: Path to YAML configuration file

        Raises:
            ConfigurationError: If configuration loading or validation fails
        """
        try:
            logger.info(f"Loading configuration from {config_path}")
            self._config_path = Path(config_path)

            if not self._config_path.exists():
                raise ConfigurationError(f"Configuration file not found: {config_path}")

            # Load default configuration first if this isn't default.yml
            if self._config_path.name != "default.yml":
                default_path = self._config_path.parent / "default.yml"
                if not default_path.exists():
                    default_path = DEFAULT_CONFIG_PATH
                with open(default_path) as f:
                    self._raw_config = yaml.safe_load(f) or {}
                    logger.debug(f"Loaded default configuration from {default_path}")
            else:
                self._raw_config = {}

            # Load and merge custom configuration
            with open(self._config_path) as f:
                custom_config = yaml.safe_load(f)
                if custom_config:
                    self._merge_configs(custom_config)
                    logger.debug(f"Merged configuration from {self._config_path}")

            self._apply_env_overrides()
            self._validate_and_create_configs()

            logger.info("Configuration loaded successfully")

        except ConfigurationError:
            logger.error(f"Failed to load configuration from {config_path}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"Failed to load configuration: {str(e)}", exc_info=True)
            raise ConfigurationError(f"Configuration loading failed: {str(e)}") from e

    def load_defaults(self) -> None:
        """Load the packaged default configuration"""
        self.load(DEFAULT_CONFIG_PATH)

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to configuration"""
        env_mapping = {
            "DTMF_API_HOST": ("server", "host"),
            "DTMF_API_PORT": ("server", "port", int),
            "DTMF_BATCH_SIZE": ("detector", "batch_size", int),
            "DTMF_FRAME_SIZE": ("generator", "frame_size", int),
            "DTMF_TONE_MS": ("generator", "tone_ms", int),
            "DTMF_PAUSE_MS": ("generator", "pause_ms", int),
            "LOG_LEVEL": ("logging", "level"),
            "LOG_OUTPUT": ("logging", "output"),
        }

        for env_var, config_path in env_mapping.items():
            if env_var in os.environ:
                section, key = config_path[0], config_path[1]
                value = os.environ[env_var]

                # Apply type conversion if specified
                if len(config_path) > 2:
                    try:
                        value = config_path[2](value)
                    except ValueError as e:
                        raise ConfigurationError(
                            f"Invalid environment variable {env_var}: {str(e)}"
                        ) from e

                if section not in self._raw_config or self._raw_config[section] is None:
                    self._raw_config[section] = {}

                self._raw_config[section][key] = value
                logger.debug(f"Applied environment override: {env_var}={value}")

    def _validate_and_create_configs(self) -> None:
        """Validate configuration and create typed configuration objects"""
        self.server = ServerConfig(
            host=self._get_config_value("server", "host", str, "0.0.0.0"),
            port=self._get_config_value("server", "port", int, 8000)
        )

        self.detector = DetectorSettings(
            sample_rate=self._get_config_value("detector", "sample_rate", int, SAMPLE_RATE),
            batch_size=self._get_config_value("detector", "batch_size", int, 102)
        )
        if self.detector.sample_rate != SAMPLE_RATE:
            raise ConfigurationError(
                f"Unsupported sample rate {self.detector.sample_rate}, only {SAMPLE_RATE} Hz is supported"
            )
        self._require_positive("detector", "batch_size", self.detector.batch_size)

        self.generator = GeneratorSettings(
            frame_size=self._get_config_value("generator", "frame_size", int, 160),
            tone_ms=self._get_config_value("generator", "tone_ms", int, 70),
            pause_ms=self._get_config_value("generator", "pause_ms", int, 50)
        )
        self._require_positive("generator", "frame_size", self.generator.frame_size)
        self._require_positive("generator", "tone_ms", self.generator.tone_ms)
        if self.generator.pause_ms < 0:
            raise ConfigurationError("generator.pause_ms must not be negative")

        output = (self._raw_config.get("logging") or {}).get("output")
        self.logging = LogConfig(
            level=self._get_config_value("logging", "level", str, "INFO"),
            format=self._get_config_value("logging", "format", str, "json"),
            output=str(output) if output else None
        )

        self.streaming = StreamingConfig(
            max_chunk_bytes=self._get_config_value("streaming", "max_chunk_bytes", int, 65536)
        )

        self.security = SecurityConfig(
            allowed_origins=self._get_config_value("security", "allowed_origins", list, ["*"])
        )

        logger.debug("Configuration validation completed successfully")

    def _require_positive(self, section: str, key: str, value: int) -> None:
        if value <= 0:
            raise ConfigurationError(f"{section}.{key} must be positive, got {value}")

    def _get_config_value(
        self,
        section: str,
        key: str,
        value_type: type,
        default: Any = None,
        config_dict: Optional[Dict] = None
    ) -> Any:
        """
        Get typed configuration value with validation.

        Args:
            section: Configuration section name
            key: Configuration key
            value_type: Expected value type
            default: Optional default value
            config_dict: Optional alternative configuration dictionary

        Returns:
            Typed configuration value

        Raises:
            ConfigurationError: If value is missing or invalid type
        """
        config = config_dict if config_dict is not None else (self._raw_config.get(section) or {})
        value = config.get(key)

        if value is None:
            if default is None:
                raise ConfigurationError(f"Required configuration missing: {section}.{key}")
            value = default
            logger.debug(f"Using default value for {section}.{key}: {default}")

        try:
            if value_type == list and isinstance(value, str):
                value = [value]
            elif value_type == int and isinstance(value, bool):
                raise TypeError("boolean is not an integer")
            elif not isinstance(value, value_type):
                value = value_type(value)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid type for {section}.{key}: expected {value_type.__name__}, got {type(value).__name__}"
            ) from e

        return value

    def _merge_configs(self, custom_config: Dict[str, Any]) -> None:
        """Deep merge custom configuration with existing config"""
        def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
            for key, value in override.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value

        deep_merge(self._raw_config, custom_config)

    def reload(self) -> None:
        """Reload configuration from file"""
        logger.info("Reloading configuration")
        if self._config_path:
            self.load(self._config_path)
        else:
            raise ConfigurationError("No configuration path set, cannot reload")
