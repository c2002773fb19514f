#!/usr/bin/env python3
"""
Configuration manager for the panEDTA pipeline
Handles loading and accessing configuration from various sources.
"""
import os
import copy
import yaml
import json
import logging
from typing import Dict, Any, Optional, List

from panedta.exceptions import ConfigError
from .schema import ConfigSchema
from .defaults import DEFAULT_CONFIG


class ConfigManager:
    """Configuration manager for the panEDTA pipeline"""

    ENV_PREFIX = "PANEDTA_"

    def __init__(self, config_path: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None):
        """Initialize configuration manager

        Args:
            config_path: Path to configuration file (optional)
            overrides: Nested dictionary applied last, e.g. from CLI flags

        Raises:
            ConfigError: If the file cannot be read or validation fails
        """
        self.logger = logging.getLogger("panedta.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = {}

        self._load_defaults()

        if config_path:
            if not os.path.exists(config_path):
                raise ConfigError(f"Configuration file not found: {config_path}",
                                  {'file': config_path})
            self._load_from_file(config_path)

            local_config_path = self._get_local_config_path(config_path)
            if os.path.exists(local_config_path):
                self._load_from_file(local_config_path)
                self.logger.info(f"Merged local configuration from {local_config_path}")

        self._load_from_env()

        if overrides:
            self.apply_overrides(overrides, validate=False)

        self._validate_config()

    def _get_local_config_path(self, config_path: str) -> str:
        """Get path to local configuration file based on main config path"""
        config_dir = os.path.dirname(config_path)
        name, ext = os.path.splitext(os.path.basename(config_path))

        # Format: <filename>.local.<extension>
        local_path = os.path.join(config_dir, f"{name}.local{ext}")
        self.logger.debug(f"Looking for local config at: {local_path}")
        return local_path

    def _load_defaults(self) -> None:
        """Load default configuration values"""
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.logger.debug("Loaded default configuration")

    def _load_from_file(self, config_path: str) -> None:
        """Load configuration from YAML or JSON file

        Args:
            config_path: Path to configuration file
        """
        try:
            with open(config_path, 'r') as f:
                if config_path.endswith('.json'):
                    file_config = json.load(f)
                else:  # Assume YAML otherwise
                    file_config = yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config file {config_path}: {str(e)}",
                              {'file': config_path}) from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Configuration file {config_path} must contain a mapping",
                              {'file': config_path})

        self._deep_update(self.config, file_config)
        self.logger.info(f"Loaded configuration from {config_path}")

    def _load_from_env(self) -> None:
        """Override config with environment variables

        Environment variables should be prefixed with PANEDTA_
        and use double underscore __ for nesting.
        Example: PANEDTA_REDUCTION__MIN_COVERAGE for reduction.min_coverage
        """
        for key, value in os.environ.items():
            if key.startswith(self.ENV_PREFIX):
                config_key = key[len(self.ENV_PREFIX):].lower()

                if "__" in config_key:
                    parts = config_key.split("__")
                    self._set_nested_value(self.config, parts, value)
                else:
                    self.config[config_key] = self._convert_value(value)

        self.logger.debug("Applied environment variable overrides")

    def _set_nested_value(self, config: Dict[str, Any],
                          key_parts: List[str], value: str) -> None:
        """Set a nested value in the configuration dictionary

        Args:
            config: Configuration dictionary
            key_parts: List of nested key parts
            value: Value to set
        """
        current = config
        for part in key_parts[:-1]:
            if part not in current or not isinstance(current[part], dict):
                current[part] = {}
            current = current[part]

        current[key_parts[-1]] = self._convert_value(value)

    def _convert_value(self, value: str) -> Any:
        """Convert string environment variable to appropriate type

        Args:
            value: String value to convert

        Returns:
            Converted value with appropriate type
        """
        if value.lower() in ('true', 'yes'):
            return True
        elif value.lower() in ('false', 'no'):
            return False
        try:
            return int(value)
        except ValueError:
            try:
                return float(value)
            except ValueError:
                return value

    def _deep_update(self, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        """Recursively update target dictionary with values from source

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._deep_update(target[key], value)
            else:
                target[key] = value

    def _validate_config(self) -> None:
        """Validate the configuration against the schema

        Raises:
            ConfigError: If any validation error is found
        """
        errors = ConfigSchema.validate(self.config)

        if errors:
            for error in errors:
                self.logger.error(f"Configuration error: {error}")
            raise ConfigError(f"Invalid configuration: {'; '.join(errors)}",
                              {'errors': errors})

        self.logger.debug("Configuration validated successfully")

    def apply_overrides(self, overrides: Dict[str, Any], validate: bool = True) -> None:
        """Merge nested overrides, skipping None values

        Args:
            overrides: Nested dictionary of section -> key -> value
            validate: Re-validate the configuration afterwards
        """
        cleaned = {
            section: {k: v for k, v in values.items() if v is not None}
            for section, values in overrides.items()
            if isinstance(values, dict)
        }
        self._deep_update(self.config, cleaned)
        if validate:
            self._validate_config()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation

        Args:
            key: Configuration key (can use dot notation for nested values)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if '.' in key:
            current = self.config
            for part in key.split('.'):
                if not isinstance(current, dict) or part not in current:
                    return default
                current = current[part]
            return current
        return self.config.get(key, default)

    def get_path(self, path_name: str, default: str = "") -> str:
        """Get a path from configuration"""
        return self.config.get('paths', {}).get(path_name, default)
