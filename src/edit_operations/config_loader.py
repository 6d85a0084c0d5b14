"""YAML configuration loading and validation.

This module loads and saves the engine settings (staging location and age,
inline size limit, default page size, request timeout). Credentials are not
part of this file; they come from the environment (see
src.wordpress_client.auth).
"""

import os
from typing import Any, Dict

import yaml

from .errors import ConfigError
from .models import EditorConfig


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure (every field is optional):
        staging_dir: "tmp/elementor-data"
        staging_max_age_hours: 24
        inline_size_limit_bytes: 100000
        default_page_size: 5
        request_timeout: 60
    """

    DEFAULTS = {
        'staging_dir': 'tmp/elementor-data',
        'staging_max_age_hours': 24,
        'inline_size_limit_bytes': 100000,
        'default_page_size': 5,
        'request_timeout': 60,
    }

    @classmethod
    def load(cls, config_path: str) -> EditorConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            EditorConfig with parsed configuration

        Raises:
            ConfigError: If the file cannot be read or the configuration is invalid
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found: {config_path}")
        except PermissionError:
            raise ConfigError(f"Permission denied reading {config_path}")
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}") from e

        # An empty file means "all defaults"
        if config_dict is None:
            config_dict = {}

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def load_or_default(cls, config_path: str) -> EditorConfig:
        """Load configuration, falling back to defaults if the file is absent.

        Raises:
            ConfigError: If the file exists but is invalid
        """
        if not os.path.exists(config_path):
            return cls._parse_config({})
        return cls.load(config_path)

    @classmethod
    def save(cls, config_path: str, config: EditorConfig) -> None:
        """Save configuration to a YAML file.

        Raises:
            ConfigError: If the file cannot be written
        """
        config_dict = {
            'staging_dir': config.staging_dir,
            'staging_max_age_hours': config.staging_max_age_hours,
            'inline_size_limit_bytes': config.inline_size_limit_bytes,
            'default_page_size': config.default_page_size,
            'request_timeout': config.request_timeout,
        }

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        try:
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except OSError as e:
            raise ConfigError(f"Cannot write {config_path}: {e}") from e

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> EditorConfig:
        """Parse and validate a configuration dictionary.

        Raises:
            ConfigError: If a field has the wrong type or value
        """
        values = {**cls.DEFAULTS, **config_dict}

        unknown = set(config_dict.keys()) - set(cls.DEFAULTS.keys())
        if unknown:
            raise ConfigError(f"Unknown fields: {', '.join(sorted(unknown))}")

        staging_dir = values['staging_dir']
        if not isinstance(staging_dir, str) or not staging_dir.strip():
            raise ConfigError("Field must be a non-empty string", 'staging_dir')

        staging_max_age_hours = cls._number(values, 'staging_max_age_hours', float)
        if staging_max_age_hours <= 0:
            raise ConfigError(
                f"Must be greater than 0, got {staging_max_age_hours}",
                'staging_max_age_hours'
            )

        inline_size_limit_bytes = cls._number(values, 'inline_size_limit_bytes', int)
        if inline_size_limit_bytes < 1:
            raise ConfigError(
                f"Must be at least 1, got {inline_size_limit_bytes}",
                'inline_size_limit_bytes'
            )

        default_page_size = cls._number(values, 'default_page_size', int)
        if default_page_size < 1:
            raise ConfigError(
                f"Must be at least 1, got {default_page_size}",
                'default_page_size'
            )

        request_timeout = cls._number(values, 'request_timeout', int)
        if request_timeout <= 0:
            raise ConfigError(
                f"Must be greater than 0, got {request_timeout}",
                'request_timeout'
            )

        return EditorConfig(
            staging_dir=staging_dir,
            staging_max_age_hours=staging_max_age_hours,
            inline_size_limit_bytes=inline_size_limit_bytes,
            default_page_size=default_page_size,
            request_timeout=request_timeout,
        )

    @classmethod
    def _number(cls, values: Dict[str, Any], name: str, kind: type) -> Any:
        """Convert a numeric field, rejecting booleans and non-numbers."""
        value = values[name]
        if isinstance(value, bool):
            raise ConfigError(f"Expected a number, got {value!r}", name)
        try:
            return kind(value)
        except (ValueError, TypeError):
            raise ConfigError(f"Expected a number, got {value!r}", name)
