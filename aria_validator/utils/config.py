# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Configuration management utilities for the aria_validator package.

Resolves options from defaults, persistent user configuration, environment
variables and runtime overrides, in that order of precedence.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from copy import deepcopy

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from aria_validator.utils.logging_helper import setup_logger, ConfigurationError

logger = setup_logger(__name__)


class ValidatorOptions(BaseModel):
    """Which optional check categories the validator runs."""

    model_config = ConfigDict(extra="forbid")

    attributes: bool = True
    experimental: bool = True
    ids: bool = True

    @classmethod
    def from_any(cls, options: Any) -> "ValidatorOptions":
        """
        Coerce a mapping, model instance or None into validated options.

        Raises:
            ConfigurationError: If the options do not validate
        """
        if options is None:
            return cls(**config_manager.get_config(section="validator"))
        if isinstance(options, cls):
            return options
        try:
            return cls.model_validate(dict(options))
        except (ValidationError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid validator options: {e}") from e


class ConfigManager:
    """
    Centralized configuration manager for the validator.

    Each section (``validator``, ``taxonomy``, ``diagnostics``) can be overridden
    by environment variables named ``<prefix><SECTION>_<OPTION>``.
    """

    def __init__(
        self, defaults: Dict[str, Any] = None, env_prefix: str = "ARIA_VALIDATOR_"
    ):
        self.defaults = defaults or {}
        self.env_prefix = env_prefix
        self.user_config = {}

    def get_config(
        self, user_options: Dict[str, Any] = None, section: str = None
    ) -> Dict[str, Any]:
        """
        Get the resolved configuration.

        Args:
            user_options: Runtime overrides (highest precedence)
            section: Optional section name to retrieve (e.g. 'taxonomy')

        Returns:
            Dict with the resolved configuration options
        """
        if section:
            config = deepcopy(self.defaults.get(section, {}))
            config.update(self.user_config.get(section, {}))
        else:
            config = deepcopy(self.defaults)
            for name, values in self.user_config.items():
                config.setdefault(name, {}).update(values)

        self._apply_env_vars(config, section)

        if user_options:
            config.update(
                {key: value for key, value in user_options.items() if value is not None}
            )

        return config

    def set_user_config(self, config: Dict[str, Any], section: str = None) -> None:
        """
        Set persistent user configuration.

        Args:
            config: Dictionary of configuration options, keyed by section when
                no section is given
            section: Optional section name
        """
        if section:
            self.user_config.setdefault(section, {}).update(config)
            return
        for name, values in config.items():
            if not isinstance(values, dict):
                raise ConfigurationError(
                    f"Configuration section '{name}' must be a mapping"
                )
            self.user_config.setdefault(name, {}).update(values)

    def reset_user_config(self) -> None:
        self.user_config = {}

    def _apply_env_vars(self, config: Dict[str, Any], section: str = None) -> None:
        """Apply environment variables for one section to the configuration."""
        if not section:
            for name, values in config.items():
                if isinstance(values, dict):
                    self._apply_env_vars(values, name)
            return

        prefix = f"{self.env_prefix}{section.upper()}_"

        for env_var, value in os.environ.items():
            if not env_var.startswith(prefix):
                continue

            option_name = env_var[len(prefix) :].lower()

            if option_name in config and config[option_name] is not None:
                existing_type = type(config[option_name])
                try:
                    if existing_type == bool:
                        value = value.lower() in ("true", "1", "yes", "y")
                    elif existing_type == int:
                        value = int(value)
                    elif existing_type == float:
                        value = float(value)
                except (ValueError, TypeError):
                    logger.warning(
                        "Could not convert environment variable %s to %s",
                        env_var,
                        existing_type.__name__,
                    )

            config[option_name] = value
            logger.debug("Applied environment variable %s", env_var)


def validate_options(
    options: Dict[str, Any],
    required_fields: Optional[Dict[str, type]] = None,
    optional_fields: Optional[Dict[str, type]] = None,
) -> None:
    """
    Validate configuration options against simple type schemas.

    Raises:
        ConfigurationError: If validation fails
    """
    for field, field_type in (required_fields or {}).items():
        if field not in options:
            raise ConfigurationError(f"Required field '{field}' is missing")

    checked = dict(optional_fields or {})
    checked.update(required_fields or {})
    for field, field_type in checked.items():
        if field in options and options[field] is not None and not isinstance(
            options[field], field_type
        ):
            raise ConfigurationError(
                f"Field '{field}' has incorrect type. "
                f"Expected {field_type.__name__}, got {type(options[field]).__name__}"
            )


def load_config_file(file_path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML (.yaml, .yml) or JSON (.json) file.

    Raises:
        ConfigurationError: If file cannot be loaded or parsed
    """
    path = Path(file_path)

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        raise ConfigurationError(
            f"Unsupported configuration file format: {path.suffix}. "
            "Supported formats: YAML (.yaml, .yml), JSON (.json)"
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error parsing configuration file: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {file_path} must contain a mapping"
        )
    return data


def save_config(config: Dict[str, Any], file_path: str, file_format: str = "yaml") -> None:
    """
    Save configuration to a file.

    Raises:
        ConfigurationError: If the format is unknown or the file cannot be written
    """
    file_format = file_format.lower()
    if file_format not in ("yaml", "json"):
        raise ConfigurationError(f"Unsupported format: {file_format}")
    try:
        with open(file_path, "w", encoding="utf-8") as f:
            if file_format == "yaml":
                yaml.safe_dump(config, f, default_flow_style=False)
            else:
                json.dump(config, f, indent=2)
        logger.info("Configuration saved to %s", file_path)
    except OSError as e:
        raise ConfigurationError(f"Error saving configuration: {e}") from e


# Global instance for shared configuration
config_manager = ConfigManager(
    {
        # Optional check categories
        "validator": {
            "attributes": True,
            "experimental": True,
            "ids": True,
        },
        # Taxonomy documents; None means the copies shipped in aria_validator/data
        "taxonomy": {
            "rdf_path": None,
            "html_path": None,
            "use_dom_properties": True,
            "parser": "html.parser",
        },
        "diagnostics": {
            "strict": False,
        },
    }
)
