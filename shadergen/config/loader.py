import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .models import ShaderGenConfig
from ..utils.exceptions import InvalidConfigError, MissingConfigError

logger = logging.getLogger(__name__)

ConfigDict = Dict[str, Any]

ENV_PREFIX = "SHADERGEN_"


def load_config_file(config_path: str) -> ConfigDict:
    """
    Loads a single YAML configuration file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        A dictionary containing the configuration. An empty file gives an
        empty dictionary.

    Raises:
        MissingConfigError: If the config_path does not exist.
        InvalidConfigError: If the file is not valid YAML or not a mapping.
    """
    path = Path(config_path)
    if not path.is_file():
        raise MissingConfigError(str(config_path))

    with open(path, 'r') as f:
        try:
            config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidConfigError(f"Error parsing YAML file {config_path}: {e}", cause=e) from e

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        raise InvalidConfigError(f"Configuration file {config_path} did not load as a dictionary.")
    return config_data


class ConfigLoader:
    """
    Loads the ShaderGen configuration from an optional YAML file and
    applies environment variable overrides.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Path to a YAML configuration file. None uses the
                built-in defaults only.
        """
        self.config_path = Path(config_path) if config_path else None
        self.loaded_config: ConfigDict = {}

        if self.config_path is not None:
            self.loaded_config = load_config_file(str(self.config_path))
            logger.info(f"Loaded configuration from: {self.config_path}")

    def load_resolved_config(self,
                             apply_env_overrides: bool = True,
                             env_prefix: str = ENV_PREFIX) -> ShaderGenConfig:
        """
        Builds the validated configuration.

        Args:
            apply_env_overrides: Whether to apply environment variable overrides.
            env_prefix: Prefix of environment variables that override config values.

        Raises:
            InvalidConfigError: If the merged values fail validation.
        """
        final_config_data = _deep_copy(self.loaded_config)

        if apply_env_overrides:
            self._apply_env_overrides(final_config_data, prefix=env_prefix)

        try:
            return ShaderGenConfig(**final_config_data)
        except ValidationError as e:
            raise InvalidConfigError(
                f"Configuration validation failed: {e.error_count()} error(s)",
                invalid_value=[err['loc'] for err in e.errors()],
                cause=e
            ) from e

    def _apply_env_overrides(self, config_dict: ConfigDict, prefix: str) -> None:
        """
        Overrides values in config_dict with environment variables.
        Supports nested keys via double underscore (e.g., SHADERGEN_GENERATOR__MAX_DEPTH).
        Values are read as YAML scalars, so "12" becomes 12 and "[r, g]" a list.
        """
        for env_var, value in sorted(os.environ.items()):
            if not env_var.startswith(prefix):
                continue
            keys = env_var[len(prefix):].lower().split('__')
            if not all(keys):
                logger.warning(f"Ignoring malformed override variable '{env_var}'")
                continue

            current_level = config_dict
            for key_segment in keys[:-1]:
                current_level = current_level.setdefault(key_segment, {})
                if not isinstance(current_level, dict):
                    raise InvalidConfigError(
                        f"Cannot apply '{env_var}': '{key_segment}' is not a section",
                        config_field='.'.join(keys)
                    )

            try:
                typed_value = yaml.safe_load(value)
            except yaml.YAMLError:
                typed_value = value
            current_level[keys[-1]] = typed_value
            logger.debug(f"Overridden '{'.'.join(keys)}' with value '{typed_value}' from env var '{env_var}'")


def _deep_copy(config: ConfigDict) -> ConfigDict:
    return {k: _deep_copy(v) if isinstance(v, dict) else v for k, v in config.items()}


def load_config(config_path: Optional[str] = None, apply_env_overrides: bool = True) -> ShaderGenConfig:
    """Load and validate the configuration; see `ConfigLoader`."""
    return ConfigLoader(config_path).load_resolved_config(apply_env_overrides=apply_env_overrides)
