"""
Config Loader - Builds Settings from YAML, .env files and overrides.

Lookup order for the YAML file:
    1. Explicit path passed to the loader
    2. $AUTOFORM_CONFIG
    3. ./config.yaml, ./config.yml, ./config/default.yaml
    4. ~/.config/autoform/config.yaml

Environment variables (AUTOFORM__SECTION__KEY) are read by pydantic-settings
and lose to values from the file; explicit overrides win over both.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from autoform_filler.config.settings import Settings
from autoform_filler.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "AUTOFORM_CONFIG"

ENV_FILES = (Path(".env"), Path(".env.local"))


class ConfigLoader:
    """
    Loads Settings for one process.

    Example:
        >>> settings = ConfigLoader("autoform.yaml").load(overrides={"fill": {"settle_ms": 3000}})
    """

    DEFAULT_CONFIG_PATHS = [
        Path("config.yaml"),
        Path("config.yml"),
        Path("config/default.yaml"),
        Path.home() / ".config" / "autoform" / "config.yaml",
    ]

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None

    def find_config_file(self) -> Optional[Path]:
        """First existing config file in lookup order, or None."""
        candidates = []
        if self.config_path:
            candidates.append(self.config_path)
        if os.environ.get(CONFIG_ENV_VAR):
            candidates.append(Path(os.environ[CONFIG_ENV_VAR]).expanduser())
        candidates.extend(self.DEFAULT_CONFIG_PATHS)

        return next((path for path in candidates if path.is_file()), None)

    def load_yaml_config(self, path: Path) -> Dict[str, Any]:
        """
        Read a YAML config file.

        Raises:
            ConfigurationError: The file is not valid YAML or not a mapping
        """
        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}", {"path": str(path)}) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}",
                {"path": str(path)},
            )
        return data

    def load_env_file(self, env_file: Optional[Union[str, Path]] = None) -> None:
        """Export variables from an explicit .env file, else the first default one found."""
        if env_file:
            load_dotenv(env_file)
            return
        for path in ENV_FILES:
            if path.is_file():
                load_dotenv(path)
                return

    def load(
        self,
        env_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        """
        Build Settings from every source.

        Args:
            env_file: Optional .env file to export before reading the environment
            overrides: Nested values applied last
        """
        self.load_env_file(env_file)

        file_config: Dict[str, Any] = {}
        config_file = self.find_config_file()
        if config_file:
            logger.debug(f"Loading config from {config_file}")
            file_config = self.load_yaml_config(config_file)

        settings = Settings(**file_config)
        return settings.merge_with(overrides) if overrides else settings


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> Settings:
    """
    Load settings in one call.

    Example:
        >>> settings = load_config()
        >>> settings = load_config(config_path="my-config.yaml")
        >>> settings = load_config(fill={"settle_ms": 3000})
    """
    return ConfigLoader(config_path).load(env_file=env_file, overrides=overrides or None)
