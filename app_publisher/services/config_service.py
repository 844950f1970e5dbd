"""Configuration management service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    DEFAULT_SETTINGS_FILE,
    ENV_BROKER_URL,
    ENV_BROKER_URL_FALLBACK,
    ENV_BUNDLE_DIR,
    ENV_CONFIG_PATH,
    ENV_DEVICE_TOKEN,
)
from ..models.config import BrokerConfig, ConfigSource, PublishSettings

logger = logging.getLogger(__name__)


class ConfigService:
    """Resolves broker and publish settings

    Priority for each broker value: settings file, then environment.
    There is no built-in broker URL; without one the stub transport is used.
    """

    def __init__(self,
                 settings_path: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize config service

        Args:
            settings_path: YAML settings file (default from env or home directory)
            environ: Environment mapping (default ``os.environ``)
        """
        self.environ = environ if environ is not None else os.environ
        if settings_path is None:
            settings_path = Path(
                self.environ.get(ENV_CONFIG_PATH, DEFAULT_SETTINGS_FILE)
            ).expanduser()
        self.settings_path = Path(settings_path)
        self._data: Optional[Dict[str, Any]] = None

    @property
    def data(self) -> Dict[str, Any]:
        """Raw settings (lazy load)"""
        if self._data is None:
            self._data = self.load_settings()
        return self._data

    def load_settings(self) -> Dict[str, Any]:
        """Load settings from the YAML file

        Returns:
            Parsed settings, empty when the file does not exist

        Raises:
            ConfigError: File exists but is not a valid YAML mapping
        """
        if not self.settings_path.exists():
            logger.debug(f"No settings file at {self.settings_path}")
            return {}

        with open(self.settings_path, 'r') as f:
            content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid settings file {self.settings_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {self.settings_path} must contain a mapping")

        return data

    def get_broker_config(self) -> BrokerConfig:
        """Resolve broker URL and device token"""
        broker = self.data.get("broker") or {}
        if not isinstance(broker, dict):
            raise ConfigError("'broker' section must be a mapping")

        url = broker.get("url")
        token = broker.get("device_token")
        source = ConfigSource.SETTINGS if url else ConfigSource.NONE

        if not url:
            url = self.environ.get(ENV_BROKER_URL) or self.environ.get(ENV_BROKER_URL_FALLBACK)
            if url:
                source = ConfigSource.ENV
        if not token:
            token = self.environ.get(ENV_DEVICE_TOKEN)

        config = BrokerConfig(url=url or None, device_token=token or None, source=source)
        logger.debug(f"Resolved {config!r}")
        return config

    def get_publish_settings(self) -> PublishSettings:
        """Resolve local publish settings"""
        publish = dict(self.data.get("publish") or {})
        if ENV_BUNDLE_DIR in self.environ and "bundle_dir" not in publish:
            publish["bundle_dir"] = self.environ[ENV_BUNDLE_DIR]
        return PublishSettings.from_dict(publish)

    def get_diagnostics(self) -> Dict[str, Any]:
        """Diagnostics-safe broker info"""
        info = self.get_broker_config().to_diagnostics()
        info["settings_file"] = str(self.settings_path)
        info["settings_file_exists"] = self.settings_path.exists()
        return info
