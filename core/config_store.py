"""
Configuration store for the Pomodoro Timer application.
Loads and saves the user Configuration through the Storage backend.
"""

import json
import logging

from .errors import ConfigLoadError, ConfigSaveError
from .models import Configuration
from .storage import Storage

logger = logging.getLogger(__name__)


class ConfigStore:
    """
    Loads and saves Configuration.
    Never raises: a bad or missing value loads as defaults, a failed save is logged.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    def load(self) -> Configuration:
        """
        Load the persisted configuration.

        Returns:
            The stored Configuration, or the defaults when nothing valid
            is stored.
        """
        try:
            return self._load()
        except ConfigLoadError as e:
            logger.warning("Ignoring stored settings, using defaults: %s", e)
            return Configuration()

    def _load(self) -> Configuration:
        text = self.storage.read_config()
        if text is None:
            logger.info("No stored settings, using defaults")
            return Configuration()
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ConfigLoadError(f"stored settings are not valid JSON: {e}") from e
        return Configuration.from_dict(data)

    def save(self, config: Configuration):
        """Persist the configuration (best-effort)."""
        try:
            self.storage.write_config(json.dumps(config.to_dict()))
        except ConfigSaveError as e:
            logger.warning("Could not save settings: %s", e)
