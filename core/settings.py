from __future__ import annotations
import copy
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from storage import files

logger = logging.getLogger('settings')

MIGRATION_SETTING = "systemMigrationVersion"


class SettingNotRegistered(KeyError):
    pass


@dataclass
class SettingConfig:
    name: str = ""
    scope: str = "world"
    config: bool = False
    type: Any = str
    default: Any = None


class SettingsStore:
    """World settings keyed by (namespace, key), persisted to one JSON file.

    Values must be registered before use. `get` is served from memory; call
    `load()` once to read previously saved values.
    """
    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._registry: Dict[Tuple[str, str], SettingConfig] = {}
        self._values: Dict[str, Any] = {}

    @staticmethod
    def _storage_key(namespace: str, key: str) -> str:
        return f"{namespace}.{key}"

    def register(self, namespace: str, key: str, **options) -> None:
        self._registry[(namespace, key)] = SettingConfig(**options)

    def _config(self, namespace: str, key: str) -> SettingConfig:
        try:
            return self._registry[(namespace, key)]
        except KeyError:
            raise SettingNotRegistered(f"{namespace}.{key} is not a registered setting") from None

    async def load(self) -> None:
        if not self.path or not os.path.exists(self.path):
            return
        data = await files.async_load_json(self.path)
        if not isinstance(data, dict):
            logger.warning('Settings file %s is unreadable; using defaults', self.path)
            return
        self._values = data

    def get(self, namespace: str, key: str) -> Any:
        cfg = self._config(namespace, key)
        storage_key = self._storage_key(namespace, key)
        if storage_key in self._values:
            return self._values[storage_key]
        return copy.deepcopy(cfg.default)

    async def set(self, namespace: str, key: str, value: Any) -> Any:
        self._config(namespace, key)
        self._values[self._storage_key(namespace, key)] = value
        if self.path:
            await files.async_save_json(self.path, self._values)
        logger.info('Setting %s.%s = %r', namespace, key, value)
        return value


def register_system_settings(settings: SettingsStore) -> None:
    """Register the settings owned by the RITS system."""
    # Track the system version upon which point a migration was last applied.
    # The default is [0] rather than a string; worlds that never migrated read
    # it back as-is.
    settings.register("rits", MIGRATION_SETTING,
        name="System Migration Version",
        scope="world",
        config=False,
        type=str,
        default=[0],
    )

__all__ = ["SettingsStore", "SettingConfig", "SettingNotRegistered", "MIGRATION_SETTING", "register_system_settings"]
