"""Time-boxed read cache and the settings service that uses it."""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

from sqlalchemy.orm import Session

from app.database import transaction
from app.models import Setting
from app.schemas.settings import SettingsResponse, SettingsUpdate

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"


@dataclass
class _Entry:
    value: Any
    stored_at: float


class TTLCache:
    """
    Small key/value cache whose entries expire ``ttl_seconds`` after being stored.

    The clock is injected so expiry can be tested without sleeping.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds cannot be negative")
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[Hashable, _Entry] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = _Entry(value=value, stored_at=self.clock())

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        value = self.get(key)
        if value is None:
            value = loader()
            self.set(key, value)
        return value

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


class SettingsService:
    """Reads and writes the single settings row, caching reads."""

    def __init__(self, db: Session, cache: TTLCache):
        self.db = db
        self.cache = cache

    def _row(self) -> Setting:
        setting = self.db.get(Setting, 1)
        if setting is None:
            setting = Setting(id=1)
            self.db.add(setting)
            self.db.flush()
        return setting

    def get(self) -> SettingsResponse:
        return self.cache.get_or_load(
            SETTINGS_KEY, lambda: SettingsResponse.model_validate(self._row())
        )

    def update(self, data: SettingsUpdate) -> SettingsResponse:
        with transaction(self.db, "settings update"):
            setting = self._row()
            for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(setting, field, value)
        self.cache.invalidate(SETTINGS_KEY)
        logger.info("Settings updated")
        return self.get()
