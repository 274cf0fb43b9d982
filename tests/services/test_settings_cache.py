"""Tests for app/services/settings_cache.py - TTL cache and settings service."""
from decimal import Decimal

import pytest

from app.models import Setting
from app.schemas.settings import SettingsUpdate
from app.services.settings_cache import SettingsService, TTLCache


class FakeMonotonic:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestTTLCache:
    def test_hit_within_ttl(self):
        clock = FakeMonotonic()
        cache = TTLCache(300, clock=clock)
        cache.set("k", 1)
        clock.now = 299.9
        assert cache.get("k") == 1

    def test_expires_at_ttl(self):
        clock = FakeMonotonic()
        cache = TTLCache(300, clock=clock)
        cache.set("k", 1)
        clock.now = 300
        assert cache.get("k") is None

    def test_get_or_load_calls_loader_once(self):
        cache = TTLCache(60, clock=FakeMonotonic())
        calls = []

        def loader():
            calls.append(1)
            return "value"

        assert cache.get_or_load("k", loader) == "value"
        assert cache.get_or_load("k", loader) == "value"
        assert len(calls) == 1

    def test_invalidate_and_clear(self):
        cache = TTLCache(60, clock=FakeMonotonic())
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        assert cache.get("a") is None
        assert cache.get("b") == 2
        cache.clear()
        assert cache.get("b") is None

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValueError):
            TTLCache(-1)


class TestSettingsService:
    def test_defaults(self, db):
        settings = SettingsService(db, TTLCache(300)).get()
        assert settings.usd_exchange_rate == Decimal("36")
        assert settings.list_a_margin == Decimal("20")
        assert settings.list_c_margin == Decimal("50")

    def test_reads_are_cached(self, db):
        clock = FakeMonotonic()
        service = SettingsService(db, TTLCache(300, clock=clock))
        assert service.get().usd_exchange_rate == Decimal("36")

        # Changed behind the service's back: the cached value is still served
        db.get(Setting, 1).usd_exchange_rate = Decimal("40")
        db.commit()
        assert service.get().usd_exchange_rate == Decimal("36")

        clock.now = 301
        assert service.get().usd_exchange_rate == Decimal("40")

    def test_update_invalidates_cache(self, db):
        service = SettingsService(db, TTLCache(300, clock=FakeMonotonic()))
        service.get()

        updated = service.update(SettingsUpdate(usd_exchange_rate=Decimal("38.5")))

        assert updated.usd_exchange_rate == Decimal("38.5")
        assert updated.list_a_margin == Decimal("20")
        assert service.get().usd_exchange_rate == Decimal("38.5")

    def test_missing_row_is_created(self, db):
        db.delete(db.get(Setting, 1))
        db.commit()
        assert SettingsService(db, TTLCache(300)).get().list_b_margin == Decimal("35")
