"""Tests for app/services/price_ledger.py - price changes and their history."""
from decimal import Decimal

import pytest

from app.errors import NotFoundError, ValidationError
from app.models import PriceHistory, Recipe
from app.services.price_ledger import PriceKind, PriceLedger, validate_price


class TestValidatePrice:
    @pytest.mark.parametrize("value", ["-1", Decimal("-0.01"), "NaN", "Infinity", "abc", None, True])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_price(value)

    def test_accepts_numbers_and_strings(self):
        assert validate_price(0) == Decimal("0")
        assert validate_price("12.50") == Decimal("12.50")
        assert validate_price(3.5) == Decimal("3.5")


class TestSetPrices:
    def test_updates_price_and_records_history(self, db, raw_material_factory, clock):
        m = raw_material_factory(price=10)
        ledger = PriceLedger(db, clock=clock)

        previous = ledger.set_price(PriceKind.RAW_MATERIAL, m.id, Decimal("12"))

        assert previous == Decimal("10")
        assert ledger.get_price(PriceKind.RAW_MATERIAL, m.id) == Decimal("12")
        history = ledger.history(PriceKind.RAW_MATERIAL, m.id)
        assert len(history) == 1
        assert history[0].old_price == Decimal("10")
        assert history[0].new_price == Decimal("12")
        assert history[0].changed_at == clock.now

    def test_marks_dependent_recipes_stale(self, db, raw_material_factory, recipe_factory):
        m = raw_material_factory(price=10)
        recipe = recipe_factory(ingredients=[(m, 5)])

        result = PriceLedger(db).set_prices(PriceKind.RAW_MATERIAL, {m.id: Decimal("11")})

        assert result.stale_count == 1
        assert db.get(Recipe, recipe.id).is_stale

    def test_package_price_marks_recipes_stale(
        self, db, raw_material_factory, package_factory, recipe_factory,
    ):
        m = raw_material_factory()
        p = package_factory(price=2)
        recipe = recipe_factory(ingredients=[(m, 1)], packages=[p])

        PriceLedger(db).set_price(PriceKind.PACKAGING, p.id, Decimal("3"))

        assert db.get(Recipe, recipe.id).is_stale

    def test_unchanged_price_is_a_no_op(self, db, raw_material_factory, recipe_factory):
        m = raw_material_factory(price=10)
        recipe = recipe_factory(ingredients=[(m, 5)])

        result = PriceLedger(db).set_prices(PriceKind.RAW_MATERIAL, {m.id: "10.00"})

        assert result.changed_ids == []
        assert result.stale_count == 0
        assert not db.get(Recipe, recipe.id).is_stale
        assert db.query(PriceHistory).count() == 0

    def test_batch_is_all_or_nothing(self, db, package_factory):
        p1 = package_factory(size=1, price=2)
        p2 = package_factory(size=5, price=5)
        ledger = PriceLedger(db)

        with pytest.raises(ValidationError):
            ledger.set_prices(PriceKind.PACKAGING, {p1.id: "3", p2.id: "-1"})
        with pytest.raises(NotFoundError):
            ledger.set_prices(PriceKind.PACKAGING, {p1.id: "3", 9999: "1"})

        assert ledger.get_price(PriceKind.PACKAGING, p1.id) == Decimal("2")
        assert db.query(PriceHistory).count() == 0

    def test_deleted_item_cannot_be_repriced(self, db, raw_material_factory):
        m = raw_material_factory()
        m.soft_delete()
        db.flush()
        with pytest.raises(NotFoundError):
            PriceLedger(db).set_price(PriceKind.RAW_MATERIAL, m.id, 1)

    def test_empty_batch_rejected(self, db):
        with pytest.raises(ValidationError):
            PriceLedger(db).set_prices(PriceKind.PACKAGING, {})


class TestLookup:
    def test_deleted_material_keeps_last_price(self, db, raw_material_factory):
        m = raw_material_factory(price=7)
        m.soft_delete()
        db.flush()
        assert PriceLedger(db).lookup(m.id) == Decimal("7")

    def test_missing_material_is_none(self, db):
        assert PriceLedger(db).lookup(12345) is None

    def test_history_newest_first(self, db, raw_material_factory, clock):
        m = raw_material_factory(price=1)
        ledger = PriceLedger(db, clock=clock)
        ledger.set_price(PriceKind.RAW_MATERIAL, m.id, 2)
        clock.advance(hours=1)
        ledger.set_price(PriceKind.RAW_MATERIAL, m.id, 3)

        history = ledger.history(PriceKind.RAW_MATERIAL, m.id)
        assert [h.new_price for h in history] == [Decimal("3"), Decimal("2")]

    def test_history_of_unknown_item(self, db):
        with pytest.raises(NotFoundError):
            PriceLedger(db).history(PriceKind.PACKAGING, 404)
