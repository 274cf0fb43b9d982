"""Tests for app/services/staleness.py - Fresh/Stale bookkeeping."""
from decimal import Decimal

from sqlalchemy import update

from app.models import Recipe
from app.services.staleness import StalenessTracker


class TestMarkStale:
    def test_marks_recipes_using_material(self, db, raw_material_factory, recipe_factory):
        urea = raw_material_factory(name="Urea")
        map_ = raw_material_factory(name="MAP")
        uses_urea = recipe_factory(name="A", ingredients=[(urea, 10)])
        other = recipe_factory(name="B", ingredients=[(map_, 10)])

        count = StalenessTracker(db).mark_stale(raw_material_ids=[urea.id])
        db.commit()

        assert count == 1
        assert db.get(Recipe, uses_urea.id).is_stale
        assert not db.get(Recipe, other.id).is_stale

    def test_marks_recipes_using_package(self, db, raw_material_factory, package_factory, recipe_factory):
        m = raw_material_factory()
        bottle = package_factory(size=1, unit="L")
        sack = package_factory(size=25, unit="Kg")
        bottled = recipe_factory(name="Liquid", ingredients=[(m, 1)], packages=[bottle])
        bagged = recipe_factory(name="Solid", ingredients=[(m, 1)], packages=[sack])

        count = StalenessTracker(db).mark_stale(package_ids=[bottle.id])
        db.commit()

        assert count == 1
        assert db.get(Recipe, bottled.id).is_stale
        assert not db.get(Recipe, bagged.id).is_stale

    def test_recipe_counted_once_when_matched_twice(
        self, db, raw_material_factory, package_factory, recipe_factory,
    ):
        m = raw_material_factory()
        p = package_factory()
        recipe_factory(ingredients=[(m, 1), (m, 2)], packages=[p])

        count = StalenessTracker(db).mark_stale(raw_material_ids=[m.id], package_ids=[p.id])
        assert count == 1

    def test_deleted_recipes_are_untouched(self, db, raw_material_factory, recipe_factory):
        m = raw_material_factory()
        recipe = recipe_factory(ingredients=[(m, 1)])
        recipe.soft_delete()
        db.flush()

        assert StalenessTracker(db).mark_stale(raw_material_ids=[m.id]) == 0
        db.commit()
        assert db.get(Recipe, recipe.id).is_price_updated is True

    def test_no_ids_is_a_no_op(self, db):
        assert StalenessTracker(db).mark_stale() == 0

    def test_mark_stale_bumps_version(self, db, raw_material_factory, recipe_factory):
        m = raw_material_factory()
        recipe = recipe_factory(ingredients=[(m, 1)])
        tracker = StalenessTracker(db)

        tracker.mark_stale(raw_material_ids=[m.id])
        tracker.mark_stale(raw_material_ids=[m.id])
        db.commit()

        assert db.get(Recipe, recipe.id).price_version == 2


class TestFreshAndStaleList:
    def test_mark_fresh_stores_cost_and_timestamp(self, db, recipe_factory, clock):
        recipe = recipe_factory(is_price_updated=False)

        assert StalenessTracker(db, clock=clock).mark_fresh(recipe, Decimal("42"), recipe.price_version)
        db.commit()

        recipe = db.get(Recipe, recipe.id)
        assert recipe.is_price_updated is True
        assert recipe.total_cost == Decimal("42")
        assert recipe.last_price_update == clock.now

    def test_mark_fresh_refuses_after_new_staleness(self, db, raw_material_factory, recipe_factory):
        m = raw_material_factory()
        recipe = recipe_factory(ingredients=[(m, 1)])
        seen = recipe.price_version
        tracker = StalenessTracker(db)
        tracker.mark_stale(raw_material_ids=[m.id])

        assert tracker.mark_fresh(recipe, Decimal("1"), seen) is False
        db.commit()
        assert db.get(Recipe, recipe.id).is_stale

        assert tracker.mark_fresh(recipe, Decimal("1"), seen + 1) is True

    def test_stale_recipes_includes_null_flag(self, db, recipe_factory):
        fresh = recipe_factory(name="Fresh")
        stale = recipe_factory(name="Stale", is_price_updated=False)
        legacy = recipe_factory(name="Legacy")
        # Rows written before the flag existed hold NULL; the column default
        # fills in True on insert, so write the NULL directly.
        db.execute(update(Recipe).where(Recipe.id == legacy.id).values(is_price_updated=None))
        db.commit()

        ids = [r.id for r in StalenessTracker(db).stale_recipes()]
        assert ids == [stale.id, legacy.id]
        assert fresh.id not in ids
