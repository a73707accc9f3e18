"""Unit tests for ingredient aggregation service."""

import itertools
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.models import Event, EventProduct
from src.services.catalog_storage import CatalogStorage, InMemoryCatalogStorage
from src.services.exceptions import (
    CollaboratorUnavailable,
    EventNotFound,
    ProductNotFound,
    UnitMismatch,
)
from src.services.ingredient_aggregation_service import (
    aggregate,
    aggregate_ingredients_for_event,
)
from src.services.selection import Selection


def _totals(result):
    return {ingredient_id: line.total_amount for ingredient_id, line in result.items()}


class TestSingleProductAggregation:
    """Tests for aggregation of one selected product."""

    def test_burger_scenario(self, burger_storage):
        result = aggregate([Selection(1, "Burger", 5, "Stück")], burger_storage)

        assert set(result) == {10, 11}
        assert result[10].total_amount == Decimal("5")
        assert result[10].unit == "Stück"
        assert result[11].total_amount == Decimal("750")
        assert result[11].unit == "g"
        assert result[11].ingredient_name == "Patty"

    def test_contribution_records_product_and_quantity(self, burger_storage):
        result = aggregate([Selection(1, "Burger", 5)], burger_storage)

        [contribution] = result[11].contributions
        assert contribution.product_name == "Burger"
        assert contribution.product_quantity == Decimal("5")

    def test_product_without_recipe_contributes_nothing(self, burger_storage):
        burger_storage.add_product(3, "Bonrolle", "Stück")
        assert aggregate([Selection(3, "Bonrolle", 2)], burger_storage) == {}

    def test_empty_selection(self, burger_storage):
        assert aggregate([], burger_storage) == {}


class TestMerge:
    """Tests for merging ingredients across products."""

    def test_shared_ingredient_is_summed(self, burger_storage):
        result = aggregate(
            [Selection(1, "Burger", 3), Selection(2, "Wrap", 2)],
            burger_storage,
        )

        assert result[10].total_amount == Decimal("5")
        assert len(result[10].contributions) == 2
        assert {c.product_name for c in result[10].contributions} == {"Burger", "Wrap"}
        assert result[11].total_amount == Decimal("450")

    def test_same_product_selected_twice(self, burger_storage):
        result = aggregate(
            [Selection(2, "Wrap", 2), Selection(2, "Wrap", 1)],
            burger_storage,
        )
        assert result[10].total_amount == Decimal("3")
        assert len(result[10].contributions) == 2

    def test_same_name_different_ids_stay_separate(self):
        storage = InMemoryCatalogStorage()
        storage.add_product(1, "Bowl", "Stück")
        storage.add_product(10, "Salz", "g", category="Gewürze")
        storage.add_product(11, "Salz", "g", category="Streugut")
        storage.add_recipe_line(1, 10, 2)
        storage.add_recipe_line(1, 11, 3)

        result = aggregate([Selection(1, "Bowl", 1)], storage)
        assert _totals(result) == {10: Decimal("2"), 11: Decimal("3")}

    def test_units_compared_ignoring_case_and_spaces(self):
        storage = InMemoryCatalogStorage()
        storage.add_product(1, "A", "Stück")
        storage.add_product(2, "B", "Stück")
        storage.add_product(10, "Mehl", "g")
        storage.add_recipe_line(1, 10, 100, unit="g")
        storage.add_recipe_line(2, 10, 50, unit=" G ")

        result = aggregate([Selection(1, "A", 1), Selection(2, "B", 1)], storage)
        assert result[10].total_amount == Decimal("150")
        assert result[10].unit == "g"


class TestUnitMismatch:
    def test_conflicting_units_fail(self, burger_storage):
        burger_storage.add_product(3, "Broken Wrap", "Stück")
        burger_storage.add_recipe_line(3, 10, 1, unit="g")

        with pytest.raises(UnitMismatch) as exc_info:
            aggregate([Selection(1, "Burger", 1), Selection(3, "Broken Wrap", 1)], burger_storage)

        error = exc_info.value
        assert error.ingredient_id == 10
        assert error.ingredient_name == "Bun"
        assert set(error.units) == {"Stück", "g"}
        assert "Broken Wrap" in error.product_names
        assert "contact an administrator" in str(error)


class TestProperties:
    """Idempotence, order independence, additivity and zero exclusion."""

    SELECTIONS = [
        Selection(1, "Burger", Decimal("3")),
        Selection(2, "Wrap", 0.7),
        Selection(1, "Burger", "1,5"),
    ]

    def test_idempotent(self, burger_storage):
        first = aggregate(self.SELECTIONS, burger_storage)
        second = aggregate(self.SELECTIONS, burger_storage)
        assert _totals(first) == _totals(second)

    def test_order_independent(self, burger_storage):
        expected = _totals(aggregate(self.SELECTIONS, burger_storage))
        for permutation in itertools.permutations(self.SELECTIONS):
            assert _totals(aggregate(permutation, burger_storage)) == expected

    def test_additive_over_disjoint_products(self, burger_storage):
        s1 = [Selection(1, "Burger", 4)]
        s2 = [Selection(2, "Wrap", 6)]

        combined = _totals(aggregate(s1 + s2, burger_storage))
        t1 = _totals(aggregate(s1, burger_storage))
        t2 = _totals(aggregate(s2, burger_storage))

        for ingredient_id in set(t1) | set(t2):
            expected = t1.get(ingredient_id, Decimal(0)) + t2.get(ingredient_id, Decimal(0))
            assert combined[ingredient_id] == expected
        assert set(combined) == set(t1) | set(t2)

    def test_zero_quantity_excluded(self, burger_storage):
        assert aggregate([Selection(1, "Burger", 0)], burger_storage) == {}

    def test_negative_quantity_skipped_without_lookup(self):
        storage = MagicMock(spec=CatalogStorage)
        assert aggregate([Selection(1, "Burger", -2), Selection(2, "Wrap", 0)], storage) == {}
        storage.get_product.assert_not_called()


class TestAtomicity:
    def test_unknown_product_aborts_everything(self, burger_storage):
        with pytest.raises(ProductNotFound):
            aggregate([Selection(1, "Burger", 1), Selection(999, "Ghost", 1)], burger_storage)

    def test_storage_failure_is_not_an_empty_result(self, burger_storage):
        storage = MagicMock(spec=CatalogStorage)
        storage.get_product.side_effect = burger_storage.get_product
        storage.get_recipe_lines.side_effect = CollaboratorUnavailable("get_recipe_lines")

        with pytest.raises(CollaboratorUnavailable):
            aggregate([Selection(1, "Burger", 1)], storage)


class TestAggregateForEvent:
    """Tests for aggregate_ingredients_for_event()."""

    def test_stored_packing_list(self, test_db, burger_catalog):
        event = Event(name="Sommerfest")
        event.event_products.extend(
            [
                EventProduct(product_id=1, quantity=Decimal("3"), unit="Stück"),
                EventProduct(product_id=2, quantity=Decimal("2"), unit="Stück"),
            ]
        )
        test_db.add(event)
        test_db.flush()

        result = aggregate_ingredients_for_event(event.id, session=test_db)

        assert result[10].total_amount == Decimal("5")
        assert result[11].total_amount == Decimal("450")

    def test_without_session(self, test_db, burger_catalog):
        event = Event(name="Hochzeit")
        event.event_products.append(EventProduct(product_id=2, quantity=Decimal("4"), unit="Stück"))
        test_db.add(event)
        test_db.commit()

        result = aggregate_ingredients_for_event(event.id)
        assert result[10].total_amount == Decimal("4")

    def test_event_without_products(self, test_db, sample_event):
        assert aggregate_ingredients_for_event(sample_event.id, session=test_db) == {}

    def test_unknown_event(self, test_db):
        with pytest.raises(EventNotFound):
            aggregate_ingredients_for_event(12345, session=test_db)
