"""Tests for the shopping list service (aggregate, project, order)."""

import logging
from decimal import Decimal

import pytest

from src.models import Event, EventProduct
from src.services.catalog_storage import InMemoryCatalogStorage
from src.services.exceptions import EventNotFound, InvalidPackaging, UnitMismatch
from src.services.selection import Selection
from src.services.shopping_list_service import (
    aggregate_and_project,
    get_event_shopping_list,
)


class TestAggregateAndProject:
    def test_burger_scenario(self, burger_storage):
        result = aggregate_and_project([Selection(1, "Burger", 5)], burger_storage)

        assert [rec.display_name for rec in result] == ["Bun", "Patty"]
        bun, patty = result
        assert (bun.total_amount, bun.package_count, bun.package_label) == (
            Decimal("5"),
            1,
            "Sack",
        )
        assert (patty.total_amount, patty.package_count, patty.package_label) == (
            Decimal("750"),
            1,
            "Packung",
        )

    def test_merge_across_products(self, burger_storage):
        result = aggregate_and_project(
            [Selection(1, "Burger", 30), Selection(2, "Wrap", 20)],
            burger_storage,
        )
        bun = next(rec for rec in result if rec.ingredient_id == 10)
        assert bun.total_amount == Decimal("50")
        assert bun.package_count == 3
        assert len(bun.contributions) == 2

    def test_empty_selection(self, burger_storage):
        assert aggregate_and_project([], burger_storage) == []

    def test_missing_packaging_uses_base_unit(self, burger_storage):
        burger_storage.add_product(3, "Salat", "Stück")
        burger_storage.add_product(12, "Gurke", "Stück")
        burger_storage.add_recipe_line(3, 12, Decimal("0.5"))

        [rec] = aggregate_and_project([Selection(3, "Salat", 3)], burger_storage)
        assert rec.package_count == 2
        assert rec.package_label == "Stück"
        assert rec.has_packaging is False

    def test_invalid_packaging_propagates(self, burger_storage):
        burger_storage.set_packaging(10, Decimal("0"), "Sack")
        with pytest.raises(InvalidPackaging):
            aggregate_and_project([Selection(2, "Wrap", 1)], burger_storage)

    def test_failure_is_logged_and_raised(self, burger_storage, caplog):
        burger_storage.add_product(3, "Broken Wrap", "Stück")
        burger_storage.add_recipe_line(3, 10, 1, unit="g")

        with caplog.at_level(logging.WARNING):
            with pytest.raises(UnitMismatch):
                aggregate_and_project(
                    [Selection(1, "Burger", 1), Selection(3, "Broken Wrap", 1)],
                    burger_storage,
                )
        assert any(record.levelno == logging.WARNING for record in caplog.records)


class TestOrdering:
    @pytest.fixture
    def storage(self):
        storage = InMemoryCatalogStorage()
        storage.add_product(1, "Menü", "Stück")
        for ingredient_id, name in [(10, "zucker"), (11, "Äpfel"), (12, "Butter"), (13, "apfelmus")]:
            storage.add_product(ingredient_id, name, "g")
            storage.add_recipe_line(1, ingredient_id, 10)
        return storage

    def test_sorted_ignoring_accents_and_case(self, storage):
        result = aggregate_and_project([Selection(1, "Menü", 1)], storage)
        assert [rec.display_name for rec in result] == ["Äpfel", "apfelmus", "Butter", "zucker"]

    def test_order_independent_of_selection_order(self, burger_storage):
        forward = aggregate_and_project(
            [Selection(1, "Burger", 2), Selection(2, "Wrap", 3)], burger_storage
        )
        backward = aggregate_and_project(
            [Selection(2, "Wrap", 3), Selection(1, "Burger", 2)], burger_storage
        )
        assert [r.ingredient_id for r in forward] == [r.ingredient_id for r in backward]
        assert [r.total_amount for r in forward] == [r.total_amount for r in backward]


class TestDisambiguation:
    def test_shared_name_gets_category(self):
        storage = InMemoryCatalogStorage()
        storage.add_product(1, "Bowl", "Stück")
        storage.add_product(10, "Salz", "g", category="Gewürze")
        storage.add_product(11, "Salz", "g", category="Streugut")
        storage.add_recipe_line(1, 10, 2)
        storage.add_recipe_line(1, 11, 3)

        result = aggregate_and_project([Selection(1, "Bowl", 1)], storage)

        assert [rec.display_name for rec in result] == ["Salz (Gewürze)", "Salz (Streugut)"]
        assert all(rec.ingredient_name == "Salz" for rec in result)

    def test_shared_name_and_category_gets_id(self):
        storage = InMemoryCatalogStorage()
        storage.add_product(1, "Bowl", "Stück")
        storage.add_product(10, "Salz", "g", category="Gewürze")
        storage.add_product(11, "Salz", "g", category="Gewürze")
        storage.add_recipe_line(1, 10, 2)
        storage.add_recipe_line(1, 11, 3)

        result = aggregate_and_project([Selection(1, "Bowl", 1)], storage)

        assert [rec.display_name for rec in result] == [
            "Salz (Gewürze) #10",
            "Salz (Gewürze) #11",
        ]

    def test_shared_name_without_category_gets_id(self):
        storage = InMemoryCatalogStorage()
        storage.add_product(1, "Bowl", "Stück")
        storage.add_product(10, "Salz", "g")
        storage.add_product(11, "Salz", "g")
        storage.add_recipe_line(1, 10, 2)
        storage.add_recipe_line(1, 11, 3)

        result = aggregate_and_project([Selection(1, "Bowl", 1)], storage)
        assert [rec.display_name for rec in result] == ["Salz #10", "Salz #11"]

    def test_unique_names_untouched(self, burger_storage):
        result = aggregate_and_project([Selection(1, "Burger", 1)], burger_storage)
        assert all(rec.display_name == rec.ingredient_name for rec in result)


class TestEventShoppingList:
    def test_stored_event(self, test_db, burger_catalog):
        event = Event(name="Sommerfest")
        event.event_products.append(EventProduct(product_id=1, quantity=Decimal("5"), unit="Stück"))
        test_db.add(event)
        test_db.commit()

        result = get_event_shopping_list(event.id)

        assert [(r.display_name, r.package_count) for r in result] == [("Bun", 1), ("Patty", 1)]

    def test_unknown_event(self, test_db):
        with pytest.raises(EventNotFound):
            get_event_shopping_list(999, session=test_db)
