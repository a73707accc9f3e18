"""Unit tests for the recipe resolver."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.services.catalog_storage import CatalogStorage, InMemoryCatalogStorage
from src.services.exceptions import (
    CollaboratorUnavailable,
    NotFound,
    ProductNotFound,
    ValidationError,
)
from src.services.recipe_resolver import resolve


class TestResolve:
    def test_scales_each_recipe_line(self, burger_storage):
        lines = resolve(1, 5, burger_storage)

        assert [line.ingredient_id for line in lines] == [10, 11]
        assert lines[0].scaled_amount == Decimal("5")
        assert lines[1].scaled_amount == Decimal("750")
        assert lines[1].unit == "g"
        assert all(line.source_product_id == 1 for line in lines)
        assert all(line.source_quantity == Decimal("5") for line in lines)

    def test_carries_ingredient_name_and_category(self, burger_storage):
        bun = resolve(2, 1, burger_storage)[0]
        assert bun.ingredient_name == "Bun"
        assert bun.ingredient_category == "Backwaren"

    def test_float_quantity_is_exact(self, burger_storage):
        lines = resolve(1, 0.1, burger_storage)
        assert lines[1].scaled_amount == Decimal("15.0")

    def test_zero_quantity_returns_empty_without_lookup(self):
        storage = MagicMock(spec=CatalogStorage)
        assert resolve(1, 0, storage) == []
        storage.get_product.assert_not_called()
        storage.get_recipe_lines.assert_not_called()

    def test_negative_quantity_rejected(self, burger_storage):
        with pytest.raises(ValidationError):
            resolve(1, -1, burger_storage)

    def test_unknown_product(self, burger_storage):
        with pytest.raises(ProductNotFound) as exc_info:
            resolve(999, 1, burger_storage)
        assert isinstance(exc_info.value, NotFound)
        assert exc_info.value.product_id == 999

    def test_product_without_recipe(self, burger_storage):
        burger_storage.add_product(3, "Bonrolle", "Stück")
        assert resolve(3, 4, burger_storage) == []

    def test_ingredients_are_not_expanded(self, burger_storage):
        # Bun has its own recipe, but only one level is resolved
        burger_storage.add_product(20, "Mehl", "g")
        burger_storage.add_recipe_line(10, 20, Decimal("80"))

        lines = resolve(1, 2, burger_storage)
        assert [line.ingredient_id for line in lines] == [10, 11]

    def test_non_positive_amounts_pass_through(self):
        storage = InMemoryCatalogStorage()
        storage.add_product(1, "Suppe", "Portion")
        storage.add_product(2, "Wasser", "ml")
        storage.add_recipe_line(1, 2, Decimal("0"))

        lines = resolve(1, 3, storage)
        assert len(lines) == 1
        assert lines[0].scaled_amount == Decimal("0")

    def test_storage_failure_propagates(self):
        storage = MagicMock(spec=CatalogStorage)
        storage.get_product.side_effect = CollaboratorUnavailable("get_product")

        with pytest.raises(CollaboratorUnavailable):
            resolve(1, 1, storage)
