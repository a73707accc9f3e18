"""
Catalog storage collaborator.

The aggregation core reads products, recipe lines and packaging units only
through the CatalogStorage interface, which callers pass in explicitly.
Two implementations are provided:

- SqlCatalogStorage: reads the SQLAlchemy models through a session
- InMemoryCatalogStorage: dictionary-backed, for callers that already hold
  the catalog in memory (imports, previews, tests)

Storage failures surface as CollaboratorUnavailable. A failed read is never
turned into an empty result.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models import PackagingUnit, Product, RecipeLine
from src.services.dto_utils import to_decimal
from src.services.exceptions import CollaboratorUnavailable, IngredientNotFound


@dataclass(frozen=True)
class ProductRecord:
    """Product as seen by the aggregation core."""

    id: int
    name: str
    unit: str
    category: Optional[str] = None


@dataclass(frozen=True)
class RecipeLineRecord:
    """One ingredient of a product's recipe, amount per unit of the product."""

    ingredient_id: int
    ingredient_name: str
    unit: str
    amount: Decimal
    ingredient_category: Optional[str] = None


@dataclass(frozen=True)
class PackagingRecord:
    """Purchasable container for a product."""

    amount_per_package: Decimal
    packaging_label: str


class CatalogStorage(ABC):
    """Read access to the product catalog."""

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[ProductRecord]:
        """Return the product, or None if it does not exist."""

    @abstractmethod
    def get_recipe_lines(self, product_id: int) -> List[RecipeLineRecord]:
        """Return the product's recipe lines (empty if it has no recipe)."""

    @abstractmethod
    def get_packaging_unit(self, product_id: int) -> Optional[PackagingRecord]:
        """Return the product's packaging, or None if it has none."""


@contextmanager
def _storage_call(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise CollaboratorUnavailable(operation, e) from e


class SqlCatalogStorage(CatalogStorage):
    """
    CatalogStorage backed by the SQLAlchemy models.

    The session is owned by the caller; this class never commits or closes it.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_product(self, product_id: int) -> Optional[ProductRecord]:
        with _storage_call("get_product"):
            product = self.session.get(Product, product_id)
            if product is None:
                return None
            return ProductRecord(
                id=product.id,
                name=product.name,
                unit=product.unit,
                category=product.category_name,
            )

    def get_recipe_lines(self, product_id: int) -> List[RecipeLineRecord]:
        with _storage_call("get_recipe_lines"):
            lines = (
                self.session.query(RecipeLine)
                .filter(RecipeLine.product_id == product_id)
                .order_by(RecipeLine.id)
                .all()
            )

            records = []
            for line in lines:
                ingredient = line.ingredient
                if ingredient is None:
                    raise IngredientNotFound(line.ingredient_id, product_id)
                records.append(
                    RecipeLineRecord(
                        ingredient_id=line.ingredient_id,
                        ingredient_name=ingredient.name,
                        unit=line.unit,
                        amount=to_decimal(line.amount),
                        ingredient_category=ingredient.category_name,
                    )
                )
            return records

    def get_packaging_unit(self, product_id: int) -> Optional[PackagingRecord]:
        with _storage_call("get_packaging_unit"):
            packaging = (
                self.session.query(PackagingUnit)
                .filter(PackagingUnit.product_id == product_id)
                .one_or_none()
            )
            if packaging is None:
                return None
            return PackagingRecord(
                amount_per_package=to_decimal(packaging.amount_per_package),
                packaging_label=packaging.packaging_label,
            )


class InMemoryCatalogStorage(CatalogStorage):
    """
    Dictionary-backed CatalogStorage.

    Example:
        storage = InMemoryCatalogStorage()
        storage.add_product(1, "Burger", "Stück")
        storage.add_product(10, "Bun", "Stück")
        storage.add_recipe_line(1, 10, Decimal("1"))
        storage.set_packaging(10, Decimal("20"), "Sack")
    """

    def __init__(self):
        self._products: Dict[int, ProductRecord] = {}
        self._recipes: Dict[int, List[RecipeLineRecord]] = {}
        self._packaging: Dict[int, PackagingRecord] = {}

    def add_product(
        self, product_id: int, name: str, unit: str, category: Optional[str] = None
    ) -> ProductRecord:
        record = ProductRecord(id=product_id, name=name, unit=unit, category=category)
        self._products[product_id] = record
        return record

    def add_recipe_line(
        self, product_id: int, ingredient_id: int, amount, unit: Optional[str] = None
    ) -> RecipeLineRecord:
        """Add a recipe line; unit defaults to the ingredient's unit."""
        ingredient = self._products.get(ingredient_id)
        if ingredient is None:
            raise IngredientNotFound(ingredient_id, product_id)
        record = RecipeLineRecord(
            ingredient_id=ingredient_id,
            ingredient_name=ingredient.name,
            unit=unit if unit is not None else ingredient.unit,
            amount=to_decimal(amount),
            ingredient_category=ingredient.category,
        )
        self._recipes.setdefault(product_id, []).append(record)
        return record

    def set_packaging(self, product_id: int, amount_per_package, packaging_label: str) -> None:
        self._packaging[product_id] = PackagingRecord(
            amount_per_package=to_decimal(amount_per_package),
            packaging_label=packaging_label,
        )

    def get_product(self, product_id: int) -> Optional[ProductRecord]:
        return self._products.get(product_id)

    def get_recipe_lines(self, product_id: int) -> List[RecipeLineRecord]:
        return list(self._recipes.get(product_id, []))

    def get_packaging_unit(self, product_id: int) -> Optional[PackagingRecord]:
        return self._packaging.get(product_id)
