"""
Recipe resolver.

Scales a finished product's recipe lines by a requested quantity. Recipes
are resolved one level deep: ingredients that have recipes of their own are
treated as atomic.

Transaction boundary: Pure computation over the storage collaborator. No
writes, no caching.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from src.services.catalog_storage import CatalogStorage
from src.services.dto_utils import AmountLike, to_decimal
from src.services.exceptions import ProductNotFound, ValidationError


@dataclass(frozen=True)
class ScaledIngredientLine:
    """Ingredient demand of one product selection.

    Attributes:
        ingredient_id: Ingredient product ID
        ingredient_name: Ingredient display name
        unit: Unit declared on the recipe line
        scaled_amount: Recipe amount multiplied by source_quantity
        source_product_id: Finished product the demand comes from
        source_quantity: Requested quantity of the finished product
        ingredient_category: Ingredient's category name, if any
    """

    ingredient_id: int
    ingredient_name: str
    unit: str
    scaled_amount: Decimal
    source_product_id: int
    source_quantity: Decimal
    ingredient_category: Optional[str] = None


def resolve(
    product_id: int,
    quantity: AmountLike,
    storage: CatalogStorage,
) -> List[ScaledIngredientLine]:
    """
    Scale a product's recipe lines by quantity.

    Recipe lines with zero or negative amounts are passed through unchanged
    so that callers see the malformed data.

    Args:
        product_id: Finished product to resolve
        quantity: Requested quantity (non-negative)
        storage: Catalog storage collaborator

    Returns:
        One ScaledIngredientLine per recipe line, in storage order.
        Empty for quantity zero or for products without a recipe.

    Raises:
        ValidationError: If quantity is negative or not a number
        ProductNotFound: If the product does not exist
        IngredientNotFound: If a recipe line references a missing ingredient
        CollaboratorUnavailable: If storage cannot be read
    """
    qty = to_decimal(quantity, field="quantity")
    if qty < 0:
        raise ValidationError([f"quantity must not be negative, got {quantity}"])
    if qty == 0:
        return []

    product = storage.get_product(product_id)
    if product is None:
        raise ProductNotFound(product_id)

    return [
        ScaledIngredientLine(
            ingredient_id=line.ingredient_id,
            ingredient_name=line.ingredient_name,
            unit=line.unit,
            scaled_amount=line.amount * qty,
            source_product_id=product_id,
            source_quantity=qty,
            ingredient_category=line.ingredient_category,
        )
        for line in storage.get_recipe_lines(product_id)
    ]
