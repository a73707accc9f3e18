"""
Packaging projector.

Turns an aggregated ingredient total into a purchase recommendation: how
many packages to buy and what they are called.

Rules:
- Without packaging, the ingredient is bought in whole base units
  (amount_per_package = 1, label = the ingredient's unit)
- With packaging, amount_per_package must be positive
- Package counts use a tolerant ceiling: the quotient is rounded to
  CEILING_TOLERANCE first, so an exact multiple that picked up float noise
  still yields k packages and not k + 1
- A total of zero or less needs no packages
"""

from dataclasses import dataclass, field
from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_CEILING,
    ROUND_HALF_EVEN,
    Decimal,
    getcontext,
    localcontext,
)
from typing import List, Optional

from src.services.catalog_storage import PackagingRecord
from src.services.dto_utils import AmountLike, to_decimal
from src.services.exceptions import InvalidPackaging
from src.services.ingredient_aggregation_service import AggregatedIngredientLine, Contribution
from src.utils.constants import CEILING_TOLERANCE, DEFAULT_AMOUNT_PER_PACKAGE


@dataclass
class PurchaseRecommendation:
    """What to buy for one ingredient.

    Attributes:
        ingredient_id: Ingredient product ID
        ingredient_name: Ingredient name as stored
        display_name: Name to render; equals ingredient_name unless two
            ingredients share a name (see shopping_list_service)
        package_count: Whole packages to buy
        package_label: Packaging label, or the base unit without packaging
        amount_per_package: Base units per package
        total_amount: Exact aggregated total in the base unit
        unit: Ingredient base unit
        contributions: Products that need this ingredient
        has_packaging: False if the base-unit fallback was used
        ingredient_category: Ingredient's category name, if any
    """

    ingredient_id: int
    ingredient_name: str
    display_name: str
    package_count: int
    package_label: str
    amount_per_package: Decimal
    total_amount: Decimal
    unit: str
    contributions: List[Contribution] = field(default_factory=list)
    has_packaging: bool = False
    ingredient_category: Optional[str] = None


def _wide_context(adjusted: int):
    """Decimal context with enough digits to hold adjusted + the tolerance."""
    ctx = getcontext().copy()
    ctx.prec = max(ctx.prec, adjusted - CEILING_TOLERANCE.adjusted() + 3)
    ctx.Emax = MAX_EMAX
    ctx.Emin = MIN_EMIN
    return localcontext(ctx)


def tolerant_ceiling(value: AmountLike) -> int:
    """
    Ceiling of value after rounding it to CEILING_TOLERANCE.

    Examples:
        >>> tolerant_ceiling(Decimal("3.0000000000004"))
        3
        >>> tolerant_ceiling(Decimal("3.001"))
        4
    """
    number = to_decimal(value)
    with _wide_context(number.adjusted()):
        snapped = number.quantize(CEILING_TOLERANCE, rounding=ROUND_HALF_EVEN)
        return int(snapped.to_integral_value(rounding=ROUND_CEILING))


def package_count_for(total: AmountLike, amount_per_package: AmountLike) -> int:
    """
    Number of packages needed for total.

    Args:
        total: Amount needed in the base unit
        amount_per_package: Base units per package (must be positive)

    Returns:
        Package count, 0 for a non-positive total
    """
    total = to_decimal(total)
    per_package = to_decimal(amount_per_package, field="amount_per_package")
    if total <= 0:
        return 0
    with _wide_context(total.adjusted() - per_package.adjusted() + 1):
        quotient = total / per_package
    return tolerant_ceiling(quotient)


def project(
    line: AggregatedIngredientLine,
    packaging: Optional[PackagingRecord],
) -> PurchaseRecommendation:
    """
    Project an aggregated ingredient onto its packaging.

    Args:
        line: Aggregated ingredient total
        packaging: The ingredient's packaging, or None if it has none

    Returns:
        PurchaseRecommendation with display_name set to the ingredient name

    Raises:
        InvalidPackaging: If amount_per_package is zero or negative
    """
    total = to_decimal(line.total_amount)

    if packaging is None:
        amount_per_package = DEFAULT_AMOUNT_PER_PACKAGE
        label = line.unit
    else:
        amount_per_package = to_decimal(packaging.amount_per_package, field="amount_per_package")
        if amount_per_package <= 0:
            raise InvalidPackaging(line.ingredient_id, amount_per_package)
        label = packaging.packaging_label or line.unit

    return PurchaseRecommendation(
        ingredient_id=line.ingredient_id,
        ingredient_name=line.ingredient_name,
        display_name=line.ingredient_name,
        package_count=package_count_for(total, amount_per_package),
        package_label=label,
        amount_per_package=amount_per_package,
        total_amount=total,
        unit=line.unit,
        contributions=list(line.contributions),
        has_packaging=packaging is not None,
        ingredient_category=line.ingredient_category,
    )
