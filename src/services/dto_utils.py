"""DTO utilities for service layer.

Provides the standard conversions for amounts passed between the storage
layer, the aggregation core and the exports, so that every amount is a
Decimal built from its decimal text and never from a binary float expansion.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from src.services.exceptions import ValidationError

AmountLike = Union[Decimal, float, int, str]


def to_decimal(value: AmountLike, field: str = "amount") -> Decimal:
    """
    Convert an amount to Decimal.

    Floats go through str() first, so 0.1 becomes Decimal("0.1") rather
    than Decimal("0.1000000000000000055511151231257827...").

    Args:
        value: Decimal, float, int or numeric string
        field: Field name used in the error message

    Returns:
        Decimal value

    Raises:
        ValidationError: If value is None, not numeric, NaN or infinite

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal("2,5")
        Decimal('2.5')
    """
    if value is None or isinstance(value, bool):
        raise ValidationError([f"{field} is required"])

    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip().replace(",", ".")
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise ValidationError([f"{field} must be a number, got {value!r}"])

    if not result.is_finite():
        raise ValidationError([f"{field} must be a finite number, got {value!r}"])
    return result

