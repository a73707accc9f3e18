"""
Amount and packaging label formatting.

Pure display helpers shared by the shopping list views, exports and the CLI:
- format_amount: locale-aware number + unit
- format_weight: like format_amount, but large gram/millilitre amounts
  switch to kilograms/litres
- pluralize: packaging label plural from a lookup table
- format_package_text: "2 Säcke à 20 Stück"

None of these functions raise; input that cannot be read as a number is
rendered unchanged.
"""

from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Optional, Union

from src.utils.constants import (
    AMOUNT_DISPLAY_DECIMALS,
    DEFAULT_LOCALE,
    GRAM_UNITS,
    KILOGRAM_LABEL,
    LITER_LABEL,
    LOCALE_CONVENTIONS,
    MILLILITER_UNITS,
    UNIT_PLURALS,
)

Number = Union[Decimal, float, int]


def _to_decimal(value: Any) -> Optional[Decimal]:
    # Reads numbers like dto_utils.to_decimal (decimal comma included),
    # but returns None instead of raising.
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip().replace(",", "."))
        except InvalidOperation:
            return None
        return result if result.is_finite() else None
    return None


def _quantize(number: Decimal, decimals: int) -> Decimal:
    # Precision grows with the number so huge amounts round instead of failing
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + decimals + 2)
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        return number.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def _locale_or_default(table: Dict[str, Any], locale: str) -> Any:
    return table.get(locale, table[DEFAULT_LOCALE])


def _decimal_separator(locale: str) -> str:
    return _locale_or_default(LOCALE_CONVENTIONS, locale)["decimal_separator"]


def format_number(value: Any, locale: str = DEFAULT_LOCALE, decimals: Optional[int] = None) -> str:
    """
    Render a number with the locale's decimal separator.

    Args:
        value: Decimal, float, int or numeric string
        locale: Display locale
        decimals: Fixed number of decimals. If None, up to
            AMOUNT_DISPLAY_DECIMALS are shown with trailing zeros trimmed.

    Returns:
        Formatted number, or str(value) if it is not numeric

    Examples:
        >>> format_number(3.5)
        '3,5'
        >>> format_number(Decimal("750.0000"), locale="en")
        '750'
        >>> format_number(1.25, decimals=1, locale="en")
        '1.3'
    """
    number = _to_decimal(value)
    if number is None:
        return str(value)

    if decimals is not None:
        text = format(_quantize(number, decimals), "f")
    else:
        text = format(_quantize(number, AMOUNT_DISPLAY_DECIMALS), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")

    # no "-0" after rounding
    if text.startswith("-") and Decimal(text) == 0:
        text = text[1:]

    return text.replace(".", _decimal_separator(locale))


def format_amount(value: Any, unit: Optional[str], locale: str = DEFAULT_LOCALE) -> str:
    """
    Format an amount with its unit.

    Examples:
        >>> format_amount(3.5, "kg")
        '3,5 kg'
        >>> format_amount(Decimal("5"), "Stück")
        '5 Stück'
    """
    number_text = format_number(value, locale)
    if not unit:
        return number_text
    return f"{number_text} {unit}"


def format_weight(value: Any, unit: Optional[str], locale: str = DEFAULT_LOCALE) -> str:
    """
    Format an amount, switching gram and millilitre amounts of 1000 or more
    to kilograms and litres with one decimal.

    Examples:
        >>> format_weight(1500, "Gramm")
        '1,5 Kg'
        >>> format_weight(750, "g")
        '750 g'
        >>> format_weight(2000, "ml", locale="en")
        '2.0 L'
    """
    number = _to_decimal(value)
    unit_key = (unit or "").strip().lower()

    if number is not None and number >= 1000:
        if unit_key in GRAM_UNITS:
            return f"{format_number(number / 1000, locale, decimals=1)} {KILOGRAM_LABEL}"
        if unit_key in MILLILITER_UNITS:
            return f"{format_number(number / 1000, locale, decimals=1)} {LITER_LABEL}"

    return format_amount(value, unit, locale)


def pluralize(count: Any, unit_label: Optional[str], locale: str = DEFAULT_LOCALE) -> str:
    """
    Return the label form that goes with count.

    A count of exactly one keeps the singular. Any other count uses the
    locale's plural table (the default locale's for an unknown locale);
    labels without an entry are returned unchanged.

    Examples:
        >>> pluralize(1, "Sack")
        'Sack'
        >>> pluralize(3, "Sack")
        'Säcke'
        >>> pluralize(0, "Flasche")
        'Flaschen'
        >>> pluralize(2, "Kanne")
        'Kanne'
    """
    label = unit_label or ""
    number = _to_decimal(count)
    if number is not None and number == 1:
        return label

    table = _locale_or_default(UNIT_PLURALS, locale)
    if label in table:
        return table[label]

    folded = label.casefold()
    for singular, plural in table.items():
        if singular.casefold() == folded:
            return plural
    return label


def format_package_text(recommendation: Any, locale: str = DEFAULT_LOCALE) -> str:
    """
    Describe a purchase recommendation as "<count> <label> à <amount>".

    Args:
        recommendation: Object with package_count, package_label,
            amount_per_package and unit attributes (PurchaseRecommendation)
        locale: Display locale

    Example:
        "1 Sack à 20 Stück"
    """
    count = recommendation.package_count
    label = pluralize(count, recommendation.package_label, locale)
    per_package = format_weight(recommendation.amount_per_package, recommendation.unit, locale)
    return f"{count} {label} à {per_package}"
