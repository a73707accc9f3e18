"""
Heuristic packaging guesses.

Substring rules used where the catalog has no packaging row for an item:
the reorder screen labels ingredient lines with a guessed container, and
the exports split their tables into "Non Food" and "Food" sections.

These are best guesses from German product names. They are kept apart
from the packaging projector, which only trusts the packaging table.
"""

from typing import Optional, Sequence, Tuple

# (name substrings, label); first match wins
NAME_RULES: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("öl", "essig", "sauce"), "Flasche"),
    (("mehl", "zucker", "salz"), "Sackerl"),
    (("marmelade", "honig", "mus"), "Glas"),
    (("milch", "sahne", "joghurt"), "Packung"),
    (("käse", "butter", "wurst"), "Packung"),
    (("brot", "brötchen"), "Stück"),
    (("ei",), "Stück"),
    (("dose", "konserve"), "Dose"),
)

UNIT_RULES: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("ml", "liter"), "Flasche"),
    (("g", "kg"), "Packung"),
)

DEFAULT_LABEL = "Stück"

NON_FOOD_KEYWORDS: Tuple[str, ...] = (
    "box",
    "karton",
    "verpackung",
    "beutel",
    "tüte",
    "becher",
    "deckel",
    "serviette",
    "napkin",
    "besteck",
    "gabel",
    "messer",
    "löffel",
    "teller",
    "schale",
    "dose",
    "flasche",
    "glas",
    "reiniger",
    "seife",
    "handschuh",
    "folie",
    "papier",
    "ketchup",
    "mayo",
    "senf",
    "sauce",
    "dressing",
    "öl",
    "essig",
    "salz",
    "pfeffer",
    "gewürz",
)


def _first_match(text: str, rules) -> Optional[str]:
    for needles, label in rules:
        if any(needle in text for needle in needles):
            return label
    return None


def guess_packaging_label(name: str, unit: Optional[str] = None) -> str:
    """
    Guess a packaging label from a product name and unit.

    Examples:
        >>> guess_packaging_label("Olivenöl", "ml")
        'Flasche'
        >>> guess_packaging_label("Reis", "g")
        'Stück'
        >>> guess_packaging_label("Nudeln", "g")
        'Packung'
        >>> guess_packaging_label("Servietten")
        'Stück'
    """
    name_key = (name or "").lower()
    unit_key = (unit or "").lower()

    return (
        _first_match(name_key, NAME_RULES)
        or _first_match(unit_key, UNIT_RULES)
        or DEFAULT_LABEL
    )


def is_non_food(name: str) -> bool:
    """True if the name looks like packaging, tableware, cleaning supplies or a condiment."""
    name_key = (name or "").lower()
    return any(keyword in name_key for keyword in NON_FOOD_KEYWORDS)
