"""
Constants for the Catering Logistics application.

This module defines all system-wide constants including:
- Application metadata
- Locale conventions (decimal separator, date format)
- Plural tables for packaging labels
- Unit aliases used for display scaling
- Arithmetic tolerances for package rounding
"""

from decimal import Decimal
from typing import Dict, List

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Catering Logistics"
APP_VERSION = "0.1.0"
DATABASE_FILENAME = "catering_logistics.db"

# ============================================================================
# Locale Conventions
# ============================================================================

DEFAULT_LOCALE = "de"

LOCALE_CONVENTIONS: Dict[str, Dict[str, str]] = {
    "de": {
        "decimal_separator": ",",
        "date_format": "%d.%m.%Y",
    },
    "en": {
        "decimal_separator": ".",
        "date_format": "%Y-%m-%d",
    },
}

# ============================================================================
# Packaging Label Plurals
# ============================================================================

# Irregular plurals cannot be derived from the singular, so every label
# that should change in the plural has to be listed here.
UNIT_PLURALS: Dict[str, Dict[str, str]] = {
    "de": {
        "Sack": "Säcke",
        "Sackerl": "Sackerl",
        "Flasche": "Flaschen",
        "Packung": "Packungen",
        "Kiste": "Kisten",
        "Karton": "Kartons",
        "Glas": "Gläser",
        "Dose": "Dosen",
        "Stück": "Stück",
        "Rolle": "Rollen",
        "Beutel": "Beutel",
        "Becher": "Becher",
        "Eimer": "Eimer",
        "Kübel": "Kübel",
        "Kanister": "Kanister",
        "Schachtel": "Schachteln",
        "Tüte": "Tüten",
        "Bund": "Bund",
        "Netz": "Netze",
        "Block": "Blöcke",
        "Laib": "Laibe",
        "Palette": "Paletten",
        "Tray": "Trays",
    },
    "en": {
        "bag": "bags",
        "bottle": "bottles",
        "box": "boxes",
        "can": "cans",
        "case": "cases",
        "jar": "jars",
        "pack": "packs",
        "piece": "pieces",
        "roll": "rolls",
        "loaf": "loaves",
    },
}

# ============================================================================
# Display Units
# ============================================================================

# Units whose large amounts are shown in the next bigger unit
GRAM_UNITS: List[str] = ["g", "gramm", "gram"]
MILLILITER_UNITS: List[str] = ["ml", "milliliter"]

KILOGRAM_LABEL = "Kg"
LITER_LABEL = "L"

# Maximum decimals shown for amounts
AMOUNT_DISPLAY_DECIMALS = 3

# ============================================================================
# Packaging Arithmetic
# ============================================================================

# Package quotients are rounded to this step before taking the ceiling
CEILING_TOLERANCE = Decimal("1e-9")

# Amount per package assumed when a product has no packaging row
DEFAULT_AMOUNT_PER_PACKAGE = Decimal("1")

# ============================================================================
# Export
# ============================================================================

EXPORT_TITLES: Dict[str, str] = {
    "packliste": "Packliste",
    "einkaufen": "Einkaufsliste",
    "bestellung": "Bestellung",
}

CHECKBOX_SYMBOL = "☐"
