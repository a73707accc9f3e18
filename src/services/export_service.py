"""
Export Service - Tabular renderings of purchase recommendations.

Exports never compute amounts themselves: they receive the output of
shopping_list_service.aggregate_and_project() and only lay it out.

Ingredient tables have the columns
    [checkbox, package text, name, total, unit]
and are split into a "Non Food" section followed by a "Food" section, each
keeping the canonical recommendation order.
"""

import csv
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Union

from src.services.exceptions import ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.services.packaging_heuristics import is_non_food
from src.services.packaging_projector import PurchaseRecommendation
from src.utils.constants import CHECKBOX_SYMBOL, DEFAULT_LOCALE, EXPORT_TITLES
from src.utils.formatting import format_number, format_package_text
from src.utils.slug_utils import sanitize_filename

logger = get_service_logger(__name__)

NON_FOOD_SECTION = "Non Food"
FOOD_SECTION = "Food"

INGREDIENT_COLUMNS = ["", "Verpackung", "Zutat", "Menge", "Einheit"]

NO_DATE_LABEL = "Kein-Datum"


@dataclass
class ExportSection:
    """A titled block of table rows."""

    title: str
    rows: List[List[str]] = field(default_factory=list)


def build_ingredient_row(rec: PurchaseRecommendation, locale: str = DEFAULT_LOCALE) -> List[str]:
    """One table row for a recommendation."""
    return [
        CHECKBOX_SYMBOL,
        format_package_text(rec, locale),
        rec.display_name,
        format_number(rec.total_amount, locale),
        rec.unit,
    ]


def build_ingredient_rows(
    recommendations: Iterable[PurchaseRecommendation],
    locale: str = DEFAULT_LOCALE,
) -> List[ExportSection]:
    """
    Lay out recommendations as "Non Food" and "Food" table sections.

    Args:
        recommendations: Output of aggregate_and_project(), already ordered
        locale: Display locale

    Returns:
        The non-empty sections, "Non Food" first
    """
    non_food = ExportSection(NON_FOOD_SECTION)
    food = ExportSection(FOOD_SECTION)

    for rec in recommendations:
        section = non_food if is_non_food(rec.ingredient_name) else food
        section.rows.append(build_ingredient_row(rec, locale))

    return [section for section in (non_food, food) if section.rows]


def write_shopping_list_csv(
    recommendations: Iterable[PurchaseRecommendation],
    file_path: Union[str, Path],
    locale: str = DEFAULT_LOCALE,
) -> bool:
    """
    Write recommendations to a CSV file.

    Each section starts with a row holding its title, followed by the
    column header and its rows. Sections are separated by an empty row.

    Args:
        recommendations: Output of aggregate_and_project()
        file_path: Destination file
        locale: Display locale

    Returns:
        True if a file was written, False if there was nothing to export
        (no file is created in that case)
    """
    sections = build_ingredient_rows(recommendations, locale)
    if not sections:
        log_operation(logger, operation="write_shopping_list_csv", outcome="empty")
        return False

    path = Path(file_path)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, delimiter=";")
        for index, section in enumerate(sections):
            if index:
                writer.writerow([])
            writer.writerow([section.title])
            writer.writerow(INGREDIENT_COLUMNS)
            writer.writerows(section.rows)

    log_operation(
        logger,
        operation="write_shopping_list_csv",
        outcome="success",
        path=str(path),
        row_count=sum(len(section.rows) for section in sections),
    )
    return True


def export_filename(
    mode: str,
    event_name: Optional[str],
    event_date: Optional[date],
    supplier_name: Optional[str] = None,
    extension: str = "csv",
) -> str:
    """
    File name for an export.

    - packliste: "<YYYY-MM-DD>_<event name>"
    - bestellung: "Bestellung_<supplier>_<YYYY-MM-DD>"
    - other modes: "<title>_<event name>_<YYYY-MM-DD>"

    Whitespace becomes "_" and characters other than letters, digits,
    "_", "-" and "." are dropped.

    Examples:
        >>> export_filename("packliste", "Sommerfest Halle 2", date(2025, 6, 14))
        '2025-06-14_Sommerfest_Halle_2.csv'
        >>> export_filename("einkaufen", "Hochzeit", None)
        'Einkaufsliste_Hochzeit_Kein-Datum.csv'

    Raises:
        ValidationError: If mode is not a known export mode
    """
    if mode not in EXPORT_TITLES:
        allowed = ", ".join(EXPORT_TITLES)
        raise ValidationError([f"Unknown export mode '{mode}' (expected one of: {allowed})"])

    date_text = event_date.isoformat() if event_date is not None else NO_DATE_LABEL

    if mode == "packliste":
        stem = f"{date_text}_{event_name or EXPORT_TITLES[mode]}"
    elif mode == "bestellung":
        stem = f"{EXPORT_TITLES[mode]}_{supplier_name or ''}_{date_text}"
    else:
        stem = f"{EXPORT_TITLES[mode]}_{event_name or 'Dokument'}_{date_text}"

    stem = sanitize_filename(stem)
    return f"{stem}.{extension}" if extension else stem
