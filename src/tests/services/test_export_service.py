"""Tests for table and file exports of purchase recommendations."""

import csv
from datetime import date
from decimal import Decimal

import pytest

from src.services.exceptions import ValidationError
from src.services.export_service import (
    FOOD_SECTION,
    INGREDIENT_COLUMNS,
    NON_FOOD_SECTION,
    build_ingredient_row,
    build_ingredient_rows,
    export_filename,
    write_shopping_list_csv,
)
from src.services.packaging_projector import PurchaseRecommendation
from src.services.selection import Selection
from src.services.shopping_list_service import aggregate_and_project


@pytest.fixture
def burger_recommendations(burger_storage):
    return aggregate_and_project(
        [Selection(1, "Burger", 100, "Stück"), Selection(2, "Wrap", 50, "Stück")],
        burger_storage,
    )


@pytest.fixture
def napkins():
    return PurchaseRecommendation(
        ingredient_id=30,
        ingredient_name="Servietten",
        display_name="Servietten",
        package_count=2,
        package_label="Stück",
        amount_per_package=Decimal("1"),
        total_amount=Decimal("2"),
        unit="Stück",
    )


class TestIngredientRows:
    def test_row_layout(self, burger_recommendations):
        bun, patty = burger_recommendations

        assert build_ingredient_row(bun) == ["☐", "8 Säcke à 20 Stück", "Bun", "150", "Stück"]
        assert build_ingredient_row(patty) == [
            "☐",
            "15 Packungen à 1,0 Kg",
            "Patty",
            "15000",
            "g",
        ]

    def test_english_locale(self, burger_recommendations):
        patty = burger_recommendations[1]
        assert build_ingredient_row(patty, locale="en")[1] == "15 Packung à 1.0 Kg"

    def test_non_food_section_first(self, burger_recommendations, napkins):
        sections = build_ingredient_rows(burger_recommendations + [napkins])

        assert [section.title for section in sections] == [NON_FOOD_SECTION, FOOD_SECTION]
        assert [row[2] for row in sections[0].rows] == ["Servietten"]
        assert [row[2] for row in sections[1].rows] == ["Bun", "Patty"]

    def test_empty_sections_omitted(self, burger_recommendations):
        sections = build_ingredient_rows(burger_recommendations)
        assert [section.title for section in sections] == [FOOD_SECTION]

    def test_nothing_to_lay_out(self):
        assert build_ingredient_rows([]) == []


class TestWriteCsv:
    def test_writes_sections(self, tmp_path, burger_recommendations, napkins):
        path = tmp_path / "einkauf.csv"

        assert write_shopping_list_csv(burger_recommendations + [napkins], path) is True

        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f, delimiter=";"))
        assert rows == [
            [NON_FOOD_SECTION],
            INGREDIENT_COLUMNS,
            ["☐", "2 Stück à 1 Stück", "Servietten", "2", "Stück"],
            [],
            [FOOD_SECTION],
            INGREDIENT_COLUMNS,
            ["☐", "8 Säcke à 20 Stück", "Bun", "150", "Stück"],
            ["☐", "15 Packungen à 1,0 Kg", "Patty", "15000", "g"],
        ]

    def test_empty_list_writes_no_file(self, tmp_path):
        path = tmp_path / "leer.csv"
        assert write_shopping_list_csv([], path) is False
        assert not path.exists()


class TestExportFilename:
    def test_packing_list(self):
        name = export_filename("packliste", "Sommerfest Halle 2", date(2025, 6, 14))
        assert name == "2025-06-14_Sommerfest_Halle_2.csv"

    def test_shopping_list_keeps_umlauts(self):
        name = export_filename("einkaufen", "Hochzeit Müller", date(2025, 9, 1), extension="pdf")
        assert name == "Einkaufsliste_Hochzeit_Müller_2025-09-01.pdf"

    def test_order_uses_supplier(self):
        name = export_filename("bestellung", "Sommerfest", date(2025, 6, 14), supplier_name="Metro")
        assert name == "Bestellung_Metro_2025-06-14.csv"

    def test_missing_date(self):
        assert export_filename("einkaufen", "Hochzeit", None) == "Einkaufsliste_Hochzeit_Kein-Datum.csv"

    def test_unsafe_characters_removed(self):
        name = export_filename("packliste", "A/B: Feier?", date(2025, 1, 2), extension="")
        assert name == "2025-01-02_AB_Feier"

    def test_unknown_mode(self):
        with pytest.raises(ValidationError):
            export_filename("rechnung", "Sommerfest", None)
