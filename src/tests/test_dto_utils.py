"""Tests for DTO utility functions."""

import pytest
from decimal import Decimal

from src.services.dto_utils import to_decimal
from src.services.exceptions import ValidationError


class TestToDecimal:
    """Tests for to_decimal function."""

    def test_decimal_passthrough(self):
        value = Decimal("1.2500")
        assert to_decimal(value) is value

    def test_float_uses_decimal_text(self):
        """0.1 becomes Decimal('0.1'), not its binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.3")

    def test_int_and_string(self):
        assert to_decimal(3) == Decimal("3")
        assert to_decimal(" 150 ") == Decimal("150")

    def test_decimal_comma(self):
        """German input with a decimal comma is accepted."""
        assert to_decimal("2,5") == Decimal("2.5")

    @pytest.mark.parametrize("value", [None, True, "", "viele", "NaN", float("inf")])
    def test_invalid_values(self, value):
        with pytest.raises(ValidationError):
            to_decimal(value)

    def test_field_name_in_message(self):
        with pytest.raises(ValidationError) as exc_info:
            to_decimal("x", field="quantity")
        assert "quantity" in str(exc_info.value)
