"""Utilities package for the catering-logistics application."""

from .formatting import format_amount, format_package_text, format_weight, pluralize

__all__ = [
    "format_amount",
    "format_package_text",
    "format_weight",
    "pluralize",
]
