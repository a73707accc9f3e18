"""
Enumerations for the reorder workflow.

This module contains enums used by the reorder models:
- ReorderStatus: Lifecycle of a reorder
- ReorderItemStatus: Lifecycle of a single reorder line
- ReorderItemType: Whether a line is a finished product or an ingredient
"""

from enum import Enum


class ReorderStatus(str, Enum):
    """
    Reorder lifecycle status.

    Values:
        OPEN: Created, nobody is working on it yet
        IN_PROGRESS: Being packed or ordered
        COMPLETED: Delivered to the event
        CANCELLED: Abandoned
    """

    OPEN = "offen"
    IN_PROGRESS = "in_bearbeitung"
    COMPLETED = "abgeschlossen"
    CANCELLED = "storniert"


class ReorderItemStatus(str, Enum):
    """Status of a single reorder line."""

    OPEN = "offen"
    ORDERED = "bestellt"
    RECEIVED = "erhalten"
    CANCELLED = "storniert"
    DONE = "erledigt"


class ReorderItemType(str, Enum):
    """Kind of item on a reorder."""

    PRODUCT = "product"
    INGREDIENT = "ingredient"
