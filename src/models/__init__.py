"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .category import Category
from .product import Product
from .recipe import RecipeLine
from .packaging_unit import PackagingUnit
from .event import Event, EventProduct
from .enums import ReorderItemStatus, ReorderItemType, ReorderStatus
from .reorder import Reorder, ReorderItem

__all__ = [
    "Base",
    "BaseModel",
    "Category",
    "Product",
    "RecipeLine",
    "PackagingUnit",
    "Event",
    "EventProduct",
    "ReorderStatus",
    "ReorderItemStatus",
    "ReorderItemType",
    "Reorder",
    "ReorderItem",
]
