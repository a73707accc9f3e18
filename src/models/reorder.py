"""
Reorder models for restocking a running event.

This module contains:
- Reorder: A restock request for one event
- ReorderItem: One product or ingredient line on a reorder
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import ReorderItemStatus, ReorderStatus


class Reorder(BaseModel):
    """
    Restock request for an event.

    Attributes:
        event_id: Event being restocked
        event_name: Event name at the time of the request
        status: ReorderStatus value
        total_items: Number of lines
        total_products: Number of product lines
        total_ingredients: Number of ingredient lines
        notes: Free text for the packing team
        completed_at: When the reorder was completed
    """

    __tablename__ = "reorders"

    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default=ReorderStatus.OPEN.value, index=True)
    total_items = Column(Integer, nullable=False, default=0)
    total_products = Column(Integer, nullable=False, default=0)
    total_ingredients = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    items = relationship(
        "ReorderItem",
        back_populates="reorder",
        cascade="all, delete-orphan",
        lazy="select",
        order_by="ReorderItem.id",
    )


class ReorderItem(BaseModel):
    """
    One line on a reorder.

    Attributes:
        reorder_id: Parent reorder
        item_type: ReorderItemType value
        item_id: Product id of the line
        item_name: Product name at the time of the request
        quantity: Quantity to bring (packages for ingredient lines)
        unit: Unit of quantity
        packaging_unit: Container label
        category: Category name for grouping
        status: ReorderItemStatus value
        is_packed: Line has been packed
    """

    __tablename__ = "reorder_items"

    reorder_id = Column(
        Integer, ForeignKey("reorders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_type = Column(String(20), nullable=False)
    item_id = Column(Integer, nullable=False)
    item_name = Column(String(200), nullable=False)
    quantity = Column(Numeric(12, 4), nullable=False)
    unit = Column(String(50), nullable=False)
    packaging_unit = Column(String(50), nullable=True)
    category = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=ReorderItemStatus.OPEN.value)
    is_packed = Column(Boolean, nullable=False, default=False)

    reorder = relationship("Reorder", back_populates="items")
