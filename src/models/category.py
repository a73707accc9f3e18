"""
Category model for grouping products on lists and in exports.

Categories only affect display grouping; aggregation never reads them
except to tell apart ingredients that share a name.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class Category(BaseModel):
    """
    Product category (e.g. "Essen", "Getränke Pet", "Equipment", "Kassa").

    Attributes:
        name: Unique category name
        symbol: Optional display symbol shown next to the category
    """

    __tablename__ = "categories"

    name = Column(String(100), nullable=False, unique=True, index=True)
    symbol = Column(String(20), nullable=True)

    products = relationship("Product", back_populates="category", lazy="select")
