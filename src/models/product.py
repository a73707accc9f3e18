"""
Product model for everything that can be planned, packed or bought.

A product is either a finished item (a dish, a drink) or a raw ingredient;
the same table holds both. Recipe lines link finished products to the
products they are made from.
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class Product(BaseModel):
    """
    Product model.

    Attributes:
        name: Unique display name
        unit: Base unit amounts of this product are expressed in
            (e.g. "g", "Stück", "L")
        category_id: Optional category, used for display grouping
    """

    __tablename__ = "products"

    name = Column(String(200), nullable=False, unique=True, index=True)
    unit = Column(String(50), nullable=False)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )

    category = relationship("Category", back_populates="products", lazy="joined")

    # Lines of this product's own recipe
    recipe_lines = relationship(
        "RecipeLine",
        foreign_keys="RecipeLine.product_id",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="select",
    )

    packaging_unit = relationship(
        "PackagingUnit",
        back_populates="product",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="select",
    )

    @property
    def category_name(self):
        """Name of the product's category, or None."""
        return self.category.name if self.category is not None else None
