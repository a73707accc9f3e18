"""
Recipe line model.

A recipe line states how much of one ingredient product goes into one unit
of a finished product. Recipes are one level deep: an ingredient's own
recipe lines are never expanded.
"""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel


class RecipeLine(BaseModel):
    """
    Recipe line linking a finished product to one ingredient product.

    Attributes:
        product_id: Finished product this line belongs to
        ingredient_id: Ingredient product consumed
        amount: Ingredient amount per unit of the finished product
        unit: Unit of amount; expected to equal the ingredient's unit
    """

    __tablename__ = "recipes"

    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id = Column(
        Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 4), nullable=False)
    unit = Column(String(50), nullable=False)

    product = relationship(
        "Product", foreign_keys=[product_id], back_populates="recipe_lines", lazy="joined"
    )
    ingredient = relationship("Product", foreign_keys=[ingredient_id], lazy="joined")

    __table_args__ = (
        UniqueConstraint("product_id", "ingredient_id", name="uq_recipe_product_ingredient"),
    )
