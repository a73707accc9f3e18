"""
Packaging unit model.

Describes the container a product is bought in ("20 Stück per Sack").
Each product has at most one packaging row.
"""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class PackagingUnit(BaseModel):
    """
    Purchasable container size for a product.

    Attributes:
        product_id: Product this packaging belongs to (unique)
        amount_per_package: Amount of the product's base unit in one package
        packaging_label: Singular container name (e.g. "Sack", "Flasche")
    """

    __tablename__ = "packaging_units"

    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    amount_per_package = Column(Numeric(12, 4), nullable=False)
    packaging_label = Column(String(50), nullable=False)

    product = relationship("Product", back_populates="packaging_unit")
