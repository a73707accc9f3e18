"""
Event models for catering assignments.

This module contains:
- Event: A catering or food truck assignment with its packing list
- EventProduct: One selected product and quantity on an event's packing list
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Event(BaseModel):
    """
    Event model.

    Attributes:
        name: Event name
        type: Event type (e.g. "Catering", "Foodtruck")
        date: First day of the event
        end_date: Last day of the event, if it spans several days
        ft: Food truck assigned to the event
        ka: Refrigerated trailer assigned to the event
        notes: Special information printed on the packing list
        print_ready: Packing list is ready to print
        finished: Event is over
    """

    __tablename__ = "events"

    name = Column(String(200), nullable=False, index=True)
    type = Column(String(50), nullable=False, default="Catering")
    date = Column(Date, nullable=True, index=True)
    end_date = Column(Date, nullable=True)
    ft = Column(String(100), nullable=True)
    ka = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    print_ready = Column(Boolean, nullable=False, default=False)
    finished = Column(Boolean, nullable=False, default=False)

    event_products = relationship(
        "EventProduct",
        back_populates="event",
        cascade="all, delete-orphan",
        lazy="select",
        order_by="EventProduct.id",
    )


class EventProduct(BaseModel):
    """
    Selected product on an event's packing list.

    Attributes:
        event_id: Event the selection belongs to
        product_id: Selected product
        quantity: Selected quantity
        unit: Unit the quantity is expressed in
    """

    __tablename__ = "event_products"

    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity = Column(Numeric(12, 4), nullable=False)
    unit = Column(String(50), nullable=False)

    event = relationship("Event", back_populates="event_products")
    product = relationship("Product", lazy="joined")

    __table_args__ = (
        UniqueConstraint("event_id", "product_id", name="uq_event_product"),
    )
