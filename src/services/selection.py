"""
Product selections.

A Selection is one "N units of product P" request handed to the aggregator.
SelectionSet reproduces how the packing list screen builds selections:
tapping a product adds to its quantity, typing a number overwrites it, and
anything that drops to zero or below disappears from the list.

Selections are keyed by product ID, never by product name.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterator, List

from src.services.dto_utils import AmountLike, to_decimal


@dataclass(frozen=True)
class Selection:
    """Requested quantity of one product.

    Attributes:
        product_id: Selected product
        product_name: Display name, recorded in ingredient contributions
        quantity: Requested quantity (entries <= 0 are ignored by aggregation)
        unit: Unit the quantity is expressed in
    """

    product_id: int
    product_name: str
    quantity: AmountLike
    unit: str = ""


class SelectionSet:
    """
    Mutable set of selections, one entry per product.

    Example:
        selections = SelectionSet()
        selections.select(1, "Burger", 3, "Stück")
        selections.select(1, "Burger", 2, "Stück")          # now 5
        selections.select(1, "Burger", 4, "Stück", overwrite=True)  # now 4
        selections.select(1, "Burger", -4, "Stück")        # removed
    """

    def __init__(self):
        self._entries: Dict[int, Selection] = {}

    def select(
        self,
        product_id: int,
        product_name: str,
        quantity: AmountLike,
        unit: str,
        overwrite: bool = False,
    ) -> None:
        """
        Add to or set a product's quantity.

        Args:
            product_id: Product to select
            product_name: Product display name
            quantity: Amount to add, or the new quantity when overwrite is True
            unit: Unit of the quantity
            overwrite: Replace the current quantity instead of adding to it
        """
        qty = to_decimal(quantity, field="quantity")
        current = self._entries.get(product_id)

        if overwrite or current is None:
            new_quantity = qty
        else:
            new_quantity = to_decimal(current.quantity) + qty

        if new_quantity <= 0:
            self._entries.pop(product_id, None)
            return

        self._entries[product_id] = Selection(
            product_id=product_id,
            product_name=product_name,
            quantity=new_quantity,
            unit=unit,
        )

    def remove(self, product_id: int) -> None:
        self._entries.pop(product_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def quantity_of(self, product_id: int) -> Decimal:
        """Selected quantity of a product, zero if not selected."""
        entry = self._entries.get(product_id)
        return to_decimal(entry.quantity) if entry is not None else Decimal(0)

    def to_selections(self) -> List[Selection]:
        """Selections in the order products were first selected."""
        return list(self._entries.values())

    def __contains__(self, product_id: int) -> bool:
        return product_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Selection]:
        return iter(self.to_selections())
