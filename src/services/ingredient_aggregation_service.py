"""
Ingredient Aggregation Service.

Aggregates recipe ingredients across product selections for packing lists,
shopping lists, reorders and exports. Every one of those screens goes
through aggregate(), so totals cannot drift between them.

Rules:
- Selections with quantity <= 0 are skipped before any storage access
- Every selection is resolved before merging starts; any error aborts the
  whole aggregation and no partial result is returned
- Lines are merged strictly by ingredient_id
- The same ingredient with two different units raises UnitMismatch

Session Management Pattern:
- Public functions that touch the database accept session=None
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from src.services import event_service
from src.services.catalog_storage import CatalogStorage, SqlCatalogStorage
from src.services.database import session_scope
from src.services.dto_utils import to_decimal
from src.services.exceptions import ServiceError, UnitMismatch
from src.services.logging_utils import get_service_logger, log_operation
from src.services.recipe_resolver import ScaledIngredientLine, resolve
from src.services.selection import Selection

logger = get_service_logger(__name__)


@dataclass
class Contribution:
    """One finished product's share in an aggregated ingredient."""

    product_name: str
    product_quantity: Decimal


@dataclass
class AggregatedIngredientLine:
    """Aggregated ingredient total across all selections.

    Attributes:
        ingredient_id: Ingredient product ID (the merge key)
        ingredient_name: Ingredient display name
        unit: Unit shared by every contributing recipe line
        total_amount: Exact sum of recipe amount x selected quantity
        contributions: Products that need this ingredient, in resolution order
        ingredient_category: Ingredient's category name, if any
    """

    ingredient_id: int
    ingredient_name: str
    unit: str
    total_amount: Decimal
    contributions: List[Contribution] = field(default_factory=list)
    ingredient_category: Optional[str] = None


def _same_unit(first: str, second: str) -> bool:
    return (first or "").strip().casefold() == (second or "").strip().casefold()


def _resolve_all(
    selections: Iterable[Selection],
    storage: CatalogStorage,
) -> List[Tuple[Selection, List[ScaledIngredientLine]]]:
    resolved = []
    for selection in selections:
        quantity = to_decimal(selection.quantity, field="quantity")
        if quantity <= 0:
            continue
        resolved.append((selection, resolve(selection.product_id, quantity, storage)))
    return resolved


def aggregate(
    selections: Iterable[Selection],
    storage: CatalogStorage,
) -> Dict[int, AggregatedIngredientLine]:
    """
    Aggregate ingredient demand across product selections.

    Transaction boundary: Read-only. Reads go through the storage collaborator.

    Args:
        selections: Product selections; the same product may appear more than once
        storage: Catalog storage collaborator

    Returns:
        Dict keyed by ingredient_id with AggregatedIngredientLine values.
        Empty if nothing with a recipe was selected.

    Raises:
        ProductNotFound: If a selected product does not exist
        IngredientNotFound: If a recipe references a missing ingredient
        UnitMismatch: If one ingredient is used with different units
        CollaboratorUnavailable: If storage cannot be read
        ValidationError: If a quantity is not a number
    """
    selections = list(selections)

    try:
        resolved = _resolve_all(selections, storage)
    except ServiceError as e:
        log_operation(
            logger,
            operation="aggregate",
            outcome="resolve_failed",
            level=logging.WARNING,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    result: Dict[int, AggregatedIngredientLine] = {}

    for selection, lines in resolved:
        for line in lines:
            existing = result.get(line.ingredient_id)

            if existing is None:
                result[line.ingredient_id] = AggregatedIngredientLine(
                    ingredient_id=line.ingredient_id,
                    ingredient_name=line.ingredient_name,
                    unit=line.unit,
                    total_amount=line.scaled_amount,
                    contributions=[Contribution(selection.product_name, line.source_quantity)],
                    ingredient_category=line.ingredient_category,
                )
                continue

            if not _same_unit(existing.unit, line.unit):
                log_operation(
                    logger,
                    operation="aggregate",
                    outcome="unit_mismatch",
                    level=logging.WARNING,
                    ingredient_id=line.ingredient_id,
                    units=[existing.unit, line.unit],
                )
                raise UnitMismatch(
                    line.ingredient_id,
                    line.ingredient_name,
                    [existing.unit, line.unit],
                    [c.product_name for c in existing.contributions] + [selection.product_name],
                )

            existing.total_amount += line.scaled_amount
            existing.contributions.append(
                Contribution(selection.product_name, line.source_quantity)
            )

    log_operation(
        logger,
        operation="aggregate",
        outcome="success",
        level=logging.DEBUG,
        selection_count=len(selections),
        resolved_count=len(resolved),
        ingredient_count=len(result),
    )
    return result


def aggregate_ingredients_for_event(
    event_id: int,
    session: Optional[Session] = None,
) -> Dict[int, AggregatedIngredientLine]:
    """
    Aggregate ingredients across the stored packing list of an event.

    Args:
        event_id: Event to aggregate for
        session: Optional session for transaction sharing

    Returns:
        Dict keyed by ingredient_id with AggregatedIngredientLine values

    Raises:
        EventNotFound: If event not found
        (plus everything aggregate() raises)
    """
    if session is not None:
        return _aggregate_for_event_impl(event_id, session)
    with session_scope() as session:
        return _aggregate_for_event_impl(event_id, session)


def _aggregate_for_event_impl(
    event_id: int,
    session: Session,
) -> Dict[int, AggregatedIngredientLine]:
    """Internal implementation of aggregate_ingredients_for_event."""
    selections = event_service.get_event_selections(event_id, session=session)
    return aggregate(selections, SqlCatalogStorage(session))
