"""
Shopping list service.

The single entry point every list, export and reorder screen uses to turn
product selections into purchase recommendations:

    aggregate -> fetch packaging per ingredient -> project -> order

Output order is by display name (accent- and case-insensitive), then by
ingredient ID. Ingredients are never merged by name: when different
ingredient IDs share a name, the display name is disambiguated with the
ingredient's category, and with its ID if that is still ambiguous.

Session Management Pattern:
- Public functions that touch the database accept session=None
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from src.services import event_service
from src.services.catalog_storage import CatalogStorage, SqlCatalogStorage
from src.services.database import session_scope
from src.services.exceptions import ServiceError
from src.services.ingredient_aggregation_service import aggregate
from src.services.logging_utils import get_service_logger, log_operation
from src.services.packaging_projector import PurchaseRecommendation, project
from src.services.selection import Selection
from src.utils.slug_utils import fold_name, name_sort_key

logger = get_service_logger(__name__)


def _disambiguate(recommendations: List[PurchaseRecommendation]) -> None:
    """Give recommendations that share a name distinct display names (in place)."""
    by_name: Dict[str, List[PurchaseRecommendation]] = defaultdict(list)
    for rec in recommendations:
        by_name[fold_name(rec.ingredient_name)].append(rec)

    for group in by_name.values():
        if len(group) < 2:
            continue

        for rec in group:
            if rec.ingredient_category:
                rec.display_name = f"{rec.ingredient_name} ({rec.ingredient_category})"

        labels: Dict[str, int] = defaultdict(int)
        for rec in group:
            labels[fold_name(rec.display_name)] += 1
        for rec in group:
            if labels[fold_name(rec.display_name)] > 1:
                rec.display_name = f"{rec.display_name} #{rec.ingredient_id}"


def sort_recommendations(
    recommendations: Iterable[PurchaseRecommendation],
) -> List[PurchaseRecommendation]:
    """Canonical output order: display name, then ingredient ID."""
    return sorted(
        recommendations,
        key=lambda rec: (name_sort_key(rec.display_name), rec.ingredient_id),
    )


def aggregate_and_project(
    selections: Iterable[Selection],
    storage: CatalogStorage,
) -> List[PurchaseRecommendation]:
    """
    Compute purchase recommendations for a set of product selections.

    Transaction boundary: Read-only. Reads go through the storage collaborator.

    Args:
        selections: Product selections
        storage: Catalog storage collaborator

    Returns:
        One PurchaseRecommendation per distinct ingredient, in canonical order

    Raises:
        ProductNotFound, IngredientNotFound: If referenced data is missing
        UnitMismatch: If one ingredient is used with different units
        InvalidPackaging: If an ingredient's packaging is not positive
        CollaboratorUnavailable: If storage cannot be read
    """
    selections = list(selections)

    try:
        aggregated = aggregate(selections, storage)
        recommendations = [
            project(line, storage.get_packaging_unit(ingredient_id))
            for ingredient_id, line in aggregated.items()
        ]
    except ServiceError as e:
        log_operation(
            logger,
            operation="aggregate_and_project",
            outcome="failed",
            level=logging.WARNING,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    _disambiguate(recommendations)
    result = sort_recommendations(recommendations)

    log_operation(
        logger,
        operation="aggregate_and_project",
        outcome="success",
        selection_count=len(selections),
        ingredient_count=len(result),
        without_packaging=sum(1 for rec in result if not rec.has_packaging),
    )
    return result


def get_event_shopping_list(
    event_id: int,
    session: Optional[Session] = None,
) -> List[PurchaseRecommendation]:
    """
    Purchase recommendations for the stored packing list of an event.

    Args:
        event_id: Event to compute the list for
        session: Optional session for transaction sharing

    Raises:
        EventNotFound: If the event does not exist
        (plus everything aggregate_and_project() raises)
    """
    if session is not None:
        return _get_event_shopping_list_impl(event_id, session)
    with session_scope() as session:
        return _get_event_shopping_list_impl(event_id, session)


def _get_event_shopping_list_impl(
    event_id: int,
    session: Session,
) -> List[PurchaseRecommendation]:
    selections = event_service.get_event_selections(event_id, session=session)
    return aggregate_and_project(selections, SqlCatalogStorage(session))
