"""
Reorder Service - Restock requests for running events.

A reorder lists finished products to bring to an event plus the
ingredients they need, computed with the same shopping list path every
other screen uses. Ingredient lines are stored in packages.

Status workflow:
    offen -> in_bearbeitung -> abgeschlossen | storniert

Completed and cancelled reorders are final. Completing a reorder records
completed_at.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from typing import Dict, List, Mapping, Optional

from sqlalchemy.orm import Session, selectinload

from src.models import (
    Event,
    Product,
    Reorder,
    ReorderItem,
    ReorderItemStatus,
    ReorderItemType,
    ReorderStatus,
)
from src.services.catalog_storage import SqlCatalogStorage
from src.services.database import session_scope
from src.services.dto_utils import AmountLike, to_decimal
from src.services.exceptions import (
    EventNotFound,
    ProductNotFound,
    ReorderNotFound,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation
from src.services.packaging_heuristics import guess_packaging_label
from src.services.selection import Selection
from src.services.shopping_list_service import aggregate_and_project
from src.utils.datetime_utils import utc_now

logger = get_service_logger(__name__)

_ALLOWED_TRANSITIONS: Dict[str, tuple] = {
    ReorderStatus.OPEN.value: (
        ReorderStatus.IN_PROGRESS.value,
        ReorderStatus.COMPLETED.value,
        ReorderStatus.CANCELLED.value,
    ),
    ReorderStatus.IN_PROGRESS.value: (
        ReorderStatus.OPEN.value,
        ReorderStatus.COMPLETED.value,
        ReorderStatus.CANCELLED.value,
    ),
}


def _status_value(status, enum_cls) -> str:
    try:
        return enum_cls(status).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            [f"Unknown status '{status}' (expected one of: {allowed})"]
        ) from None


def _get_reorder_or_raise(reorder_id: int, sess: Session) -> Reorder:
    reorder = (
        sess.query(Reorder)
        .options(selectinload(Reorder.items))
        .filter(Reorder.id == reorder_id)
        .first()
    )
    if reorder is None:
        raise ReorderNotFound(reorder_id)
    return reorder


def _get_item_or_raise(item_id: int, sess: Session) -> ReorderItem:
    item = sess.get(ReorderItem, item_id)
    if item is None:
        raise ReorderNotFound(item_id, entity="Reorder item")
    return item


def create_reorder(
    event_id: int,
    product_quantities: Mapping[int, AmountLike],
    notes: Optional[str] = None,
    session: Optional[Session] = None,
) -> Reorder:
    """
    Create a reorder for an event.

    Products with a quantity > 0 become product lines. Their combined
    ingredient demand becomes ingredient lines, one per ingredient, with the
    package count as quantity. Ingredients without packaging get a guessed
    container label.

    Transaction boundary: the reorder and all its lines are written in one
    transaction; any error leaves nothing behind.

    Args:
        event_id: Event to restock
        product_quantities: Product ID -> quantity to bring
        notes: Optional free text
        session: Optional database session

    Returns:
        The created Reorder with its items

    Raises:
        EventNotFound: If the event doesn't exist
        ProductNotFound: If a product doesn't exist
        ValidationError: If no product has a positive quantity
        (plus everything aggregate_and_project() raises)
    """
    requested = {}
    for product_id, quantity in product_quantities.items():
        qty = to_decimal(quantity, field="quantity")
        if qty > 0:
            requested[product_id] = qty
    if not requested:
        raise ValidationError(["Select at least one product with a quantity above zero"])

    def _impl(sess: Session) -> Reorder:
        event = sess.get(Event, event_id)
        if event is None:
            raise EventNotFound(event_id)

        products: List[Product] = []
        for product_id in requested:
            product = sess.get(Product, product_id)
            if product is None:
                raise ProductNotFound(product_id)
            products.append(product)

        storage = SqlCatalogStorage(sess)
        selections = [
            Selection(product.id, product.name, requested[product.id], product.unit)
            for product in products
        ]
        recommendations = aggregate_and_project(selections, storage)

        items = []
        for product in products:
            packaging = storage.get_packaging_unit(product.id)
            items.append(
                ReorderItem(
                    item_type=ReorderItemType.PRODUCT.value,
                    item_id=product.id,
                    item_name=product.name,
                    quantity=requested[product.id],
                    unit=product.unit,
                    packaging_unit=(
                        packaging.packaging_label
                        if packaging is not None
                        else guess_packaging_label(product.name, product.unit)
                    ),
                    category=product.category_name,
                    status=ReorderItemStatus.OPEN.value,
                    is_packed=False,
                )
            )

        for rec in recommendations:
            items.append(
                ReorderItem(
                    item_type=ReorderItemType.INGREDIENT.value,
                    item_id=rec.ingredient_id,
                    item_name=rec.display_name,
                    quantity=rec.package_count,
                    unit=rec.unit,
                    packaging_unit=(
                        rec.package_label
                        if rec.has_packaging
                        else guess_packaging_label(rec.ingredient_name, rec.unit)
                    ),
                    category=rec.ingredient_category,
                    status=ReorderItemStatus.OPEN.value,
                    is_packed=False,
                )
            )

        reorder = Reorder(
            event_id=event.id,
            event_name=event.name,
            status=ReorderStatus.OPEN.value,
            total_items=len(items),
            total_products=len(products),
            total_ingredients=len(recommendations),
            notes=notes,
        )
        reorder.items.extend(items)
        sess.add(reorder)
        sess.flush()

        log_operation(
            logger,
            operation="create_reorder",
            outcome="success",
            reorder_id=reorder.id,
            event_id=event_id,
            total_products=reorder.total_products,
            total_ingredients=reorder.total_ingredients,
        )
        return reorder

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def get_reorder(reorder_id: int, session: Optional[Session] = None) -> Reorder:
    """
    Get a reorder with its items loaded.

    Raises:
        ReorderNotFound: If the reorder doesn't exist
    """
    if session is not None:
        return _get_reorder_or_raise(reorder_id, session)
    with session_scope() as sess:
        return _get_reorder_or_raise(reorder_id, sess)


def list_reorders(
    event_id: Optional[int] = None,
    session: Optional[Session] = None,
) -> List[Reorder]:
    """
    List reorders, newest first.

    Args:
        event_id: If given, only reorders of this event
        session: Optional database session
    """

    def _impl(sess: Session) -> List[Reorder]:
        query = sess.query(Reorder).options(selectinload(Reorder.items))
        if event_id is not None:
            query = query.filter(Reorder.event_id == event_id)
        return query.order_by(Reorder.created_at.desc(), Reorder.id.desc()).all()

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def update_reorder_status(
    reorder_id: int,
    status: str,
    session: Optional[Session] = None,
) -> Reorder:
    """
    Move a reorder to a new status.

    Raises:
        ReorderNotFound: If the reorder doesn't exist
        ValidationError: If the status is unknown or the transition is not allowed
    """
    new_status = _status_value(status, ReorderStatus)

    def _impl(sess: Session) -> Reorder:
        reorder = _get_reorder_or_raise(reorder_id, sess)
        if reorder.status == new_status:
            return reorder
        if new_status not in _ALLOWED_TRANSITIONS.get(reorder.status, ()):
            raise ValidationError(
                [f"Cannot change reorder status from '{reorder.status}' to '{new_status}'"]
            )

        reorder.status = new_status
        if new_status == ReorderStatus.COMPLETED.value:
            reorder.completed_at = utc_now()
        sess.flush()

        log_operation(
            logger,
            operation="update_reorder_status",
            outcome="success",
            reorder_id=reorder_id,
            status=new_status,
        )
        return reorder

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def set_item_packed(
    item_id: int,
    is_packed: bool,
    session: Optional[Session] = None,
) -> ReorderItem:
    """
    Tick or untick a reorder line as packed.

    Raises:
        ReorderNotFound: If the item doesn't exist
    """

    def _impl(sess: Session) -> ReorderItem:
        item = _get_item_or_raise(item_id, sess)
        item.is_packed = bool(is_packed)
        sess.flush()
        return item

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def update_item_status(
    item_id: int,
    status: str,
    session: Optional[Session] = None,
) -> ReorderItem:
    """
    Set the status of a reorder line.

    Raises:
        ReorderNotFound: If the item doesn't exist
        ValidationError: If the status is unknown
    """
    new_status = _status_value(status, ReorderItemStatus)

    def _impl(sess: Session) -> ReorderItem:
        item = _get_item_or_raise(item_id, sess)
        item.status = new_status
        sess.flush()
        return item

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)


def delete_reorder(reorder_id: int, session: Optional[Session] = None) -> None:
    """
    Delete a reorder and its items.

    Raises:
        ReorderNotFound: If the reorder doesn't exist
    """

    def _impl(sess: Session) -> None:
        reorder = _get_reorder_or_raise(reorder_id, sess)
        sess.delete(reorder)
        sess.flush()
        log_operation(logger, operation="delete_reorder", outcome="success", reorder_id=reorder_id)

    if session is not None:
        return _impl(session)
    with session_scope() as sess:
        return _impl(sess)
