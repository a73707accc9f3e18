"""
Event Service - Catering events and their packing lists.

This module provides:
- CRUD for events
- Status flags (print ready, finished) and notes
- Saving and reading an event's selected products
- Converting a stored packing list into aggregation selections

Session Management Pattern:
- All public functions accept session=None parameter
- If session provided, use it directly
- If session is None, create a new session via session_scope()
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from src.models import Event, EventProduct, Product
from src.services.database import session_scope
from src.services.dto_utils import to_decimal
from src.services.exceptions import EventNotFound, ProductNotFound, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.services.selection import Selection

logger = get_service_logger(__name__)

_EDITABLE_FIELDS = ("name", "type", "date", "end_date", "ft", "ka", "notes")


def _validate_event_data(data: Dict[str, Any], partial: bool = False) -> None:
    errors = []
    if not partial or "name" in data:
        if not (data.get("name") or "").strip():
            errors.append("Event name is required")

    start = data.get("date")
    end = data.get("end_date")
    if start is not None and not isinstance(start, date):
        errors.append("date must be a date")
    if end is not None and not isinstance(end, date):
        errors.append("end_date must be a date")
    if isinstance(start, date) and isinstance(end, date) and end < start:
        errors.append("end_date must not be before date")

    if errors:
        raise ValidationError(errors)


def _get_event_or_raise(event_id: int, session: Session) -> Event:
    event = session.get(Event, event_id)
    if event is None:
        raise EventNotFound(event_id)
    return event


def create_event(data: Dict[str, Any], session: Optional[Session] = None) -> Event:
    """
    Create an event.

    Args:
        data: name (required), type, date, end_date, ft, ka, notes
        session: Optional session for transaction sharing

    Returns:
        The created Event

    Raises:
        ValidationError: If the name is missing or the dates are inconsistent
    """
    _validate_event_data(data)

    def _impl(session: Session) -> Event:
        event = Event(
            name=data["name"].strip(),
            type=data.get("type") or "Catering",
            date=data.get("date"),
            end_date=data.get("end_date"),
            ft=data.get("ft"),
            ka=data.get("ka"),
            notes=data.get("notes"),
        )
        session.add(event)
        session.flush()
        log_operation(logger, operation="create_event", outcome="success", event_id=event.id)
        return event

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def get_event(event_id: int, session: Optional[Session] = None) -> Event:
    """
    Get an event by ID.

    Raises:
        EventNotFound: If the event does not exist
    """
    if session is not None:
        return _get_event_or_raise(event_id, session)
    with session_scope() as session:
        return _get_event_or_raise(event_id, session)


def list_events(include_finished: bool = True, session: Optional[Session] = None) -> List[Event]:
    """
    List events, newest first.

    Args:
        include_finished: If False, hide finished events
        session: Optional session for transaction sharing
    """

    def _impl(session: Session) -> List[Event]:
        query = session.query(Event)
        if not include_finished:
            query = query.filter(Event.finished.is_(False))
        return query.order_by(Event.created_at.desc(), Event.id.desc()).all()

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def update_event(event_id: int, data: Dict[str, Any], session: Optional[Session] = None) -> Event:
    """
    Update an event's editable fields.

    Raises:
        EventNotFound: If the event does not exist
        ValidationError: If the resulting data is invalid
    """

    def _impl(session: Session) -> Event:
        event = _get_event_or_raise(event_id, session)
        merged = {name: getattr(event, name) for name in _EDITABLE_FIELDS}
        merged.update({k: v for k, v in data.items() if k in _EDITABLE_FIELDS})
        _validate_event_data(merged)

        event.update_from_dict(merged)
        event.name = merged["name"].strip()
        session.flush()
        log_operation(logger, operation="update_event", outcome="success", event_id=event_id)
        return event

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def delete_event(event_id: int, session: Optional[Session] = None) -> None:
    """
    Delete an event with its packing list and reorders.

    Raises:
        EventNotFound: If the event does not exist
    """

    def _impl(session: Session) -> None:
        event = _get_event_or_raise(event_id, session)
        session.delete(event)
        session.flush()
        log_operation(logger, operation="delete_event", outcome="success", event_id=event_id)

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def _set_flag(event_id: int, flag: str, value: bool, session: Optional[Session]) -> Event:
    def _impl(session: Session) -> Event:
        event = _get_event_or_raise(event_id, session)
        setattr(event, flag, bool(value))
        session.flush()
        return event

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def set_print_ready(event_id: int, is_ready: bool, session: Optional[Session] = None) -> Event:
    """Mark an event's packing list as ready (or not ready) to print."""
    return _set_flag(event_id, "print_ready", is_ready, session)


def set_finished(event_id: int, is_finished: bool, session: Optional[Session] = None) -> Event:
    """Mark an event as finished (or reopen it)."""
    return _set_flag(event_id, "finished", is_finished, session)


def update_event_notes(event_id: int, notes: str, session: Optional[Session] = None) -> Event:
    """Replace an event's special information text."""

    def _impl(session: Session) -> Event:
        event = _get_event_or_raise(event_id, session)
        event.notes = notes
        session.flush()
        return event

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def save_event_products(
    event_id: int,
    products: Iterable[Dict[str, Any]],
    session: Optional[Session] = None,
) -> List[EventProduct]:
    """
    Replace an event's packing list.

    The previous list is deleted and the new one inserted in the same
    transaction. Entries with quantity <= 0 are dropped; repeated products
    are summed.

    Args:
        event_id: Event to save for
        products: Dicts with product_id, quantity and optional unit
            (defaults to the product's unit)
        session: Optional session for transaction sharing

    Returns:
        The stored EventProduct rows

    Raises:
        EventNotFound: If the event does not exist
        ProductNotFound: If a product does not exist
        ValidationError: If a quantity is not a number
    """

    def _impl(session: Session) -> List[EventProduct]:
        event = _get_event_or_raise(event_id, session)

        rows: Dict[int, EventProduct] = {}
        for entry in products:
            quantity = to_decimal(entry.get("quantity"), field="quantity")
            if quantity <= 0:
                continue
            product_id = entry["product_id"]
            product = session.get(Product, product_id)
            if product is None:
                raise ProductNotFound(product_id)

            if product_id in rows:
                rows[product_id].quantity += quantity
                continue
            rows[product_id] = EventProduct(
                product_id=product_id,
                quantity=quantity,
                unit=entry.get("unit") or product.unit,
            )

        event.event_products.clear()
        session.flush()
        event.event_products.extend(rows.values())
        session.flush()

        log_operation(
            logger,
            operation="save_event_products",
            outcome="success",
            event_id=event_id,
            product_count=len(rows),
        )
        return list(event.event_products)

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def get_event_products(event_id: int, session: Optional[Session] = None) -> List[EventProduct]:
    """
    Get an event's packing list.

    Raises:
        EventNotFound: If the event does not exist
    """

    def _impl(session: Session) -> List[EventProduct]:
        event = _get_event_or_raise(event_id, session)
        return list(event.event_products)

    if session is not None:
        return _impl(session)
    with session_scope() as session:
        return _impl(session)


def get_event_selections(event_id: int, session: Optional[Session] = None) -> List[Selection]:
    """
    Convert an event's packing list into aggregation selections.

    Raises:
        EventNotFound: If the event does not exist
    """
    return [
        Selection(
            product_id=row.product_id,
            product_name=row.product.name,
            quantity=to_decimal(row.quantity),
            unit=row.unit,
        )
        for row in get_event_products(event_id, session=session)
    ]
