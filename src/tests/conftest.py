"""Pytest configuration and fixtures for service layer tests."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from src.models import Event, PackagingUnit, Product, RecipeLine
from src.models.base import Base
from src.services.catalog_storage import InMemoryCatalogStorage


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    # Create in-memory SQLite database for testing
    engine = create_engine("sqlite:///:memory:", echo=False)

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import src.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    # Restore original session factory
    db_module.get_session_factory = original_get_session


@pytest.fixture
def burger_storage():
    """In-memory catalog for the burger/wrap scenario.

    Burger (1): 1 Bun + 150 g Patty
    Wrap (2): 1 Bun
    Bun (10): packed 20 Stück per Sack
    Patty (11): packed 1000 g per Packung
    """
    storage = InMemoryCatalogStorage()
    storage.add_product(1, "Burger", "Stück", category="Essen")
    storage.add_product(2, "Wrap", "Stück", category="Essen")
    storage.add_product(10, "Bun", "Stück", category="Backwaren")
    storage.add_product(11, "Patty", "g", category="Fleisch")
    storage.add_recipe_line(1, 10, Decimal("1"))
    storage.add_recipe_line(1, 11, Decimal("150"))
    storage.add_recipe_line(2, 10, Decimal("1"))
    storage.set_packaging(10, Decimal("20"), "Sack")
    storage.set_packaging(11, Decimal("1000"), "Packung")
    return storage


@pytest.fixture
def burger_catalog(test_db):
    """The burger/wrap scenario as database rows (same IDs as burger_storage)."""
    session = test_db()
    session.add_all(
        [
            Product(id=1, name="Burger", unit="Stück"),
            Product(id=2, name="Wrap", unit="Stück"),
            Product(id=10, name="Bun", unit="Stück"),
            Product(id=11, name="Patty", unit="g"),
        ]
    )
    session.flush()
    session.add_all(
        [
            RecipeLine(product_id=1, ingredient_id=10, amount=Decimal("1"), unit="Stück"),
            RecipeLine(product_id=1, ingredient_id=11, amount=Decimal("150"), unit="g"),
            RecipeLine(product_id=2, ingredient_id=10, amount=Decimal("1"), unit="Stück"),
            PackagingUnit(product_id=10, amount_per_package=Decimal("20"), packaging_label="Sack"),
            PackagingUnit(
                product_id=11, amount_per_package=Decimal("1000"), packaging_label="Packung"
            ),
        ]
    )
    session.commit()
    return session


@pytest.fixture
def sample_event(test_db):
    """An event without products."""
    session = test_db()
    event = Event(name="Sommerfest", type="Catering", date=date(2025, 6, 14))
    session.add(event)
    session.commit()
    return event
