"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rest_api.main import app
from rest_api.models import AddOn, Base, DiningTable, MenuItem
from shared.infrastructure.db import build_engine, get_db


# SQLite in-memory database shared by every session of a test
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = build_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    The context manager runs the lifespan, so the notification hub exists.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seed_table(db_session):
    """Create table number 4."""
    table = DiningTable(number=4)
    db_session.add(table)
    db_session.commit()
    db_session.refresh(table)
    return table


@pytest.fixture
def seed_item(db_session):
    """Create a dish priced at 20.00."""
    item = MenuItem(
        name="Lomo a lo pobre",
        description="Beef, fries, onions and fried eggs",
        price=Decimal("20.00"),
        category="dish",
    )
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


@pytest.fixture
def seed_drink(db_session):
    """Create a drink priced at 4.50."""
    item = MenuItem(name="Mote con huesillo", price=Decimal("4.50"), category="drink")
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


@pytest.fixture
def seed_addon(db_session):
    """Create an add-on priced at 3.00."""
    addon = AddOn(name="Extra cheese", price=Decimal("3.00"))
    db_session.add(addon)
    db_session.commit()
    db_session.refresh(addon)
    return addon
