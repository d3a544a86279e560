"""
Seed data for development and demos.
Creates a small menu, add-ons, tables and staff.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from rest_api.models import AddOn, DiningTable, Employee, MenuItem
from shared.config.constants import ItemCategory
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit

logger = get_logger(__name__)


DEMO_TABLE_COUNT = 8

DEMO_MENU = [
    {
        "name": "Grilled Picanha",
        "description": "Picanha with rice, beans and farofa",
        "price": Decimal("20.00"),
        "category": ItemCategory.DISH,
        "is_dish_of_day": True,
        "observation_info": "Meat doneness?",
    },
    {
        "name": "Chicken Parmigiana",
        "description": "Breaded chicken with tomato sauce and mozzarella",
        "price": Decimal("16.50"),
        "category": ItemCategory.DISH,
    },
    {
        "name": "Caesar Salad",
        "description": "Romaine, croutons, parmesan",
        "price": Decimal("9.90"),
        "category": ItemCategory.DISH,
    },
    {
        "name": "Lemonade",
        "description": "Fresh squeezed",
        "price": Decimal("4.50"),
        "category": ItemCategory.DRINK,
        "observation_info": "Sugar or no sugar?",
    },
    {
        "name": "Sparkling Water",
        "price": Decimal("3.00"),
        "category": ItemCategory.DRINK,
    },
]

DEMO_ADDONS = [
    ("Extra Cheese", Decimal("3.00")),
    ("Bacon", Decimal("4.00")),
    ("Fried Egg", Decimal("2.50")),
]

DEMO_EMPLOYEES = [
    ("Ana", "waiter"),
    ("Bruno", "cook"),
    ("Carla", "cashier"),
]


def seed(db: Session) -> bool:
    """
    Seed the demo catalog.
    Idempotent: does nothing if any menu item exists.

    Returns True if data was inserted.
    """
    if db.scalar(select(MenuItem.id).limit(1)):
        logger.info("Demo data already seeded, skipping")
        return False

    db.add_all(MenuItem(**item) for item in DEMO_MENU)
    db.add_all(AddOn(name=name, price=price) for name, price in DEMO_ADDONS)
    db.add_all(Employee(name=name, role=role) for name, role in DEMO_EMPLOYEES)

    existing_numbers = set(db.scalars(select(DiningTable.number)).all())
    db.add_all(
        DiningTable(number=n)
        for n in range(1, DEMO_TABLE_COUNT + 1)
        if n not in existing_numbers
    )

    safe_commit(db)
    logger.info(
        "Demo data seeded",
        items=len(DEMO_MENU),
        addons=len(DEMO_ADDONS),
        tables=DEMO_TABLE_COUNT,
        employees=len(DEMO_EMPLOYEES),
    )
    return True
