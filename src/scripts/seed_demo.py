"""
Seed a fresh database with the default catalog, restaurant settings and an
admin operator.

Safe to run repeatedly: existing rows are left alone.
"""
import os
import sys
from decimal import Decimal

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '../..'))

from sqlalchemy.orm import Session

from src.core.security import hash_password
from src.db.base import Base
from src.db.session import SessionLocal, engine
from src.models import Category, MenuItem, User
from src.services.settings import SettingsService

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"

DEFAULT_CATEGORIES = [
    ("SHAWARMA", 1),
    ("WRAP", 2),
    ("BURGER", 3),
    ("POTATO", 4),
    ("BREAKFAST", 5),
    ("BROAST", 6),
    ("DRINKS", 7),
    ("EXTRAS", 8),
]

# (category, name, code, price, display_order)
DEFAULT_MENU_ITEMS = [
    ("SHAWARMA", "Chicken Shawarma", "SHW001", "15.00", 1),
    ("SHAWARMA", "Beef Shawarma", "SHW002", "18.00", 2),
    ("SHAWARMA", "Mixed Shawarma", "SHW003", "20.00", 3),
    ("SHAWARMA", "Shawarma Plate", "SHW004", "25.00", 4),
    ("WRAP", "Chicken Wrap", "WRP001", "12.00", 1),
    ("WRAP", "Beef Wrap", "WRP002", "14.00", 2),
    ("WRAP", "Falafel Wrap", "WRP003", "10.00", 3),
    ("BURGER", "Classic Burger", "BRG001", "18.00", 1),
    ("BURGER", "Cheese Burger", "BRG002", "20.00", 2),
    ("BURGER", "Double Burger", "BRG003", "25.00", 3),
    ("BURGER", "Chicken Burger", "BRG004", "16.00", 4),
    ("BURGER", "Veggie Burger", "BRG005", "14.00", 5),
    ("POTATO", "French Fries (S)", "POT001", "5.00", 1),
    ("POTATO", "French Fries (M)", "POT002", "8.00", 2),
    ("POTATO", "French Fries (L)", "POT003", "12.00", 3),
    ("POTATO", "Loaded Fries", "POT004", "15.00", 4),
    ("POTATO", "Potato Wedges", "POT005", "10.00", 5),
    ("BREAKFAST", "Eggs & Toast", "BRK001", "12.00", 1),
    ("BREAKFAST", "Pancakes", "BRK002", "15.00", 2),
    ("BREAKFAST", "Full Breakfast", "BRK003", "25.00", 3),
    ("BREAKFAST", "Omelette", "BRK004", "14.00", 4),
    ("BROAST", "Broast 2 Pcs", "BRS001", "15.00", 1),
    ("BROAST", "Broast 4 Pcs", "BRS002", "28.00", 2),
    ("BROAST", "Broast 8 Pcs", "BRS003", "50.00", 3),
    ("BROAST", "Broast Meal", "BRS004", "35.00", 4),
    ("DRINKS", "Water", "DRK001", "2.00", 1),
    ("DRINKS", "Soft Drink", "DRK002", "5.00", 2),
    ("DRINKS", "Fresh Juice", "DRK003", "10.00", 3),
    ("DRINKS", "Tea", "DRK004", "3.00", 4),
    ("DRINKS", "Coffee", "DRK005", "8.00", 5),
    ("DRINKS", "Lemonade", "DRK006", "7.00", 6),
    ("EXTRAS", "Garlic Sauce", "EXT001", "2.00", 1),
    ("EXTRAS", "Tahini Sauce", "EXT002", "2.00", 2),
    ("EXTRAS", "Cheese Extra", "EXT003", "3.00", 3),
    ("EXTRAS", "Hummus", "EXT004", "8.00", 4),
    ("EXTRAS", "Pickles", "EXT005", "3.00", 5),
]


def seed_catalog(db: Session) -> int:
    """Insert default categories and items into an empty catalog. Returns items added."""
    if db.query(Category).count() == 0:
        for name, order in DEFAULT_CATEGORIES:
            db.add(Category(name=name, display_order=order))
        db.commit()

    if db.query(MenuItem).count() > 0:
        return 0

    category_ids = {c.name: c.id for c in db.query(Category).all()}
    added = 0
    for category, name, code, price, order in DEFAULT_MENU_ITEMS:
        if category not in category_ids:
            continue
        db.add(MenuItem(
            category_id=category_ids[category],
            name=name,
            code=code,
            price=Decimal(price),
            display_order=order,
        ))
        added += 1
    db.commit()
    return added


def seed_admin(db: Session) -> bool:
    """Create the default admin if there are no users. Returns True if created."""
    if db.query(User).count() > 0:
        return False

    db.add(User(
        username=DEFAULT_ADMIN_USERNAME,
        hashed_password=hash_password(DEFAULT_ADMIN_PASSWORD),
        full_name="Administrator",
        role="admin",
    ))
    db.commit()
    return True


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed_catalog(db)
        print(f"Menu items added: {added}")
        print(f"Settings added: {SettingsService(db).seed_defaults()}")
        if seed_admin(db):
            print(f"Default admin created (username: {DEFAULT_ADMIN_USERNAME}, password: {DEFAULT_ADMIN_PASSWORD})")
        else:
            print("Users already exist, admin not created.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
