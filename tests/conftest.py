"""
Test configuration and fixtures.
"""
import os
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Settings are read at import time, so configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "pos-test-signing-key-0123456789abcdefghijklmnop"

from src.main import app
from src.core.security import create_access_token, hash_password
from src.db.base import Base
from src.db.session import build_engine, get_db
from src.models import Category, MenuItem, User


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database per test."""
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    """Create a database session for the test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


def make_user(db: Session, username: str, role: str, password: str = "testpassword123", **kwargs) -> User:
    user = User(
        username=username,
        hashed_password=hash_password(password),
        full_name=kwargs.pop("full_name", username.title()),
        role=role,
        **kwargs,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}


@pytest.fixture
def admin_user(db: Session) -> User:
    return make_user(db, "admin", "admin", full_name="Administrator")


@pytest.fixture
def cashier_user(db: Session) -> User:
    return make_user(db, "cashier", "cashier", full_name="Front Till")


@pytest.fixture
def manager_user(db: Session) -> User:
    return make_user(db, "manager", "manager", full_name="Shift Manager")


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return auth_headers_for(admin_user)


@pytest.fixture
def manager_headers(manager_user: User) -> dict:
    return auth_headers_for(manager_user)


@pytest.fixture
def cashier_headers(cashier_user: User) -> dict:
    return auth_headers_for(cashier_user)


@pytest.fixture
def category(db: Session) -> Category:
    category = Category(name="SHAWARMA", display_order=1)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def menu_item(db: Session, category: Category) -> MenuItem:
    """Tracked item: 10 in stock, low-stock threshold 5."""
    item = MenuItem(
        category_id=category.id,
        name="Chicken Shawarma",
        code="SHW001",
        price=Decimal("12.00"),
        track_stock=True,
        stock_quantity=10,
        low_stock_threshold=5,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@pytest.fixture
def untracked_item(db: Session, category: Category) -> MenuItem:
    item = MenuItem(
        category_id=category.id,
        name="Garlic Sauce",
        code="EXT001",
        price=Decimal("2.00"),
        track_stock=False,
        stock_quantity=0,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item
