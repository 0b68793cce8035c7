"""
Catalog router for categories and menu items.

Provides endpoints for:
- Listing, creating, updating and deleting categories
- Listing, creating, updating and deleting menu items
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from src.core.config import get_settings
from src.core.deps import get_current_user, require_roles
from src.db.session import get_db
from src.models.inventory import MovementType
from src.models.menu import Category, MenuItem
from src.models.user import User
from src.schemas.menu import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    MenuItemCreate,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemUpdate,
)
from src.services.inventory import InventoryLedger

logger = logging.getLogger(__name__)

router = APIRouter(tags=["menu"])

manager_only = require_roles("admin", "manager")


# ============ Helper Functions ============

def get_category_or_404(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    return category


def get_menu_item_or_404(db: Session, item_id: int) -> MenuItem:
    item = db.execute(
        select(MenuItem).options(joinedload(MenuItem.category)).where(MenuItem.id == item_id)
    ).scalar_one_or_none()
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Menu item not found"
        )
    return item


def commit_or_409(db: Session, detail: str) -> None:
    """Commit, turning unique/foreign key violations into 409 Conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Catalog write rejected: {e.orig}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


# ============ Categories ============

@router.get("/categories", response_model=CategoryListResponse)
def list_categories(
    active_only: bool = Query(True, description="Only return active categories"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = select(Category)
    if active_only:
        query = query.where(Category.is_active.is_(True))
    query = query.order_by(Category.display_order.asc(), Category.name.asc())

    categories = db.execute(query).scalars().all()
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories],
        total=len(categories),
    )


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(manager_only),
):
    db_category = Category(
        name=category.name,
        display_order=category.display_order,
        is_active=category.is_active,
    )
    db.add(db_category)
    commit_or_409(db, f"Category '{category.name}' already exists")
    db.refresh(db_category)
    return db_category


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    update: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(manager_only),
):
    db_category = get_category_or_404(db, category_id)

    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(db_category, field, value)

    commit_or_409(db, "Category name already in use")
    db.refresh(db_category)
    return db_category


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(manager_only),
):
    """
    Delete a category and its menu items.

    Refused while any of its items has stock history.
    """
    db_category = get_category_or_404(db, category_id)
    db.delete(db_category)
    commit_or_409(db, "Category has items with stock history; deactivate it instead")


# ============ Menu Items ============

@router.get("/menu-items", response_model=MenuItemListResponse)
def list_menu_items(
    category_id: Optional[int] = Query(None, description="Only items in this category"),
    available_only: bool = Query(True, description="Only return items on sale"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List menu items in till order (category, then item display order, then name)."""
    query = (
        select(MenuItem)
        .join(Category, MenuItem.category_id == Category.id)
        .options(joinedload(MenuItem.category))
    )

    if category_id is not None:
        query = query.where(MenuItem.category_id == category_id)
    if available_only:
        query = query.where(MenuItem.is_available.is_(True))

    query = query.order_by(Category.display_order.asc(), MenuItem.display_order.asc(), MenuItem.name.asc())
    items = db.execute(query).scalars().all()

    return MenuItemListResponse(
        items=[MenuItemResponse.model_validate(item) for item in items],
        total=len(items),
    )


@router.get("/menu-items/{item_id}", response_model=MenuItemResponse)
def get_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_menu_item_or_404(db, item_id)


@router.post("/menu-items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    item: MenuItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(manager_only),
):
    """
    Add a menu item.

    A non-zero opening stock is booked as a `purchase` movement so the
    item's history starts from zero.
    """
    get_category_or_404(db, item.category_id)
    settings = get_settings()

    db_item = MenuItem(
        category_id=item.category_id,
        name=item.name,
        code=item.code or None,
        price=item.price,
        description=item.description,
        display_order=item.display_order,
        track_stock=item.track_stock,
        stock_quantity=0,
        low_stock_threshold=(
            item.low_stock_threshold
            if item.low_stock_threshold is not None
            else settings.DEFAULT_LOW_STOCK_THRESHOLD
        ),
    )
    db.add(db_item)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Item code '{item.code}' already in use")

    if item.stock_quantity > 0:
        InventoryLedger(db).record_movement(
            db_item.id,
            MovementType.PURCHASE,
            item.stock_quantity,
            notes="Opening stock",
            acting_user_id=current_user.id,
        )

    commit_or_409(db, f"Item code '{item.code}' already in use")
    return get_menu_item_or_404(db, db_item.id)


@router.put("/menu-items/{item_id}", response_model=MenuItemResponse)
def update_menu_item(
    item_id: int,
    update: MenuItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(manager_only),
):
    """
    Update catalog fields.

    Past order lines keep the name and rate they were sold at.
    """
    db_item = get_menu_item_or_404(db, item_id)
    changes = update.model_dump(exclude_unset=True)

    if "category_id" in changes and changes["category_id"] is not None:
        get_category_or_404(db, changes["category_id"])
    if "code" in changes:
        changes["code"] = changes["code"] or None

    for field, value in changes.items():
        setattr(db_item, field, value)

    commit_or_409(db, "Item code already in use")
    return get_menu_item_or_404(db, item_id)


@router.delete("/menu-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(manager_only),
):
    """Delete a menu item. Refused while it has stock history."""
    db_item = get_menu_item_or_404(db, item_id)
    db.delete(db_item)
    commit_or_409(db, "Item has stock history; mark it unavailable instead")
