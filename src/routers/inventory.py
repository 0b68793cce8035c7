"""
Inventory router for stock levels, movements and history.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.core.deps import get_current_user
from src.db.session import get_db
from src.models.user import User
from src.schemas.inventory import (
    HistoryEntryResponse,
    HistoryResponse,
    MovementCreate,
    MovementResponse,
    StockItemListResponse,
    StockItemResponse,
    StockSet,
    StockSettingsUpdate,
)
from src.services.inventory import InventoryLedger


router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=StockItemListResponse)
def list_stock(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """All stock-tracked items in menu order."""
    items = InventoryLedger(db).list_tracked()
    return StockItemListResponse(
        items=[StockItemResponse.model_validate(i) for i in items],
        total=len(items),
    )


@router.get("/low-stock", response_model=StockItemListResponse)
def list_low_stock(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Items at or below their low-stock threshold.

    Most urgent (lowest stock) first.
    """
    items = InventoryLedger(db).get_low_stock()
    return StockItemListResponse(
        items=[StockItemResponse.model_validate(i) for i in items],
        total=len(items),
    )


@router.post("/{item_id}/movements", response_model=MovementResponse)
def record_movement(
    item_id: int,
    movement: MovementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Receive, write off or correct stock by a relative amount.

    `purchase` and `adjustment` add; `sale` and `waste` subtract and never
    take stock below zero.
    """
    result = InventoryLedger(db).apply_movement(
        item_id,
        movement.movement_type,
        movement.quantity,
        notes=movement.notes,
        acting_user_id=current_user.id,
        reference_id=movement.reference_id,
    )
    return MovementResponse(item_id=item_id, previous_stock=result.previous_stock, new_stock=result.new_stock)


@router.put("/{item_id}/stock", response_model=MovementResponse)
def set_stock(
    item_id: int,
    stock: StockSet,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Overwrite an item's stock with a counted value."""
    result = InventoryLedger(db).set_stock(
        item_id,
        stock.quantity,
        notes=stock.notes,
        acting_user_id=current_user.id,
    )
    return MovementResponse(item_id=item_id, previous_stock=result.previous_stock, new_stock=result.new_stock)


@router.patch("/{item_id}/settings", response_model=StockItemResponse)
def update_stock_settings(
    item_id: int,
    update: StockSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change the low-stock threshold or switch tracking on/off."""
    item = InventoryLedger(db).update_settings(
        item_id,
        low_stock_threshold=update.low_stock_threshold,
        track_stock=update.track_stock,
    )
    return StockItemResponse.model_validate(item)


@router.get("/{item_id}/history", response_model=HistoryResponse)
def stock_history(
    item_id: int,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Recent stock movements for an item, newest first."""
    entries = InventoryLedger(db).get_history(item_id, limit=limit)
    return HistoryResponse(
        movements=[HistoryEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )
