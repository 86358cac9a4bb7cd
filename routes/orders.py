from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging

from utils.database import get_db
from utils.auth import get_current_user, require_admin
from models.user import User
from models.menu import MenuItem
from models.franchise import Store
from models.order import Order, OrderItem
from schemas.order import (
    MenuItemCreate,
    MenuItemResponse,
    OrderCreate,
    OrderCreatedResponse,
    OrderHistoryResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/order", tags=["orders"])

ORDERS_PER_PAGE = 10


def get_menu_items(db: Session) -> List[MenuItem]:
    return db.query(MenuItem).order_by(MenuItem.id).all()


@router.get("/menu", response_model=List[MenuItemResponse])
async def get_menu(db: Session = Depends(get_db)):
    return get_menu_items(db)


@router.put("/menu", response_model=List[MenuItemResponse])
async def add_menu_item(
    item: MenuItemCreate,
    db: Session = Depends(get_db),
    current_user: User = require_admin("unable to add menu item")
):
    try:
        db_item = MenuItem(**item.model_dump())
        db.add(db_item)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}"
        )

    logger.info(f"Menu item added: {db_item.title} (ID: {db_item.id})")
    return get_menu_items(db)


@router.get("", response_model=OrderHistoryResponse)
async def list_orders(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    The caller's own orders, newest first.
    """
    orders = (
        db.query(Order)
        .filter(Order.user_id == current_user.id)
        .order_by(Order.id.desc())
        .offset((page - 1) * ORDERS_PER_PAGE)
        .limit(ORDERS_PER_PAGE)
        .all()
    )
    return {"user_id": current_user.id, "orders": orders, "page": page}


@router.post("", response_model=OrderCreatedResponse)
async def create_order(
    order: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    store = db.query(Store).filter(
        Store.id == order.store_id,
        Store.franchise_id == order.franchise_id
    ).first()
    if not store:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="store not found"
        )

    menu_ids = {item.menu_id for item in order.items}
    menu = {m.id: m for m in db.query(MenuItem).filter(MenuItem.id.in_(menu_ids)).all()}
    missing = sorted(menu_ids - menu.keys())
    if missing:
        logger.warning(f"Order from user {current_user.id} references unknown menu items {missing}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"unknown menu item {missing[0]}"
        )

    try:
        db_order = Order(
            user_id=current_user.id,
            franchise_id=order.franchise_id,
            store_id=order.store_id,
            items=[
                OrderItem(
                    menu_id=item.menu_id,
                    description=menu[item.menu_id].title,
                    price=menu[item.menu_id].price,
                    quantity=item.quantity,
                )
                for item in order.items
            ],
        )
        db.add(db_order)
        db.commit()
        db.refresh(db_order)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create order for user {current_user.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to create order"
        )

    logger.info(f"Order {db_order.id} created for user {current_user.id} at store {store.id}")
    return {"order": db_order}
