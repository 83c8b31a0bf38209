import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from orderdesk.core.security import get_current_user, require_admin
from orderdesk.db.session import get_db
from orderdesk import models
from orderdesk.schemas.orders import (
    OrderCreateRequest,
    OrderCreatedResponse,
    OrderOut,
    OrderPaidResponse,
    PaymentResult,
    SalesSummary,
)
from orderdesk.schemas.payments import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

ORDER_NOT_FOUND = "Order Not Found"


def _get_order_or_404(db: Session, order_id: int) -> models.Order:
    order = db.get(models.Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail=ORDER_NOT_FOUND)
    return order


@router.get("", response_model=List[OrderOut])
def list_orders(db: Session = Depends(get_db), _: models.User = Depends(require_admin)):
    return (
        db.query(models.Order)
        .options(selectinload(models.Order.user), selectinload(models.Order.items))
        .order_by(models.Order.created_at.desc(), models.Order.id.desc())
        .all()
    )


@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreateRequest,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    if not payload.order_items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    order = models.Order(
        user_id=user.id,
        shipping_address=payload.shipping_address.model_dump(),
        payment_method=payload.payment_method,
        items_price=payload.items_price,
        shipping_price=payload.shipping_price,
        tax_price=payload.tax_price,
        total_price=payload.total_price,
        is_paid=False,
        is_delivered=False,
    )
    for it in payload.order_items:
        order.items.append(models.OrderItem(
            product_id=it.product_id,
            name=it.name,
            quantity=it.quantity,
            image=it.image,
            price=it.price,
        ))
    db.add(order)
    db.commit()
    db.refresh(order)
    _ = order.items  # load before the session closes
    _ = order.user
    logger.info(f"Order {order.id} created for user {user.id}")

    return {"message": "New Order Created", "order": order}


@router.get("/summary", response_model=SalesSummary)
def summary(db: Session = Depends(get_db), _: models.User = Depends(require_admin)):
    num_users = db.query(func.count(models.User.id)).scalar() or 0

    num_orders, total_sales = db.query(
        func.count(models.Order.id),
        func.coalesce(func.sum(models.Order.total_price), 0),
    ).one()

    # group by calendar day of creation (UTC)
    day = func.date(models.Order.created_at)
    daily_rows = (
        db.query(day.label("day"), func.count(models.Order.id), func.coalesce(func.sum(models.Order.total_price), 0))
        .group_by(day)
        .order_by(day)
        .all()
    )

    category_rows = (
        db.query(models.Product.category, func.count(models.Product.id))
        .group_by(models.Product.category)
        .order_by(models.Product.category)
        .all()
    )

    return {
        "users": {"num_users": int(num_users)},
        "orders": {"num_orders": int(num_orders or 0), "total_sales": round(float(total_sales or 0), 2)},
        "daily_orders": [
            {"date": str(d), "orders": int(n), "sales": round(float(s or 0), 2)}
            for d, n, s in daily_rows
        ],
        "product_categories": [
            {"category": c, "count": int(n)} for c, n in category_rows
        ],
    }


@router.get("/mine", response_model=List[OrderOut])
def my_orders(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    return (
        db.query(models.Order)
        .options(selectinload(models.Order.user), selectinload(models.Order.items))
        .filter(models.Order.user_id == user.id)
        .order_by(models.Order.created_at.desc(), models.Order.id.desc())
        .all()
    )


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    order = _get_order_or_404(db, order_id)
    # other people's orders look the same as missing ones
    if order.user_id != user.id and user.role != "admin":
        raise HTTPException(status_code=404, detail=ORDER_NOT_FOUND)
    _ = order.items
    _ = order.user
    return order


@router.put("/{order_id}/deliver", response_model=MessageResponse)
def deliver_order(order_id: int, db: Session = Depends(get_db), _: models.User = Depends(get_current_user)):
    order = _get_order_or_404(db, order_id)
    order.is_delivered = True
    order.delivered_at = datetime.utcnow()
    db.add(order)
    db.commit()
    logger.info(f"Order {order.id} marked delivered")
    return {"message": "Order Delivered"}


@router.put("/{order_id}/pay", response_model=OrderPaidResponse)
def pay_order(
    order_id: int,
    payload: Optional[PaymentResult] = None,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_current_user),
):
    order = _get_order_or_404(db, order_id)
    order.is_paid = True
    order.paid_at = datetime.utcnow()
    if payload is not None:
        order.payment_result = payload.model_dump()
    db.add(order)
    db.commit()
    db.refresh(order)
    _ = order.items
    _ = order.user
    logger.info(f"Order {order.id} marked paid")
    return {"message": "Order Paid", "order": order}


@router.delete("/{order_id}", response_model=MessageResponse)
def delete_order(order_id: int, db: Session = Depends(get_db), _: models.User = Depends(require_admin)):
    order = _get_order_or_404(db, order_id)
    db.delete(order)
    db.commit()
    logger.info(f"Order {order_id} deleted")
    return {"message": "Order Deleted"}
