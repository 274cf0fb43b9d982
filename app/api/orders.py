"""Order endpoints."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from app.database import get_db, transaction
from app.errors import ValidationError
from app.models import Customer, Order, Recipe, active_only
from app.schemas.order import OrderCreate, OrderStatusUpdate, OrderResponse, OrderList
from app.services.catalog import get_live

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def order_to_response(order: Order) -> OrderResponse:
    response = OrderResponse.model_validate(order)
    response.customer_name = order.customer.name if order.customer else None
    response.recipe_name = order.recipe.name if order.recipe else None
    return response


def _orders_query(db: Session):
    return (
        active_only(db, Order)
        .options(selectinload(Order.customer), selectinload(Order.recipe))
        .order_by(Order.created_at.desc(), Order.id.desc())
    )


def _check_status(status: str) -> None:
    if status not in Order.STATUSES:
        raise ValidationError(f"Invalid status '{status}'. Must be one of: {', '.join(Order.STATUSES)}")


@router.get("", response_model=OrderList)
def list_orders(db: Session = Depends(get_db)):
    orders = _orders_query(db).all()
    return OrderList(orders=[order_to_response(o) for o in orders], count=len(orders))


@router.get("/active", response_model=OrderList)
def list_active_orders(db: Session = Depends(get_db)):
    """Orders still waiting for confirmation."""
    orders = _orders_query(db).filter(Order.status == Order.STATUS_PENDING).all()
    return OrderList(orders=[order_to_response(o) for o in orders], count=len(orders))


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return order_to_response(get_live(db, Order, order_id, "Order"))


@router.post("", response_model=OrderResponse, status_code=201)
def create_order(data: OrderCreate, db: Session = Depends(get_db)):
    """Create an order for a live customer and recipe. New orders start as pending."""
    _check_status(data.status)
    if data.status != Order.STATUS_PENDING:
        raise ValidationError(f"New orders start as pending, got '{data.status}'")
    get_live(db, Customer, data.customer_id, "Customer")
    get_live(db, Recipe, data.recipe_id, "Recipe")

    with transaction(db, "order creation"):
        order = Order(**data.model_dump())
        db.add(order)

    logger.info(f"Created order {order.id} for recipe {order.recipe_id}")
    return order_to_response(order)


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: int, data: OrderStatusUpdate, db: Session = Depends(get_db)):
    """
    Move an order forward: pending -> confirmed or pending -> cancelled.

    Confirmed and cancelled orders are final.
    """
    _check_status(data.status)
    order = get_live(db, Order, order_id, "Order")
    if not order.can_transition_to(data.status):
        raise ValidationError(f"Cannot change order status from {order.status} to {data.status}")

    with transaction(db, f"status change of order {order_id}"):
        order.status = data.status

    logger.info(f"Order {order_id} is now {order.status}")
    return order_to_response(order)


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    order = get_live(db, Order, order_id, "Order")
    with transaction(db, f"deletion of order {order_id}"):
        order.soft_delete()
    logger.info(f"Deleted order {order_id}")
    return None
