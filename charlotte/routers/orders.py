# charlotte/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status

from charlotte.core.auth import get_gateway, require_admin, require_auth
from charlotte.core.gateway import Gateway
from charlotte.models.user import User
from charlotte.repositories.order_repo import OrderRepository
from charlotte.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatusUpdate,
    StatusFilter,
)
from charlotte.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

service = OrderService(OrderRepository())


# -------- User-facing endpoints --------


@router.post(
    "",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
def place_order(
    payload: OrderCreate,
    gateway: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_auth),
):
    """
    Place an order for the current user.

    valor_total is the sum of the given lines, fixed at creation.
    """
    return service.place_order(gateway, current_user.id, payload)


@router.get("/me", response_model=list[OrderRead])
def list_my_orders(
    status_filter: StatusFilter = Query(default="todos", alias="status"),
    gateway: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_auth),
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(gateway, current_user.id, status_filter)


@router.get("/me/{order_id}", response_model=OrderRead)
def get_my_order(
    order_id: uuid.UUID,
    gateway: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_auth),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(gateway, current_user.id, order_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    q: str = "",
    status_filter: StatusFilter = Query(default="todos", alias="status"),
    gateway: Gateway = Depends(get_gateway),
):
    """
    List all orders (admin only).

    - `q` matches the order id or the customer's name.
    """
    return service.list_all_orders(gateway, q, status_filter)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    gateway: Gateway = Depends(get_gateway),
):
    """
    Set the status of an order (admin only).
    """
    return service.update_status(gateway, order_id, payload)
