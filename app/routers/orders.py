# app/routers/orders.py
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_admin, require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.stats_repo import StatsRepository
from app.schemas.order import (
    AdminOrderPage,
    OrderCreate,
    OrderCreated,
    OrderPage,
    OrderRead,
    OrderSortField,
    OrderStatus,
    OrderStatusUpdate,
    OrderStatusUpdated,
    SortOrder,
)
from app.schemas.stats import OrderStats
from app.services.order_service import OrderService
from app.services.stats_service import StatsService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, cart_repo, product_repo)
stats_service = StatsService(StatsRepository())


# -------- User-facing endpoints --------


@router.post(
    "/create",
    response_model=OrderCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Create an order from the current user's cart.

    The payment amount is computed on the server; any amount sent by
    the client is ignored.
    """
    order = service.create_order_from_cart(session, current_user.id, payload)
    return OrderCreated(message="Order created successfully", order=order)


@router.get("/user-orders", response_model=OrderPage)
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: OrderStatus | None = None,
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(session, current_user.id, page, limit, status)


# -------- Admin endpoints --------
# Declared before /{order_id} so the literal paths win.


@router.get(
    "/admin/orders",
    response_model=AdminOrderPage,
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: OrderStatus | None = None,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    sort_by: OrderSortField = "created_at",
    sort_order: SortOrder = "desc",
):
    """
    List all orders (admin only) with total count and revenue for the
    current filter. The date window applies when both bounds are given.
    """
    return service.list_all_orders(
        session,
        page=page,
        limit=limit,
        status_filter=status,
        from_date=from_date,
        to_date=to_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get(
    "/stats/all",
    response_model=OrderStats,
    dependencies=[Depends(require_admin)],
)
def order_stats(session: Session = Depends(get_session)):
    """
    Order count, revenue, average order value and status distribution.
    """
    return stats_service.get_order_stats(session)


@router.put(
    "/{order_id}/status",
    response_model=OrderStatusUpdated,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).

      Pending -> Processing -> Shipped -> Delivered

      any non-Cancelled -> Cancelled (stock is restored)

      Cancelled -> (no change)
    """
    order = service.update_status(session, order_id, payload)
    return OrderStatusUpdated(message="Order status updated successfully", order=order)


@router.get("/{order_id}", response_model=OrderRead)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get a single order belonging to the current user.
    """
    return service.get_user_order(session, current_user.id, order_id)
