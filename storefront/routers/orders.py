# storefront/routers/orders.py
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_admin, require_auth
from storefront.core.notifications import NotificationHub, get_notifier
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.common import ApiResponse
from storefront.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
)
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()


def get_order_service(
    notifier: NotificationHub = Depends(get_notifier),
) -> OrderService:
    """
    Build the service around the hub of the running application.
    """
    return OrderService(order_repo, cart_repo, product_repo, notifier)


# -------- User-facing endpoints --------


@router.post(
    "",
    response_model=ApiResponse[OrderRead],
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: OrderService = Depends(get_order_service),
):
    """
    Create an order from the current user's cart.

    The cart is emptied and inventory decremented on success.
    """
    order = service.create_order_from_cart(session, current_user.id, payload)
    return {"success": True, "data": OrderRead.model_validate(order)}


@router.get("", response_model=ApiResponse[list[OrderRead]])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: OrderService = Depends(get_order_service),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    List the authenticated user's orders, newest first.
    """
    orders, pagination = service.list_user_orders(
        session, current_user.id, page=page, limit=limit
    )
    return {
        "success": True,
        "count": len(orders),
        "pagination": pagination,
        "data": [OrderRead.model_validate(o) for o in orders],
    }


# -------- Admin listing (declared before /{order_id}) --------


@router.get(
    "/admin/all",
    response_model=ApiResponse[list[OrderRead]],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    service: OrderService = Depends(get_order_service),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: OrderStatus | None = Query(None, alias="status"),
    start_date: datetime | None = None,
    end_date: datetime | None = None,
):
    """
    List all orders (admin only), optionally filtered by status and
    creation date range.
    """
    orders, pagination = service.list_all_orders(
        session,
        page=page,
        limit=limit,
        status_filter=status_filter,
        start_date=start_date,
        end_date=end_date,
    )
    return {
        "success": True,
        "count": len(orders),
        "pagination": pagination,
        "data": [OrderRead.model_validate(o) for o in orders],
    }


@router.get("/{order_id}", response_model=ApiResponse[OrderRead])
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: OrderService = Depends(get_order_service),
):
    """
    Get a single order. Owner or admin.
    """
    order = service.get_order(session, current_user, order_id)
    return {"success": True, "data": OrderRead.model_validate(order)}


@router.put("/{order_id}/cancel", response_model=ApiResponse[OrderRead])
def cancel_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: OrderService = Depends(get_order_service),
):
    """
    Cancel a pending order. Stock is put back.
    """
    order = service.cancel_order(session, current_user, order_id)
    return {"success": True, "data": OrderRead.model_validate(order)}


# -------- Admin endpoints --------


@router.put(
    "/{order_id}",
    response_model=ApiResponse[OrderRead],
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    service: OrderService = Depends(get_order_service),
):
    """
    Update order status / tracking (admin only).

    Any status may be set; the owner receives an order-notification.
    """
    order = service.update_status(session, order_id, payload)
    return {"success": True, "data": OrderRead.model_validate(order)}
