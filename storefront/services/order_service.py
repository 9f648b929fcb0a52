# storefront/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.auth import is_admin
from storefront.core.notifications import (
    ADMIN_ROOM,
    ORDER_NOTIFICATION,
    STOCK_UPDATE,
    NotificationHub,
)
from storefront.core.pricing import compute_charges, subtotal_of
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.common import Pagination, make_pagination
from storefront.schemas.order import OrderCreate, OrderStatusUpdate
from storefront.services import cart_lines

logger = logging.getLogger(__name__)


def generate_order_number() -> str:
    now = datetime.now(timezone.utc)
    return f"ORD-{now:%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


def _freeze_line(line: CartItem) -> OrderItem:
    snapshot = line.snapshot
    return OrderItem(
        product_id=line.product_id,
        name=snapshot.name,
        price=snapshot.price,
        image=snapshot.image,
        quantity=line.quantity,
    )


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from cart (checkout)
      - Validate cart lines against live products (active, stock)
      - Compute charges from the cart's price snapshots
      - Decrement inventory, clear cart, notify back office
      - Cancellation with inventory restore
      - Admin status updates with owner notification
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        notifier: NotificationHub,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.notifier = notifier

    def _get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> Order:
        """
        Convert the current user's cart into an Order.

        Checks (first failure wins, nothing written yet):
          1. Cart exists and is not empty.
          2. Every line's product is active with enough inventory.

        Writes, each committed on its own:
          3. Order with frozen lines and charges, status 'pending'.
          4. Inventory decrement per line.
          5. Cart cleared.
        Then a stock-update event goes to the admin room.

        A failure between 3 and 5 is not rolled back.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is None or cart.is_empty:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        for line in cart.items:
            product = self.product_repo.get_by_id(session, line.product_id)
            if (
                product is None
                or not product.is_active
                or product.inventory_quantity < line.quantity
            ):
                name = product.name if product is not None else line.name
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Insufficient stock for {name}",
                )

        charges = compute_charges(subtotal_of(cart.items))
        purchased = [(line.product_id, line.quantity) for line in cart.items]

        shipping_address = payload.shipping_address.model_dump()
        billing_address = (
            payload.billing_address.model_dump()
            if payload.billing_address is not None
            else shipping_address
        )

        order = Order(
            order_number=generate_order_number(),
            user_id=user_id,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payload.payment_method,
            items_price=charges.items_price,
            tax_price=charges.tax_price,
            shipping_price=charges.shipping_price,
            total_price=charges.total_price,
            status="pending",
            notes=payload.notes,
            items=[_freeze_line(line) for line in cart.items],
        )
        order = self.order_repo.create(session, order)
        logger.info(
            "Order %s created for user %s (total %.2f)",
            order.order_number,
            user_id,
            order.total_price,
        )

        for product_id, quantity in purchased:
            self.product_repo.adjust_inventory(session, product_id, -quantity)

        cart_lines.clear(cart)
        self.cart_repo.save(session, cart)

        self.notifier.publish(
            ADMIN_ROOM,
            STOCK_UPDATE,
            {
                "message": "Product stock updated after order",
                "order_id": str(order.id),
                "product_ids": [str(product_id) for product_id, _ in purchased],
            },
        )
        return order

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Order], Pagination]:
        """
        List orders for the given user, newest first.
        """
        orders, total = self.order_repo.list_for_user(
            session, user_id, skip=(page - 1) * limit, limit=limit
        )
        return orders, make_pagination(page, limit, total)

    def get_order(
        self,
        session: Session,
        current_user: User,
        order_id: uuid.UUID,
    ) -> Order:
        """
        Get a single order. Owners and admins only.
        """
        order = self._get_order(session, order_id)
        if order.user_id != current_user.id and not is_admin(current_user):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to access this order",
            )
        return order

    def cancel_order(
        self,
        session: Session,
        current_user: User,
        order_id: uuid.UUID,
    ) -> Order:
        """
        Cancel a pending order and put its quantities back in stock.

        Only the owner may cancel, and only while status is 'pending'.
        """
        order = self._get_order(session, order_id)

        if order.user_id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to cancel this order",
            )

        if order.status != "pending":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Order cannot be cancelled at this stage",
            )

        restocked = [(item.product_id, item.quantity) for item in order.items]
        for product_id, quantity in restocked:
            self.product_repo.adjust_inventory(session, product_id, quantity)

        order.status = "cancelled"
        order = self.order_repo.update(session, order)
        logger.info("Order %s cancelled by user %s", order.order_number, current_user.id)
        return order

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        page: int = 1,
        limit: int = 20,
        status_filter: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> tuple[list[Order], Pagination]:
        orders, total = self.order_repo.list_all(
            session,
            skip=(page - 1) * limit,
            limit=limit,
            status=status_filter,
            start_date=start_date,
            end_date=end_date,
        )
        return orders, make_pagination(page, limit, total)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        """
        Admin update. Status may be set to any value; the owner is
        notified on their own room.
        """
        order = self._get_order(session, order_id)

        if payload.status is not None:
            order.status = payload.status
        if payload.tracking_number is not None:
            order.tracking_number = payload.tracking_number
        if payload.notes is not None:
            order.notes = payload.notes

        order = self.order_repo.update(session, order)
        logger.info("Order %s status set to %s", order.order_number, order.status)

        if payload.status is not None:
            self.notifier.publish(
                str(order.user_id),
                ORDER_NOTIFICATION,
                {
                    "order_id": str(order.id),
                    "status": order.status,
                    "message": f"Order {order.order_number} status updated to {order.status}",
                },
            )
        return order
