# storefront/services/cart_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.cart import Cart
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemAdd, CartItemUpdate, CartMerge
from storefront.services import cart_lines

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence, active flag and stock before mutating
      - delegate the mutation itself to cart_lines
      - persist the cart after each mutation
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_active_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def _get_existing_cart(self, session: Session, user_id: uuid.UUID) -> Cart:
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart not found",
            )
        return cart

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> Cart:
        return self.cart_repo.get_or_create(session, user_id)

    def add_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemAdd,
    ) -> Cart:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist and be active (404)
          - requested quantity <= inventory_quantity (400)
        """
        product = self._get_active_product(session, payload.product_id)

        if product.inventory_quantity < payload.quantity:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Insufficient stock",
            )

        cart = self.cart_repo.get_or_create(session, user_id)
        cart_lines.add_item(cart, product, payload.quantity, payload.options)
        return self.cart_repo.save(session, cart)

    def update_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> Cart:
        """
        Set the quantity of a cart line; 0 removes it.

        Stock is re-checked only when the quantity grows.
        """
        cart = self._get_existing_cart(session, user_id)

        if payload.quantity > 0:
            line = cart_lines.find_line(cart, payload.product_id, payload.options)
            if line is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Item not found in cart",
                )
            if payload.quantity > line.quantity:
                product = self.product_repo.get_by_id(session, payload.product_id)
                if product and product.inventory_quantity < payload.quantity:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Insufficient stock",
                    )

        cart_lines.update_quantity(
            cart, payload.product_id, payload.quantity, payload.options
        )
        return self.cart_repo.save(session, cart)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        options: dict[str, str] | None = None,
    ) -> Cart:
        cart = self._get_existing_cart(session, user_id)
        cart_lines.remove_item(cart, product_id, options)
        return self.cart_repo.save(session, cart)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> Cart:
        cart = self._get_existing_cart(session, user_id)
        cart_lines.clear(cart)
        return self.cart_repo.save(session, cart)

    def merge_guest_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartMerge,
    ) -> Cart:
        """
        Merge lines collected while anonymous into the user's cart.

        Lines whose product is missing, inactive or short on stock are
        skipped silently.
        """
        cart = self.cart_repo.get_or_create(session, user_id)

        skipped = 0
        for guest_line in payload.guest_cart:
            product = self.product_repo.get_by_id(session, guest_line.product)
            if (
                product is None
                or not product.is_active
                or product.inventory_quantity < guest_line.quantity
            ):
                skipped += 1
                continue
            cart_lines.add_item(
                cart, product, guest_line.quantity, guest_line.selected_options
            )

        if skipped:
            logger.info("Skipped %d guest cart lines for user %s", skipped, user_id)

        return self.cart_repo.save(session, cart)
