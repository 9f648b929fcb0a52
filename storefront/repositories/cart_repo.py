# storefront/repositories/cart_repo.py
import uuid
from sqlmodel import Session, select
from storefront.models.cart import Cart


class CartRepository:

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        return session.exec(stmt).first()

    def get_or_create(self, session: Session, user_id: uuid.UUID) -> Cart:
        """
        Return the user's cart, creating an empty one on first use.
        """
        cart = self.get_for_user(session, user_id)
        if cart is None:
            cart = self.save(session, Cart(user_id=user_id))
        return cart

    def save(self, session: Session, cart: Cart) -> Cart:
        """
        Persist the cart and its lines (added/removed lines cascade).
        """
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart
