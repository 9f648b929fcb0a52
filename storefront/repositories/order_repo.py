# storefront/repositories/order_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import func
from sqlmodel import Session, col, select

from storefront.models.order import Order


class OrderRepository:
    """
    Data access layer for orders and order_items.

    Each write commits on its own: checkout is a sequence of independent
    writes, not one transaction.
    """

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Order], int]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(col(Order.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        count_stmt = (
            select(func.count()).select_from(Order).where(Order.user_id == user_id)
        )
        return list(session.exec(stmt).all()), int(session.exec(count_stmt).one() or 0)

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 20,
        status: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> tuple[list[Order], int]:
        conditions = []
        if status:
            conditions.append(Order.status == status)
        if start_date is not None:
            conditions.append(Order.created_at >= start_date)
        if end_date is not None:
            conditions.append(Order.created_at <= end_date)

        stmt = (
            select(Order)
            .where(*conditions)
            .order_by(col(Order.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(Order).where(*conditions)
        return list(session.exec(stmt).all()), int(session.exec(count_stmt).one() or 0)

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def create(self, session: Session, order: Order) -> Order:
        """
        Insert an Order together with its items.
        """
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def update(self, session: Session, order: Order) -> Order:
        order.updated_at = datetime.now(timezone.utc)
        session.add(order)
        session.commit()
        session.refresh(order)
        return order
