# storefront/repositories/product_repo.py
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from storefront.models.product import Product

# ?sort= keys accepted by the catalog, mapped to columns
SORTABLE_COLUMNS = {
    "price": Product.price,
    "name": Product.name,
    "created_at": Product.created_at,
    "average_rating": Product.average_rating,
}


@dataclass
class ProductFilters:
    category: str | None = None
    brand: str | None = None
    search: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    featured: bool = False


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    @staticmethod
    def _apply_filters(stmt, filters: ProductFilters):
        stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if filters.category:
            stmt = stmt.where(Product.category == filters.category)
        if filters.brand:
            stmt = stmt.where(Product.brand == filters.brand)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern),
                    col(Product.description).ilike(pattern),
                )
            )
        if filters.min_price is not None:
            stmt = stmt.where(Product.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(Product.price <= filters.max_price)
        if filters.featured:
            stmt = stmt.where(Product.is_featured == True)  # noqa: E712
        return stmt

    @staticmethod
    def _order_by(sort: str | None) -> list:
        """
        Parse "price,-created_at" into ORDER BY clauses.
        Unknown keys are ignored; default is newest first.
        """
        clauses = []
        for raw in (sort or "").split(","):
            key = raw.strip()
            if not key:
                continue
            descending = key.startswith("-")
            column = SORTABLE_COLUMNS.get(key.lstrip("-"))
            if column is None:
                continue
            clauses.append(col(column).desc() if descending else col(column).asc())
        return clauses or [col(Product.created_at).desc()]

    def search(
        self,
        session: Session,
        filters: ProductFilters,
        sort: str | None = None,
        skip: int = 0,
        limit: int = 12,
    ) -> tuple[list[Product], int]:
        """
        Active products matching `filters`, plus the total match count.
        """
        stmt = self._apply_filters(select(Product), filters)
        stmt = stmt.order_by(*self._order_by(sort)).offset(skip).limit(limit)
        products = list(session.exec(stmt).all())

        count_stmt = self._apply_filters(
            select(func.count()).select_from(Product), filters
        )
        total = session.exec(count_stmt).one()
        return products, int(total or 0)

    def distinct_values(self, session: Session, column) -> list[str]:
        stmt = (
            select(column)
            .where(Product.is_active == True)  # noqa: E712
            .distinct()
            .order_by(column)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        product.updated_at = datetime.now(timezone.utc)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def adjust_inventory(
        self,
        session: Session,
        product_id: uuid.UUID,
        delta: int,
    ) -> Product | None:
        """
        Add `delta` (negative to decrement) to a product's inventory and
        commit right away. No lower bound, no lock.
        """
        product = self.get_by_id(session, product_id)
        if product is None:
            return None
        product.inventory_quantity += delta
        return self.update(session, product)
