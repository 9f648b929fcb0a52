# storefront/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, Relationship

from storefront.core.pricing import PriceSnapshot


class Cart(SQLModel, table=True):
    """
    Shopping cart. Exactly one per user.

    total_items / total_price are derived from `items` and recomputed
    after every mutation (see services/cart_lines.py).
    """

    __tablename__ = "carts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    total_items: int = Field(default=0, ge=0)
    total_price: float = Field(default=0, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    items: list["CartItem"] = Relationship(
        back_populates="cart",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "CartItem.created_at",
        },
    )

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0


class CartItem(SQLModel, table=True):
    """
    One cart line: a product, the chosen options and a price snapshot
    taken when the product was added.
    """

    __tablename__ = "cart_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    cart_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="carts.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    # Snapshot of the product at add-time
    name: str
    price: float = Field(ge=0)
    image: str = ""

    quantity: int = Field(ge=1, le=99)

    selected_options: dict[str, str] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    cart: Cart | None = Relationship(back_populates="items")

    @property
    def snapshot(self) -> PriceSnapshot:
        return PriceSnapshot(name=self.name, price=self.price, image=self.image)

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)
