# storefront/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, Relationship

from storefront.core.pricing import PriceSnapshot


class Order(SQLModel, table=True):
    """
    Finalized purchase.

    Everything except `status`, `tracking_number` and `notes` is fixed
    when the order is created from a cart:
      total_price == items_price + tax_price + shipping_price
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_number: str = Field(unique=True, index=True)

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # {"street", "city", "state", "zip_code", "country"}
    shipping_address: dict = Field(sa_column=Column(JSON, nullable=False))
    billing_address: dict = Field(sa_column=Column(JSON, nullable=False))

    # credit_card | debit_card | paypal | stripe (stored, never charged)
    payment_method: str

    items_price: float = Field(ge=0)
    tax_price: float = Field(ge=0)
    shipping_price: float = Field(ge=0)
    total_price: float = Field(ge=0)

    # pending | processing | shipped | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
    )

    tracking_number: str | None = None
    notes: str | None = Field(default=None, max_length=500)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    items: list["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order, frozen at purchase time.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    name: str
    price: float = Field(ge=0)
    image: str = ""
    quantity: int = Field(gt=0)

    order: Order | None = Relationship(back_populates="items")

    @property
    def snapshot(self) -> PriceSnapshot:
        return PriceSnapshot(name=self.name, price=self.price, image=self.image)

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)
