# storefront/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    - never hard-deleted: DELETE flips is_active to False
    - inventory_quantity is decremented on checkout and restored on cancel
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str = Field(max_length=1000)

    price: float = Field(ge=0)

    # see schemas.product.Category
    category: str = Field(index=True)

    brand: str = Field(index=True)

    # [{"url": ..., "alt": ...}, ...]
    images: list[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    inventory_quantity: int = Field(
        default=0,
        description="How many units currently in stock",
    )

    low_stock_threshold: int = Field(default=10, ge=0)

    specifications: dict | None = Field(default=None, sa_column=Column(JSON))

    weight: float | None = Field(default=None, ge=0)

    # {"length": ..., "width": ..., "height": ...}
    dimensions: dict | None = Field(default=None, sa_column=Column(JSON))

    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    is_active: bool = Field(default=True, index=True)
    is_featured: bool = Field(default=False, index=True)

    average_rating: float = Field(default=0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.inventory_quantity <= self.low_stock_threshold
