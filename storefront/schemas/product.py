# storefront/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Category = Literal[
    "electronics",
    "clothing",
    "books",
    "home",
    "sports",
    "beauty",
    "toys",
    "automotive",
    "other",
]


class ProductImage(SQLModel):
    url: str
    alt: str = ""

    @field_validator("url")
    @classmethod
    def must_be_http_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must be an http(s) URL")
        return v


class Dimensions(SQLModel):
    length: float | None = Field(default=None, ge=0)
    width: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)


class ProductCreate(SQLModel):
    """
    Payload for creating a product (admin).

    slug is derived from name.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    price: float = Field(ge=0)
    category: Category
    brand: str = Field(min_length=1)
    images: list[ProductImage] = Field(min_length=1)
    inventory_quantity: int = Field(ge=0)
    low_stock_threshold: int = Field(default=10, ge=0)
    specifications: dict[str, str] | None = None
    weight: float | None = Field(default=None, ge=0)
    dimensions: Dimensions | None = None
    tags: list[str] = []
    is_featured: bool = False

    @field_validator("name", "brand", "description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=1000)
    price: float | None = Field(default=None, ge=0)
    category: Category | None = None
    brand: str | None = Field(default=None, min_length=1)
    images: list[ProductImage] | None = Field(default=None, min_length=1)
    inventory_quantity: int | None = Field(default=None, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)
    specifications: dict[str, str] | None = None
    weight: float | None = Field(default=None, ge=0)
    dimensions: Dimensions | None = None
    tags: list[str] | None = None
    is_featured: bool | None = None
    is_active: bool | None = None

    @field_validator("name", "brand", "description")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    slug: str
    description: str
    price: float
    category: str
    brand: str
    images: list[ProductImage]
    inventory_quantity: int
    low_stock_threshold: int
    is_low_stock: bool
    specifications: dict[str, str] | None = None
    weight: float | None = None
    dimensions: Dimensions | None = None
    tags: list[str] = []
    is_active: bool
    is_featured: bool
    average_rating: float
    review_count: int
    created_at: datetime
    updated_at: datetime
