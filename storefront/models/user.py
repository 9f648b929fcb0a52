# storefront/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Shopper or back-office account.

    Rows are keyed by the token subject and created lazily on the first
    authenticated request. Credentials are not stored.
    Carts and orders hang off `id`.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(primary_key=True, index=True)

    email: str = Field(unique=True, index=True)

    name: str = Field(max_length=50)

    # "user" (customer) or "admin"
    role: str = Field(default="user", index=True)

    # Deactivated accounts are refused even with a valid token
    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
