# storefront/schemas/common.py
import math
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlmodel import SQLModel

T = TypeVar("T")


class Pagination(SQLModel):
    page: int
    limit: int
    total: int
    pages: int


class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope used by every endpoint:

        {"success": true, "data": ..., "message": ..., "pagination": ...}
    """

    success: bool = True
    count: int | None = None
    data: T | None = None
    message: str | None = None
    pagination: Pagination | None = None


def make_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit) if limit else 0,
    )
