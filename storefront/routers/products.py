# storefront/routers/products.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.product_repo import ProductFilters, ProductRepository
from storefront.schemas.common import ApiResponse
from storefront.schemas.product import (
    Category,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=ApiResponse[list[ProductRead]])
def list_products(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category: Category | None = None,
    brand: str | None = None,
    search: str | None = None,
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    featured: bool = False,
    sort: str | None = Query(None, description="e.g. price,-created_at"),
):
    """
    Paginated catalog of active products.
    """
    filters = ProductFilters(
        category=category,
        brand=brand,
        search=search,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
    )
    products, pagination = service.list_products(
        session, filters, sort=sort, page=page, limit=limit
    )
    return {
        "success": True,
        "count": len(products),
        "pagination": pagination,
        "data": [ProductRead.model_validate(p) for p in products],
    }


@router.get("/categories/list", response_model=ApiResponse[list[str]])
def list_categories(session: Session = Depends(get_session)):
    """Categories that currently have active products."""
    return {"success": True, "data": service.list_categories(session)}


@router.get("/brands/list", response_model=ApiResponse[list[str]])
def list_brands(session: Session = Depends(get_session)):
    """Brands that currently have active products."""
    return {"success": True, "data": service.list_brands(session)}


@router.get("/{product_id}", response_model=ApiResponse[ProductRead])
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    product = service.get_active_product(session, product_id)
    return {"success": True, "data": ProductRead.model_validate(product)}


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ApiResponse[ProductRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    product = service.create_product(session, payload)
    return {"success": True, "data": ProductRead.model_validate(product)}


@router.put(
    "/{product_id}",
    response_model=ApiResponse[ProductRead],
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    product = service.update_product(session, product_id, payload)
    return {"success": True, "data": ProductRead.model_validate(product)}


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Soft delete a product (admin only).
    """
    service.delete_product(session, product_id)
    return {"success": True, "message": "Product deleted successfully"}


@router.post(
    "/{product_id}/images",
    response_model=ApiResponse[ProductRead],
    dependencies=[Depends(require_admin)],
    summary="Upload one or more images for a product",
)
def upload_product_images(
    product_id: uuid.UUID,
    files: list[UploadFile] = File(...),
    alt: str = Form(""),
    session: Session = Depends(get_session),
):
    """
    Upload images to storage and append them to the product.

    - Accepts JPEG, PNG, WEBP.
    """
    payload: list[tuple[str, bytes]] = []
    for f in files:
        if not f.content_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing content-type for one of the uploaded files",
            )
        payload.append((f.content_type, f.file.read()))

    product = service.add_images(session, product_id, payload, alt=alt)
    return {"success": True, "data": ProductRead.model_validate(product)}
