# storefront/services/product_service.py
import logging
import re
import uuid
from typing import Iterable

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.storage_utils import generate_filename, upload_to_storage
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductFilters, ProductRepository
from storefront.schemas.common import Pagination, make_pagination
from storefront.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ProductService:
    """
    Business logic for the catalog.

    Responsibilities:
      - catalog queries (filters, sort, pagination)
      - slug generation & uniqueness
      - soft delete
      - image upload to storage
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "product"

    def _ensure_unique_slug(self, session: Session, base_slug: str) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.
        """
        slug = base_slug
        i = 2
        while self.repo.get_by_slug(session, slug) is not None:
            slug = f"{base_slug}-{i}"
            i += 1
        return slug

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    # ----- Catalog -----

    def list_products(
        self,
        session: Session,
        filters: ProductFilters,
        sort: str | None = None,
        page: int = 1,
        limit: int = 12,
    ) -> tuple[list[Product], Pagination]:
        products, total = self.repo.search(
            session,
            filters,
            sort=sort,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return products, make_pagination(page, limit, total)

    def list_categories(self, session: Session) -> list[str]:
        return self.repo.distinct_values(session, Product.category)

    def list_brands(self, session: Session) -> list[str]:
        return self.repo.distinct_values(session, Product.brand)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def get_active_product(self, session: Session, product_id: uuid.UUID) -> Product:
        """Public lookup: soft-deleted products are reported as missing."""
        product = self.get_product(session, product_id)
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    # ----- Admin -----

    def create_product(
        self,
        session: Session,
        payload: ProductCreate,
    ) -> Product:
        """
        Create a new product with a unique slug derived from its name.
        """
        slug = self._ensure_unique_slug(session, self._slugify(payload.name))
        data = payload.model_dump()
        product = Product(slug=slug, **data)
        product = self.repo.create(session, product)
        logger.info("Product %s created (%s)", product.id, product.slug)
        return product

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product. Only fields sent by the client change.
        """
        product = self.get_product(session, product_id)

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(product, field, value)

        return self.repo.update(session, product)

    def delete_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> Product:
        """
        Soft delete: the row stays (orders reference it), is_active=False.
        """
        product = self.get_product(session, product_id)
        product.is_active = False
        product = self.repo.update(session, product)
        logger.info("Product %s deactivated", product.id)
        return product

    def add_images(
        self,
        session: Session,
        product_id: uuid.UUID,
        files: Iterable[tuple[str, bytes]],
        alt: str = "",
    ) -> Product:
        """
        Upload one or more images and append them to the product gallery.

        Args:
            files: iterable of (content_type, file_bytes)

        Path pattern:
            products/<product_id>/<uuid>.<ext>
        """
        product = self.get_product(session, product_id)

        images = list(product.images)
        for content_type, file_bytes in files:
            ext = self._validate_and_get_ext(content_type, file_bytes)
            path = f"products/{product.id}/{generate_filename(ext)}"
            url = upload_to_storage(path, file_bytes, content_type)
            images.append({"url": url, "alt": alt or product.name})

        # New list so the JSON column is flagged dirty
        product.images = images
        return self.repo.update(session, product)
