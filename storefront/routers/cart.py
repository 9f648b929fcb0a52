# storefront/routers/cart.py
import json
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemAdd, CartItemUpdate, CartMerge, CartRead
from storefront.schemas.common import ApiResponse
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


def _parse_options(raw: str | None) -> dict[str, str]:
    """Options arrive as a JSON object in the query string."""
    if not raw:
        return {}
    try:
        options = json.loads(raw)
    except json.JSONDecodeError:
        options = None
    if not isinstance(options, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="options must be a JSON object",
        )
    return {str(k): str(v) for k, v in options.items()}


@router.get("", response_model=ApiResponse[CartRead])
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get the current user's cart, creating an empty one on first access.
    """
    cart = service.get_cart(session, current_user.id)
    return {"success": True, "data": CartRead.model_validate(cart)}


@router.post("", response_model=ApiResponse[CartRead])
def add_to_cart(
    payload: CartItemAdd,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add product to the current user's cart.

    Returns the updated cart.
    """
    cart = service.add_item(session, current_user.id, payload)
    return {"success": True, "data": CartRead.model_validate(cart)}


@router.put("", response_model=ApiResponse[CartRead])
def update_cart_item(
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Set the quantity of a cart line. quantity=0 removes it.
    """
    cart = service.update_item(session, current_user.id, payload)
    return {"success": True, "data": CartRead.model_validate(cart)}


@router.delete("/{product_id}", response_model=ApiResponse[CartRead])
def remove_cart_item(
    product_id: uuid.UUID,
    options: str | None = Query(None, description='JSON object, e.g. {"size":"M"}'),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove a product line (matched with its options) from the cart.
    """
    cart = service.remove_item(
        session, current_user.id, product_id, _parse_options(options)
    )
    return {"success": True, "data": CartRead.model_validate(cart)}


@router.delete("", response_model=ApiResponse[CartRead])
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Clear the entire cart.
    """
    cart = service.clear_cart(session, current_user.id)
    return {
        "success": True,
        "message": "Cart cleared successfully",
        "data": CartRead.model_validate(cart),
    }


@router.post("/merge", response_model=ApiResponse[CartRead])
def merge_guest_cart(
    payload: CartMerge,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Merge a guest cart into the user's cart after login.
    """
    cart = service.merge_guest_cart(session, current_user.id, payload)
    return {"success": True, "data": CartRead.model_validate(cart)}
