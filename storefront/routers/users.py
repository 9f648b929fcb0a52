# storefront/routers/users.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.core.auth import require_admin, require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.common import ApiResponse
from storefront.schemas.user import UserCreate, UserRead, UserRoleUpdate, UserUpdate
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


# -------- Self profile --------


@router.get("/me", response_model=ApiResponse[UserRead])
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.
    """
    return {"success": True, "data": UserRead.model_validate(current_user)}


@router.post("/me", response_model=ApiResponse[UserRead])
def complete_me(
    payload: UserCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    First-time profile completion.

    The profile row is auto-created on the first authenticated request,
    with a default name derived from the email and role="user".
    """
    user = service.complete_profile(session, current_user, payload)
    return {"success": True, "data": UserRead.model_validate(user)}


@router.patch("/me", response_model=ApiResponse[UserRead])
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    user = service.update_me(session, current_user, payload)
    return {"success": True, "data": UserRead.model_validate(user)}


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=ApiResponse[list[UserRead]],
    dependencies=[Depends(require_admin)],
)
def list_users(
    session: Session = Depends(get_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """
    List all users (admin only).
    """
    users = service.list_users(session, skip, limit)
    return {
        "success": True,
        "count": len(users),
        "data": [UserRead.model_validate(u) for u in users],
    }


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserRead],
    dependencies=[Depends(require_admin)],
)
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    user = service.get_user(session, user_id)
    return {"success": True, "data": UserRead.model_validate(user)}


@router.patch(
    "/{user_id}/role",
    response_model=ApiResponse[UserRead],
    dependencies=[Depends(require_admin)],
)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Update a user's role (admin only). Roles: user, admin.
    """
    user = service.update_role(session, user_id, payload)
    return {"success": True, "data": UserRead.model_validate(user)}
