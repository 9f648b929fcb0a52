# storefront/core/auth.py
import logging
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

settings = get_settings()

# Missing header is not an error here; require_auth decides.
bearer_scheme = HTTPBearer(auto_error=False)

users = UserRepository()

ADMIN_ROLE = "admin"


class TokenClaims(BaseModel):
    """Claims the API relies on. Anything else in the token is ignored."""

    sub: uuid.UUID
    email: str


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry, then pull out `sub` and `email`.

    The audience claim is not checked.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
        claims = TokenClaims.model_validate(payload)
    except (JWTError, ValidationError):
        raise _unauthorized("Not authorized, token failed")

    if not claims.email:
        raise _unauthorized("Not authorized, token failed")
    return claims


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Optional identity: None for anonymous callers, otherwise the profile
    row for the token subject (created with role "user" on first sight).
    """
    if credentials is None:
        return None

    claims = decode_access_token(credentials.credentials)
    user = users.get_or_provision(session, claims.sub, claims.email)

    if not user.is_active:
        logger.info("Rejected token for deactivated user %s", user.id)
        raise _unauthorized("Account is deactivated")
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    if user is None:
        raise _unauthorized("Not authorized, no token")
    return user


def is_admin(user: User) -> bool:
    return user.role == ADMIN_ROLE


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Raises:
        HTTPException(403): caller is authenticated but not an admin.
    """
    if not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User role {user.role} is not authorized to access this route",
        )
    return user
