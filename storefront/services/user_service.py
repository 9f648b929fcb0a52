# storefront/services/user_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import UserCreate, UserRoleUpdate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Profile maintenance for customers and user administration for admins.

    Identity (id, email) comes from the access token and never changes here.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def _rename(self, session: Session, user: User, name: str | None) -> User:
        if name is not None:
            user.name = name
        return self.repo.save(session, user)

    def complete_profile(
        self,
        session: Session,
        current_user: User,
        payload: UserCreate,
    ) -> User:
        """
        First-time completion after the row was auto-provisioned.

        An email in the payload is only a cross-check against the token.
        """
        if payload.email and payload.email.lower() != current_user.email.lower():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email cannot be changed",
            )
        return self._rename(session, current_user, payload.name)

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        return self._rename(session, current_user, payload.name)

    def list_users(self, session: Session, skip: int, limit: int) -> list[User]:
        return self.repo.list(session, skip=skip, limit=limit)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        user = self.repo.get_by_id(session, user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """Promote or demote; takes effect on the user's next request."""
        user = self.get_user(session, user_id)
        previous, user.role = user.role, payload.role
        user = self.repo.save(session, user)
        logger.info("User %s role changed %s -> %s", user.id, previous, user.role)
        return user
