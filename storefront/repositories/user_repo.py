# storefront/repositories/user_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.user import User


def default_display_name(email: str) -> str:
    """Local part of the address until the customer picks a name."""
    return email.split("@", 1)[0][:50] or email[:50]


class UserRepository:
    """
    Profile rows mirroring the identities found in access tokens.
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        return session.get(User, user_id)

    def get_or_provision(
        self,
        session: Session,
        user_id: uuid.UUID,
        email: str,
    ) -> User:
        """
        Profile for a token subject. First sight creates a plain customer.
        """
        user = self.get_by_id(session, user_id)
        if user is None:
            user = self.save(
                session,
                User(id=user_id, email=email, name=default_display_name(email)),
            )
        return user

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        stmt = (
            select(User)
            .order_by(col(User.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def save(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
