# app/repositories/user_repo.py
from sqlmodel import Session, col, select

from app.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Queries -----

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def get_active_by_email(self, session: Session, email: str) -> User | None:
        """Return the active User with this email, or None."""
        stmt = select(User).where(User.email == email, col(User.is_active).is_(True))
        return session.exec(stmt).first()

    def list_all(self, session: Session) -> list[User]:
        """All users, newest first."""
        stmt = select(User).order_by(col(User.created_at).desc(), col(User.id).desc())
        return list(session.exec(stmt).all())

    def has_admin(self, session: Session) -> bool:
        stmt = select(User.id).where(User.role == "admin")
        return session.exec(stmt).first() is not None

    # ----- Mutations -----

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
