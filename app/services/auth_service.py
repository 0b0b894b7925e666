# app/services/auth_service.py
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.auth import RequestContext
from app.core.errors import (
    AccessDenied,
    DuplicateEmail,
    InvalidPassword,
    LoginUserNotFound,
    UserNotFound,
)
from app.core.security import TokenCodec, hash_password, verify_password
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import Role, UserLogin, UserRead, UserRegister

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: UserRead
    token: str


class AuthService:
    """
    Business logic for accounts.

    Responsibilities:
      - registration with password hashing and role downgrade
      - login (password verification) and token issuance
      - admin-only listing, role changes and deactivation

    Every public method opens one Session for its own duration.
    """

    def __init__(self, engine: Engine, repo: UserRepository, codec: TokenCodec):
        self.engine = engine
        self.repo = repo
        self.codec = codec

    # ----- internal helpers -----

    def _issue(self, user: UserRead) -> AuthResult:
        token = self.codec.issue(user.id, user.email, user.role)
        return AuthResult(user=user, token=token)

    @staticmethod
    def _require_admin(requesting: RequestContext) -> None:
        if requesting.role != "admin":
            raise AccessDenied()

    # ----- sign-up / sign-in -----

    def register(
        self,
        payload: UserRegister,
        requesting: RequestContext | None = None,
    ) -> AuthResult:
        """
        Create an account and issue its first token.

        Rules:
          - email must be unused (DuplicateEmail otherwise)
          - role "admin" only sticks when an admin is registering someone;
            anyone else asking for it silently gets "user"
        """
        role: Role = "user"
        if payload.role == "admin" and requesting is not None and requesting.is_admin:
            role = "admin"

        with Session(self.engine) as session:
            if self.repo.get_by_email(session, payload.email) is not None:
                raise DuplicateEmail()

            user = User(
                email=payload.email,
                password_hash=hash_password(payload.password),
                first_name=payload.first_name,
                last_name=payload.last_name,
                phone=payload.phone,
                role=role,
            )
            try:
                user = self.repo.create(session, user)
            except IntegrityError:
                # Lost a race against a concurrent registration.
                session.rollback()
                raise DuplicateEmail()
            result = UserRead.model_validate(user)

        logger.info("User registered: %s with role: %s", result.email, result.role)
        return self._issue(result)

    def login(self, payload: UserLogin) -> AuthResult:
        """
        Verify credentials of an active account.

        Unknown email and wrong password raise different classes so logs
        can tell them apart, but both render the same 401 to the caller.
        """
        with Session(self.engine) as session:
            user = self.repo.get_active_by_email(session, payload.email)
            if user is None:
                logger.info("Login failed for %s: no active account", payload.email)
                raise LoginUserNotFound()
            if not verify_password(payload.password, user.password_hash):
                logger.info("Login failed for %s: wrong password", payload.email)
                raise InvalidPassword()
            result = UserRead.model_validate(user)

        logger.info("User logged in: %s", result.email)
        return self._issue(result)

    # ----- lookups -----

    def get_user_by_id(self, user_id: int) -> UserRead | None:
        with Session(self.engine) as session:
            user = self.repo.get_by_id(session, user_id)
            return UserRead.model_validate(user) if user else None

    # ----- admin operations -----

    def get_all_users(self, requesting: RequestContext) -> list[UserRead]:
        """All accounts, newest first (admin only)."""
        self._require_admin(requesting)
        with Session(self.engine) as session:
            return [UserRead.model_validate(u) for u in self.repo.list_all(session)]

    def update_user_role(
        self,
        user_id: int,
        new_role: Role,
        requesting: RequestContext,
    ) -> UserRead:
        """
        Change a user's role (admin only).

        Role validation is enforced by the schema (Literal).
        """
        self._require_admin(requesting)
        with Session(self.engine) as session:
            user = self.repo.get_by_id(session, user_id)
            if user is None:
                raise UserNotFound()
            user.role = new_role
            user.updated_at = datetime.now(timezone.utc)
            user = self.repo.update(session, user)
            result = UserRead.model_validate(user)

        logger.info(
            "User role updated: %s -> %s by %s", result.email, new_role, requesting.email
        )
        return result

    def deactivate_user(self, user_id: int, requesting: RequestContext) -> bool:
        """
        Soft-deactivate an account (admin only).

        Returns False when no such user exists. Callers are responsible
        for refusing self-deactivation.
        """
        self._require_admin(requesting)
        with Session(self.engine) as session:
            user = self.repo.get_by_id(session, user_id)
            if user is None:
                return False
            user.is_active = False
            user.updated_at = datetime.now(timezone.utc)
            self.repo.update(session, user)

        logger.info("User deactivated: ID %s by %s", user_id, requesting.email)
        return True

    def bootstrap_admin(self, email: str | None, password: str | None) -> UserRead | None:
        """
        Create the first admin account if none exists yet.

        Controlled via BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD so a
        fresh deployment has a deterministic way to reach admin endpoints.
        No-op when either is unset or an admin is already present.
        """
        if not email or not password:
            return None

        with Session(self.engine) as session:
            if self.repo.has_admin(session):
                return None
            existing = self.repo.get_by_email(session, email)
            if existing is not None:
                existing.role = "admin"
                existing.is_active = True
                existing.updated_at = datetime.now(timezone.utc)
                user = self.repo.update(session, existing)
            else:
                user = self.repo.create(
                    session,
                    User(email=email, password_hash=hash_password(password), role="admin"),
                )
            result = UserRead.model_validate(user)

        logger.info("Bootstrap admin ready: %s", result.email)
        return result
