# app/core/auth.py
"""
Request authentication and authorization.

Every protected request walks the same guard chain:

    NoCredential -> TokenPresented -> TokenValid -> IdentityLoaded -> Authorized

Each guard reads and fills an `AuthAttempt`, and raises a typed failure to
stop the chain. Role checks are extra guards appended to the base chain, so
`require_admin` is the base chain plus one more step rather than a wrapper
around `require_auth`.

The user row is re-read on every request. A token stays cryptographically
valid until it expires; this re-check is what makes deactivation and role
changes take effect immediately.
"""
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine
from sqlmodel import Session

from app.core.errors import (
    InsufficientRole,
    InvalidToken,
    MissingCredential,
    StaleCredential,
)
from app.core.security import TokenClaims, TokenCodec, TokenRejected
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => a missing or non-Bearer Authorization header does
#   NOT raise here, so the first guard reports it with our own envelope.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Identity attached to an authenticated request."""

    id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass
class AuthAttempt:
    token: str | None
    claims: TokenClaims | None = None
    context: RequestContext | None = None


Guard = Callable[[AuthAttempt], None]


class AuthMiddleware:
    """
    Owns the guard chain. Built once at startup with the engine and token
    codec; holds no per-request state.
    """

    def __init__(self, engine: Engine, codec: TokenCodec, users: UserRepository):
        self.engine = engine
        self.codec = codec
        self.users = users

    # ----- base guards -----

    def bearer_present(self, attempt: AuthAttempt) -> None:
        if not attempt.token:
            raise MissingCredential()

    def token_valid(self, attempt: AuthAttempt) -> None:
        result = self.codec.verify(attempt.token or "")
        if isinstance(result, TokenRejected):
            logger.info("Rejected bearer token: %s", result.reason)
            raise InvalidToken()
        attempt.claims = result

    def identity_loaded(self, attempt: AuthAttempt) -> None:
        assert attempt.claims is not None
        with Session(self.engine) as session:
            user = self.users.get_by_id(session, attempt.claims.user_id)
            if user is None or not user.is_active:
                raise StaleCredential()
            # Live role wins over the role frozen into the token.
            attempt.context = RequestContext(id=user.id, email=user.email, role=user.role)

    # ----- authorization guards -----

    @staticmethod
    def role_in(roles: Iterable[str], message: str | None = None) -> Guard:
        ordered = tuple(roles)
        allowed = frozenset(ordered)
        detail = message or f"Access denied. Required roles: {', '.join(ordered)}"

        def guard(attempt: AuthAttempt) -> None:
            if attempt.context is None or attempt.context.role not in allowed:
                raise InsufficientRole(detail)

        return guard

    # ----- chains -----

    def chain(self, *extra: Guard) -> list[Guard]:
        return [self.bearer_present, self.token_valid, self.identity_loaded, *extra]

    def run(self, guards: Sequence[Guard], token: str | None) -> RequestContext:
        attempt = AuthAttempt(token=token)
        for guard in guards:
            guard(attempt)
        assert attempt.context is not None
        return attempt.context

    def authenticate(self, token: str | None) -> RequestContext:
        return self.run(self.chain(), token)

    def require_admin(self, token: str | None) -> RequestContext:
        return self.run(
            self.chain(self.role_in({"admin"}, "Admin access required")),
            token,
        )

    def require_role(self, token: str | None, roles: Iterable[str]) -> RequestContext:
        return self.run(self.chain(self.role_in(roles)), token)


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


def _middleware(request: Request) -> AuthMiddleware:
    return request.app.state.auth


def _token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is None:
        return None
    return credentials.credentials or None


def require_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> RequestContext:
    """
    Enforce authentication.

    Raises:
        MissingCredential / InvalidToken / StaleCredential (401)
    """
    return _middleware(request).authenticate(_token(credentials))


def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> RequestContext:
    """
    Enforce admin role.

    Raises:
        401 as `require_auth`, InsufficientRole (403) if role is not admin.
    """
    return _middleware(request).require_admin(_token(credentials))


def require_role(*roles: str):
    """Dependency factory: authenticated caller whose role is in `roles`."""

    def dependency(
        request: Request,
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    ) -> RequestContext:
        return _middleware(request).require_role(_token(credentials), roles)

    return dependency


def optional_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> RequestContext | None:
    """
    Anonymous callers get None. A caller that does send an Authorization
    header goes through the full chain, and its failures propagate.
    """
    if "authorization" not in request.headers:
        return None
    return _middleware(request).authenticate(_token(credentials))
