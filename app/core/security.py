# app/core/security.py
"""
Password hashing and the bearer token codec.

Tokens are HS256 JWTs carrying `userId`, `email`, `role`, `iat` and `exp`.
`TokenCodec.verify` never raises on bad input: it returns a `TokenRejected`
value, and the auth guard chain decides what HTTP failure that becomes.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

ROLES = ("user", "admin")

_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password cannot be empty")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except (ValueError, TypeError):
        # Unknown or corrupted hash format.
        return False


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenRejected:
    # expired | invalid | malformed
    reason: str


class TokenCodec:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=24),
    ):
        if not secret:
            raise ValueError("token signing secret cannot be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(
        self,
        user_id: int,
        email: str,
        role: str,
        now: datetime | None = None,
    ) -> str:
        issued = now or datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "userId": int(user_id),
            "email": email,
            "role": role,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self.expires_in).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims | TokenRejected:
        if not token or not isinstance(token, str):
            return TokenRejected("malformed")
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            return TokenRejected("expired")
        except JWTError:
            return TokenRejected("invalid")

        user_id = payload.get("userId")
        email = payload.get("email")
        role = payload.get("role")
        exp = payload.get("exp")
        iat = payload.get("iat", exp)

        # bool is an int subclass; a `true` userId is not an id.
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return TokenRejected("malformed")
        if not isinstance(email, str) or not email:
            return TokenRejected("malformed")
        if role not in ROLES:
            return TokenRejected("malformed")
        if not isinstance(exp, (int, float)) or not isinstance(iat, (int, float)):
            return TokenRejected("malformed")

        return TokenClaims(
            user_id=user_id,
            email=email,
            role=role,
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
