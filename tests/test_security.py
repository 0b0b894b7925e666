"""Tests for password hashing and the bearer token codec."""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.security import (
    TokenClaims,
    TokenCodec,
    TokenRejected,
    hash_password,
    verify_password,
)

SECRET = "codec-secret"


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(SECRET, expires_in=timedelta(hours=24))


class TestPasswords:
    def test_hash_is_salted_and_verifies(self):
        first = hash_password("secret1")
        second = hash_password("secret1")

        assert first != second
        assert "secret1" not in first
        assert verify_password("secret1", first)
        assert verify_password("secret1", second)

    def test_wrong_password_is_rejected(self):
        assert not verify_password("secret2", hash_password("secret1"))

    def test_garbage_hash_is_rejected_without_raising(self):
        assert not verify_password("secret1", "not-a-hash")
        assert not verify_password("", "whatever")

    def test_empty_password_cannot_be_hashed(self):
        with pytest.raises(ValueError):
            hash_password("")


class TestTokenCodec:
    def test_issue_then_verify_round_trips_identity(self, codec):
        token = codec.issue(7, "a@x.com", "admin")
        claims = codec.verify(token)

        assert isinstance(claims, TokenClaims)
        assert (claims.user_id, claims.email, claims.role) == (7, "a@x.com", "admin")
        assert claims.expires_at - claims.issued_at == timedelta(hours=24)

    def test_expired_token_is_rejected(self, codec):
        issued = datetime.now(timezone.utc) - timedelta(hours=25)
        token = codec.issue(7, "a@x.com", "user", now=issued)

        assert codec.verify(token) == TokenRejected("expired")

    def test_foreign_signature_is_rejected(self, codec):
        token = TokenCodec("someone-else").issue(7, "a@x.com", "user")

        assert codec.verify(token) == TokenRejected("invalid")

    def test_tampered_payload_is_rejected(self, codec):
        header, payload, signature = codec.issue(7, "a@x.com", "user").split(".")
        forged_payload = jwt.encode(
            {"userId": 1, "email": "a@x.com", "role": "admin", "exp": 9999999999},
            "other",
        ).split(".")[1]

        result = codec.verify(".".join([header, forged_payload, signature]))
        assert result == TokenRejected("invalid")

    @pytest.mark.parametrize("token", ["", "abc", "a.b.c", "Bearer x.y.z"])
    def test_garbage_is_rejected_without_raising(self, codec, token):
        assert isinstance(codec.verify(token), TokenRejected)

    @pytest.mark.parametrize(
        "claims",
        [
            {"email": "a@x.com", "role": "user"},
            {"userId": "7", "email": "a@x.com", "role": "user"},
            {"userId": True, "email": "a@x.com", "role": "user"},
            {"userId": 7, "role": "user"},
            {"userId": 7, "email": "a@x.com", "role": "superuser"},
        ],
    )
    def test_ill_formed_claims_are_malformed(self, codec, claims):
        claims = {**claims, "exp": int(datetime.now(timezone.utc).timestamp()) + 60}
        token = jwt.encode(claims, SECRET, algorithm="HS256")

        assert codec.verify(token) == TokenRejected("malformed")

    def test_token_without_expiry_is_malformed(self, codec):
        token = jwt.encode({"userId": 7, "email": "a@x.com", "role": "user"}, SECRET)

        assert codec.verify(token) == TokenRejected("malformed")

    def test_empty_secret_is_refused(self):
        with pytest.raises(ValueError):
            TokenCodec("")
