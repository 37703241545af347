"""Tests for HMAC-SHA256 admin token signing and verification."""

import base64
import hashlib
import hmac
import json
import time

from shared.auth.admin_token import (
    CLOCK_SKEW_SECONDS,
    create_signed_token,
    derive_signing_key,
    sign_admin_token,
    verify_admin_token,
)
from shared.auth.models import AdminToken, Role

SECRET = "correct horse battery staple"
TTL = 3600


def _make_token(
    issued_at: float | None = None,
    expires_at: float | None = None,
    role: str = Role.OWNER.value,
) -> AdminToken:
    now = time.time()
    return AdminToken(
        token_id="tok-1",
        role=role,
        issued_at=issued_at if issued_at is not None else now,
        expires_at=expires_at if expires_at is not None else now + TTL,
    )


class TestRoundTrip:
    def test_created_token_verifies(self):
        claims, token = create_signed_token(SECRET, TTL)

        result = verify_admin_token(token, SECRET, TTL)

        assert result is not None
        assert result.token_id == claims.token_id
        assert result.role == Role.OWNER

    def test_each_token_has_unique_id(self):
        first, _ = create_signed_token(SECRET, TTL)
        second, _ = create_signed_token(SECRET, TTL)
        assert first.token_id != second.token_id


class TestSecretRotation:
    def test_token_from_old_secret_rejected(self):
        _, token = create_signed_token(SECRET, TTL)
        assert verify_admin_token(token, "rotated-secret", TTL) is None

    def test_signing_key_is_not_the_raw_secret(self):
        assert derive_signing_key(SECRET) != SECRET.encode()


class TestRejections:
    def test_expired_token_rejected(self):
        past = time.time() - TTL - 10
        token = sign_admin_token(_make_token(issued_at=past, expires_at=past + TTL), SECRET)
        assert verify_admin_token(token, SECRET, TTL) is None

    def test_tampered_payload_rejected(self):
        token = sign_admin_token(_make_token(), SECRET)
        payload_b64, sig_b64 = token.split(".")
        payload = json.loads(base64.urlsafe_b64decode(payload_b64))
        payload["expires_at"] += 10_000
        tampered = base64.urlsafe_b64encode(json.dumps(payload, sort_keys=True).encode()).decode()
        assert verify_admin_token(f"{tampered}.{sig_b64}", SECRET, TTL) is None

    def test_future_issued_token_rejected(self):
        future = time.time() + CLOCK_SKEW_SECONDS + 100
        token = sign_admin_token(_make_token(issued_at=future, expires_at=future + 10), SECRET)
        assert verify_admin_token(token, SECRET, TTL) is None

    def test_lifetime_longer_than_ttl_rejected(self):
        now = time.time()
        token = sign_admin_token(_make_token(issued_at=now, expires_at=now + TTL * 10), SECRET)
        assert verify_admin_token(token, SECRET, TTL) is None

    def test_unknown_role_rejected(self):
        token = sign_admin_token(_make_token(role="editor"), SECRET)
        assert verify_admin_token(token, SECRET, TTL) is None

    def test_malformed_tokens_rejected(self):
        assert verify_admin_token("", SECRET, TTL) is None
        assert verify_admin_token("no-dot", SECRET, TTL) is None
        assert verify_admin_token("a.b.c", SECRET, TTL) is None
        assert verify_admin_token("!!!.???", SECRET, TTL) is None

    def test_non_json_payload_rejected(self):
        payload = b"not json"
        sig = hmac.new(derive_signing_key(SECRET), payload, hashlib.sha256).digest()
        token = f"{base64.urlsafe_b64encode(payload).decode()}.{base64.urlsafe_b64encode(sig).decode()}"
        assert verify_admin_token(token, SECRET, TTL) is None
