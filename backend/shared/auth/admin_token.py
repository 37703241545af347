"""HMAC-SHA256 signed admin tokens.

After a successful secret verification the server hands out a token instead
of asking the browser to keep replaying the raw secret. Privileged endpoints
verify the signature and expiry locally on every call.

The signing key is derived from the admin secret, so rotating the secret
invalidates every outstanding token at once.

Token format: base64url(json_payload_bytes).base64url(hmac_sha256_signature)
"""

import base64
import binascii
import hashlib
import hmac
import json
import math
import time
from dataclasses import asdict
from uuid import uuid4

import structlog

from shared.auth.models import AdminToken, Role

logger = structlog.get_logger()

_TOKEN_PARTS = 2  # base64url(payload).base64url(signature)
_KEY_CONTEXT = b"portfolio-admin-token:v1"

CLOCK_SKEW_SECONDS = 60


def derive_signing_key(admin_secret: str) -> bytes:
    """Derive the token signing key from the admin secret."""
    return hmac.new(admin_secret.encode(), _KEY_CONTEXT, hashlib.sha256).digest()


def create_signed_token(admin_secret: str, ttl_seconds: int) -> tuple[AdminToken, str]:
    """Create and sign an owner token, returning (claims, signed token string)."""
    now = time.time()
    token = AdminToken(
        token_id=str(uuid4()),
        role=Role.OWNER.value,
        issued_at=now,
        expires_at=now + ttl_seconds,
    )
    return token, sign_admin_token(token, admin_secret)


def sign_admin_token(token: AdminToken, admin_secret: str) -> str:
    """Serialize claims to JSON, compute HMAC-SHA256, return base64url(payload).base64url(sig)."""
    payload_bytes = json.dumps(asdict(token), sort_keys=True).encode()
    sig = hmac.new(derive_signing_key(admin_secret), payload_bytes, hashlib.sha256).digest()
    payload_b64 = base64.urlsafe_b64encode(payload_bytes).decode()
    sig_b64 = base64.urlsafe_b64encode(sig).decode()
    return f"{payload_b64}.{sig_b64}"


def verify_admin_token(token: str, admin_secret: str, max_ttl_seconds: int) -> AdminToken | None:
    """Verify HMAC signature and expiry. Returns AdminToken or None on any failure."""
    parts = token.split(".")
    if len(parts) != _TOKEN_PARTS:
        return None

    try:
        payload_bytes = base64.urlsafe_b64decode(parts[0])
        provided_sig = base64.urlsafe_b64decode(parts[1])
    except (ValueError, binascii.Error):
        return None

    expected_sig = hmac.new(derive_signing_key(admin_secret), payload_bytes, hashlib.sha256).digest()
    if not hmac.compare_digest(provided_sig, expected_sig):
        logger.debug("admin token signature mismatch")
        return None

    try:
        data = json.loads(payload_bytes)
        claims = AdminToken(**data)
    except (json.JSONDecodeError, TypeError, KeyError):
        logger.debug("admin token malformed payload")
        return None

    if claims.role != Role.OWNER:
        logger.debug("admin token carries unknown role")
        return None

    if not _validate_token_timestamps(claims, max_ttl_seconds):
        return None

    return claims


def _is_finite_number(value: object) -> bool:
    """Check that a value is a finite int or float (excluding bool)."""
    if isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _validate_token_timestamps(claims: AdminToken, max_ttl_seconds: int) -> bool:
    """Validate temporal claims: finite, not issued in the future, bounded lifetime, unexpired."""
    if not _is_finite_number(claims.issued_at) or not _is_finite_number(claims.expires_at):
        logger.debug("admin token non-finite timestamp")
        return False

    now = time.time()

    if claims.issued_at > now + CLOCK_SKEW_SECONDS:
        logger.debug("admin token issued in the future")
        return False

    if claims.expires_at <= claims.issued_at:
        logger.debug("admin token expires_at <= issued_at")
        return False

    if claims.expires_at - claims.issued_at > max_ttl_seconds + CLOCK_SKEW_SECONDS:
        logger.debug("admin token lifetime too long")
        return False

    if now > claims.expires_at:
        logger.debug("admin token expired")
        return False

    return True
