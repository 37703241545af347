"""Admin gate: shared-secret verification, token issuance, and per-call authorization."""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from shared.auth.admin_token import create_signed_token, verify_admin_token
from shared.auth.models import Role
from shared.errors import ConfigurationError, Unauthorized

if TYPE_CHECKING:
    from shared.auth.credentials import Credentials
    from shared.auth.revocation import TokenRevocationList
    from shared.auth.settings import AuthSettings

logger = structlog.get_logger()


@dataclass
class IssuedToken:
    token: str
    expires_at: float


class AdminAuthService:
    """Verify the shared admin secret and the tokens derived from it.

    Stateless apart from the revocation list: every privileged call is
    re-validated against the configured secret.
    """

    def __init__(self, settings: AuthSettings, revocations: TokenRevocationList | None = None) -> None:
        self._settings = settings
        self._revocations = revocations

    def ensure_configured(self) -> None:
        """Raise ConfigurationError unless a secret is configured."""
        self._require_secret()

    def verify_secret(self, supplied: str) -> Role:
        """Return OWNER iff ``supplied`` equals the configured secret exactly.

        Fails closed: raises ConfigurationError when no secret is configured.
        """
        configured = self._require_secret()
        valid = hmac.compare_digest(supplied.encode(), configured.encode())
        logger.info("admin secret verification", outcome="success" if valid else "failure")
        return Role.OWNER if valid else Role.NONE

    def issue_token(self) -> IssuedToken:
        """Sign a fresh owner token. Call only after a successful verify_secret."""
        claims, token = create_signed_token(self._require_secret(), self._settings.token_ttl_seconds)
        return IssuedToken(token=token, expires_at=claims.expires_at)

    def check_token(self, token: str) -> Role:
        """Return OWNER for a valid, unexpired, unrevoked token; NONE otherwise."""
        secret = self._require_secret()
        claims = verify_admin_token(token, secret, self._settings.token_ttl_seconds)
        if claims is None:
            return Role.NONE
        if self._revocations is not None and self._revocations.is_revoked(claims.token_id):
            logger.info("revoked admin token presented")
            return Role.NONE
        return Role.OWNER

    def revoke_token(self, token: str) -> bool:
        """Revoke a valid token. Return False when the token was not valid to begin with."""
        secret = self._require_secret()
        claims = verify_admin_token(token, secret, self._settings.token_ttl_seconds)
        if claims is None or self._revocations is None:
            return False
        self._revocations.revoke(claims.token_id, claims.expires_at)
        logger.info("admin token revoked")
        return True

    def authorize(self, *, secret: str | None = None, token: str | None = None) -> Role:
        """Authorize a single privileged call. Raises Unauthorized unless the caller is the owner."""
        self._require_secret()
        role = Role.NONE
        if token:
            role = self.check_token(token)
        elif secret:
            role = self.verify_secret(secret)
        if role != Role.OWNER:
            raise Unauthorized
        return role

    def authorize_credentials(self, credentials: Credentials) -> Role:
        return self.authorize(secret=credentials.secret, token=credentials.token)

    def _require_secret(self) -> str:
        if not self._settings.is_configured:
            logger.error("ADMIN_SECRET not configured")
            raise ConfigurationError("Admin authentication not configured")
        return self._settings.secret
