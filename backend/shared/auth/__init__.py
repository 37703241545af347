"""Admin authentication shared by the portal endpoints and the operator tools."""

from shared.auth.admin_token import create_signed_token, sign_admin_token, verify_admin_token
from shared.auth.credentials import Credentials, credentials_from_body
from shared.auth.models import AdminToken, Role
from shared.auth.revocation import TokenRevocationList
from shared.auth.service import AdminAuthService, IssuedToken
from shared.auth.settings import AuthSettings

__all__ = [
    "AdminAuthService",
    "AdminToken",
    "AuthSettings",
    "Credentials",
    "IssuedToken",
    "Role",
    "TokenRevocationList",
    "create_signed_token",
    "credentials_from_body",
    "sign_admin_token",
    "verify_admin_token",
]
