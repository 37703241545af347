"""Admin identity models."""

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    """Authorization outcome of the admin gate.

    Holding the shared secret (or a token derived from it) makes the caller
    the site owner; anything else is no role at all.
    """

    OWNER = "owner"
    NONE = "none"


@dataclass
class AdminToken:
    """Claims carried inside a signed admin token."""

    token_id: str  # UUID, used for revocation
    role: str
    issued_at: float  # time.time()
    expires_at: float  # time.time() + TTL
