"""Admin credentials as they arrive in a function request body."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Credentials:
    """A caller-supplied shared secret and/or signed admin token."""

    secret: str | None = None
    token: str | None = None

    @property
    def present(self) -> bool:
        return bool(self.secret or self.token)


def credentials_from_body(body: dict) -> Credentials:
    """Pick ``secret`` and ``token`` out of a request body.

    Non-string or empty values count as absent.
    """
    secret = body.get("secret")
    token = body.get("token")
    return Credentials(
        secret=secret if isinstance(secret, str) and secret else None,
        token=token if isinstance(token, str) and token else None,
    )
