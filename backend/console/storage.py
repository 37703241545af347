"""Tab-scoped storage for the console session record."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Protocol


@dataclass
class StoredSession:
    """What survives a reload: the signed token, never the raw secret."""

    token: str
    expires_at: float  # token expiry from the server
    issued_at: float
    last_activity: float

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> StoredSession | None:
        """Rebuild a stored session. Return None when the record is incomplete or malformed."""
        token = data.get("token")
        if not isinstance(token, str) or not token:
            return None
        try:
            return cls(
                token=token,
                expires_at=float(data["expires_at"]),  # type: ignore[arg-type]
                issued_at=float(data["issued_at"]),  # type: ignore[arg-type]
                last_activity=float(data["last_activity"]),  # type: ignore[arg-type]
            )
        except (KeyError, TypeError, ValueError):
            return None


class SessionStorage(Protocol):
    """Short-lived storage scoped to one browsing context or console process."""

    def load(self) -> dict[str, object] | None: ...

    def save(self, data: dict[str, object]) -> None: ...

    def clear(self) -> None: ...


class MemorySessionStorage:
    """Keeps the session record in process memory; gone when the process exits."""

    def __init__(self) -> None:
        self._data: dict[str, object] | None = None

    def load(self) -> dict[str, object] | None:
        return dict(self._data) if self._data is not None else None

    def save(self, data: dict[str, object]) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = None
