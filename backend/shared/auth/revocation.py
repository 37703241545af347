"""In-memory revocation list for admin tokens with periodic expiry cleanup."""

import asyncio
import contextlib
import time

import structlog

CLEANUP_INTERVAL_SECONDS = 300  # 5 minutes

logger = structlog.get_logger()


class TokenRevocationList:
    """Token ids revoked by logout, kept until the token would have expired anyway.

    Entries are ephemeral: a server restart forgets revocations, which only
    matters for tokens that are still inside their TTL. Rotating the admin
    secret remains the way to revoke everything.
    Call start_cleanup() on app startup and stop_cleanup() on shutdown.
    """

    def __init__(self) -> None:
        self._revoked: dict[str, float] = {}  # token_id -> expires_at
        self._cleanup_task: asyncio.Task[None] | None = None

    def revoke(self, token_id: str, expires_at: float) -> None:
        """Mark a token id as revoked until its expiry time."""
        self._revoked[token_id] = expires_at

    def is_revoked(self, token_id: str) -> bool:
        expires_at = self._revoked.get(token_id)
        if expires_at is None:
            return False
        if time.time() > expires_at:
            del self._revoked[token_id]
            return False
        return True

    def cleanup_expired(self) -> int:
        """Drop entries for tokens past their expiry. Return count of removed entries."""
        now = time.time()
        expired = [tid for tid, exp in self._revoked.items() if now > exp]
        for tid in expired:
            del self._revoked[tid]
        if expired:
            logger.info("cleaned up revoked tokens", count=len(expired))
        return len(expired)

    def start_cleanup(self) -> None:
        """Start the periodic cleanup background task."""
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop_cleanup(self) -> None:
        """Stop the periodic cleanup background task."""
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._cleanup_task
            self._cleanup_task = None

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
            self.cleanup_expired()
