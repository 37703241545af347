"""Admin session state machine for the dashboard and the operator console.

States::

    anonymous --login--> verifying --valid--> authenticated
                              \\--invalid--> anonymous
    authenticated --logout--> anonymous
    authenticated --inactive > timeout--> expired

Activity events refresh the in-memory ``last_activity``; a periodic check
persists it and expires the session once the owner has been idle for longer
than the inactivity timeout. A session sitting exactly on the boundary is
still valid.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from console.api import ApiError
from console.storage import MemorySessionStorage, StoredSession

if TYPE_CHECKING:
    from collections.abc import Callable

    from console.api import AdminApiClient
    from console.storage import SessionStorage

logger = structlog.get_logger()

DEFAULT_INACTIVITY_TIMEOUT_SECONDS = 30 * 60
DEFAULT_CHECK_INTERVAL_SECONDS = 60


class SessionState(StrEnum):
    ANONYMOUS = "anonymous"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"


class ActivityEvent(StrEnum):
    POINTER_DOWN = "pointerdown"
    KEY_DOWN = "keydown"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"


class SessionExpiredError(Exception):
    """Raised when a privileged call is attempted without a live session."""


class AdminSessionManager:
    def __init__(
        self,
        api: AdminApiClient,
        storage: SessionStorage | None = None,
        *,
        inactivity_timeout: float = DEFAULT_INACTIVITY_TIMEOUT_SECONDS,
        check_interval: float = DEFAULT_CHECK_INTERVAL_SECONDS,
    ) -> None:
        self._api = api
        self._storage = storage or MemorySessionStorage()
        self._timeout = inactivity_timeout
        self._check_interval = check_interval
        self._state = SessionState.ANONYMOUS
        self._session: StoredSession | None = None
        self._listening = False
        self._monitor_task: asyncio.Task[None] | None = None
        self._state_listeners: list[Callable[[SessionState], None]] = []
        self.last_error: str | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    @property
    def listening(self) -> bool:
        """Whether activity events are currently being tracked."""
        return self._listening

    @property
    def last_activity(self) -> float | None:
        return self._session.last_activity if self._session else None

    def add_state_listener(self, callback: Callable[[SessionState], None]) -> None:
        self._state_listeners.append(callback)

    async def login(self, secret: str) -> bool:
        """Verify ``secret`` with the server and start a session on success.

        Returns False (storing nothing) for a wrong secret. Server or network
        failures return the manager to anonymous and re-raise ApiError.
        """
        if self._state == SessionState.VERIFYING:
            raise RuntimeError("A verification is already in progress")
        if self._state == SessionState.AUTHENTICATED:
            await self.logout()

        self.last_error = None
        self._set_state(SessionState.VERIFYING)
        try:
            result = await self._api.verify(secret)
        except ApiError as e:
            self.last_error = e.message
            self._set_state(SessionState.ANONYMOUS)
            raise

        if not result.valid or not result.token or result.expires_at is None:
            self.last_error = "Invalid admin secret"
            logger.info("admin login rejected")
            self._set_state(SessionState.ANONYMOUS)
            return False

        now = time.time()
        self._session = StoredSession(
            token=result.token,
            expires_at=float(result.expires_at),
            issued_at=now,
            last_activity=now,
        )
        self._storage.save(self._session.to_dict())
        self._enter_authenticated()
        logger.info("admin session started")
        return True

    async def logout(self) -> None:
        """End the session locally and ask the server to revoke its token."""
        session = self._session
        self._teardown(SessionState.ANONYMOUS)
        if session is not None:
            try:
                await self._api.logout(session.token)
            except ApiError as e:
                # Local state is already cleared; the token still expires on its own.
                logger.warning("token revocation failed", status=e.status)
        logger.info("admin session ended")

    async def restore(self) -> bool:
        """Resume a stored session after a reload.

        Only a session issued less than one inactivity timeout ago is
        resumed. The stored token is only trusted after the server confirms
        it, so a rotated secret or a revoked token lands the caller back at
        anonymous.
        """
        stored = self._storage.load()
        session = StoredSession.from_dict(stored) if stored else None
        if session is None:
            self._storage.clear()
            return False
        now = time.time()
        if self._is_stale(session, now) or now - session.issued_at >= self._timeout:
            self._storage.clear()
            return False

        self._set_state(SessionState.VERIFYING)
        try:
            valid = await self._api.check(session.token)
        except ApiError as e:
            logger.warning("session restore check failed", status=e.status)
            valid = False
        if not valid:
            self._storage.clear()
            self._set_state(SessionState.ANONYMOUS)
            return False

        self._session = session
        self._enter_authenticated()
        logger.info("admin session restored")
        return True

    def record_activity(self, event: ActivityEvent | str) -> bool:
        """Note owner activity. Ignored unless authenticated and the event type is tracked."""
        if not self._listening or self._session is None:
            return False
        try:
            ActivityEvent(event)
        except ValueError:
            return False
        self._session.last_activity = time.time()
        return True

    def check_expiry(self) -> bool:
        """Expire the session if it has gone stale. Return True when it expired on this call."""
        if self._state != SessionState.AUTHENTICATED or self._session is None:
            return False
        if self._is_stale(self._session, time.time()):
            logger.info("admin session expired after inactivity")
            self._teardown(SessionState.EXPIRED)
            return True
        self._storage.save(self._session.to_dict())
        return False

    def require_token(self) -> str:
        """Return the token for a privileged call, expiring the session first if it went stale."""
        self.check_expiry()
        if self._state != SessionState.AUTHENTICATED or self._session is None:
            raise SessionExpiredError("Not logged in")
        return self._session.token

    async def close(self) -> None:
        """Stop the periodic check without ending the session."""
        await self._stop_monitor()

    def _is_stale(self, session: StoredSession, now: float) -> bool:
        return now - session.last_activity > self._timeout or now >= session.expires_at

    def _enter_authenticated(self) -> None:
        self._listening = True
        self._set_state(SessionState.AUTHENTICATED)
        self._start_monitor()

    def _teardown(self, state: SessionState) -> None:
        self._listening = False
        self._session = None
        self._storage.clear()
        self._cancel_monitor()
        self._set_state(state)

    def _set_state(self, state: SessionState) -> None:
        if state == self._state:
            return
        self._state = state
        for callback in self._state_listeners:
            callback(state)

    def _start_monitor(self) -> None:
        if self._monitor_task is not None and not self._monitor_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._monitor_task = loop.create_task(self._monitor_loop())

    def _cancel_monitor(self) -> None:
        task = self._monitor_task
        self._monitor_task = None
        if task is not None and task is not _current_task():
            task.cancel()

    async def _stop_monitor(self) -> None:
        task = self._monitor_task
        self._cancel_monitor()
        if task is not None and task is not _current_task():
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _monitor_loop(self) -> None:
        while self._state == SessionState.AUTHENTICATED:
            await asyncio.sleep(self._check_interval)
            if self.check_expiry():
                return


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None
