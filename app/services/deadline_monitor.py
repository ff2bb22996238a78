"""
Background deadline monitor owned by an administrator session.

Each admin gets at most one monitor. Monitors live in a registry stored on the
application state, so their lifetime is bound to the app and to the admin that
started them.
"""

import asyncio
from collections.abc import Callable
from contextlib import suppress
from datetime import date, datetime

import anyio
from sqlmodel import Session

from app.core.config import get_settings
from app.database.database import new_session
from app.models.notification import DeadlineNotification, MonitorStatus
from app.services.admin import is_active_admin
from app.services.deadline import scan_deadlines
from app.utils.logger import logger


class DeadlineMonitor:
    """
    Periodic deadline scan publishing notifications to one admin.

    The blocking database scan runs in a worker thread. Authorization is
    checked before each scan and again before results are published; once it
    fails the monitor stops and drops whatever it had not delivered.
    """

    def __init__(
        self,
        admin_username: str,
        is_authorized: Callable[[], bool],
        session_factory: Callable[[], Session] = new_session,
        interval_seconds: int = 60,
        warning_days: int = 3,
        clock: Callable[[], date] = date.today,
    ):
        self.admin_username = admin_username
        self.interval_seconds = interval_seconds
        self.warning_days = warning_days
        self.last_scan_at: datetime | None = None
        self._is_authorized = is_authorized
        self._session_factory = session_factory
        self._clock = clock
        self._pending: list[DeadlineNotification] = []
        self._task: asyncio.Task | None = None
        self._revoked = False
        # Loop ticks and manual scans share one scan at a time
        self._scan_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop; the first scan happens immediately."""
        if self.running:
            return
        self._revoked = False
        self._task = asyncio.create_task(
            self._loop(), name=f"deadline-monitor:{self.admin_username}"
        )
        logger.info(
            f"Deadline monitor started for {self.admin_username} "
            f"(every {self.interval_seconds}s)"
        )

    async def stop(self) -> None:
        """Cancel the loop and discard undelivered notifications."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._pending.clear()
        logger.info(f"Deadline monitor stopped for {self.admin_username}")

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception:
                logger.exception(f"Deadline monitor scan failed for {self.admin_username}")
            if self._revoked:
                return
            await asyncio.sleep(self.interval_seconds)

    async def _check_authorized(self) -> bool:
        authorized = await anyio.to_thread.run_sync(self._is_authorized)
        if not authorized:
            self._revoked = True
            self._pending.clear()
            logger.warning(
                f"Deadline monitor for {self.admin_username} stopped: "
                "administrative capability revoked"
            )
        return authorized

    def _scan(self) -> list[DeadlineNotification]:
        with self._session_factory() as session:
            return scan_deadlines(session, self._clock(), self.warning_days)

    async def run_once(self) -> list[DeadlineNotification]:
        """
        Run one authorized scan and queue its notifications.

        Returns:
            list[DeadlineNotification]: What this scan published, empty when
            the admin is no longer authorized.
        """
        async with self._scan_lock:
            if self._revoked or not await self._check_authorized():
                return []
            notifications = await anyio.to_thread.run_sync(self._scan)
            if not await self._check_authorized():
                return []
            self._pending.extend(notifications)
            self.last_scan_at = datetime.now()
            return notifications

    def drain_notifications(self) -> list[DeadlineNotification]:
        """Hand over queued notifications, emptying the queue."""
        notifications, self._pending = self._pending, []
        return notifications

    def status(self) -> MonitorStatus:
        return MonitorStatus(
            admin_username=self.admin_username,
            running=self.running,
            interval_seconds=self.interval_seconds,
            pending_notifications=len(self._pending),
            last_scan_at=self.last_scan_at,
        )


class DeadlineMonitorRegistry:
    """Deadline monitors of the running application, one per admin username."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = new_session,
        interval_seconds: int | None = None,
        warning_days: int | None = None,
    ):
        settings = get_settings()
        self.session_factory = session_factory
        self.interval_seconds = (
            interval_seconds or settings.DEADLINE_MONITOR_INTERVAL_SECONDS
        )
        self.warning_days = warning_days or settings.DEADLINE_WARNING_DAYS
        self._monitors: dict[str, DeadlineMonitor] = {}

    def _authorization_check(self, admin_username: str) -> Callable[[], bool]:
        def check() -> bool:
            with self.session_factory() as session:
                return is_active_admin(session, admin_username)

        return check

    def get(self, admin_username: str) -> DeadlineMonitor | None:
        return self._monitors.get(admin_username)

    def start_for(self, admin_username: str) -> DeadlineMonitor:
        """Start (or return the already running) monitor of an admin."""
        monitor = self._monitors.get(admin_username)
        if monitor is None:
            monitor = DeadlineMonitor(
                admin_username,
                self._authorization_check(admin_username),
                session_factory=self.session_factory,
                interval_seconds=self.interval_seconds,
                warning_days=self.warning_days,
            )
            self._monitors[admin_username] = monitor
        monitor.start()
        return monitor

    async def stop_for(self, admin_username: str) -> bool:
        """Stop and forget an admin's monitor. Returns False if there was none."""
        monitor = self._monitors.pop(admin_username, None)
        if monitor is None:
            return False
        await monitor.stop()
        return True

    async def stop_all(self) -> None:
        for username in list(self._monitors):
            await self.stop_for(username)
