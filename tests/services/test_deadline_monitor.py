"""Tests for the session-owned deadline monitor."""

import asyncio
from datetime import date, timedelta

import pytest
from sqlmodel import Session

from app.database.database import new_session
from app.models.admin import Admin
from app.models.enums import ProjectStatus
from app.models.partner import Partner
from app.services.deadline_monitor import DeadlineMonitor, DeadlineMonitorRegistry
from tests.factories import build_project, persist


def _overdue_project(session: Session, partner: Partner):
    end = date.today() - timedelta(days=1)
    return persist(
        session,
        build_project(
            partner.id_partner,
            date_start=end - timedelta(days=10),
            date_end=end,
            application_deadline=end - timedelta(days=12),
        ),
    )


class TestDeadlineMonitor:
    @pytest.mark.asyncio
    async def test_run_once_queues_notifications(
        self, session: Session, host_partner: Partner
    ):
        project = _overdue_project(session, host_partner)
        monitor = DeadlineMonitor("root_admin", lambda: True, session_factory=new_session)

        published = await monitor.run_once()

        assert len(published) == 1
        assert monitor.status().pending_notifications == 1
        assert monitor.last_scan_at is not None
        drained = monitor.drain_notifications()
        assert drained[0].id_project == project.id_project
        assert monitor.drain_notifications() == []

        session.refresh(project)
        assert project.status == ProjectStatus.CLOSED

    @pytest.mark.asyncio
    async def test_concurrent_scans_close_a_project_once(
        self, session: Session, host_partner: Partner
    ):
        project = _overdue_project(session, host_partner)
        monitor = DeadlineMonitor("root_admin", lambda: True)

        first, second = await asyncio.gather(monitor.run_once(), monitor.run_once())

        assert len(first) + len(second) == 1
        assert monitor.status().pending_notifications == 1
        session.refresh(project)
        assert project.status == ProjectStatus.CLOSED

    @pytest.mark.asyncio
    async def test_unauthorized_monitor_scans_nothing(
        self, session: Session, host_partner: Partner
    ):
        project = _overdue_project(session, host_partner)
        monitor = DeadlineMonitor("root_admin", lambda: False)

        assert await monitor.run_once() == []

        session.refresh(project)
        assert project.status == ProjectStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_revocation_between_scan_and_publish_discards_results(
        self, session: Session, host_partner: Partner
    ):
        _overdue_project(session, host_partner)
        answers = iter([True, False])
        monitor = DeadlineMonitor("root_admin", lambda: next(answers))

        assert await monitor.run_once() == []
        assert monitor.drain_notifications() == []

    @pytest.mark.asyncio
    async def test_start_scans_immediately_and_stop_discards(
        self, session: Session, host_partner: Partner
    ):
        _overdue_project(session, host_partner)
        monitor = DeadlineMonitor("root_admin", lambda: True, interval_seconds=3600)

        monitor.start()
        assert monitor.running
        for _ in range(50):
            if monitor.last_scan_at is not None:
                break
            await asyncio.sleep(0.02)

        assert monitor.status().pending_notifications == 1
        await monitor.stop()
        assert not monitor.running
        assert monitor.drain_notifications() == []

    @pytest.mark.asyncio
    async def test_loop_stops_itself_when_revoked(self, session: Session):
        monitor = DeadlineMonitor("root_admin", lambda: False, interval_seconds=3600)

        monitor.start()
        for _ in range(50):
            if not monitor.running:
                break
            await asyncio.sleep(0.02)

        assert not monitor.running


class TestDeadlineMonitorRegistry:
    @pytest.mark.asyncio
    async def test_one_monitor_per_admin(self, session: Session, admin: Admin):
        registry = DeadlineMonitorRegistry(interval_seconds=3600)

        first = registry.start_for(admin.username)
        second = registry.start_for(admin.username)

        assert first is second
        assert registry.get(admin.username) is first
        assert registry.interval_seconds == 3600
        await registry.stop_all()
        assert registry.get(admin.username) is None
        assert not first.running

    def test_authorization_follows_admin_row(
        self, session: Session, admin: Admin
    ):
        registry = DeadlineMonitorRegistry(interval_seconds=3600)
        check = registry._authorization_check(admin.username)
        assert check() is True

        admin.is_active = False
        persist(session, admin)
        assert check() is False
        assert registry._authorization_check("ghost")() is False

    @pytest.mark.asyncio
    async def test_stop_for_unknown_admin(self, session: Session):
        registry = DeadlineMonitorRegistry()
        assert await registry.stop_for("nobody") is False
        assert registry.interval_seconds == 60
        assert registry.warning_days == 3
