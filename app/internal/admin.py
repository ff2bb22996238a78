"""Administrator-only operations: validation, partner management, reconciliation, deadline monitor."""

from functools import partial
from typing import Annotated

import anyio
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from app.core.dependencies import get_current_admin, get_monitor_registry
from app.database.database import get_session
from app.models.admin import Admin, AdminCreate, AdminPublic
from app.models.candidature import Candidature, CandidaturePublic
from app.models.notification import DeadlineNotification, MonitorStatus
from app.models.outcome import AssignmentOutcome, ReconcileRequest
from app.models.partner import PartnerPublic, PartnerTypesUpdate
from app.models.project import DeadlineStats, ProjectPublic
from app.services import admin as admin_service
from app.services import assignment as assignment_service
from app.services import partner as partner_service
from app.services import project as project_service
from app.services.deadline import scan_deadlines
from app.services.deadline_monitor import DeadlineMonitorRegistry

router = APIRouter(
    prefix="/internal/admin", tags=["Internal Admin"], include_in_schema=False
)

CurrentAdmin = Annotated[Admin, Depends(get_current_admin)]
SessionDep = Annotated[Session, Depends(get_session)]
Registry = Annotated[DeadlineMonitorRegistry, Depends(get_monitor_registry)]


@router.post("/", response_model=AdminPublic, status_code=status.HTTP_201_CREATED)
def create_new_admin(admin_in: AdminCreate, session: SessionDep, admin: CurrentAdmin):
    return admin_service.create_admin(session, admin_in)


@router.post("/admins/{admin_id}/deactivate", response_model=AdminPublic)
async def deactivate_admin(
    admin_id: int, session: SessionDep, admin: CurrentAdmin, registry: Registry
):
    """Revoke an administrator and stop the deadline monitor it owns."""
    deactivated = admin_service.deactivate_admin(session, admin_id)
    await registry.stop_for(deactivated.username)
    return deactivated


# --- Projects ---


@router.post("/projects/{project_id}/validate", response_model=ProjectPublic)
def validate_project(project_id: int, session: SessionDep, admin: CurrentAdmin):
    """Publish a pending project (pending -> active, stamps published_at)."""
    project = project_service.validate_project(session, project_id)
    return project_service.to_project_public(project)


@router.post("/projects/{project_id}/close", response_model=ProjectPublic)
def close_project(project_id: int, session: SessionDep, admin: CurrentAdmin):
    project = project_service.close_project(session, project_id)
    return project_service.to_project_public(project)


@router.get("/projects/deadline-stats", response_model=DeadlineStats)
def read_deadline_stats(session: SessionDep, admin: CurrentAdmin, registry: Registry):
    return project_service.get_deadline_stats(
        session, warning_days=registry.warning_days
    )


# --- Partners ---


@router.patch("/partners/{partner_id}/types", response_model=PartnerPublic)
def update_partner_types(
    partner_id: int,
    types_update: PartnerTypesUpdate,
    session: SessionDep,
    admin: CurrentAdmin,
):
    """Replace a partner's structure types; permissions follow immediately."""
    partner = partner_service.update_structure_types(
        session, partner_id, types_update.structure_types
    )
    return partner_service.to_partner_public(partner)


@router.post("/partners/{partner_id}/activate", response_model=PartnerPublic)
def activate_partner(partner_id: int, session: SessionDep, admin: CurrentAdmin):
    partner = partner_service.activate_partner(session, partner_id)
    return partner_service.to_partner_public(partner)


@router.post("/partners/{partner_id}/deactivate", response_model=PartnerPublic)
def deactivate_partner(partner_id: int, session: SessionDep, admin: CurrentAdmin):
    partner = partner_service.deactivate_partner(session, partner_id)
    return partner_service.to_partner_public(partner)


# --- Reconciliation ---


@router.get("/reconciliation", response_model=list[CandidaturePublic])
def list_pending_reconciliation(
    session: SessionDep,
    admin: CurrentAdmin,
    project_id: int | None = Query(default=None),
):
    """Accepted candidatures left without an active assignment."""
    return assignment_service.list_pending_reconciliation(session, project_id)


@router.post(
    "/candidatures/{candidature_id}/reconcile",
    response_model=AssignmentOutcome | CandidaturePublic,
)
def reconcile_candidature(
    candidature_id: int,
    request: ReconcileRequest,
    session: SessionDep,
    admin: CurrentAdmin,
):
    """`retry` re-runs the acceptance, `revert` puts the candidature back to pending."""
    result = assignment_service.reconcile_candidature(
        session, candidature_id, request.action
    )
    if isinstance(result, Candidature):
        return CandidaturePublic.model_validate(result)
    return result


# --- Deadline monitor ---


@router.post("/deadline-monitor", response_model=MonitorStatus)
async def start_deadline_monitor(admin: CurrentAdmin, registry: Registry):
    """
    Start the deadline monitor of the current admin session.

    The first scan runs right away, then every
    DEADLINE_MONITOR_INTERVAL_SECONDS. Starting twice keeps the running monitor.
    """
    monitor = registry.start_for(admin.username)
    return monitor.status()


@router.get("/deadline-monitor", response_model=MonitorStatus)
def read_deadline_monitor(admin: CurrentAdmin, registry: Registry):
    monitor = registry.get(admin.username)
    if monitor is None:
        return MonitorStatus(
            admin_username=admin.username,
            running=False,
            interval_seconds=registry.interval_seconds,
            pending_notifications=0,
        )
    return monitor.status()


@router.delete("/deadline-monitor", status_code=status.HTTP_204_NO_CONTENT)
async def stop_deadline_monitor(admin: CurrentAdmin, registry: Registry):
    """Stop the monitor and discard its undelivered notifications."""
    await registry.stop_for(admin.username)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/deadline-monitor/notifications", response_model=list[DeadlineNotification]
)
def drain_deadline_notifications(admin: CurrentAdmin, registry: Registry):
    """Deliver (and clear) the notifications queued for the current admin."""
    monitor = registry.get(admin.username)
    if monitor is None:
        return []
    return monitor.drain_notifications()


@router.post(
    "/deadline-monitor/scan", response_model=list[DeadlineNotification]
)
async def run_deadline_scan(admin: CurrentAdmin, session: SessionDep, registry: Registry):
    """
    Run a scan now.

    With a running monitor the scan goes through it (and its notifications
    are queued as usual); otherwise results are returned directly.
    """
    monitor = registry.get(admin.username)
    if monitor is not None and monitor.running:
        return await monitor.run_once()
    return await anyio.to_thread.run_sync(
        partial(scan_deadlines, session, warning_days=registry.warning_days)
    )
