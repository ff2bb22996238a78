"""Project lifecycle state machine: pending -> active -> closed."""

from datetime import datetime

from app.exceptions import IllegalTransitionError
from app.models.enums import ProjectStatus
from app.models.project import Project

ALLOWED_TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.PENDING: frozenset({ProjectStatus.ACTIVE, ProjectStatus.CLOSED}),
    ProjectStatus.ACTIVE: frozenset({ProjectStatus.CLOSED}),
    ProjectStatus.CLOSED: frozenset(),
}


def can_transition(current: ProjectStatus, target: ProjectStatus) -> bool:
    """Same-state is always allowed (no-op); otherwise consult the table."""
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def possible_transitions(current: ProjectStatus) -> list[ProjectStatus]:
    return sorted(ALLOWED_TRANSITIONS[current], key=lambda s: s.value)


def transition(
    project: Project, target: ProjectStatus, now: datetime | None = None
) -> Project:
    """
    Move a project to `target`, stamping lifecycle timestamps.

    The first entry into `active` sets `published_at`; entering `closed`
    sets `closed_at`. Re-applying the current status changes nothing. The
    caller owns the commit.

    Args:
        project: Project to mutate.
        target: Requested status.
        now: Clock override, mainly for tests.

    Returns:
        Project: The same instance, mutated.

    Raises:
        IllegalTransitionError: If the table forbids the move.
    """
    current = ProjectStatus(project.status)
    if current == target:
        return project
    if not can_transition(current, target):
        raise IllegalTransitionError(current.value, target.value)

    now = now or datetime.now()
    if target == ProjectStatus.ACTIVE and project.published_at is None:
        project.published_at = now
    if target == ProjectStatus.CLOSED:
        project.closed_at = now
    project.status = target
    project.updated_at = now
    return project


def can_be_edited(status: ProjectStatus) -> bool:
    return status in (ProjectStatus.PENDING, ProjectStatus.ACTIVE)


def can_accept_applications(status: ProjectStatus) -> bool:
    return status == ProjectStatus.ACTIVE


def is_closed(status: ProjectStatus) -> bool:
    return status == ProjectStatus.CLOSED
