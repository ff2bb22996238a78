"""Project service: submission, listing, edition and lifecycle entry points."""

from datetime import date, datetime, timedelta

from sqlmodel import Session, func, or_, select

from app.exceptions import (
    InsufficientPermissionsError,
    NotFoundError,
    ValidationError,
)
from app.models.enums import ActionKind, ProjectStatus
from app.models.partner import Partner
from app.models.project import (
    DeadlineStats,
    Project,
    ProjectCreate,
    ProjectPublic,
    ProjectUpdate,
)
from app.services import project_workflow
from app.services.capacity import available_slots, has_open_slot
from app.services.permission import require_access
from app.utils.logger import logger


def get_project(session: Session, project_id: int) -> Project:
    """
    Raises:
        NotFoundError: If the project does not exist.
    """
    project = session.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


def get_owned_project(session: Session, project_id: int, partner_id: int) -> Project:
    """
    Load a project and check that `partner_id` owns it.

    Raises:
        NotFoundError: If the project does not exist.
        InsufficientPermissionsError: If another partner owns it.
    """
    project = get_project(session, project_id)
    if project.id_partner != partner_id:
        raise InsufficientPermissionsError("You do not own this project")
    return project


def submit_project(
    session: Session, partner: Partner, project_in: ProjectCreate
) -> Project:
    """
    Submit a new project for validation.

    The project starts `pending` with no volunteers. There is no quota on
    the number of projects a partner may submit.

    Parameters:
        session: Database session.
        partner: Submitting partner.
        project_in: Project data (date order already validated).

    Returns:
        Project: The stored project.

    Raises:
        InsufficientPermissionsError: If the partner is inactive or its
            structure types do not allow project creation.
    """
    require_access(partner, ActionKind.SUBMIT_PROJECT)

    project = Project.model_validate(
        project_in,
        update={
            "id_partner": partner.id_partner,
            "status": ProjectStatus.PENDING,
            "current_volunteers": 0,
        },
    )
    session.add(project)
    session.commit()
    session.refresh(project)
    logger.info(f"Project {project.id_project} submitted by partner {partner.id_partner}")
    return project


def list_public_projects(
    session: Session,
    *,
    region: str | None = None,
    activity_domain: str | None = None,
    search: str | None = None,
    show_full: bool = True,
    offset: int = 0,
    limit: int = 100,
) -> list[Project]:
    """
    List projects open to the public, i.e. `active` ones, soonest start first.

    Parameters:
        region: Exact region filter.
        activity_domain: Exact domain filter.
        search: Case-insensitive match on title or short description.
        show_full: When False, projects without a free slot are left out.
        offset: Pagination offset.
        limit: Pagination limit.
    """
    statement = select(Project).where(Project.status == ProjectStatus.ACTIVE)
    if region:
        statement = statement.where(Project.region == region)
    if activity_domain:
        statement = statement.where(Project.activity_domain == activity_domain)
    if search:
        pattern = f"%{search}%"
        statement = statement.where(
            or_(
                Project.title.ilike(pattern),  # type: ignore[attr-defined]
                Project.short_description.ilike(pattern),  # type: ignore[attr-defined]
            )
        )
    if not show_full:
        statement = statement.where(
            Project.current_volunteers < Project.required_volunteers  # type: ignore[arg-type]
        )
    statement = (
        statement.order_by(Project.date_start, Project.id_project)  # type: ignore[arg-type]
        .offset(offset)
        .limit(limit)
    )
    return list(session.exec(statement).all())


def list_partner_projects(session: Session, partner_id: int) -> list[Project]:
    return list(
        session.exec(
            select(Project)
            .where(Project.id_partner == partner_id)
            .order_by(Project.created_at)  # type: ignore[arg-type]
        ).all()
    )


def update_project(
    session: Session,
    project_id: int,
    project_update: ProjectUpdate,
    partner_id: int | None = None,
) -> Project:
    """
    Edit a pending or active project.

    `status` and `current_volunteers` cannot be changed here; they belong to
    the state machine and the capacity tracker.

    Parameters:
        session: Database session.
        project_id: Project to edit.
        project_update: Fields to change.
        partner_id: When given, the project must belong to this partner.

    Returns:
        Project: The updated project.

    Raises:
        NotFoundError: If the project does not exist.
        InsufficientPermissionsError: If `partner_id` does not own the project.
        ValidationError: If the project is closed, the resulting dates are out
            of order, or the capacity would drop below the assigned volunteers.
    """
    project = (
        get_owned_project(session, project_id, partner_id)
        if partner_id is not None
        else get_project(session, project_id)
    )
    if not project_workflow.can_be_edited(project.status):
        raise ValidationError("A closed project cannot be edited", field="status")

    update_data = project_update.model_dump(exclude_unset=True)

    date_start = update_data.get("date_start", project.date_start)
    date_end = update_data.get("date_end", project.date_end)
    deadline = update_data.get("application_deadline", project.application_deadline)
    if date_start > date_end:
        raise ValidationError("date_start must not be after date_end", field="date_start")
    if deadline > date_end:
        raise ValidationError(
            "application_deadline must not be after date_end",
            field="application_deadline",
        )

    required = update_data.get("required_volunteers")
    if required is not None and required < project.current_volunteers:
        raise ValidationError(
            f"required_volunteers cannot drop below the {project.current_volunteers} "
            "volunteers already assigned",
            field="required_volunteers",
        )

    for key, value in update_data.items():
        setattr(project, key, value)
    project.updated_at = datetime.now()

    session.add(project)
    session.commit()
    session.refresh(project)
    return project


def close_project(
    session: Session, project_id: int, partner_id: int | None = None
) -> Project:
    """
    Close a project (owner or administrator).

    Closing an already closed project is a no-op and keeps `closed_at`.

    Raises:
        NotFoundError: If the project does not exist.
        InsufficientPermissionsError: If `partner_id` does not own the project.
    """
    project = (
        get_owned_project(session, project_id, partner_id)
        if partner_id is not None
        else get_project(session, project_id)
    )
    if project_workflow.is_closed(project.status):
        return project
    project_workflow.transition(project, ProjectStatus.CLOSED)
    session.add(project)
    session.commit()
    session.refresh(project)
    logger.info(f"Project {project_id} closed")
    return project


def validate_project(session: Session, project_id: int) -> Project:
    """
    Publish a pending project (administrator action).

    Raises:
        NotFoundError: If the project does not exist.
        IllegalTransitionError: If the project is closed.

    Validating an already active project is a no-op.
    """
    project = get_project(session, project_id)
    if project.status == ProjectStatus.ACTIVE:
        return project
    project_workflow.transition(project, ProjectStatus.ACTIVE)
    session.add(project)
    session.commit()
    session.refresh(project)
    logger.info(f"Project {project_id} validated and published")
    return project


def get_deadline_stats(
    session: Session, today: date | None = None, warning_days: int = 3
) -> DeadlineStats:
    """
    Count non-closed projects past their end date or ending within `warning_days`.
    """
    today = today or date.today()
    not_closed = Project.status != ProjectStatus.CLOSED
    overdue = session.exec(
        select(func.count())
        .select_from(Project)
        .where(not_closed, Project.date_end < today)
    ).one()
    due_soon = session.exec(
        select(func.count())
        .select_from(Project)
        .where(
            not_closed,
            Project.date_end >= today,
            Project.date_end <= today + timedelta(days=warning_days),
        )
    ).one()
    return DeadlineStats(overdue=overdue, due_soon=due_soon, total=overdue + due_soon)


def to_project_public(project: Project) -> ProjectPublic:
    return ProjectPublic.model_validate(
        project,
        update={
            "available_slots": available_slots(project),
            "is_full": not has_open_slot(project),
        },
    )
