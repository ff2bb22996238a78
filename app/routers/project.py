"""Project router: public discovery and partner-side project management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.dependencies import get_current_partner, get_current_principal
from app.database.database import get_session
from app.models.admin import Admin
from app.models.assignment import AssignmentPublic, AssignmentStats
from app.models.enums import ActionKind, AssignmentStatus
from app.models.partner import Partner
from app.models.project import ProjectCreate, ProjectPublic, ProjectUpdate
from app.services import assignment as assignment_service
from app.services import project as project_service
from app.services.permission import require_access
from app.utils.validation import ensure_id

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("/", response_model=ProjectPublic, status_code=status.HTTP_201_CREATED)
def submit_project(
    project_in: ProjectCreate,
    session: Annotated[Session, Depends(get_session)],
    partner: Annotated[Partner, Depends(get_current_partner)],
) -> ProjectPublic:
    """
    Submit a project for administrator validation.

    The partner must be active and hold a structure type allowed to create
    projects (every type except PTF). The project starts `pending`.
    """
    project = project_service.submit_project(session, partner, project_in)
    return project_service.to_project_public(project)


@router.get("/", response_model=list[ProjectPublic])
def list_public_projects(
    session: Annotated[Session, Depends(get_session)],
    region: str | None = Query(default=None, description="Filter by region"),
    activity_domain: str | None = Query(
        default=None, description="Filter by activity domain"
    ),
    search: str | None = Query(
        default=None, description="Text search in title and short description"
    ),
    show_full: bool = Query(
        default=True, description="Include projects without a free slot"
    ),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=100),
) -> list[ProjectPublic]:
    """
    Public listing of active projects. No authentication required.
    """
    projects = project_service.list_public_projects(
        session,
        region=region,
        activity_domain=activity_domain,
        search=search,
        show_full=show_full,
        offset=offset,
        limit=limit,
    )
    return [project_service.to_project_public(p) for p in projects]


@router.get("/mine", response_model=list[ProjectPublic])
def list_my_projects(
    session: Annotated[Session, Depends(get_session)],
    partner: Annotated[Partner, Depends(get_current_partner)],
) -> list[ProjectPublic]:
    partner_id = ensure_id(partner.id_partner, "Partner")
    projects = project_service.list_partner_projects(session, partner_id)
    return [project_service.to_project_public(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectPublic)
def get_project(
    project_id: int,
    session: Annotated[Session, Depends(get_session)],
) -> ProjectPublic:
    project = project_service.get_project(session, project_id)
    return project_service.to_project_public(project)


@router.patch("/{project_id}", response_model=ProjectPublic)
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    session: Annotated[Session, Depends(get_session)],
    partner: Annotated[Partner, Depends(get_current_partner)],
) -> ProjectPublic:
    """
    Edit a project owned by the current partner.

    Closed projects are read-only (422). Inactive partners are denied (403).
    """
    require_access(partner, ActionKind.SUBMIT_PROJECT)
    project = project_service.update_project(
        session,
        project_id,
        project_update,
        partner_id=ensure_id(partner.id_partner, "Partner"),
    )
    return project_service.to_project_public(project)


@router.post("/{project_id}/close", response_model=ProjectPublic)
def close_project(
    project_id: int,
    session: Annotated[Session, Depends(get_session)],
    partner: Annotated[Partner, Depends(get_current_partner)],
) -> ProjectPublic:
    """Close a project owned by the current partner; closing it again changes nothing."""
    require_access(partner, ActionKind.SUBMIT_PROJECT)
    project = project_service.close_project(
        session, project_id, partner_id=ensure_id(partner.id_partner, "Partner")
    )
    return project_service.to_project_public(project)


def _managed_project_id(session: Session, partner: Partner, project_id: int) -> int:
    require_access(partner, ActionKind.MANAGE_CANDIDATES)
    project = project_service.get_owned_project(
        session, project_id, ensure_id(partner.id_partner, "Partner")
    )
    return ensure_id(project.id_project, "Project")


@router.get("/{project_id}/assignments", response_model=list[AssignmentPublic])
def list_project_assignments(
    project_id: int,
    session: Annotated[Session, Depends(get_session)],
    partner: Annotated[Partner, Depends(get_current_partner)],
    assignment_status: AssignmentStatus | None = Query(default=None, alias="status"),
):
    _managed_project_id(session, partner, project_id)
    return assignment_service.list_project_assignments(
        session, project_id, assignment_status
    )


@router.get("/{project_id}/stats", response_model=AssignmentStats)
def get_project_assignment_stats(
    project_id: int,
    session: Annotated[Session, Depends(get_session)],
    partner: Annotated[Partner, Depends(get_current_partner)],
) -> AssignmentStats:
    """Count the project's assignments per status."""
    _managed_project_id(session, partner, project_id)
    return assignment_service.get_assignment_stats(session, project_id)


@router.delete("/{project_id}/assignments/{assignment_id}", response_model=ProjectPublic)
def unassign_volunteer(
    project_id: int,
    assignment_id: int,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Admin | Partner, Depends(get_current_principal)],
) -> ProjectPublic:
    """
    Remove a volunteer from a project.

    Open to the owning partner (with volunteer management rights) and to
    administrators. Returns the project with its updated counter.
    """
    partner_id = None
    if isinstance(principal, Partner):
        require_access(principal, ActionKind.MANAGE_CANDIDATES)
        partner_id = ensure_id(principal.id_partner, "Partner")
    project = assignment_service.unassign(
        session, project_id, assignment_id, partner_id=partner_id
    )
    return project_service.to_project_public(project)
