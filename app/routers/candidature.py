"""Candidature router: public application and reviewer decisions."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.dependencies import get_current_principal
from app.database.database import get_session
from app.exceptions import InsufficientPermissionsError
from app.models.admin import Admin
from app.models.candidature import (
    Candidature,
    CandidatureCreate,
    CandidaturePublic,
    InterviewRequest,
    RejectCandidatureRequest,
)
from app.models.enums import ActionKind
from app.models.outcome import AssignmentOutcome
from app.models.partner import Partner
from app.models.project import Project
from app.services import assignment as assignment_service
from app.services import candidature as candidature_service
from app.services.permission import require_access

router = APIRouter(prefix="/candidatures", tags=["candidatures"])


def _authorize_reviewer(
    session: Session, principal: Admin | Partner, candidature_id: int
) -> Candidature:
    """
    Load a candidature and check the caller may decide on it.

    Administrators may review any candidature. A partner must be allowed to
    manage volunteers and own the project applied to.
    """
    candidature = candidature_service.get_candidature(session, candidature_id)
    if isinstance(principal, Admin):
        return candidature

    require_access(principal, ActionKind.MANAGE_CANDIDATES)
    project = (
        session.get(Project, candidature.id_project)
        if candidature.id_project is not None
        else None
    )
    if project is None or project.id_partner != principal.id_partner:
        raise InsufficientPermissionsError(
            "You can only review candidatures to your own projects",
            action=ActionKind.MANAGE_CANDIDATES.value,
        )
    return candidature


@router.post(
    "/", response_model=CandidaturePublic, status_code=status.HTTP_201_CREATED
)
def submit_candidature(
    candidature_in: CandidatureCreate,
    session: Annotated[Session, Depends(get_session)],
):
    """
    Apply to an active project. No authentication required.

    Skills may be sent as a list or a comma-separated string; they are stored
    trimmed and comma-separated.
    """
    return candidature_service.submit_candidature(session, candidature_in)


@router.get("/{candidature_id}", response_model=CandidaturePublic)
def get_candidature(
    candidature_id: int,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Admin | Partner, Depends(get_current_principal)],
):
    return _authorize_reviewer(session, principal, candidature_id)


@router.post("/{candidature_id}/accept", response_model=AssignmentOutcome)
def accept_candidature(
    candidature_id: int,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Admin | Partner, Depends(get_current_principal)],
) -> AssignmentOutcome:
    """
    Accept a candidature and assign the volunteer to the project.

    - 200 with `already_assigned=true` when the volunteer already holds an
      active assignment on the project.
    - 409 when the project is full; the candidature stays `accepted` and
      shows up in the reconciliation list.
    - 422 when the candidature lacks its project or volunteer reference,
      or when the project is closed.
    """
    _authorize_reviewer(session, principal, candidature_id)
    return assignment_service.accept_and_assign(session, candidature_id)


@router.post("/{candidature_id}/reject", response_model=CandidaturePublic)
def reject_candidature(
    candidature_id: int,
    request: RejectCandidatureRequest,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Admin | Partner, Depends(get_current_principal)],
):
    _authorize_reviewer(session, principal, candidature_id)
    return candidature_service.reject_candidature(session, candidature_id, request)


@router.post("/{candidature_id}/interview", response_model=CandidaturePublic)
def schedule_interview(
    candidature_id: int,
    request: InterviewRequest,
    session: Annotated[Session, Depends(get_session)],
    principal: Annotated[Admin | Partner, Depends(get_current_principal)],
):
    _authorize_reviewer(session, principal, candidature_id)
    return candidature_service.schedule_interview(session, candidature_id, request)
