"""Assignment lifecycle router (administrators)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.dependencies import get_current_admin
from app.database.database import get_session
from app.models.assignment import AssignmentPublic
from app.models.enums import AssignmentStatus
from app.services import assignment as assignment_service

router = APIRouter(
    prefix="/assignments",
    tags=["assignments"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/{assignment_id}", response_model=AssignmentPublic)
def get_assignment(
    assignment_id: int,
    session: Annotated[Session, Depends(get_session)],
):
    return assignment_service.get_assignment(session, assignment_id)


@router.post("/{assignment_id}/terminate", response_model=AssignmentPublic)
def terminate_assignment(
    assignment_id: int,
    session: Annotated[Session, Depends(get_session)],
):
    """Mark an active assignment as finished and free its slot."""
    return assignment_service.end_assignment(
        session, assignment_id, AssignmentStatus.FINISHED
    )


@router.post("/{assignment_id}/cancel", response_model=AssignmentPublic)
def cancel_assignment(
    assignment_id: int,
    session: Annotated[Session, Depends(get_session)],
):
    """Cancel an active assignment and free its slot."""
    return assignment_service.end_assignment(
        session, assignment_id, AssignmentStatus.CANCELLED
    )
