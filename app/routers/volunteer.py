"""Volunteer profile router."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.dependencies import get_current_admin
from app.database.database import get_session
from app.models.volunteer import VolunteerCreate, VolunteerPublic
from app.services import volunteer as volunteer_service

router = APIRouter(prefix="/volunteers", tags=["volunteers"])


@router.post("/", response_model=VolunteerPublic, status_code=status.HTTP_201_CREATED)
def create_volunteer(
    volunteer_in: VolunteerCreate,
    session: Annotated[Session, Depends(get_session)],
) -> VolunteerPublic:
    """Register a volunteer profile. New volunteers start with the `Candidat` status."""
    volunteer = volunteer_service.create_volunteer(session, volunteer_in)
    return volunteer_service.to_volunteer_public(volunteer)


@router.get(
    "/{volunteer_id}",
    response_model=VolunteerPublic,
    dependencies=[Depends(get_current_admin)],
)
def get_volunteer(
    volunteer_id: int,
    session: Annotated[Session, Depends(get_session)],
) -> VolunteerPublic:
    """
    Volunteer profile with its completion percentage (administrators only).
    """
    volunteer = volunteer_service.get_volunteer(session, volunteer_id)
    return volunteer_service.to_volunteer_public(volunteer)
