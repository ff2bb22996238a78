from sqlmodel import Session, select

from app.exceptions import NotFoundError
from app.models.volunteer import Volunteer, VolunteerCreate, VolunteerPublic
from app.utils.logger import logger
from app.utils.validation import mask_email

PROFILE_FIELDS = (
    "address",
    "region",
    "education_level",
    "education_field",
    "skills",
    "motivation",
    "availability",
    "cv_url",
    "document_type",
    "document_number",
    "document_url",
)


def profile_completion(volunteer: Volunteer) -> int:
    """
    Percentage of the profile fields a volunteer has filled in.

    A field counts when it is set and not blank. Identity fields are always
    present and do not count.

    Returns:
        int: Rounded percentage between 0 and 100.
    """
    filled = 0
    for name in PROFILE_FIELDS:
        value = getattr(volunteer, name)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        filled += 1
    return round(filled / len(PROFILE_FIELDS) * 100)


def to_volunteer_public(volunteer: Volunteer) -> VolunteerPublic:
    return VolunteerPublic.model_validate(
        volunteer, update={"profile_completion": profile_completion(volunteer)}
    )


def create_volunteer(session: Session, volunteer_in: VolunteerCreate) -> Volunteer:
    """Register a volunteer profile in the `Candidat` status."""
    volunteer = Volunteer.model_validate(volunteer_in)
    session.add(volunteer)
    session.commit()
    session.refresh(volunteer)
    logger.info(
        f"Volunteer {volunteer.id_volunteer} registered ({mask_email(volunteer.email)})"
    )
    return volunteer


def get_volunteer(session: Session, volunteer_id: int) -> Volunteer:
    """
    Raises:
        NotFoundError: If no volunteer has this id.
    """
    volunteer = session.get(Volunteer, volunteer_id)
    if volunteer is None:
        raise NotFoundError("Volunteer", volunteer_id)
    return volunteer


def get_volunteer_by_email(session: Session, email: str) -> Volunteer | None:
    return session.exec(select(Volunteer).where(Volunteer.email == email)).first()
