"""Candidature intake and review (everything except acceptance)."""

from datetime import datetime

from sqlmodel import Session, select

from app.exceptions import NotFoundError, ValidationError
from app.models.candidature import (
    Candidature,
    CandidatureCreate,
    InterviewRequest,
    RejectCandidatureRequest,
)
from app.models.enums import CandidatureStatus
from app.models.project import Project
from app.services.project_workflow import can_accept_applications
from app.utils.logger import logger
from app.utils.validation import mask_email

# Statuses from which a reviewer may still reject or schedule an interview
REVIEWABLE_STATUSES = (CandidatureStatus.PENDING, CandidatureStatus.INTERVIEW)


def get_candidature(session: Session, candidature_id: int) -> Candidature:
    candidature = session.get(Candidature, candidature_id)
    if candidature is None:
        raise NotFoundError("Candidature", candidature_id)
    return candidature


def submit_candidature(
    session: Session, candidature_in: CandidatureCreate
) -> Candidature:
    """
    Record an application to a project.

    Args:
        session: Database session.
        candidature_in: Applicant snapshot; skills are already normalized.

    Returns:
        Candidature: The stored candidature, `pending`.

    Raises:
        NotFoundError: If the project does not exist.
        ValidationError: If the project is not accepting applications.
    """
    project = session.get(Project, candidature_in.id_project)
    if project is None:
        raise NotFoundError("Project", candidature_in.id_project)
    if not can_accept_applications(project.status):
        raise ValidationError(
            f"Project {project.id_project} is not accepting applications",
            field="id_project",
        )

    candidature = Candidature.model_validate(candidature_in)
    session.add(candidature)
    session.commit()
    session.refresh(candidature)
    logger.info(
        f"Candidature {candidature.id_candidature} submitted to project "
        f"{project.id_project} by {mask_email(candidature.email)}"
    )
    return candidature


def _ensure_reviewable(candidature: Candidature, action: str) -> None:
    if candidature.status not in REVIEWABLE_STATUSES:
        raise ValidationError(
            f"Cannot {action} candidature in status {candidature.status.value}",
            field="status",
        )


def reject_candidature(
    session: Session, candidature_id: int, request: RejectCandidatureRequest
) -> Candidature:
    """
    Reject a pending or interviewed candidature.

    The reason, if any, is appended to the internal notes.
    """
    candidature = get_candidature(session, candidature_id)
    _ensure_reviewable(candidature, "reject")

    candidature.status = CandidatureStatus.REJECTED
    if request.reason:
        candidature.internal_notes = _append_note(
            candidature.internal_notes, f"Rejected: {request.reason}"
        )
    candidature.updated_at = datetime.now()
    session.add(candidature)
    session.commit()
    session.refresh(candidature)
    return candidature


def schedule_interview(
    session: Session, candidature_id: int, request: InterviewRequest
) -> Candidature:
    candidature = get_candidature(session, candidature_id)
    _ensure_reviewable(candidature, "schedule an interview for")

    candidature.status = CandidatureStatus.INTERVIEW
    candidature.interview_date = request.interview_date
    if request.notes:
        candidature.internal_notes = _append_note(
            candidature.internal_notes, request.notes
        )
    candidature.updated_at = datetime.now()
    session.add(candidature)
    session.commit()
    session.refresh(candidature)
    return candidature


def list_project_candidatures(
    session: Session, project_id: int, status: CandidatureStatus | None = None
) -> list[Candidature]:
    query = select(Candidature).where(Candidature.id_project == project_id)
    if status is not None:
        query = query.where(Candidature.status == status)
    return list(session.exec(query.order_by(Candidature.created_at)).all())  # type: ignore[arg-type]


def _append_note(existing: str | None, note: str) -> str:
    return f"{existing}\n{note}" if existing else note
