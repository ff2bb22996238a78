"""
Application-to-assignment transaction and assignment lifecycle.

Accepting a candidature is a multi-step operation with deliberate commit
points:

1. the candidature status is committed as `accepted` first;
2. the volunteer is found or created from the candidature snapshot and committed;
3. the project row is locked, the assignment is created and the capacity
   counter is incremented in a single final commit.

A failure in step 3 leaves the candidature `accepted` without an assignment.
Such candidatures are listed by `list_pending_reconciliation` and repaired by
`reconcile_candidature`.
"""

from datetime import datetime

from sqlmodel import Session, func, select

from app.core.telemetry import assignments_created, capacity_rejections, tracer
from app.exceptions import (
    CapacityExceededError,
    InsufficientPermissionsError,
    MissingLinkError,
    NotFoundError,
    ValidationError,
)
from app.models.assignment import Assignment, AssignmentPublic, AssignmentStats
from app.models.candidature import Candidature, CandidaturePublic
from app.models.enums import (
    AssignmentStatus,
    CandidatureStatus,
    ReconciliationAction,
    VolunteerStatus,
)
from app.models.outcome import AssignmentOutcome
from app.models.project import Project
from app.models.volunteer import Volunteer
from app.services.capacity import has_open_slot, release_slot, reserve_slot
from app.services.project_workflow import is_closed
from app.services.volunteer import get_volunteer_by_email, to_volunteer_public
from app.utils.logger import logger
from app.utils.validation import ensure_id, mask_email

DEFAULT_AVAILABILITY = "Temps plein"
DEFAULT_REGION = "À définir"

ENDED_STATUSES = (AssignmentStatus.FINISHED, AssignmentStatus.CANCELLED)

_STATS_FIELDS = {
    AssignmentStatus.ACTIVE: "active",
    AssignmentStatus.FINISHED: "finished",
    AssignmentStatus.CANCELLED: "cancelled",
    AssignmentStatus.INACTIVE: "inactive",
}


def get_assignment(session: Session, assignment_id: int) -> Assignment:
    assignment = session.get(Assignment, assignment_id)
    if assignment is None:
        raise NotFoundError("Assignment", assignment_id)
    return assignment


def find_active_assignment(
    session: Session, volunteer_id: int, project_id: int
) -> Assignment | None:
    return session.exec(
        select(Assignment).where(
            Assignment.id_volunteer == volunteer_id,
            Assignment.id_project == project_id,
            Assignment.status == AssignmentStatus.ACTIVE,
        )
    ).first()


def find_or_create_volunteer(
    session: Session, candidature: Candidature
) -> tuple[Volunteer, bool]:
    """
    Resolve the volunteer an accepted candidature refers to.

    Lookup order: the candidature's `id_volunteer`, then a volunteer with the
    same email. When neither exists a `Candidat` volunteer is built from the
    candidature snapshot, committed, and the candidature is relinked to it.

    Args:
        session: Database session.
        candidature: Candidature carrying the applicant snapshot.

    Returns:
        tuple[Volunteer, bool]: The volunteer and whether it was just created.
    """
    if candidature.id_volunteer is not None:
        volunteer = session.get(Volunteer, candidature.id_volunteer)
        if volunteer is not None:
            return volunteer, False

    volunteer = get_volunteer_by_email(session, candidature.email)
    created = volunteer is None
    if volunteer is None:
        volunteer = Volunteer(
            first_name=candidature.first_name,
            last_name=candidature.last_name,
            email=candidature.email,
            phone=candidature.phone or "",
            document_type=candidature.document_type,
            document_number=candidature.document_number,
            skills=candidature.skills,
            motivation=candidature.motivation_letter,
            availability=DEFAULT_AVAILABILITY,
            region=DEFAULT_REGION,
            status=VolunteerStatus.CANDIDATE,
        )
        session.add(volunteer)
        session.flush()
        logger.info(
            f"Volunteer {volunteer.id_volunteer} created from candidature "
            f"{candidature.id_candidature} ({mask_email(volunteer.email)})"
        )

    if candidature.id_volunteer != volunteer.id_volunteer:
        candidature.id_volunteer = volunteer.id_volunteer
        candidature.updated_at = datetime.now()
        session.add(candidature)
    session.commit()
    session.refresh(volunteer)
    return volunteer, created


def _lock_project(session: Session, project_id: int) -> Project:
    project = session.exec(
        select(Project)
        .where(Project.id_project == project_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


def _outcome(
    candidature: Candidature,
    volunteer: Volunteer,
    project: Project,
    assignment: Assignment | None,
    *,
    already_assigned: bool,
    volunteer_created: bool,
    message: str,
) -> AssignmentOutcome:
    return AssignmentOutcome(
        candidature=CandidaturePublic.model_validate(candidature),
        volunteer=to_volunteer_public(volunteer),
        assignment=AssignmentPublic.model_validate(assignment) if assignment else None,
        already_assigned=already_assigned,
        volunteer_created=volunteer_created,
        current_volunteers=project.current_volunteers,
        required_volunteers=project.required_volunteers,
        message=message,
    )


def accept_and_assign(session: Session, candidature_id: int) -> AssignmentOutcome:
    """
    Accept a candidature and assign its volunteer to the project.

    Accepting twice is idempotent: the second call reports `already_assigned`
    and changes nothing.

    Args:
        session: Database session.
        candidature_id: Candidature to accept.

    Returns:
        AssignmentOutcome: Candidature, volunteer, the new assignment (None when
        already assigned) and the project counters.

    Raises:
        NotFoundError: If the candidature or its project does not exist.
        MissingLinkError: If the candidature has no project or no volunteer reference.
        ValidationError: If the project is closed. Nothing is changed.
        CapacityExceededError: If the project is full. The candidature stays
            `accepted`, this partial commit is intended.
    """
    with tracer.start_as_current_span("accept_and_assign") as span:
        span.set_attribute("candidature.id", candidature_id)

        candidature = session.get(Candidature, candidature_id)
        if candidature is None:
            raise NotFoundError("Candidature", candidature_id)

        missing = [
            name
            for name in ("id_project", "id_volunteer")
            if getattr(candidature, name) is None
        ]
        if missing:
            raise MissingLinkError(candidature_id, missing)

        project_id = ensure_id(candidature.id_project, "Project")
        span.set_attribute("project.id", project_id)
        project = session.get(Project, project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        if is_closed(project.status):
            logger.warning(
                f"Refusing to accept candidature {candidature_id}: project {project_id} is closed"
            )
            raise ValidationError(
                f"Project {project_id} is closed and takes no new volunteers",
                field="status",
            )

        if candidature.status != CandidatureStatus.ACCEPTED:
            candidature.status = CandidatureStatus.ACCEPTED
            candidature.updated_at = datetime.now()
            session.add(candidature)
            session.commit()
            session.refresh(candidature)

        volunteer, created = find_or_create_volunteer(session, candidature)
        volunteer_id = ensure_id(volunteer.id_volunteer, "Volunteer")

        project = _lock_project(session, project_id)

        if find_active_assignment(session, volunteer_id, project_id) is not None:
            session.commit()
            logger.info(
                f"Volunteer {volunteer_id} already assigned to project {project_id}"
            )
            return _outcome(
                candidature,
                volunteer,
                project,
                None,
                already_assigned=True,
                volunteer_created=created,
                message="Volunteer already assigned to this project",
            )

        if not has_open_slot(project):
            error = CapacityExceededError(
                project_id,
                project.required_volunteers,
                project.current_volunteers,
                candidature_id=candidature_id,
            )
            session.rollback()
            capacity_rejections.add(1, {"reason": "full"})
            logger.warning(
                f"Project {project_id} is full, candidature {candidature_id} "
                "accepted without assignment"
            )
            raise error

        now = datetime.now()
        assignment = Assignment(
            id_volunteer=volunteer_id,
            id_project=project_id,
            role=candidature.requested_role,
            notes=f"Affectation automatique depuis candidature #{candidature_id}",
            status=AssignmentStatus.ACTIVE,
            assigned_at=now,
            created_at=now,
            updated_at=now,
        )
        session.add(assignment)
        session.flush()

        try:
            reserve_slot(session, project, candidature_id=candidature_id)
        except CapacityExceededError:
            # Lost the race for the last slot: drop the flushed assignment
            session.rollback()
            capacity_rejections.add(1, {"reason": "race"})
            raise

        session.commit()
        session.refresh(assignment)
        session.refresh(project)
        assignments_created.add(1)
        logger.info(
            f"Assignment {assignment.id_assignment} created: volunteer {volunteer_id} "
            f"-> project {project_id} ({project.current_volunteers}/"
            f"{project.required_volunteers})"
        )
        return _outcome(
            candidature,
            volunteer,
            project,
            assignment,
            already_assigned=False,
            volunteer_created=created,
            message="Candidature accepted and volunteer assigned",
        )


def unassign(
    session: Session,
    project_id: int,
    assignment_id: int,
    partner_id: int | None = None,
) -> Project:
    """
    Remove a volunteer from a project.

    The assignment is deleted and, when it was still active, the project
    counter is decremented (never below zero). Both changes share one commit.

    Parameters:
        session: Database session.
        project_id: Project the assignment must belong to.
        assignment_id: Assignment to delete.
        partner_id: When given, the project must belong to this partner.

    Returns:
        Project: The project with its refreshed counter.

    Raises:
        NotFoundError: If the project or the assignment does not exist.
        InsufficientPermissionsError: If `partner_id` does not own the project.
        ValidationError: If the assignment belongs to another project.
    """
    project = session.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    if partner_id is not None and project.id_partner != partner_id:
        raise InsufficientPermissionsError("You do not own this project")

    assignment = get_assignment(session, assignment_id)
    if assignment.id_project != project_id:
        raise ValidationError(
            f"Assignment {assignment_id} does not belong to project {project_id}",
            field="assignment_id",
        )

    was_active = assignment.status == AssignmentStatus.ACTIVE
    try:
        session.delete(assignment)
        if was_active:
            release_slot(session, project)
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(project)
    logger.info(f"Assignment {assignment_id} removed from project {project_id}")
    return project


def end_assignment(
    session: Session, assignment_id: int, status: AssignmentStatus
) -> Assignment:
    """
    Finish or cancel an active assignment, keeping the row for history.

    Raises:
        NotFoundError: If the assignment does not exist.
        ValidationError: If `status` is not an end status or the assignment
            is no longer active.
    """
    if status not in ENDED_STATUSES:
        raise ValidationError(
            f"{status.value} is not an end status for an assignment", field="status"
        )
    assignment = get_assignment(session, assignment_id)
    if assignment.status != AssignmentStatus.ACTIVE:
        raise ValidationError(
            f"Assignment {assignment_id} is already {assignment.status.value}",
            field="status",
        )

    project = session.get(Project, assignment.id_project)
    if project is None:
        raise NotFoundError("Project", assignment.id_project)

    now = datetime.now()
    assignment.status = status
    assignment.ended_at = now
    assignment.updated_at = now
    session.add(assignment)
    try:
        release_slot(session, project)
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(assignment)
    return assignment


def list_project_assignments(
    session: Session, project_id: int, status: AssignmentStatus | None = None
) -> list[Assignment]:
    query = select(Assignment).where(Assignment.id_project == project_id)
    if status is not None:
        query = query.where(Assignment.status == status)
    return list(session.exec(query.order_by(Assignment.assigned_at)).all())  # type: ignore[arg-type]


def get_assignment_stats(session: Session, project_id: int) -> AssignmentStats:
    """Count a project's assignments per status."""
    rows = session.exec(
        select(Assignment.status, func.count())
        .where(Assignment.id_project == project_id)
        .group_by(Assignment.status)  # type: ignore[arg-type]
    ).all()
    stats = AssignmentStats()
    for status, count in rows:
        setattr(stats, _STATS_FIELDS[AssignmentStatus(status)], count)
        stats.total += count
    return stats


def list_pending_reconciliation(
    session: Session, project_id: int | None = None
) -> list[Candidature]:
    """
    Accepted candidatures that have no active assignment.

    These are left behind when an acceptance failed after its status commit,
    typically because the project was full.
    """
    active_assignment = select(Assignment.id_assignment).where(
        Assignment.id_volunteer == Candidature.id_volunteer,
        Assignment.id_project == Candidature.id_project,
        Assignment.status == AssignmentStatus.ACTIVE,
    )
    query = select(Candidature).where(
        Candidature.status == CandidatureStatus.ACCEPTED,
        ~active_assignment.exists(),
    )
    if project_id is not None:
        query = query.where(Candidature.id_project == project_id)
    return list(session.exec(query.order_by(Candidature.updated_at)).all())  # type: ignore[arg-type]


def reconcile_candidature(
    session: Session, candidature_id: int, action: ReconciliationAction
) -> AssignmentOutcome | Candidature:
    """
    Repair an accepted candidature that has no assignment.

    `retry` runs the acceptance again (and may raise CapacityExceededError
    again); `revert` puts the candidature back to `pending`.

    Raises:
        NotFoundError: If the candidature does not exist.
        ValidationError: If the candidature is not accepted, or is already
            assigned when reverting.
    """
    candidature = session.get(Candidature, candidature_id)
    if candidature is None:
        raise NotFoundError("Candidature", candidature_id)
    if candidature.status != CandidatureStatus.ACCEPTED:
        raise ValidationError(
            f"Candidature {candidature_id} is {candidature.status.value}, "
            "only accepted candidatures can be reconciled",
            field="status",
        )

    if action == ReconciliationAction.RETRY:
        return accept_and_assign(session, candidature_id)

    if (
        candidature.id_volunteer is not None
        and candidature.id_project is not None
        and find_active_assignment(
            session, candidature.id_volunteer, candidature.id_project
        )
        is not None
    ):
        raise ValidationError(
            f"Candidature {candidature_id} is already assigned, nothing to revert",
            field="status",
        )

    candidature.status = CandidatureStatus.PENDING
    candidature.internal_notes = (
        f"{candidature.internal_notes}\nAcceptance reverted"
        if candidature.internal_notes
        else "Acceptance reverted"
    )
    candidature.updated_at = datetime.now()
    session.add(candidature)
    session.commit()
    session.refresh(candidature)
    logger.info(f"Candidature {candidature_id} reverted to pending")
    return candidature
