"""
Capacity tracking for projects.

`current_volunteers` is only ever written here, through guarded UPDATE
statements evaluated by the database, so the check and the write cannot be
split by a concurrent acceptance.
"""

from sqlalchemy import update
from sqlmodel import Session

from app.exceptions import CapacityExceededError
from app.models.project import Project
from app.utils.validation import ensure_id


def has_open_slot(project: Project) -> bool:
    return project.current_volunteers < project.required_volunteers


def available_slots(project: Project) -> int:
    return max(0, project.required_volunteers - project.current_volunteers)


def reserve_slot(
    session: Session, project: Project, candidature_id: int | None = None
) -> Project:
    """
    Increment the volunteer counter if a slot is still free.

    Does not commit: the increment belongs to the caller's transaction.

    Args:
        session: Database session holding the caller's transaction.
        project: Project to increment (refreshed in place).
        candidature_id: Reported in the error when the reservation comes from an acceptance.

    Raises:
        CapacityExceededError: If the guarded update matched no row.
    """
    project_id = ensure_id(project.id_project, "Project")
    session.flush()
    result = session.connection().execute(
        update(Project)
        .where(
            Project.id_project == project_id,  # type: ignore[arg-type]
            Project.current_volunteers < Project.required_volunteers,  # type: ignore[arg-type]
        )
        .values(current_volunteers=Project.current_volunteers + 1)
    )
    session.refresh(project)
    if result.rowcount == 0:
        raise CapacityExceededError(
            project_id,
            project.required_volunteers,
            project.current_volunteers,
            candidature_id=candidature_id,
        )
    return project


def release_slot(session: Session, project: Project) -> Project:
    """
    Decrement the volunteer counter, never below zero.

    Does not commit. A counter already at zero is left unchanged.
    """
    project_id = ensure_id(project.id_project, "Project")
    session.flush()
    session.connection().execute(
        update(Project)
        .where(
            Project.id_project == project_id,  # type: ignore[arg-type]
            Project.current_volunteers > 0,  # type: ignore[arg-type]
        )
        .values(current_volunteers=Project.current_volunteers - 1)
    )
    session.refresh(project)
    return project
