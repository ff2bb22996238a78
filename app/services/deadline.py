"""Deadline scan: closes overdue projects and reports upcoming deadlines."""

from datetime import date, timedelta

from sqlmodel import Session, select

from app.core.telemetry import projects_auto_closed, tracer
from app.exceptions import IllegalTransitionError
from app.models.enums import NotificationLevel, ProjectStatus
from app.models.notification import DeadlineNotification
from app.models.project import Project
from app.services.project_workflow import transition
from app.utils.logger import logger
from app.utils.validation import ensure_id


def _close_overdue(session: Session, project: Project) -> DeadlineNotification:
    project_id = ensure_id(project.id_project, "Project")
    previous = ProjectStatus(project.status)
    try:
        transition(project, ProjectStatus.CLOSED)
    except IllegalTransitionError as e:
        session.rollback()
        return DeadlineNotification(
            level=NotificationLevel.INFO,
            id_project=project_id,
            project_title=project.title,
            message=f"Project '{project.title}' is past its deadline but could not be closed: {e}",
        )

    session.add(project)
    session.commit()
    projects_auto_closed.add(1, {"previous_status": previous.value})
    logger.info(f"Project {project_id} closed automatically (was {previous.value})")
    if previous == ProjectStatus.ACTIVE:
        message = f"Project '{project.title}' was closed automatically: its end date has passed"
    else:
        message = (
            f"Project '{project.title}' was closed automatically: its end date "
            "passed before it was ever validated"
        )
    return DeadlineNotification(
        level=NotificationLevel.WARNING,
        id_project=project_id,
        project_title=project.title,
        message=message,
        auto_closed=True,
    )


def scan_deadlines(
    session: Session, today: date | None = None, warning_days: int = 3
) -> list[DeadlineNotification]:
    """
    Run one pass over every non-closed project.

    - end date before today: the project is closed (a rejected transition
      becomes an informational notification, never an exception);
    - end date today: alert;
    - end date exactly `warning_days` ahead: informational reminder.

    A failure on one project is logged and does not stop the scan.

    Args:
        session: Database session; each closure is committed on its own.
        today: Reference day, defaults to the current date.
        warning_days: Lead time of the reminder.

    Returns:
        list[DeadlineNotification]: Notifications in project end-date order.
    """
    today = today or date.today()
    warning_day = today + timedelta(days=warning_days)
    notifications: list[DeadlineNotification] = []

    with tracer.start_as_current_span("scan_deadlines") as span:
        projects = session.exec(
            select(Project)
            .where(
                Project.status != ProjectStatus.CLOSED,
                Project.date_end <= warning_day,
            )
            .order_by(Project.date_end, Project.id_project)  # type: ignore[arg-type]
        ).all()
        span.set_attribute("projects.scanned", len(projects))

        for project in projects:
            try:
                if project.date_end < today:
                    notifications.append(_close_overdue(session, project))
                elif project.date_end == today:
                    notifications.append(
                        DeadlineNotification(
                            level=NotificationLevel.ALERT,
                            id_project=ensure_id(project.id_project, "Project"),
                            project_title=project.title,
                            message=f"Project '{project.title}' reaches its deadline today",
                        )
                    )
                elif project.date_end == warning_day:
                    notifications.append(
                        DeadlineNotification(
                            level=NotificationLevel.INFO,
                            id_project=ensure_id(project.id_project, "Project"),
                            project_title=project.title,
                            message=(
                                f"Project '{project.title}' reaches its deadline "
                                f"in {warning_days} days"
                            ),
                        )
                    )
            except Exception:
                session.rollback()
                logger.exception(f"Deadline scan failed for project {project.id_project}")

        span.set_attribute("notifications.count", len(notifications))
    return notifications
