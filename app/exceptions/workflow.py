"""Exceptions raised by the project lifecycle and assignment engine."""

from app.exceptions.base import AppException


class IllegalTransitionError(AppException):
    """A project status change is not allowed by the workflow table."""

    def __init__(self, current: str, target: str):
        """
        Parameters:
            current (str): Status the project is currently in.
            target (str): Status that was requested.
        """
        self.current = current
        self.target = target
        super().__init__(f"illegal transition: {current} -> {target}")


class CapacityExceededError(AppException):
    """The project has no open volunteer slot left."""

    def __init__(
        self,
        project_id: int,
        required: int,
        current: int,
        candidature_id: int | None = None,
    ):
        """
        Build the error for a full project.

        When raised from the accept-and-assign transaction, `candidature_id` is
        set: that candidature has already been moved to `accepted` and needs
        manual reconciliation.

        Parameters:
            project_id (int): The full project.
            required (int): Required volunteer count.
            current (int): Current volunteer count.
            candidature_id (int | None): Candidature left accepted without assignment.
        """
        self.project_id = project_id
        self.required = required
        self.current = current
        self.candidature_id = candidature_id
        super().__init__(
            f"Project {project_id} has reached its capacity ({current}/{required})"
        )


class MissingLinkError(AppException):
    """A candidature is not linked to a project or to a volunteer."""

    def __init__(self, candidature_id: int, missing: list[str]):
        """
        Parameters:
            candidature_id (int): The incomplete candidature.
            missing (list[str]): Missing references ("id_project", "id_volunteer").
        """
        self.candidature_id = candidature_id
        self.missing = missing
        super().__init__(
            f"Candidature {candidature_id} is missing {', '.join(missing)}"
        )
