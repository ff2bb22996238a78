"""Exceptions for lookups and persistence of domain records."""

from app.exceptions.base import AppException


class NotFoundError(AppException):
    """Referenced record does not exist."""

    def __init__(self, resource: str, identifier: int | str):
        """
        Parameters:
            resource (str): Entity name, e.g. "Project" or "Candidature".
            identifier (int | str): Identifier that was looked up.
        """
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with identifier '{identifier}' not found")


class AlreadyExistsError(AppException):
    """A unique field value is already taken."""

    def __init__(self, resource: str, field: str, value: int | str):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} with {field}='{value}' already exists")


class ValidationError(AppException):
    """Business rule validation failed."""

    def __init__(self, message: str, field: str | None = None):
        """
        Parameters:
            message (str): Description of the rule that was violated.
            field (str | None): Offending field, when the failure is field-specific.
        """
        self.field = field
        super().__init__(message)
