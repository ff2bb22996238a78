"""HTTP error handlers for the FastAPI application.

Maps domain exceptions raised by the services to HTTP status codes, so the
engine itself never deals with transport concerns.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.exceptions import (
    AppException,
    NotFoundError,
    AlreadyExistsError,
    ValidationError,
    AuthenticationError,
    InsufficientPermissionsError,
    IllegalTransitionError,
    CapacityExceededError,
    MissingLinkError,
)
from app.utils.logger import logger


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Return 404 with the exception message."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
    )


async def already_exists_handler(
    request: Request, exc: AlreadyExistsError
) -> JSONResponse:
    """Return 409 Conflict for unique-field collisions."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
    )


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """
    Return 422 for business rule failures.

    The body includes `field` when the exception names one.
    """
    content = {"detail": str(exc)}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, content=content
    )


async def illegal_transition_handler(
    request: Request, exc: IllegalTransitionError
) -> JSONResponse:
    """Return 409: the project is not in a state that allows the change."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": str(exc),
            "kind": "IllegalTransition",
            "current": exc.current,
            "target": exc.target,
        },
    )


async def capacity_exceeded_handler(
    request: Request, exc: CapacityExceededError
) -> JSONResponse:
    """
    Return 409 for a full project.

    When the failure comes from an acceptance, the body tells the caller that
    the candidature stays `accepted` and must be reconciled.
    """
    content = {
        "detail": str(exc),
        "kind": "CapacityExceeded",
        "id_project": exc.project_id,
        "current_volunteers": exc.current,
        "required_volunteers": exc.required,
    }
    if exc.candidature_id is not None:
        content["id_candidature"] = exc.candidature_id
        content["candidature_status"] = "accepted"
        content["requires_reconciliation"] = True
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=content)


async def missing_link_handler(
    request: Request, exc: MissingLinkError
) -> JSONResponse:
    """Return 422: the candidature cannot be processed without its references."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={"detail": str(exc), "kind": "MissingLink", "missing": exc.missing},
    )


async def insufficient_permissions_handler(
    request: Request, exc: InsufficientPermissionsError
) -> JSONResponse:
    """Return 403 with the denial reason (and the action when known)."""
    content = {"detail": str(exc)}
    if exc.action:
        content["action"] = exc.action
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=content)


async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    """Return 401 with a `WWW-Authenticate: Bearer` header."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Return a generic 500 for application errors without a dedicated mapping."""
    logger.error(f"Unhandled application error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred"},
    )


def register_exception_handlers(app) -> None:
    """
    Register the domain-to-HTTP exception handlers on a FastAPI app.

    Specific handlers come before the AppException catch-all so that
    subclasses are matched first.
    """
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(AlreadyExistsError, already_exists_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    app.add_exception_handler(IllegalTransitionError, illegal_transition_handler)
    app.add_exception_handler(CapacityExceededError, capacity_exceeded_handler)
    app.add_exception_handler(MissingLinkError, missing_link_handler)

    app.add_exception_handler(
        InsufficientPermissionsError, insufficient_permissions_handler
    )
    app.add_exception_handler(AuthenticationError, authentication_error_handler)

    app.add_exception_handler(AppException, app_exception_handler)
