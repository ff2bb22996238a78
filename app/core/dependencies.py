from typing import Annotated
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session, select

from app.core.security import decode_access_token
from app.database.database import get_session
from app.exceptions import InsufficientPermissionsError, InvalidTokenError
from app.models.admin import Admin
from app.models.partner import Partner
from app.models.token import TokenData
from app.services.deadline_monitor import DeadlineMonitorRegistry

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_data(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> TokenData:
    """
    Decode the bearer token of the request.

    Raises:
        InvalidTokenError: If no bearer token was sent or it does not verify.
    """
    if credentials is None:
        raise InvalidTokenError("Not authenticated")
    return decode_access_token(credentials.credentials)


def _load_admin(session: Session, token_data: TokenData) -> Admin:
    if token_data.mode != "admin":
        raise InvalidTokenError("Could not validate admin credentials")
    admin = session.exec(
        select(Admin).where(Admin.username == token_data.username)
    ).first()
    if admin is None:
        raise InvalidTokenError("Could not validate admin credentials")
    if not admin.is_active:
        raise InsufficientPermissionsError("Administrative capability revoked")
    return admin


def _load_partner(session: Session, token_data: TokenData) -> Partner:
    if token_data.mode != "partner":
        raise InvalidTokenError("Could not validate partner credentials")
    partner = session.exec(
        select(Partner).where(Partner.email == token_data.username)
    ).first()
    if partner is None:
        raise InvalidTokenError("Could not validate partner credentials")
    return partner


def get_current_admin(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    session: Annotated[Session, Depends(get_session)],
) -> Admin:
    """
    Resolve the active administrator behind an `admin` mode token.

    Raises:
        InvalidTokenError: 401 if the token is not an admin token or the admin is unknown.
        InsufficientPermissionsError: 403 if the admin account has been deactivated.
    """
    return _load_admin(session, token_data)


def get_current_partner(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    session: Annotated[Session, Depends(get_session)],
) -> Partner:
    """
    Resolve the partner behind a `partner` mode token (subject is the partner email).

    Inactive partners are returned as well: the permission validator is the
    single place that denies them.
    """
    return _load_partner(session, token_data)


def get_current_principal(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    session: Annotated[Session, Depends(get_session)],
) -> Admin | Partner:
    """Resolve either an administrator or a partner, for operations open to both."""
    if token_data.mode == "admin":
        return _load_admin(session, token_data)
    return _load_partner(session, token_data)


def get_monitor_registry(request: Request) -> DeadlineMonitorRegistry:
    """Return the deadline monitor registry owned by the running application."""
    return request.app.state.deadline_monitors
