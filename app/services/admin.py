from sqlmodel import Session, select

from app.exceptions import AlreadyExistsError, NotFoundError
from app.models.admin import Admin, AdminCreate
from app.utils.logger import logger


def create_admin(session: Session, admin_in: AdminCreate) -> Admin:
    """
    Register an administrator account.

    Raises:
        AlreadyExistsError: If the username is taken.
    """
    if get_admin_by_username(session, admin_in.username) is not None:
        raise AlreadyExistsError("Admin", "username", admin_in.username)
    admin = Admin.model_validate(admin_in)
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


def get_admin_by_username(session: Session, username: str) -> Admin | None:
    return session.exec(select(Admin).where(Admin.username == username)).first()


def is_active_admin(session: Session, username: str) -> bool:
    """Administrative capability check used by the deadline monitor."""
    admin = get_admin_by_username(session, username)
    return admin is not None and admin.is_active


def deactivate_admin(session: Session, admin_id: int) -> Admin:
    """
    Revoke an administrator's capability.

    Any deadline monitor running for this admin stops itself on its next
    authorization check; the router also stops it right away.
    """
    admin = session.get(Admin, admin_id)
    if admin is None:
        raise NotFoundError("Admin", admin_id)
    admin.is_active = False
    session.add(admin)
    session.commit()
    session.refresh(admin)
    logger.info(f"Admin {admin.username} deactivated")
    return admin
