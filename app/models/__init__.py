"""Import every table so SQLModel.metadata is complete (Alembic, create_all)."""

from app.models.admin import Admin
from app.models.assignment import Assignment
from app.models.candidature import Candidature
from app.models.partner import Partner
from app.models.project import Project
from app.models.volunteer import Volunteer

__all__ = ["Admin", "Assignment", "Candidature", "Partner", "Project", "Volunteer"]
