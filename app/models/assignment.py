from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from .enums import AssignmentStatus

if TYPE_CHECKING:
    from app.models.project import Project
    from app.models.volunteer import Volunteer


class AssignmentBase(SQLModel):
    id_volunteer: int = Field(foreign_key="volunteer.id_volunteer", index=True)
    id_project: int = Field(foreign_key="project.id_project", index=True)
    role: str = Field(max_length=100)
    notes: str | None = Field(default=None, max_length=1000)


class Assignment(AssignmentBase, table=True):
    id_assignment: int | None = Field(default=None, primary_key=True)
    status: AssignmentStatus = Field(default=AssignmentStatus.ACTIVE, index=True)
    assigned_at: datetime = Field(default_factory=datetime.now)
    ended_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    project: "Project" = Relationship(back_populates="assignments")
    volunteer: "Volunteer" = Relationship(back_populates="assignments")


class AssignmentPublic(AssignmentBase):
    id_assignment: int
    status: AssignmentStatus
    assigned_at: datetime
    ended_at: datetime | None = None


class AssignmentStats(SQLModel):
    total: int = 0
    active: int = 0
    finished: int = 0
    cancelled: int = 0
    inactive: int = 0
