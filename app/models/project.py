from datetime import date, datetime
from typing import TYPE_CHECKING
from pydantic import model_validator
from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field, Relationship
from .enums import ProjectStatus

if TYPE_CHECKING:
    from app.models.partner import Partner
    from app.models.assignment import Assignment
    from app.models.candidature import Candidature


class ProjectBase(SQLModel):
    title: str = Field(max_length=150)
    short_description: str = Field(max_length=300)
    long_description: str = Field(max_length=5000)
    activity_domain: str = Field(max_length=100)
    mission_type: str | None = Field(default=None, max_length=50)
    region: str = Field(max_length=100)
    city: str = Field(max_length=100)
    required_skills: str | None = Field(default=None, max_length=500)
    volunteer_benefits: str | None = Field(default=None, max_length=500)
    special_conditions: str | None = Field(default=None, max_length=1000)
    contact_name: str | None = Field(default=None, max_length=100)
    contact_email: str | None = None
    required_volunteers: int = Field(ge=1)
    date_start: date
    date_end: date
    application_deadline: date


class Project(ProjectBase, table=True):
    __table_args__ = (
        CheckConstraint(
            "current_volunteers >= 0", name="ck_project_current_volunteers_non_negative"
        ),
        CheckConstraint(
            "current_volunteers <= required_volunteers", name="ck_project_capacity"
        ),
    )

    id_project: int | None = Field(default=None, primary_key=True)
    id_partner: int = Field(foreign_key="partner.id_partner", index=True)
    # Only the capacity tracker writes this column
    current_volunteers: int = Field(default=0, ge=0)
    status: ProjectStatus = Field(default=ProjectStatus.PENDING, index=True)
    published_at: datetime | None = None
    closed_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    partner: "Partner" = Relationship(back_populates="projects")
    assignments: list["Assignment"] = Relationship(back_populates="project")
    candidatures: list["Candidature"] = Relationship(back_populates="project")


class ProjectCreate(ProjectBase):
    @model_validator(mode="after")
    def check_dates(self) -> "ProjectCreate":
        if self.date_start > self.date_end:
            raise ValueError("date_start must not be after date_end")
        if self.application_deadline > self.date_end:
            raise ValueError("application_deadline must not be after date_end")
        return self


class ProjectPublic(ProjectBase):
    id_project: int
    id_partner: int
    current_volunteers: int
    status: ProjectStatus
    published_at: datetime | None = None
    closed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    available_slots: int = 0
    is_full: bool = False


class ProjectUpdate(SQLModel):
    title: str | None = Field(default=None, max_length=150)
    short_description: str | None = Field(default=None, max_length=300)
    long_description: str | None = Field(default=None, max_length=5000)
    activity_domain: str | None = Field(default=None, max_length=100)
    mission_type: str | None = Field(default=None, max_length=50)
    region: str | None = Field(default=None, max_length=100)
    city: str | None = Field(default=None, max_length=100)
    required_skills: str | None = Field(default=None, max_length=500)
    volunteer_benefits: str | None = Field(default=None, max_length=500)
    special_conditions: str | None = Field(default=None, max_length=1000)
    contact_name: str | None = Field(default=None, max_length=100)
    contact_email: str | None = None
    required_volunteers: int | None = Field(default=None, ge=1)
    date_start: date | None = None
    date_end: date | None = None
    application_deadline: date | None = None


class DeadlineStats(SQLModel):
    overdue: int
    due_soon: int
    total: int
