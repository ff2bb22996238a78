from datetime import date, datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from .enums import VolunteerStatus, DocumentType

if TYPE_CHECKING:
    from app.models.assignment import Assignment


class VolunteerBase(SQLModel):
    last_name: str = Field(max_length=50)
    first_name: str = Field(max_length=50)
    email: str = Field(index=True)
    phone: str = Field(default="", max_length=50)
    birthdate: date | None = None
    nationality: str = Field(default="", max_length=50)
    sex: str | None = Field(default=None, max_length=1)
    address: str | None = None
    region: str | None = Field(default=None, max_length=100)
    education_level: str | None = Field(default=None, max_length=100)
    education_field: str | None = Field(default=None, max_length=100)
    skills: str = Field(default="", max_length=500)
    motivation: str | None = Field(default=None, max_length=3000)
    availability: str | None = Field(default=None, max_length=50)
    cv_url: str | None = None
    document_type: DocumentType | None = None
    document_number: str | None = Field(default=None, max_length=50)
    document_url: str | None = None


class Volunteer(VolunteerBase, table=True):
    id_volunteer: int | None = Field(default=None, primary_key=True)
    status: VolunteerStatus = Field(default=VolunteerStatus.CANDIDATE)
    registered_at: datetime = Field(default_factory=datetime.now)
    validated_at: datetime | None = None
    internal_notes: str | None = None
    assignments: list["Assignment"] = Relationship(back_populates="volunteer")


class VolunteerCreate(VolunteerBase):
    pass


class VolunteerPublic(VolunteerBase):
    id_volunteer: int
    status: VolunteerStatus
    registered_at: datetime
    profile_completion: int = 0
