from enum import Enum


class UserType(str, Enum):
    ADMIN = "admin"
    PARTNER = "partner"
    VOLUNTEER = "volunteer"


class ProjectStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CLOSED = "closed"


class CandidatureStatus(str, Enum):
    PENDING = "pending"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class VolunteerStatus(str, Enum):
    CANDIDATE = "Candidat"
    WAITING = "En attente"
    ACTIVE = "Actif"
    INACTIVE = "Inactif"
    REFUSED = "Refusé"


class AssignmentStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "terminee"
    CANCELLED = "annulee"
    INACTIVE = "inactive"


class StructureType(str, Enum):
    PUBLIC_ADMINISTRATION = "Public-Administration"
    PUBLIC_COLLECTIVITE = "Public-Collectivite"
    SOCIETE_CIVILE = "SocieteCivile"
    SECTEUR_PRIVE = "SecteurPrive"
    PTF = "PTF"
    INSTITUTION_ACADEMIQUE = "InstitutionAcademique"


class ActionKind(str, Enum):
    SUBMIT_PROJECT = "submit-project"
    MANAGE_CANDIDATES = "manage-candidates"
    VIEW_STATISTICS = "view-statistics"
    VIEW_REPORTS = "view-reports"
    ACCESS_FINANCIAL_ZONE = "access-financial-zone"
    FINANCIAL_DASHBOARD = "financial-dashboard"
    HOST_DASHBOARD = "host-dashboard"


class DocumentType(str, Enum):
    CNIB = "CNIB"
    PASSPORT = "PASSEPORT"


class ExperienceLevel(str, Enum):
    BEGINNER = "debutant"
    INTERMEDIATE = "intermediaire"
    EXPERT = "expert"


class ReconciliationAction(str, Enum):
    RETRY = "retry"
    REVERT = "revert"


class NotificationLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"
