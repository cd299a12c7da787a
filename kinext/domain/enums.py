"""Domain enumerations for the Kinext application.

Enums represent fixed sets of domain values stored as strings in tenant
documents (CRM statuses, job types, content block kinds).
"""

from enum import Enum


class UserRole(str, Enum):
    """Role stored on the identity record."""

    USER = "user"
    ADMIN = "admin"


class ContactStatus(str, Enum):
    """CRM contact pipeline stage."""

    LEAD = "lead"
    PROSPECT = "prospect"
    CUSTOMER = "customer"
    OTHER = "other"


class InteractionType(str, Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"


class JobType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class ApplicationStatus(str, Enum):
    """Hiring pipeline stage of a job application."""

    APPLIED = "applied"
    REVIEWED = "reviewed"
    INTERVIEWING = "interviewing"
    REJECTED = "rejected"
    HIRED = "hired"


class ContentBlockType(str, Enum):
    """Kinds of CMS content block; each has its own data shape."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    HERO = "hero"
    CALLOUT = "callout"

    @classmethod
    def values(cls) -> list[str]:
        """Return all block type values as strings."""
        return [block_type.value for block_type in cls]
