"""
User models as seen by the applicant pipeline.

An applicant is a ``User`` with the job seeker role; the fields below are
the ones the applicant filter and the response views consume.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from jobboard.utils.constants import EducationLevel, UserRole

from .base import BaseDocument, EmbeddedModel


class Region(EmbeddedModel):
    """A named city or province."""

    name: str


class User(BaseDocument):
    """A user account."""

    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    email: EmailStr
    role: UserRole = UserRole.JOB_SEEKER
    profile_image: Optional[str] = None
    phone_number: Optional[str] = None

    # Profile fields used by the applicant filter
    date_of_birth: Optional[datetime] = None
    last_education: Optional[EducationLevel] = None
    current_address: Optional[str] = None
    city: Optional[Region] = None
    province: Optional[Region] = None

    @property
    def full_name(self) -> str:
        """First and last name joined, blank parts dropped."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
