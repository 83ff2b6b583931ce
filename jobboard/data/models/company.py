"""
Company and job posting models.

Only the fields the applicant pipeline reads are modelled here; the rest of
a posting (description, requirements, benefits) belongs to the posting flow.
"""

from typing import Optional

from pydantic import Field, field_validator

from .base import BaseDocument, PyObjectId


class Company(BaseDocument):
    """A company account, administered by exactly one user."""

    name: str = Field(..., min_length=1, max_length=200)
    admin_id: PyObjectId


class JobPosting(BaseDocument):
    """A job posting owned by a company."""

    company_id: PyObjectId
    title: str = Field(..., min_length=1, max_length=200)
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    is_active: bool = True

    @field_validator("salary_min", "salary_max")
    @classmethod
    def validate_amount(cls, v: Optional[float]) -> Optional[float]:
        """Validate salary amount is non-negative."""
        if v is not None and v < 0:
            raise ValueError("Salary amount must be non-negative")
        return v
