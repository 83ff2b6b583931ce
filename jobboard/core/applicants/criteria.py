"""
Applicant filter criteria.

``FilterCriteria`` is the ephemeral value object behind the applicant list:
search terms, ranges, sort and pagination. ``parse_filter_params`` turns
flat query parameters into one, reporting every invalid field at once.
"""

from datetime import date
from typing import Any, Mapping, Optional

from bson import ObjectId
from pydantic import (
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from jobboard.core.exceptions import FieldError, FilterValidationError
from jobboard.data.models.base import CamelModel
from jobboard.utils.config import get_settings
from jobboard.utils.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    ApplicationStatus,
    EducationLevel,
    SortField,
    SortOrder,
)


class FilterCriteria(CamelModel):
    """Search, sort and pagination parameters for one applicant listing."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
        extra="ignore",
    )

    # Search
    name: Optional[str] = None
    location: Optional[str] = None

    # Ranges (inclusive, each bound optional)
    age_min: Optional[int] = Field(None, ge=0)
    age_max: Optional[int] = Field(None, ge=0)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    test_score_min: Optional[float] = None
    test_score_max: Optional[float] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    # Equality
    education: Optional[EducationLevel] = None
    status: Optional[ApplicationStatus] = None
    has_cv: Optional[bool] = Field(None, alias="hasCV")
    has_cover_letter: Optional[bool] = None

    # Narrow a company-wide listing to one posting
    job_posting_id: Optional[str] = None

    # Sort and pagination
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.ASC
    page: int = Field(DEFAULT_PAGE, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1)

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_absent(cls, v: Any, info: ValidationInfo) -> Any:
        """Empty query parameters mean 'no constraint', i.e. the field default."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("name", "location")
    @classmethod
    def strip_term(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v

    @property
    def has_age_bounds(self) -> bool:
        return self.age_min is not None or self.age_max is not None

    @property
    def has_salary_bounds(self) -> bool:
        return self.salary_min is not None or self.salary_max is not None

    @property
    def has_test_score_bounds(self) -> bool:
        return self.test_score_min is not None or self.test_score_max is not None

    def applied(self) -> dict[str, Any]:
        """The criteria as echoed back to the client (camelCase, set values only)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


_RANGES: tuple[tuple[str, str], ...] = (
    ("age_min", "age_max"),
    ("salary_min", "salary_max"),
    ("test_score_min", "test_score_max"),
    ("date_from", "date_to"),
)


def _alias(field_name: str) -> str:
    return FilterCriteria.model_fields[field_name].alias or field_name


def _cross_field_errors(criteria: FilterCriteria, max_page_size: int) -> list[FieldError]:
    errors = []
    for low_name, high_name in _RANGES:
        low = getattr(criteria, low_name)
        high = getattr(criteria, high_name)
        if low is not None and high is not None and low > high:
            errors.append(
                FieldError(
                    _alias(low_name),
                    f"must not be greater than {_alias(high_name)}",
                )
            )
    if criteria.limit > max_page_size:
        errors.append(FieldError("limit", f"must be at most {max_page_size}"))
    if criteria.job_posting_id is not None and not ObjectId.is_valid(criteria.job_posting_id):
        errors.append(FieldError("jobPostingId", "is not a valid identifier"))
    return errors


def parse_filter_params(params: Mapping[str, Any]) -> FilterCriteria:
    """
    Build ``FilterCriteria`` from flat query parameters.

    Unknown keys are ignored and blank values count as absent. Missing
    ``page``/``limit`` fall back to the configured defaults.

    Raises:
        FilterValidationError: listing every invalid field; nothing is applied.
    """
    settings = get_settings().applicants
    raw = dict(params)
    if raw.get("limit") is None or not str(raw["limit"]).strip():
        raw["limit"] = settings.default_page_size

    errors: list[FieldError] = []
    try:
        criteria = FilterCriteria.model_validate(raw)
    except PydanticValidationError as exc:
        bad_keys = set()
        for err in exc.errors():
            key = str(err["loc"][0]) if err["loc"] else "query"
            bad_keys.add(key)
            errors.append(FieldError(key, err["msg"]))
        # Validate what remains so cross-field problems are reported too
        try:
            criteria = FilterCriteria.model_validate(
                {k: v for k, v in raw.items() if k not in bad_keys}
            )
        except PydanticValidationError:
            criteria = None

    if criteria is not None:
        reported = {e.field for e in errors}
        errors.extend(
            e for e in _cross_field_errors(criteria, settings.max_page_size)
            if e.field not in reported
        )
    if errors:
        raise FilterValidationError("Invalid filter parameters", errors)
    return criteria
