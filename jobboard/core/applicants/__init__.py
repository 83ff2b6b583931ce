"""
Applicant search.

Filter criteria parsing, store query construction (including ordering and
paging), derived fields, and the in-process reference forms of ordering
and paging, tied together by ``ApplicantSearchService``.
"""

from jobboard.core.access import QueryScope

from .criteria import FilterCriteria, parse_filter_params
from .derived import birth_date_bounds, calculate_age, compose_location
from .pagination import Page, paginate
from .query_builder import NAME_COLLATION, ApplicantQuery, SortSpec, build_query
from .search_service import (
    ApplicantSearchService,
    get_search_service,
    shape_application,
)
from .sorting import apply_sort, fold_name, missing_value

__all__ = [
    # Criteria
    "FilterCriteria",
    "QueryScope",
    "parse_filter_params",
    # Derived fields
    "birth_date_bounds",
    "calculate_age",
    "compose_location",
    # Query
    "ApplicantQuery",
    "NAME_COLLATION",
    "SortSpec",
    "build_query",
    # Sorting and pagination
    "Page",
    "apply_sort",
    "fold_name",
    "missing_value",
    "paginate",
    # Service
    "ApplicantSearchService",
    "get_search_service",
    "shape_application",
]
