"""
Applicant query builder.

Translates ``FilterCriteria`` and a ``QueryScope`` into a MongoDB aggregation
pipeline over ``job_applications``. The pipeline joins each application
with its applicant, its job posting and its most recent interview, and
applies every filter. Ordering, skip, limit and the total count run in the
store as well, following the rules of ``apply_sort``: missing values are
replaced by the same infinities before ``$sort``, and names are compared
under an accent- and case-insensitive collation.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from pymongo.collation import Collation, CollationStrength

from jobboard.core.access import QueryScope
from jobboard.utils.constants import COLLECTIONS, SortField, SortOrder

from .criteria import FilterCriteria
from .derived import birth_date_bounds, today_utc
from .sorting import missing_value

# Non-blank text
_PRESENT = re.compile(r"\S")

SORT_VALUE_FIELD = "sort_value"

NAME_COLLATION = Collation(locale="en", strength=CollationStrength.SECONDARY)


@dataclass(frozen=True)
class SortSpec:
    """How the matched applications are ordered."""

    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.ASC


@dataclass
class ApplicantQuery:
    """A ready-to-run applicant search."""

    pipeline: list[dict[str, Any]]
    sort: SortSpec
    collation: Optional[Collation] = None


def _contains(term: str) -> dict[str, Any]:
    """Case-insensitive substring match on literal text."""
    return {"$regex": re.escape(term), "$options": "i"}


def _range(low: Any, high: Any) -> dict[str, Any]:
    """Inclusive range that never matches a missing value."""
    condition: dict[str, Any] = {"$ne": None}
    if low is not None:
        condition["$gte"] = low
    if high is not None:
        condition["$lte"] = high
    return condition


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _application_filter(criteria: FilterCriteria, scope: QueryScope) -> dict[str, Any]:
    match: dict[str, Any] = {"job_posting_id": {"$in": list(scope.job_posting_ids)}}

    if criteria.status is not None:
        match["status"] = criteria.status.value

    if criteria.has_salary_bounds:
        match["expected_salary"] = _range(criteria.salary_min, criteria.salary_max)

    if criteria.has_test_score_bounds:
        match["test_score"] = _range(criteria.test_score_min, criteria.test_score_max)

    if criteria.date_from is not None or criteria.date_to is not None:
        created: dict[str, Any] = {}
        if criteria.date_from is not None:
            created["$gte"] = _day_start(criteria.date_from)
        if criteria.date_to is not None:
            # date_to covers the whole day
            created["$lt"] = _day_start(criteria.date_to + timedelta(days=1))
        match["created_at"] = created

    if criteria.has_cv is not None:
        match["cv_url"] = {"$regex": _PRESENT} if criteria.has_cv else {"$not": _PRESENT}

    if criteria.has_cover_letter is not None:
        match["cover_letter"] = (
            {"$regex": _PRESENT} if criteria.has_cover_letter else {"$not": _PRESENT}
        )

    return match


def _applicant_filter(criteria: FilterCriteria, today: Optional[date]) -> dict[str, Any]:
    clauses: list[dict[str, Any]] = []

    if criteria.name:
        clauses.append(
            {
                "$or": [
                    {"applicant_name": _contains(criteria.name)},
                    {"applicant.email": _contains(criteria.name)},
                ]
            }
        )

    if criteria.location:
        clauses.append(
            {
                "$or": [
                    {"applicant_location": _contains(criteria.location)},
                    {"applicant.current_address": _contains(criteria.location)},
                ]
            }
        )

    if criteria.education is not None:
        clauses.append({"applicant.last_education": criteria.education.value})

    if criteria.has_age_bounds:
        # Unknown birth dates never satisfy an age bound
        born_on_or_after, born_before = birth_date_bounds(
            criteria.age_min, criteria.age_max, today
        )
        born: dict[str, Any] = {"$ne": None}
        if born_on_or_after is not None:
            born["$gte"] = born_on_or_after
        if born_before is not None:
            born["$lt"] = born_before
        clauses.append({"applicant.date_of_birth": born})

    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _joined_name_fields() -> dict[str, Any]:
    """Composed full name and location, computed the way the views render them."""
    return {
        "applicant_name": {
            "$trim": {
                "input": {
                    "$concat": [
                        {"$ifNull": ["$applicant.first_name", ""]},
                        " ",
                        {"$ifNull": ["$applicant.last_name", ""]},
                    ]
                }
            }
        },
        "applicant_location": {
            "$trim": {
                "input": {
                    "$concat": [
                        {"$ifNull": ["$applicant.city.name", ""]},
                        ", ",
                        {"$ifNull": ["$applicant.province.name", ""]},
                    ]
                },
                "chars": ", ",
            }
        },
    }


def _sort_value(sort_by: SortField, sort_order: SortOrder, today: date) -> Any:
    """Expression for the compared value, with the missing-value infinities."""
    missing = missing_value(sort_by, sort_order)
    if sort_by == SortField.EXPECTED_SALARY:
        return {"$ifNull": ["$expected_salary", missing]}
    if sort_by == SortField.TEST_SCORE:
        return {"$ifNull": ["$test_score", missing]}

    # Full years, minus one while this year's birthday is still ahead
    born = "$applicant.date_of_birth"
    birthday = {"$add": [{"$multiply": [{"$month": born}, 100]}, {"$dayOfMonth": born}]}
    age = {
        "$subtract": [
            {"$subtract": [today.year, {"$year": born}]},
            {"$cond": [{"$gt": [birthday, today.month * 100 + today.day]}, 1, 0]},
        ]
    }
    return {"$ifNull": [age, missing]}


def _sort_stages(sort: SortSpec, today: date) -> list[dict[str, Any]]:
    direction = 1 if sort.sort_order == SortOrder.ASC else -1
    if sort.sort_by == SortField.CREATED_AT:
        key = "created_at"
    elif sort.sort_by == SortField.NAME:
        key = "applicant_name"
    else:
        key = SORT_VALUE_FIELD

    stages: list[dict[str, Any]] = []
    if key == SORT_VALUE_FIELD:
        stages.append(
            {"$addFields": {SORT_VALUE_FIELD: _sort_value(sort.sort_by, sort.sort_order, today)}}
        )
    # _id keeps ties in insertion order in both directions
    stages.append({"$sort": {key: direction, "_id": 1}})
    return stages


def _page_stages() -> list[dict[str, Any]]:
    """Joins only needed for the rows that are returned."""
    return [
        {
            "$lookup": {
                "from": COLLECTIONS["job_postings"],
                "localField": "job_posting_id",
                "foreignField": "_id",
                "as": "job_posting",
            }
        },
        {"$unwind": "$job_posting"},
        {
            "$lookup": {
                "from": COLLECTIONS["interviews"],
                "let": {"application_id": "$_id"},
                "pipeline": [
                    {"$match": {"$expr": {"$eq": ["$job_application_id", "$$application_id"]}}},
                    {"$sort": {"scheduled_at": -1}},
                    {"$limit": 1},
                ],
                "as": "latest_interview",
            }
        },
    ]


def build_query(
    criteria: FilterCriteria,
    scope: QueryScope,
    today: Optional[date] = None,
) -> ApplicantQuery:
    """
    Build the store query for one page of an applicant listing.

    Absent criteria fields add no constraint; this function never raises.
    The pipeline yields a single document ``{"items": [...], "total":
    [{"count": n}]}``; ``total`` is empty when nothing matches.

    Args:
        criteria: Validated filter criteria
        scope: Job postings the listing is restricted to
        today: Reference date for age bounds and age ordering (defaults to
            today, UTC)

    Returns:
        ApplicantQuery with the aggregation pipeline, sort specification
        and the collation the pipeline must run under
    """
    today = today or today_utc()
    sort = SortSpec(sort_by=criteria.sort_by, sort_order=criteria.sort_order)
    skip = (criteria.page - 1) * criteria.limit

    pipeline: list[dict[str, Any]] = [
        {"$match": _application_filter(criteria, scope)},
        {
            "$lookup": {
                "from": COLLECTIONS["users"],
                "localField": "user_id",
                "foreignField": "_id",
                "as": "applicant",
            }
        },
        {"$unwind": "$applicant"},
        {"$addFields": _joined_name_fields()},
    ]

    applicant_match = _applicant_filter(criteria, today)
    if applicant_match:
        pipeline.append({"$match": applicant_match})

    pipeline.extend(_sort_stages(sort, today))
    pipeline.append(
        {
            "$facet": {
                "items": [{"$skip": skip}, {"$limit": criteria.limit}, *_page_stages()],
                "total": [{"$count": "count"}],
            }
        }
    )

    return ApplicantQuery(
        pipeline=pipeline,
        sort=sort,
        collation=NAME_COLLATION if sort.sort_by == SortField.NAME else None,
    )
