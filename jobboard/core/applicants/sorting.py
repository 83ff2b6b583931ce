"""
In-process ordering of applicant listings.

Missing values are placed by substituting an infinity before comparing:

============== ========= ==========
field          ascending descending
============== ========= ==========
expectedSalary +inf      -inf
age            +inf      -inf
testScore      +inf      +inf
============== ========= ==========

So applicants without a salary or a known age always come last. A missing
test score counts as the highest possible score in both directions: last
when ascending, first when descending. That asymmetry is the established
behaviour of the listing and is kept as is.

Names are compared accent- and case-insensitively: "Émile" sorts with
"Emile", before "Zoe". Exact spelling only breaks ties.

Sorting is stable in both directions: ties keep their incoming order.
The store runs the same ordering for paged listings (see
``query_builder``); ``apply_sort`` is the in-process form of it.
"""

import unicodedata
from typing import Any, Callable, Sequence, TypeVar

from jobboard.data.models.views import ApplicationView
from jobboard.utils.constants import SortField, SortOrder

V = TypeVar("V", bound=ApplicationView)

INF = float("inf")


def missing_value(sort_field: SortField, sort_order: SortOrder) -> float:
    """Stand-in for a missing value of ``sort_field``, per the table above."""
    ascending = sort_order == SortOrder.ASC
    if sort_field == SortField.TEST_SCORE:
        return INF
    return INF if ascending else -INF


def fold_name(name: str) -> str:
    """Case-folded name with accents and other combining marks removed."""
    decomposed = unicodedata.normalize("NFKD", name.strip())
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def name_sort_key(name: str) -> tuple[str, str]:
    """Collation key for a display name: folded base letters, then exact form."""
    return fold_name(name), unicodedata.normalize("NFC", name.strip()).casefold()


def _key_for(sort_field: SortField, sort_order: SortOrder) -> Callable[[ApplicationView], Any]:
    missing = missing_value(sort_field, sort_order)

    def or_missing(value: Any) -> float:
        return missing if value is None else value

    if sort_field == SortField.NAME:
        return lambda app: name_sort_key(app.applicant.name)
    if sort_field == SortField.EXPECTED_SALARY:
        return lambda app: or_missing(app.expected_salary)
    if sort_field == SortField.TEST_SCORE:
        return lambda app: or_missing(app.test_score)
    if sort_field == SortField.AGE:
        return lambda app: or_missing(app.applicant.age)
    return lambda app: app.created_at


def apply_sort(
    applications: Sequence[V],
    sort_by: SortField | str = SortField.CREATED_AT,
    sort_order: SortOrder | str = SortOrder.ASC,
) -> list[V]:
    """
    Return ``applications`` ordered by ``sort_by`` in ``sort_order``.

    Unknown sort keys fall back to creation time; the input is not modified.
    """
    try:
        sort_field = SortField(sort_by)
    except ValueError:
        sort_field = SortField.CREATED_AT
    order = SortOrder(sort_order)

    return sorted(
        applications,
        key=_key_for(sort_field, order),
        reverse=order == SortOrder.DESC,
    )
