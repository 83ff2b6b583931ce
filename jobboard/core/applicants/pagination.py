"""Page slicing for applicant listings."""

import math
from dataclasses import dataclass, field
from typing import Generic, Sequence, TypeVar

from jobboard.data.models.views import PaginationInfo

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results plus the numbers needed to navigate."""

    items: list[T] = field(default_factory=list)
    page: int = 1
    limit: int = 20
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def info(self) -> PaginationInfo:
        return PaginationInfo(
            page=self.page,
            limit=self.limit,
            total=self.total,
            total_pages=self.total_pages,
            has_next=self.has_next,
            has_prev=self.has_prev,
        )


def paginate(items: Sequence[T], page: int, limit: int) -> Page[T]:
    """
    Slice one page out of the full filtered set.

    Args:
        items: Every matching item, already ordered
        page: 1-based page number
        limit: Page size

    Raises:
        ValueError: If page or limit is not a positive integer
    """
    if page < 1 or limit < 1:
        raise ValueError("page and limit must be positive integers")
    skip = (page - 1) * limit
    return Page(items=list(items[skip:skip + limit]), page=page, limit=limit, total=len(items))
