"""Paging primitives shared by repositories and routes."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import asc, desc

from workflow_web.core.errors import BadRequestError

T = TypeVar("T")


@dataclass(frozen=True)
class Sort:
    field: str
    direction: str = "asc"

    @classmethod
    def asc(cls, field: str) -> Sort:
        return cls(field, "asc")

    @classmethod
    def desc(cls, field: str) -> Sort:
        return cls(field, "desc")

    def to_clause(self, entity: Any, allowed: set[str]):
        """Resolve to an ORDER BY clause on entity; only whitelisted columns."""
        if self.field not in allowed:
            raise BadRequestError(f"Cannot sort on '{self.field}'", code="INVALID_SORT")
        if self.direction not in {"asc", "desc"}:
            raise BadRequestError("sort order must be asc|desc", code="INVALID_SORT_ORDER")
        column = getattr(entity, self.field)
        return desc(column) if self.direction == "desc" else asc(column)


@dataclass(frozen=True)
class Pageable:
    page: int = 0
    size: int = 25
    sort: tuple[Sort, ...] = ()

    @classmethod
    def of(cls, page: int, size: int, *sort: Sort, max_size: int = 100) -> Pageable:
        return cls(page=max(page, 0), size=min(max(size, 1), max_size), sort=tuple(sort))

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    content: Sequence[T]
    total_elements: int
    number: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @property
    def start(self) -> int:
        return self.number * self.size

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages
