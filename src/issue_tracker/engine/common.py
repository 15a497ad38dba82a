"""Small validation and pagination helpers shared by the services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from ..errors import ValidationFailedError
from ..utils import _parse_iso

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


@dataclass
class Page(Generic[T]):
    items: list[T]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "totalPages": self.total_pages}


def paginate(items: Sequence[T], page: int, limit: int, *, max_limit: int) -> Page[T]:
    if page < 1:
        raise ValidationFailedError("page must be >= 1", details={"fields": ["page"]})
    if limit < 1 or limit > max_limit:
        raise ValidationFailedError(f"limit must be between 1 and {max_limit}", details={"fields": ["limit"]})
    start = (page - 1) * limit
    return Page(items=list(items[start:start + limit]), page=page, limit=limit, total=len(items))


def coerce_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = [e.value for e in enum_cls]
        raise ValidationFailedError(
            f"'{field_name}' must be one of {allowed}",
            details={"fields": [field_name]},
        ) from exc


def require_text(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_hours(value: Any, field_name: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationFailedError(
            f"'{field_name}' must be a number",
            details={"fields": [field_name]},
        )
    return float(value)


def validate_due_date(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or _parse_iso(value) is None:
        raise ValidationFailedError("'due_date' must be an ISO 8601 date", details={"fields": ["due_date"]})
    return value
