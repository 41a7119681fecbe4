"""limit/offset pagination shared by the list endpoints."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Parse the leading integer of ``raw``; ``None`` when there is none."""

    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    total: int
    limit: Optional[int]
    offset: Optional[int]

    @property
    def count(self) -> int:
        return len(self.items)

    def meta(self) -> Dict[str, Any]:
        """Echo the parsed values; absent ones are left out rather than sent as null."""

        pagination = {"limit": self.limit, "offset": self.offset}
        return {"pagination": {key: value for key, value in pagination.items() if value is not None}}


def paginate(records: Sequence[T], limit: Optional[str] = None, offset: Optional[str] = None) -> Page[T]:
    """Slice ``records`` to ``[offset, offset + limit)``.

    Nothing is sliced when both values are absent; a missing offset starts at
    the beginning and a missing limit runs to the end.
    """

    parsed_limit = parse_int(limit)
    parsed_offset = parse_int(offset)

    items = list(records)
    if parsed_limit is not None or parsed_offset is not None:
        start = parsed_offset if parsed_offset is not None else 0
        end = start + parsed_limit if parsed_limit is not None else None
        items = items[start:end]

    return Page(items=items, total=len(records), limit=parsed_limit, offset=parsed_offset)


__all__ = ["Page", "paginate", "parse_int"]
