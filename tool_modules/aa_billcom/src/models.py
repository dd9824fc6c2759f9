"""Request-shaping helpers shared by the legacy operations."""

from dataclasses import asdict, dataclass
from typing import Any

DEFAULT_START = 0
DEFAULT_MAX = 999

FILTER_OPERATORS = ("eq", "ne", "lt", "le", "gt", "ge", "in", "nin", "sw", "ew", "ct")


@dataclass
class SearchFilter:
    """One List/* filter clause, e.g. ``SearchFilter("isActive", "eq", "1")``."""

    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in FILTER_OPERATORS:
            raise ValueError(f"Unsupported filter operator '{self.op}'. Use one of: {', '.join(FILTER_OPERATORS)}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchFilter":
        try:
            return cls(field=data["field"], op=data["op"], value=data["value"])
        except KeyError as e:
            raise ValueError(f"Filter is missing key {e}: {data}") from e


@dataclass
class SortOption:
    field: str
    asc: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SortOption":
        if "field" not in data:
            raise ValueError(f"Sort option is missing 'field': {data}")
        return cls(field=data["field"], asc=bool(data.get("asc", True)))


def compact(fields: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None or an empty string."""
    return {k: v for k, v in fields.items() if v is not None and v != ""}


def list_request(
    start: int | None = None,
    max_results: int | None = None,
    filters: list[SearchFilter | dict[str, Any]] | None = None,
    sort: list[SortOption | dict[str, Any]] | None = None,
    nested: bool | None = None,
) -> dict[str, Any]:
    """Build the ``data`` payload for a legacy List/* call.

    ``start`` and ``max`` are always sent; the API rejects list calls without them.
    """
    data: dict[str, Any] = {
        "start": DEFAULT_START if start is None else start,
        "max": DEFAULT_MAX if max_results is None else max_results,
    }
    if nested is not None:
        data["nested"] = nested
    if filters:
        data["filters"] = [asdict(f if isinstance(f, SearchFilter) else SearchFilter.from_dict(f)) for f in filters]
    if sort:
        data["sort"] = [asdict(s if isinstance(s, SortOption) else SortOption.from_dict(s)) for s in sort]
    return data
