"""Translate a filter specification into MongoDB aggregation stages."""
import re
from typing import Any

from nft_marketplace.schemas import FieldFilter, QueryFilters


def _predicate(item: FieldFilter) -> Any:
    if item.operator == "eq":
        return item.query
    if item.operator == "regex":
        return {"$regex": re.escape(str(item.query)), "$options": "i"}
    if item.operator in ("in", "nin"):
        values = item.query if isinstance(item.query, list) else [item.query]
        return {f"${item.operator}": values}
    return {f"${item.operator}": item.query}


def build_match(filters: list[FieldFilter]) -> dict[str, Any]:
    """Combine field predicates into one $match body.

    Repeated fields are joined with $and so that a later predicate does not
    overwrite an earlier one (e.g. price >= 1 and price <= 5).
    """
    match: dict[str, Any] = {}
    extra: list[dict[str, Any]] = []
    for item in filters:
        if item.field_name in match:
            extra.append({item.field_name: _predicate(item)})
        else:
            match[item.field_name] = _predicate(item)
    if extra:
        return {"$and": [match, *extra]}
    return match


def _sort_and_page(filters: QueryFilters) -> list[dict[str, Any]]:
    stages: list[dict[str, Any]] = []
    if filters.order_by:
        stages.append({"$sort": {filters.order_by: -1 if filters.direction == "desc" else 1}})
    if filters.start_index:
        stages.append({"$skip": filters.start_index})
    if filters.limit:
        stages.append({"$limit": filters.limit})
    return stages


def parse_filters(filters: QueryFilters | None) -> list[dict[str, Any]]:
    """Return ordered stages: $match, then $sort, then $skip/$limit.

    No filters (or an empty specification) yields an empty pipeline.
    """
    if filters is None:
        return []
    stages: list[dict[str, Any]] = []
    if filters.filters:
        stages.append({"$match": build_match(filters.filters)})
    return stages + _sort_and_page(filters)


def without_pagination(filters: QueryFilters | None) -> QueryFilters | None:
    """Same predicates and sort, no skip or limit."""
    if filters is None:
        return None
    return filters.model_copy(update={"start_index": None, "limit": None})


def paginate(items: list[Any], filters: QueryFilters | None) -> list[Any]:
    """Apply startIndex/limit to rows derived in memory."""
    if filters is None:
        return items
    start = filters.start_index or 0
    end = start + filters.limit if filters.limit else None
    return items[start:end]


def build_pipeline(
    filters: QueryFilters | None, scope: dict[str, Any] | None = None
) -> list[dict[str, Any]]:
    """Build a pipeline restricted to `scope`.

    The scope $match follows the caller's $match and precedes sort and
    pagination, so pages are cut from scoped rows only.
    """
    stages: list[dict[str, Any]] = []
    if filters is not None and filters.filters:
        stages.append({"$match": build_match(filters.filters)})
    if scope:
        stages.append({"$match": dict(scope)})
    if filters is not None:
        stages.extend(_sort_and_page(filters))
    return stages
