"""Response envelopes: {"success": true, "data": ...} plus pagination metadata on lists."""

from typing import Any, Sequence

from pydantic import BaseModel

from app.core.pagination import PageParams


def dump(value: Any) -> Any:
    """Serialize schemas with their camelCase aliases; pass everything else through."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, (list, tuple)):
        return [dump(v) for v in value]
    return value


def ok(data: Any = None, **extra) -> dict:
    body = {"success": True, "data": dump(data)}
    body.update(extra)
    return body


def paginated(items: Sequence[Any], total: int, params: PageParams) -> dict:
    raw = params.to_raw_params()
    return ok(
        list(items),
        pagination={
            "total": total,
            "page": params.page,
            "limit": params.limit,
            "hasMore": raw.offset + len(items) < total,
        },
    )
