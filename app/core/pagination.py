"""
page/limit pagination for list endpoints.

Plugged into fastapi-pagination as a custom params type so the raw
limit/offset math lives in one place.
"""

from fastapi import Query
from fastapi_pagination.bases import AbstractParams, RawParams
from pydantic import BaseModel


class PageParams(BaseModel, AbstractParams):
    page: int = Query(1, ge=1, description="Page number (1-based)")
    limit: int = Query(12, ge=1, le=100, description="Page size")

    def to_raw_params(self) -> RawParams:
        return RawParams(
            limit=self.limit,
            offset=(self.page - 1) * self.limit,
        )
