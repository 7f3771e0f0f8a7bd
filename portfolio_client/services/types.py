"""
Wire envelope types shared by the dispatcher and the domain facade.

The backend answers every call with the same JSON envelope:
    {success, data?, error?, message?, timestamp, requestId, pagination?}
Field names are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class WireModel(BaseModel):
    """Base model using camelCase aliases on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class APIError(WireModel):
    """Error body of a failed envelope."""

    code: str
    message: str
    details: dict[str, Any] | None = None
    field: str | None = None


class PaginationInfo(WireModel):
    """Pagination block for list endpoints."""

    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _request_id() -> str:
    return uuid4().hex


class APIResponse(WireModel, Generic[T]):
    """Response envelope returned by every dispatch."""

    success: bool
    data: T | None = None
    error: APIError | None = None
    message: str | None = None
    timestamp: str = Field(default_factory=_utc_now)
    request_id: str = Field(default_factory=_request_id)
    pagination: PaginationInfo | None = None
    meta: dict[str, Any] | None = None

    # Local marker, never sent or cached
    from_cache: bool = Field(default=False, exclude=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize back to the camelCase envelope."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class QueryParams(WireModel):
    """Common list query parameters."""

    page: int | None = None
    page_size: int | None = None
    sort: str | None = None
    order: Literal["asc", "desc"] | None = None
    search: str | None = None
    filter: dict[str, Any] | None = None
    include: list[str] | None = None
    fields: list[str] | None = None

    def to_params(self) -> dict[str, Any]:
        """Flatten into query string parameters."""
        params: dict[str, Any] = {}
        raw = self.model_dump(by_alias=True, exclude_none=True)

        for key, value in raw.items():
            if key == "filter":
                for name, item in value.items():
                    params[f"filter[{name}]"] = item
            elif key in ("include", "fields"):
                params[key] = ",".join(value)
            else:
                params[key] = value

        return params
