"""Shared Data Transfer Objects used across every API resource."""

from __future__ import annotations

from typing import Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiObject(BaseModel):
    """Base for objects returned by the API.

    Unknown fields are kept so that server additions never break parsing.
    """

    model_config = ConfigDict(extra="allow")


class RequestOptions(BaseModel):
    """Per-request extras forwarded to the HTTP layer."""

    headers: Dict[str, str] = Field(default_factory=dict)
    # Only sent with POST requests
    idempotency_key: Optional[str] = None
    # Connected account to act on behalf of (platform operations)
    zoneless_account: Optional[str] = None


class RangeFilter(BaseModel):
    """Numeric range filter, encoded as ``field[gt]=...`` style query keys."""

    gt: Optional[int] = None
    gte: Optional[int] = None
    lt: Optional[int] = None
    lte: Optional[int] = None


class ListParams(BaseModel):
    """Cursor pagination parameters shared by every list endpoint."""

    limit: Optional[int] = Field(default=None, ge=1, le=100)
    starting_after: Optional[str] = None
    ending_before: Optional[str] = None


class ListResponse(BaseModel, Generic[T]):
    """One page of a list endpoint."""

    object: Literal["list"] = "list"
    url: str = ""
    has_more: bool = False
    data: List[T] = Field(default_factory=list)


class DeletedResponse(ApiObject):
    id: str
    object: str
    deleted: bool = True
