from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Optional, TypeVar

from pydantic import BaseModel

from ...application.dtos import ListParams, ListResponse
from ..http.http_client import HttpClient

T = TypeVar("T")
P = TypeVar("P", bound=ListParams)


def _scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def build_query(params: Optional[BaseModel]) -> Dict[str, Any]:
    """Flatten a params DTO into query-string keys.

    Nested objects become ``key[sub]`` (``created[gte]=...``) and lists become
    ``key[0]``, ``key[1]``, ... Unset values are dropped.
    """
    if params is None:
        return {}
    query: Dict[str, Any] = {}
    for key, value in params.model_dump(exclude_none=True).items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                query[f"{key}[{sub_key}]"] = _scalar(sub_value)
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                query[f"{key}[{index}]"] = _scalar(item)
        else:
            query[key] = _scalar(value)
    return query


def auto_paginate(
    list_fn: Callable[[P], ListResponse[T]],
    params: P,
) -> Iterator[T]:
    """Yield every item of a list endpoint, following ``starting_after`` cursors.

    ``list_fn`` is any resource ``list`` method bound to its options, e.g.
    ``lambda p: client.payouts.list(p)``.
    """
    page_params = params
    while True:
        page = list_fn(page_params)
        yield from page.data
        if not page.has_more or not page.data:
            return
        last_id = getattr(page.data[-1], "id", None)
        if last_id is None:
            return
        page_params = page_params.model_copy(
            update={"starting_after": last_id, "ending_before": None}
        )


class BaseResource:
    """Base class for every API resource; holds the shared HTTP client."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http
