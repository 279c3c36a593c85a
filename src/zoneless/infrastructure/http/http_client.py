from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Type
from types import TracebackType

import httpx

from ...application.dtos import RequestOptions
from ...domain.errors import RemoteCallError

logger = logging.getLogger(__name__)

API_PREFIX = "/v1"


class HttpClient:
    """Thin synchronous HTTP client wrapper around httpx.

    - Normalizes base URLs and prefixes every path with ``/v1``.
    - Sends the API key and per-request options as headers.
    - Maps non-successful responses and transport failures to ``RemoteCallError``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def _url(self, path: str) -> str:
        return f"{self._base_url}{API_PREFIX}/{path.lstrip('/')}"

    def _headers(self, method: str, options: Optional[RequestOptions]) -> Dict[str, str]:
        headers = {
            "x-api-key": self._api_key,
            "Content-Type": "application/json",
        }
        if options is None:
            return headers
        headers.update(options.headers)
        if options.idempotency_key and method == "POST":
            headers["idempotency-key"] = options.idempotency_key
        if options.zoneless_account:
            headers["zoneless-account"] = options.zoneless_account
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        params = {k: v for k, v in (query or {}).items() if v is not None}
        try:
            resp = self._client.request(
                method,
                self._url(path),
                params=params or None,
                json=json if method != "GET" else None,
                headers=self._headers(method, options),
            )
        except httpx.TimeoutException as exc:
            raise RemoteCallError(
                f"Request to {path} timed out", type="api_connection_error"
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteCallError(
                f"Request to {path} failed: {exc}", type="api_connection_error"
            ) from exc

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        return self._parse(resp)

    @staticmethod
    def _parse(resp: httpx.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as exc:
            raise RemoteCallError(
                f"Invalid response from API: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            ) from exc

        if resp.is_success:
            return data

        error = data.get("error") if isinstance(data, dict) else None
        if not isinstance(error, dict):
            error = {}
        message = error.get("message") or (
            data.get("message") if isinstance(data, dict) else None
        )
        raise RemoteCallError(
            message or "An error occurred",
            type=error.get("type") or "api_error",
            code=error.get("code"),
            param=error.get("param"),
            status_code=resp.status_code,
        )

    def get(
        self,
        path: str,
        query: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        return self.request("GET", path, query=query, options=options)

    def post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        return self.request("POST", path, json=json or {}, options=options)

    def delete(
        self, path: str, options: Optional[RequestOptions] = None
    ) -> Dict[str, Any]:
        return self.request("DELETE", path, options=options)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()
