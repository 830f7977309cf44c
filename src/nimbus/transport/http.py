"""REST fetcher backed by httpx."""

from __future__ import annotations

from typing import Any, Self
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from result import Err, Ok

from nimbus.common import create_logger
from nimbus.objects import (
    ConnectionFailedError,
    ErrorCode,
    FetchTimeoutError,
    InvalidRequestError,
    InvalidResponseError,
    ObjectNotFoundError,
    RemoteObject,
    ServerError,
    is_valid_class_name,
)

from .config import ServerConfig
from .protocol import FetchResult

logger = create_logger("transport.http")


class HttpObjectFetcher:
    """Fetches objects with ``GET {url}/classes/{class_name}/{object_id}``.

    Every request is attempted once. Retrying after a failure is left to
    the caller.
    """

    def __init__(self, server: ServerConfig, client: httpx.Client | None = None) -> None:
        self._server = server
        self._client = client or httpx.Client(timeout=server.timeout)
        self._owns_client = client is None

    def fetch(self, class_name: str, object_id: str) -> FetchResult:
        context = {"class_name": class_name, "object_id": object_id}

        if not is_valid_class_name(class_name):
            return Err(
                InvalidRequestError(
                    code=ErrorCode.INVALID_CLASS_NAME,
                    message=f"Invalid class name '{class_name}'",
                    **context,
                )
            )
        if not object_id:
            return Err(
                InvalidRequestError(
                    code=ErrorCode.MISSING_OBJECT_ID,
                    message="Object id is required",
                    **context,
                )
            )

        url = self._object_url(class_name, object_id)
        logger.debug("Fetching object", url=url)

        try:
            response = self._client.get(url, headers=self._server.headers(), timeout=self._server.timeout)
        except httpx.TimeoutException as exc:
            logger.warning("Fetch timed out", url=url, error=str(exc))
            return Err(FetchTimeoutError(message=f"Request timed out: {exc}", **context))
        except httpx.TransportError as exc:
            logger.warning("Connection failed", url=url, error=str(exc))
            return Err(ConnectionFailedError(message=f"Connection failed: {exc}", **context))

        return _parse_response(response, class_name, object_id)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def _object_url(self, class_name: str, object_id: str) -> str:
        base = self._server.url.rstrip("/")
        return f"{base}/classes/{class_name}/{quote(object_id, safe='')}"


def _parse_response(response: httpx.Response, class_name: str, object_id: str) -> FetchResult:
    context = {"class_name": class_name, "object_id": object_id}
    status = response.status_code
    body = _decode_body(response)

    if status >= 500:
        return Err(
            ServerError(
                status_code=status,
                message=_error_message(body, f"Server responded with status {status}"),
                **context,
            )
        )

    if status >= 400:
        code = _error_code(body, ErrorCode.INVALID_QUERY)
        if status == 404 or code is ErrorCode.OBJECT_NOT_FOUND:
            return Err(
                ObjectNotFoundError(
                    message=_error_message(body, f"Object '{object_id}' of class '{class_name}' not found"),
                    **context,
                )
            )
        return Err(
            InvalidRequestError(
                code=code,
                status_code=status,
                message=_error_message(body, f"Request rejected with status {status}"),
                **context,
            )
        )

    if body is None:
        return Err(InvalidResponseError(message="Response body is not a JSON object", **context))

    try:
        return Ok(RemoteObject.from_json(class_name, body))
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or "object"
        return Err(
            InvalidResponseError(
                message=f"Response does not describe an object ({field}: {first.get('msg', str(exc))})",
                **context,
            )
        )


def _decode_body(response: httpx.Response) -> dict[str, Any] | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _error_code(body: dict[str, Any] | None, default: ErrorCode) -> ErrorCode:
    if body is None:
        return default
    try:
        return ErrorCode(body.get("code"))
    except ValueError:
        return default


def _error_message(body: dict[str, Any] | None, default: str) -> str:
    if body is not None and isinstance(body.get("error"), str):
        return body["error"]
    return default
