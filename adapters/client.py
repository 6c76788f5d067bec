"""
Twist REST API client: thin wrapper over httpx.AsyncClient.

Every call is described by an ApiRequest (see adapters/endpoints.py) so the
same descriptor can be sent alone via execute() or bundled into one
round trip via batch().

Reads are retried on transient failures. Mutations are sent once: a failed
mutation surfaces its first error to the caller.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable
from urllib.parse import urlencode

import httpx

from config import API_TIMEOUT, TWIST_API_BASE_URL
from logging_config import log_api_call, log_api_result, logger
from models import TwistApiError
from retry import with_retry


def _encode_value(value: Any) -> str:
    """Encode one parameter value the way the REST API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return str(int(value.timestamp()))
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value)
    return str(value)


@dataclass(frozen=True)
class ApiRequest:
    """
    Description of one API call.

    Attributes:
        method: HTTP method ("GET" or "POST")
        path: Endpoint path relative to the API root, e.g. "threads/getone"
        params: Query (GET) or form (POST) parameters. None values are dropped.
        parse: Optional callable turning decoded JSON into a model
    """
    method: str
    path: str
    params: dict[str, Any] = field(default_factory=dict)
    parse: Callable[[Any], Any] | None = None

    @property
    def is_read(self) -> bool:
        return self.method == "GET"

    def encoded_params(self) -> dict[str, str]:
        return {
            key: _encode_value(value)
            for key, value in self.params.items()
            if value is not None
        }

    def batch_entry(self, base_url: str) -> dict[str, str]:
        """Entry for the batch endpoint: method plus absolute URL with params."""
        url = f"{base_url}{self.path}"
        query = urlencode(self.encoded_params())
        if query:
            url = f"{url}?{query}"
        return {"method": self.method, "url": url}

    def parse_response(self, data: Any) -> Any:
        if self.parse is None:
            return data
        return self.parse(data)


def _error_message(body: Any, status_code: int) -> str:
    """Pull the API's error string out of an error body."""
    if isinstance(body, dict):
        message = body.get("error_string") or body.get("error") or body.get("message")
        if message:
            return str(message)
    if isinstance(body, str) and body.strip():
        return body.strip()
    return f"HTTP {status_code}"


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _decode_batch_body(body: Any) -> Any:
    """Batch items carry their body as a JSON-encoded string."""
    if isinstance(body, str):
        try:
            return json.loads(body) if body else None
        except ValueError:
            return body
    return body


class TwistClient:
    """
    Async client for the Twist REST API.

    Args:
        api_key: Personal API token, sent as a bearer token
        base_url: API root (must end with a slash)
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = TWIST_API_BASE_URL,
        timeout: float = API_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not base_url.endswith("/"):
            base_url = f"{base_url}/"
        self.base_url = base_url
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Single requests
    # ------------------------------------------------------------------

    async def execute(self, request: ApiRequest) -> Any:
        """
        Perform one request and return its parsed result.

        Raises:
            TwistApiError: Non-2xx response
            TwistError: Transport failure (after retries, for reads)
        """
        if request.is_read:
            return await self._read(request)
        return await self._write(request)

    @with_retry(max_attempts=3, delay_ms=1000)
    async def _read(self, request: ApiRequest) -> Any:
        return await self._send(request)

    @with_retry(max_attempts=1)
    async def _write(self, request: ApiRequest) -> Any:
        return await self._send(request)

    async def _send(self, request: ApiRequest) -> Any:
        log_api_call(request.method, request.path, **request.params)
        params = request.encoded_params()
        if request.is_read:
            response = await self._http.get(request.path, params=params)
        else:
            response = await self._http.post(request.path, data=params)

        body = _decode_json(response)
        if not response.is_success:
            raise TwistApiError(
                response.status_code,
                _error_message(body, response.status_code),
                request.path,
            )

        result = request.parse_response(body)
        log_api_result(request.path, len(result) if isinstance(result, list) else None)
        return result

    # ------------------------------------------------------------------
    # Atomic batch
    # ------------------------------------------------------------------

    async def batch(self, *requests: ApiRequest) -> list[Any]:
        """
        Submit several requests in one round trip.

        Returns one parsed result per request, in submission order. Fails as
        a whole if the batch call fails or any item comes back non-2xx.
        An empty batch returns [] without touching the network.
        """
        if not requests:
            return []
        if all(request.is_read for request in requests):
            return await self._read_batch(requests)
        return await self._write_batch(requests)

    @with_retry(max_attempts=3, delay_ms=1000)
    async def _read_batch(self, requests: tuple[ApiRequest, ...]) -> list[Any]:
        return await self._send_batch(requests, parallel=True)

    @with_retry(max_attempts=1)
    async def _write_batch(self, requests: tuple[ApiRequest, ...]) -> list[Any]:
        return await self._send_batch(requests, parallel=False)

    async def _send_batch(self, requests: tuple[ApiRequest, ...], parallel: bool) -> list[Any]:
        log_api_call("POST", "batch", count=len(requests), parallel=parallel)
        form = {
            "requests": json.dumps([r.batch_entry(self.base_url) for r in requests]),
        }
        if parallel:
            form["parallel"] = "true"

        response = await self._http.post("batch", data=form)
        body = _decode_json(response)
        if not response.is_success:
            raise TwistApiError(
                response.status_code,
                _error_message(body, response.status_code),
                "batch",
            )
        if not isinstance(body, list) or len(body) != len(requests):
            raise TwistApiError(
                response.status_code,
                f"Batch returned {len(body) if isinstance(body, list) else 'no'} results "
                f"for {len(requests)} requests",
                "batch",
            )

        results: list[Any] = []
        for index, (request, item) in enumerate(zip(requests, body)):
            code = int(item.get("code", 0))
            data = _decode_batch_body(item.get("body"))
            if not 200 <= code < 300:
                message = _error_message(data, code)
                logger.debug(f"Batch item {index} ({request.path}) failed: {code} {message}")
                raise TwistApiError(code, message, request.path)
            results.append(request.parse_response(data))

        log_api_result("batch", len(results))
        return results
