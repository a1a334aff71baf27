"""JSON-RPC 2.0 client for an Ethereum-compatible node."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Sequence

import httpx

from ...domain.errors import CallRejectedError, TransportError
from ..http.http_client import HttpClient

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """Sends JSON-RPC requests over an `HttpClient`.

    Error objects in a response become `CallRejectedError` with the node's
    code, message and data untouched. Anything that leaves the outcome
    unknown (connection failures, timeouts, HTTP errors, unparseable bodies)
    becomes `TransportError`.
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http
        self._ids = itertools.count(1)

    def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": list(params or []),
        }
        try:
            body = self._http.post_json(payload)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} failed: {e}") from e
        except ValueError as e:
            raise TransportError(f"{method} returned a non-JSON response") from e

        if not isinstance(body, dict):
            raise TransportError(f"{method} returned an unexpected response: {body!r}")

        error = body.get("error")
        if error is not None:
            if not isinstance(error, dict):
                raise CallRejectedError(str(error))
            message = str(error.get("message", "call rejected"))
            logger.warning("%s rejected by node: %s", method, message)
            raise CallRejectedError(
                message, code=error.get("code"), data=error.get("data")
            )
        if "result" not in body:
            raise TransportError(f"{method} response carries neither result nor error")
        return body["result"]

    def close(self) -> None:
        self._http.close()
