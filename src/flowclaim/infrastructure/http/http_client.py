from __future__ import annotations

from typing import Any, Optional

import httpx


class HttpClient:
    """Posts JSON documents to a single endpoint over a pooled httpx client."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._url = url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def post_json(self, payload: Any) -> Any:
        """POST `payload` and return the decoded JSON body.

        Raises httpx.HTTPError for transport failures and non-2xx statuses,
        ValueError when the body is not JSON.
        """
        resp = self._client.post(self._url, json=payload)
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        self._client.close()
