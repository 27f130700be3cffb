"""Remote dictionary API client.

Thin request/response mapper over the entries endpoint. Each call is a
single best-effort round trip: no retries, no caching.

Routes:
- GET    /api/entries
- POST   /api/entries
- PUT    /api/entries?id=<id>
- DELETE /api/entries?id=<id>
"""

import json
import logging
from typing import Any

import httpx

from domain.model.cloud_config import CloudConfig

logger = logging.getLogger(__name__)

ENTRIES_PATH = "/api/entries"
PASSPHRASE_HEADER = "X-Passphrase"
API_TIMEOUT_SECONDS = 15.0


class ApiError(Exception):
    """Non-successful response from the dictionary API."""

    def __init__(self, status: int, message: str, payload: Any = None):
        self.status = status
        self.message = message
        self.payload = payload
        super().__init__(message)


class DictionaryApiClient:
    """Issues entry requests against a configured base URL."""

    def __init__(
        self,
        config: CloudConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = API_TIMEOUT_SECONDS,
    ):
        self.config = config
        self._transport = transport
        self._timeout = timeout

    def _headers(self, has_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.config.passphrase:
            headers[PASSPHRASE_HEADER] = self.config.passphrase
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def _request(
        self,
        method: str,
        params: dict | None = None,
        body: dict | None = None,
    ) -> Any:
        """Perform one request and return the parsed JSON body (or None).

        Raises:
            ApiError: response status is not 2xx
            httpx.HTTPError: transport failure
        """
        url = f"{self.config.base_url}{ENTRIES_PATH}"
        content = json.dumps(body) if body is not None else None
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            response = await client.request(
                method,
                url,
                params=params,
                content=content,
                headers=self._headers(content is not None),
            )

        payload = _parse_body(response.text)
        if not response.is_success:
            message = (
                (payload.get("error") if isinstance(payload, dict) else None)
                or response.reason_phrase
                or f"HTTP {response.status_code}"
            )
            logger.warning(
                "Dictionary API request failed",
                extra={"method": method, "status_code": response.status_code, "error": message},
            )
            raise ApiError(response.status_code, message, payload)

        logger.debug(
            "Dictionary API request succeeded",
            extra={"method": method, "status_code": response.status_code},
        )
        return payload

    async def list_entries(self) -> list[dict]:
        data = await self._request("GET")
        if not isinstance(data, dict) or not isinstance(data.get("entries"), list):
            raise ApiError(200, "Invalid response from server", data)
        return data["entries"]

    async def create_entry(self, payload: dict) -> dict:
        data = await self._request("POST", body=payload)
        return _require_entry(data)

    async def update_entry(self, entry_id: str, payload: dict) -> dict:
        data = await self._request("PUT", params={"id": entry_id}, body=payload)
        return _require_entry(data)

    async def delete_entry(self, entry_id: str) -> None:
        await self._request("DELETE", params={"id": entry_id})


def _parse_body(text: str) -> Any:
    """Parse a JSON body. Empty or unparseable bodies become None."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _require_entry(data: Any) -> dict:
    if not isinstance(data, dict) or not isinstance(data.get("entry"), dict):
        raise ApiError(200, "Invalid response from server", data)
    return data["entry"]
