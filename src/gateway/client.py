"""Async REST client for the hosted league store.

Speaks the PostgREST dialect: one table per path, ``select``/``order`` query
parameters for reads, and ``Prefer: resolution=merge-duplicates`` for
upserts keyed on a named conflict target.
"""

import logging
from typing import Dict, List, Optional, Sequence

import httpx

from src.gateway.config import REST_PATH, GatewaySettings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Raised when the store rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    """Pull the store's error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "hint"):
            if body.get(key):
                return str(body[key])
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"


class RestGateway:
    """Bulk-read and batch-upsert access to the store's relations."""

    def __init__(
        self,
        settings: GatewaySettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.settings.url}{REST_PATH}",
            headers={
                "apikey": self.settings.api_key,
                "Authorization": f"Bearer {self.settings.api_key}",
                "Accept": "application/json",
            },
            timeout=self.settings.timeout,
            transport=self._transport,
        )

    async def select(self, table: str, order_by: Optional[str] = None) -> List[Dict]:
        """Read every row of *table*, optionally sorted ascending by *order_by*.

        Raises:
            GatewayError: On a non-2xx response, transport failure or a
                payload that is not a JSON array.
        """
        params = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.asc"

        async with self._client() as client:
            try:
                response = await client.get(f"/{table}", params=params)
            except httpx.HTTPError as e:
                raise GatewayError(f"Request to {table} failed: {e}") from e

        if response.is_error:
            raise GatewayError(_error_message(response), response.status_code)

        try:
            rows = response.json()
        except ValueError as e:
            raise GatewayError(f"Invalid JSON from {table}: {e}") from e
        if not isinstance(rows, list):
            raise GatewayError(f"Expected a list of rows from {table}")

        logger.debug("Read %d rows from %s", len(rows), table)
        return rows

    async def upsert(
        self, table: str, rows: Sequence[Dict], on_conflict: Sequence[str]
    ) -> None:
        """Insert *rows*, overwriting any row that collides on *on_conflict*.

        Raises:
            GatewayError: On a non-2xx response or transport failure.
        """
        async with self._client() as client:
            try:
                response = await client.post(
                    f"/{table}",
                    params={"on_conflict": ",".join(on_conflict)},
                    json=list(rows),
                    headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
                )
            except httpx.HTTPError as e:
                raise GatewayError(f"Request to {table} failed: {e}") from e

        if response.is_error:
            raise GatewayError(_error_message(response), response.status_code)

        logger.debug("Upserted %d rows into %s", len(rows), table)
