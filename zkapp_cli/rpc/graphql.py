"""
GraphQL-over-HTTP client (async).

- One POST per operation: {"operationName", "query", "variables"}.
- Every request is bounded by a hard wall-clock deadline (default 20 s) using
  `asyncio.wait_for`, so a slow-trickling endpoint cannot stall a deploy past
  the bound. httpx's own per-phase timeouts are set to the same value.
- No retries. Failures raise typed errors from :mod:`zkapp_cli.errors`:

    * GraphQLTransportError  timeout / DNS / refused connection / non-JSON body
    * GraphQLHttpError       non-2xx status (server `errors` kept when present)
    * GraphQLResponseError   2xx body with a top-level `errors` list

Example:
    async with GraphQLClient("https://example/graphql") as gql:
        data = await gql.execute("query { syncStatus }")
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from ..errors import GraphQLHttpError, GraphQLResponseError, GraphQLTransportError
from ..version import __version__

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0

__all__ = ["GraphQLClient", "DEFAULT_TIMEOUT"]


@dataclass
class GraphQLClient:
    """Minimal async GraphQL client over httpx."""

    url: str
    timeout: float = DEFAULT_TIMEOUT
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.AsyncBaseTransport] = None
    _client: Optional[httpx.AsyncClient] = field(init=False, default=None, repr=False)

    # --- lifecycle -------------------------------------------------------

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            merged: Dict[str, str] = {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": f"zkapp-cli/{__version__}",
            }
            if self.headers:
                merged.update(dict(self.headers))
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=merged,
                transport=self.transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GraphQLClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    # --- public API ------------------------------------------------------

    async def post(self, query: str, variables: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Send one operation and return the whole decoded body (`data` and any
        `errors`). Raises GraphQLTransportError / GraphQLHttpError.
        """
        payload = {"operationName": None, "query": query, "variables": dict(variables or {})}
        client = self._ensure_client()
        try:
            resp = await asyncio.wait_for(client.post(self.url, json=payload), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GraphQLTransportError(f"Request to {self.url} timed out after {self.timeout:g}s") from e
        except httpx.TimeoutException as e:
            raise GraphQLTransportError(f"Request to {self.url} timed out after {self.timeout:g}s") from e
        except httpx.HTTPError as e:
            raise GraphQLTransportError(f"Network error talking to {self.url}: {e}") from e

        log.debug("POST %s -> HTTP %s", self.url, resp.status_code)
        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.is_success:
            errors = body.get("errors") if isinstance(body, dict) else None
            raise GraphQLHttpError(
                status_code=resp.status_code,
                status_text=resp.reason_phrase,
                errors=errors if errors is not None else (resp.text[:256] or None),
            )
        if not isinstance(body, dict):
            raise GraphQLTransportError(f"Non-JSON response from {self.url}: {resp.text[:256]!r}")
        return body

    async def execute(self, query: str, variables: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Like `post`, but returns `data` and raises GraphQLResponseError on `errors`."""
        body = await self.post(query, variables)
        if body.get("errors"):
            raise GraphQLResponseError(errors=body["errors"])
        data = body.get("data")
        return data if isinstance(data, dict) else {}