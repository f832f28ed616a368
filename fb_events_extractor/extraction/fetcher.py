"""
Parallel Fetching

Executes Graph API queries concurrently over one httpx.AsyncClient.
A round is all-or-nothing: the first failing query cancels the rest and
its error is raised. No retries are attempted.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

import httpx

from ..config import DEFAULT_REQUEST_TIMEOUT
from ..exceptions import FetchError
from ..parsers import load_json
from .queries import GraphQuery, redact_token

logger = logging.getLogger(__name__)


class RedactTokenFilter(logging.Filter):
    """Masks access tokens in log records (httpx logs full request URLs at INFO)."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_token(message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


_redact_filter = RedactTokenFilter()
logging.getLogger("httpx").addFilter(_redact_filter)


class GraphFetcher:
    """Runs GraphQuery descriptors and returns raw response bodies.

    Args:
        timeout: Per-request timeout in seconds (None disables it).
        transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        client: Optional pre-built AsyncClient. The caller owns its lifecycle.

    Usage:
        async with GraphFetcher() as fetcher:
            bodies = await fetcher.fetch_all(queries)
    """

    def __init__(
        self,
        timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._timeout = timeout
        self._transport = transport
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._client is None:
            client_kwargs = {"timeout": self._timeout, "follow_redirects": True}
            if self._transport is not None:
                client_kwargs["transport"] = self._transport
            self._client = httpx.AsyncClient(**client_kwargs)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, query: GraphQuery) -> str:
        """
        Execute one query.

        Returns:
            Response body text

        Raises:
            GraphAPIError: If the API answered with an error payload
            FetchError: On transport errors or other non-2xx statuses
        """
        if self._client is None:
            raise FetchError("GraphFetcher must be used as an async context manager")

        logger.debug("GET %s", query.redacted_url)
        try:
            response = await self._client.get(query.url)
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {query.path} failed: {e}") from e

        if not response.is_success:
            # Graph API errors come back as JSON with a non-2xx status
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                load_json(payload)  # raises GraphAPIError for error payloads
            raise FetchError(
                f"API error: {response.status_code} - {response.text[:200]}"
            )

        return response.text

    async def fetch_all(self, queries: Sequence[GraphQuery]) -> List[str]:
        """
        Execute all queries concurrently and wait for every one of them.

        Returns:
            Response bodies in the same order as `queries`

        Raises:
            The first error raised by any query. Remaining queries are
            cancelled and no partial results are returned.
        """
        if not queries:
            return []

        tasks = [asyncio.ensure_future(self.fetch(query)) for query in queries]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
