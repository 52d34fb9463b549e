"""
Async GraphQL transport for orgperms.

Executes GraphQL documents against the GitHub API using the httpx async
client, and maps failures into typed exceptions. Requests are never retried.
"""

import time
from collections.abc import Mapping
from typing import Any

import httpx

from orgperms.exceptions import (
    AuthenticationError,
    AuthorizationError,
    GraphQLError,
    NotFoundError,
    OrgPermsError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from orgperms.logging import log_http_request, log_http_response

DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_TIMEOUT = 30.0


class AsyncGraphQLTransport:
    """
    GraphQL transport bound to one access token.

    Handles:
    - Authorization header injection
    - Error response parsing into typed exceptions
    - GraphQL ``errors`` lists surfaced as ``GraphQLError``

    Satisfies the ``QueryExecutor`` protocol used by the pagination engine.
    """

    def __init__(
        self,
        token: str,
        url: str = DEFAULT_GRAPHQL_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            token: GitHub personal access token
            url: GraphQL endpoint
            timeout: Per-request timeout in seconds
            http_transport: Optional httpx transport (for testing)
        """
        self.url = url
        self.timeout = timeout
        self._headers = {
            "Authorization": f"token {token}",
            "Content-Type": "application/json",
            "User-Agent": "orgperms",
        }

        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=self._headers,
            transport=http_transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncGraphQLTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def execute(
        self, query: str, variables: Mapping[str, Any]
    ) -> dict[str, Any]:
        """
        Execute a GraphQL query.

        Args:
            query: GraphQL document
            variables: Query variables

        Returns:
            The ``data`` object of the response

        Raises:
            OrgPermsError: On transport, HTTP or GraphQL errors
        """
        payload = {"query": query, "variables": dict(variables)}
        log_http_request(self.url, self._headers, payload["variables"])

        started = time.monotonic()
        try:
            response = await self._client.post(self.url, json=payload)
        except httpx.RequestError as e:
            raise ServerError("CONNECTION_ERROR", str(e)) from e

        request_id = response.headers.get("X-GitHub-Request-Id")
        log_http_response(
            response.status_code,
            self.url,
            elapsed_ms=(time.monotonic() - started) * 1000,
            request_id=request_id,
        )

        if response.status_code >= 400:
            raise self._parse_error_response(response)

        try:
            body = response.json()
        except ValueError as e:
            raise ServerError(
                "INVALID_RESPONSE", f"Response is not JSON: {e}", request_id
            ) from e

        if body.get("errors"):
            raise GraphQLError(body["errors"], request_id)

        return body.get("data") or {}

    def _parse_error_response(self, response: httpx.Response) -> OrgPermsError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate OrgPermsError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        code = str(response.status_code)
        message = data.get("message") or f"HTTP {response.status_code}"
        request_id = response.headers.get("X-GitHub-Request-Id")

        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError(code, message, request_id)
        elif status_code == 403:
            return AuthorizationError(code, message, request_id)
        elif status_code == 404:
            return NotFoundError(code, message, request_id)
        elif status_code == 429:
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError(code, message, retry_after, request_id)
        elif status_code >= 500:
            return ServerError(code, message, request_id)
        else:
            return ValidationError(code, message, request_id)
