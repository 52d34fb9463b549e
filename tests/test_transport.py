"""
Tests for the async GraphQL transport.

Feature: orgperms
"""

import asyncio
import json
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from orgperms.exceptions import (
    AuthenticationError,
    GraphQLError,
    RateLimitedError,
    ServerError,
)
from orgperms.transport import AsyncGraphQLTransport


def _execute(handler: Any, query: str = "query { viewer { login } }") -> Any:
    async def go() -> Any:
        async with AsyncGraphQLTransport(
            "ghp_secret", http_transport=httpx.MockTransport(handler)
        ) as transport:
            return await transport.execute(query, {"orgname": "acme", "endCursor": None})

    return asyncio.run(go())


def test_execute_returns_data_and_sends_token() -> None:
    seen: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"organization": {"login": "acme"}}})

    data = _execute(handler, "query Q { x }")

    assert data == {"organization": {"login": "acme"}}
    assert seen["authorization"] == "token ghp_secret"
    assert seen["body"] == {
        "query": "query Q { x }",
        "variables": {"orgname": "acme", "endCursor": None},
    }


def test_graphql_errors_raise() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "data": None,
                "errors": [
                    {"type": "NOT_FOUND", "message": "Could not resolve to an Organization"}
                ],
            },
            headers={"X-GitHub-Request-Id": "req-1"},
        )

    with pytest.raises(GraphQLError) as exc_info:
        _execute(handler)

    assert exc_info.value.code == "NOT_FOUND"
    assert "Could not resolve" in exc_info.value.message
    assert exc_info.value.request_id == "req-1"
    assert len(exc_info.value.errors) == 1


def test_http_401_raises_authentication_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Bad credentials"})

    with pytest.raises(AuthenticationError) as exc_info:
        _execute(handler)

    assert exc_info.value.message == "Bad credentials"


def test_connection_error_raises_server_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ServerError) as exc_info:
        _execute(handler)

    assert exc_info.value.code == "CONNECTION_ERROR"


def test_non_json_body_raises_server_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(ServerError) as exc_info:
        _execute(handler)

    assert exc_info.value.code == "INVALID_RESPONSE"


def test_no_retry_on_server_error() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502, text="Bad gateway")

    with pytest.raises(ServerError):
        _execute(handler)

    assert len(calls) == 1


# Status code to exception type mapping for property test
STATUS_CODE_TO_EXCEPTION = {
    401: "AuthenticationError",
    403: "AuthorizationError",
    404: "NotFoundError",
    429: "RateLimitedError",
    500: "ServerError",
    502: "ServerError",
    503: "ServerError",
    400: "ValidationError",
    422: "ValidationError",
}


@given(
    status_code=st.sampled_from(list(STATUS_CODE_TO_EXCEPTION)),
    error_message=st.text(min_size=1, max_size=200),
    request_id=st.text(min_size=1, max_size=50, alphabet=st.characters(
        whitelist_categories=("Lu", "Ll", "Nd"),
        whitelist_characters="-:",
    )),
    retry_after=st.integers(min_value=1, max_value=3600),
)
@settings(max_examples=100)
def test_property_error_response_parsing(
    status_code: int,
    error_message: str,
    request_id: str,
    retry_after: int,
) -> None:
    """
    Property: Error response parsing

    For any error response the transport produces a typed exception carrying
    the status code, message and GitHub request id; rate limit errors also
    carry the Retry-After hint.
    """
    transport = AsyncGraphQLTransport("ghp_secret")

    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.json.return_value = {"message": error_message}
    mock_response.headers = {
        "Retry-After": str(retry_after),
        "X-GitHub-Request-Id": request_id,
    }

    error = transport._parse_error_response(mock_response)

    assert type(error).__name__ == STATUS_CODE_TO_EXCEPTION[status_code]
    assert error.code == str(status_code)
    assert error.message == error_message
    assert error.request_id == request_id

    if status_code == 429:
        assert isinstance(error, RateLimitedError)
        assert error.retry_after == retry_after


def test_error_without_json_body() -> None:
    transport = AsyncGraphQLTransport("ghp_secret")

    mock_response = MagicMock()
    mock_response.status_code = 503
    mock_response.json.side_effect = ValueError("no json")
    mock_response.headers = {}

    error = transport._parse_error_response(mock_response)

    assert isinstance(error, ServerError)
    assert error.message == "HTTP 503"
