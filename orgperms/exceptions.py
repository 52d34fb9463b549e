"""orgperms exception classes."""

from typing import Any


class OrgPermsError(Exception):
    """Base exception for all orgperms errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(OrgPermsError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(OrgPermsError):
    """Raised when the token is rejected (HTTP 401)."""

    pass


class AuthorizationError(OrgPermsError):
    """Raised when the token lacks access (HTTP 403)."""

    pass


class NotFoundError(OrgPermsError):
    """Raised when the endpoint or organization is not found."""

    pass


class RateLimitedError(OrgPermsError):
    """Raised when rate limited. The wait hint is informational only."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(OrgPermsError):
    """Raised on other client errors (4xx)."""

    pass


class ServerError(OrgPermsError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class GraphQLError(OrgPermsError):
    """Raised when the response body carries a GraphQL ``errors`` list."""

    def __init__(
        self,
        errors: list[dict[str, Any]],
        request_id: str | None = None,
    ) -> None:
        self.errors = errors
        first = errors[0] if errors else {}
        code = first.get("type") or first.get("extensions", {}).get("code") or "GRAPHQL_ERROR"
        messages = "; ".join(str(e.get("message", "unknown error")) for e in errors)
        super().__init__(code, messages or "GraphQL request failed", request_id)


class PayloadError(OrgPermsError):
    """Raised when a response does not have the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__("MALFORMED_PAYLOAD", message)


class BudgetExhaustedError(OrgPermsError):
    """Raised when the request budget or run deadline has been used up."""

    def __init__(self, message: str) -> None:
        super().__init__("BUDGET_EXHAUSTED", message)
