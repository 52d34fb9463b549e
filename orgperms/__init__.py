"""orgperms - collaborator permissions for every repository in a GitHub organization."""

from orgperms.config import QueryConfig
from orgperms.dedupe import unique
from orgperms.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BudgetExhaustedError,
    ConfigurationError,
    GraphQLError,
    NotFoundError,
    OrgPermsError,
    PayloadError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from orgperms.logging import configure_logging, get_logger
from orgperms.orchestrator import PermissionReport, run
from orgperms.pagination import (
    FetchBudget,
    PageFailure,
    PaginationResult,
    QueryExecutor,
    retrieve_all,
)
from orgperms.query import PERMISSIONS_QUERY, build_permissions_query
from orgperms.sorting import SortColumn, sort_records
from orgperms.transport import AsyncGraphQLTransport
from orgperms.types import PaginationState, PermissionRecord, TeamPermission

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Orchestration
    "run",
    "PermissionReport",
    "QueryConfig",
    # Pagination
    "retrieve_all",
    "QueryExecutor",
    "PaginationState",
    "PaginationResult",
    "PageFailure",
    "FetchBudget",
    # Post-processing
    "unique",
    "sort_records",
    "SortColumn",
    # Records
    "PermissionRecord",
    "TeamPermission",
    # Query
    "PERMISSIONS_QUERY",
    "build_permissions_query",
    # Transport
    "AsyncGraphQLTransport",
    # Exceptions
    "OrgPermsError",
    "ConfigurationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "GraphQLError",
    "PayloadError",
    "BudgetExhaustedError",
    # Logging
    "configure_logging",
    "get_logger",
]
