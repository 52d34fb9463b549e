"""
Entry point tying the query pipeline together.

    executor -> retrieve_all -> unique -> sort_records -> PermissionReport
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from orgperms.config import DEFAULT_MAX_REQUESTS
from orgperms.dedupe import unique
from orgperms.exceptions import ConfigurationError
from orgperms.logging import get_logger
from orgperms.pagination import FetchBudget, PageFailure, QueryExecutor, retrieve_all
from orgperms.query import PERMISSIONS_QUERY
from orgperms.sorting import SortColumn, sort_records
from orgperms.transport import DEFAULT_GRAPHQL_URL, DEFAULT_TIMEOUT, AsyncGraphQLTransport
from orgperms.types.permissions import PermissionRecord
from orgperms.types.query import PaginationState, RateLimit

logger = get_logger()


@dataclass(frozen=True)
class PermissionReport(Sequence[PermissionRecord]):
    """
    Unique, sorted permission records of one run.

    Behaves as a read-only sequence of records. ``complete`` tells a full
    result apart from one where some pages could not be retrieved.
    """

    records: tuple[PermissionRecord, ...]
    failures: tuple[PageFailure, ...] = ()
    requests: int = 0
    rate_limit: RateLimit | None = None

    @property
    def complete(self) -> bool:
        return not self.failures

    def __getitem__(self, index: Any) -> Any:
        return self.records[index]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[PermissionRecord]:
        return iter(self.records)


async def run(
    token: str,
    organization: str,
    paginate: bool = True,
    sort_column: SortColumn | str = SortColumn.REPOSITORY,
    *,
    executor: QueryExecutor | None = None,
    query: str = PERMISSIONS_QUERY,
    base_url: str = DEFAULT_GRAPHQL_URL,
    timeout: float = DEFAULT_TIMEOUT,
    max_requests: int | None = DEFAULT_MAX_REQUESTS,
    run_timeout: float | None = None,
) -> PermissionReport:
    """
    Query an organization's collaborator permissions.

    Args:
        token: GitHub token with repo, admin:org and read:user scopes
        organization: Organization login
        paginate: Gather all pages instead of only the first
        sort_column: "repository" or "user"
        executor: Use this executor instead of a transport bound to ``token``
        query: GraphQL document to execute
        base_url: GraphQL endpoint for the transport
        timeout: Per-request timeout in seconds
        max_requests: Maximum number of queries for the whole run
        run_timeout: Seconds after which no further query is issued

    Returns:
        PermissionReport with unique records sorted by ``sort_column``

    Raises:
        ConfigurationError: If token, organization or sort column is invalid
    """
    column = SortColumn.parse(sort_column)
    if not organization:
        raise ConfigurationError("organization must not be empty")
    if executor is None and not token:
        raise ConfigurationError("token must not be empty")

    state = PaginationState.initial(organization)
    budget = FetchBudget(max_requests=max_requests, timeout=run_timeout)

    if executor is not None:
        result = await retrieve_all(
            executor, query, state, paginate=paginate, budget=budget
        )
    else:
        async with AsyncGraphQLTransport(token, url=base_url, timeout=timeout) as transport:
            result = await retrieve_all(
                transport, query, state, paginate=paginate, budget=budget
            )

    records = sort_records(unique(result.records), column)
    logger.info(
        "Retrieved %d records (%d unique) for %s in %d requests",
        len(result.records),
        len(records),
        organization,
        result.requests,
    )
    if not result.complete:
        logger.warning(
            "%d page(s) of %s could not be retrieved; results are incomplete",
            len(result.failures),
            organization,
        )

    return PermissionReport(
        records=records,
        failures=result.failures,
        requests=result.requests,
        rate_limit=result.rate_limit,
    )
