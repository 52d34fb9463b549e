"""
Retrieval of organization permissions across both cursor axes.

The permissions query walks two nested connections at once: the
organization's repositories (outer cursor, ``endCursor``) and each
repository's collaborators (inner cursor, ``innerCursor``). Every page is
fetched with its own immutable ``PaginationState`` and yields its own
``PaginationResult``; the walk only concatenates results. Both axes are
followed in loops, so the number of pages is bounded by the ``FetchBudget``
and not by the interpreter's recursion limit.

A failed page never aborts the walk. It is logged, recorded as a
``PageFailure`` and contributes no records, while everything gathered
elsewhere is kept.
"""

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from orgperms.exceptions import BudgetExhaustedError, OrgPermsError
from orgperms.logging import get_logger, log_page_fetch
from orgperms.types.permissions import PermissionRecord, SourceKind, TeamPermission
from orgperms.types.query import (
    CollaboratorConnection,
    CollaboratorEdge,
    OrganizationPayload,
    PaginationState,
    RateLimit,
    RepositoryNode,
)

logger = get_logger("pagination")

UNKNOWN_REPOSITORY = "unknown"


class QueryExecutor(Protocol):
    """Anything that can run a GraphQL document and return its ``data``."""

    async def execute(
        self, query: str, variables: Mapping[str, Any]
    ) -> dict[str, Any]: ...


@dataclass(frozen=True)
class PageFailure:
    """A page that could not be retrieved, and why."""

    state: PaginationState
    error: OrgPermsError


@dataclass(frozen=True)
class PaginationResult:
    """Records gathered by one branch of the walk plus what went wrong."""

    records: tuple[PermissionRecord, ...] = ()
    failures: tuple[PageFailure, ...] = ()
    requests: int = 0
    rate_limit: RateLimit | None = None

    @property
    def complete(self) -> bool:
        """True when every page of the branch was retrieved."""
        return not self.failures

    def __add__(self, other: "PaginationResult") -> "PaginationResult":
        return PaginationResult.concat((self, other))

    @classmethod
    def concat(cls, results: Iterable["PaginationResult"]) -> "PaginationResult":
        """Join results in order; the last rate limit seen wins."""
        records: list[PermissionRecord] = []
        failures: list[PageFailure] = []
        requests = 0
        rate_limit = None
        for result in results:
            records.extend(result.records)
            failures.extend(result.failures)
            requests += result.requests
            rate_limit = result.rate_limit or rate_limit
        return cls(
            records=tuple(records),
            failures=tuple(failures),
            requests=requests,
            rate_limit=rate_limit,
        )


class FetchBudget:
    """
    Upper bound on the work a single walk may do.

    Guards against an API that keeps reporting ``hasNextPage`` forever and
    bounds total run time. Shared by every branch of one walk.
    """

    def __init__(
        self,
        max_requests: int | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Args:
            max_requests: Maximum number of queries to issue (None: unlimited)
            timeout: Seconds from now after which no new query is issued
        """
        self.max_requests = max_requests
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self.used = 0

    def consume(self) -> None:
        """
        Account for one more query.

        Raises:
            BudgetExhaustedError: If the request limit or deadline was reached
        """
        if self.max_requests is not None and self.used >= self.max_requests:
            raise BudgetExhaustedError(
                f"Request budget of {self.max_requests} queries exhausted"
            )
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise BudgetExhaustedError("Run deadline reached")
        self.used += 1


async def retrieve_all(
    executor: QueryExecutor,
    query: str,
    state: PaginationState,
    *,
    paginate: bool = True,
    budget: FetchBudget | None = None,
) -> PaginationResult:
    """
    Retrieve every permission record reachable from ``state``.

    Args:
        executor: Runs the GraphQL query
        query: The permissions query document
        state: Starting cursors (usually ``PaginationState.initial(org)``)
        paginate: Follow further repository and collaborator pages
        budget: Optional limit on requests and run time

    Returns:
        The gathered records (possibly with duplicates) and any page failures.
        Never raises ``OrgPermsError``.
    """
    return await _walk_repositories(executor, query, state, paginate, budget)


async def _walk_repositories(
    executor: QueryExecutor,
    query: str,
    state: PaginationState,
    paginate: bool,
    budget: FetchBudget | None,
) -> PaginationResult:
    """Fetch repository pages in order, each followed by its extra collaborator pages."""
    pages: list[PaginationResult] = []

    while True:
        try:
            payload = await _fetch_page(executor, query, state, budget)
        except OrgPermsError as e:
            pages.append(_failed(state, e))
            break

        pages.append(PaginationResult(requests=1, rate_limit=payload.rate_limit))

        for repository in payload.repositories.nodes:
            collaborators = repository.collaborators
            if collaborators is None:
                continue

            pages.append(
                PaginationResult(records=project_collaborators(repository, collaborators))
            )

            if paginate and collaborators.page_info.has_more:
                pages.append(
                    await _walk_collaborators(
                        executor,
                        query,
                        state.next_inner(collaborators.page_info.end_cursor),
                        repository.name_with_owner,
                        budget,
                    )
                )

        page_info = payload.repositories.page_info
        if not (paginate and page_info.has_more):
            break
        state = state.next_outer(page_info.end_cursor)

    return PaginationResult.concat(pages)


async def _walk_collaborators(
    executor: QueryExecutor,
    query: str,
    state: PaginationState,
    repository_name: str | None,
    budget: FetchBudget | None,
) -> PaginationResult:
    """Follow the collaborator pages of one repository on the current repository page."""
    pages: list[PaginationResult] = []

    while True:
        try:
            payload = await _fetch_page(executor, query, state, budget)
        except OrgPermsError as e:
            pages.append(_failed(state, e))
            break

        pages.append(PaginationResult(requests=1, rate_limit=payload.rate_limit))

        # The inner cursor belongs to a single repository; other nodes on the
        # page are already covered by the page that started this walk.
        repository = next(
            (
                node
                for node in payload.repositories.nodes
                if node.name_with_owner == repository_name
            ),
            None,
        )
        if repository is None or repository.collaborators is None:
            logger.warning(
                "Repository %s missing from collaborator page (innerCursor=%s)",
                repository_name or UNKNOWN_REPOSITORY,
                state.inner_cursor,
            )
            break

        collaborators = repository.collaborators
        pages.append(
            PaginationResult(records=project_collaborators(repository, collaborators))
        )

        if not collaborators.page_info.has_more:
            break
        state = state.next_inner(collaborators.page_info.end_cursor)

    return PaginationResult.concat(pages)


async def _fetch_page(
    executor: QueryExecutor,
    query: str,
    state: PaginationState,
    budget: FetchBudget | None,
) -> OrganizationPayload:
    if budget is not None:
        budget.consume()

    data = await executor.execute(query, state.variables())
    payload = OrganizationPayload.from_dict(data)

    log_page_fetch(
        state.organization,
        state.end_cursor,
        state.inner_cursor,
        len(payload.repositories.nodes),
        sum(
            len(node.collaborators.edges)
            for node in payload.repositories.nodes
            if node.collaborators is not None
        ),
    )
    if payload.rate_limit is not None:
        logger.debug(
            "rate limit: remaining=%d/%d, cost=%d, resets=%s",
            payload.rate_limit.remaining,
            payload.rate_limit.limit,
            payload.rate_limit.cost,
            payload.rate_limit.reset_at,
        )

    return payload


def _failed(state: PaginationState, error: OrgPermsError) -> PaginationResult:
    logger.error(
        "Query failed for %s (endCursor=%s, innerCursor=%s): %s",
        state.organization,
        state.end_cursor,
        state.inner_cursor,
        error,
    )
    issued = 0 if isinstance(error, BudgetExhaustedError) else 1
    return PaginationResult(failures=(PageFailure(state, error),), requests=issued)


def project_collaborators(
    repository: RepositoryNode, collaborators: CollaboratorConnection
) -> tuple[PermissionRecord, ...]:
    """Flatten one page of a repository's collaborators into records."""
    return tuple(project_edge(repository, edge) for edge in collaborators.edges)


def project_edge(repository: RepositoryNode, edge: CollaboratorEdge) -> PermissionRecord:
    """
    Build the permission record for one collaborator edge.

    The organization and repository permissions come from the first source
    of that kind; every team source contributes a team permission, in order.
    """
    sources = edge.sources or ()

    def first_permission(kind: SourceKind) -> str | None:
        return next((s.permission for s in sources if s.kind is kind), None)

    return PermissionRecord(
        repository=repository.name_with_owner or UNKNOWN_REPOSITORY,
        handle=edge.login,
        permission=edge.permission,
        organization_permission=first_permission(SourceKind.ORGANIZATION),
        repository_permission=first_permission(SourceKind.REPOSITORY),
        team_permissions=(
            None
            if edge.sources is None
            else tuple(
                TeamPermission(name=s.name, permission=s.permission)
                for s in edge.sources
                if s.kind is SourceKind.TEAM
            )
        ),
    )
