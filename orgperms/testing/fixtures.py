"""
Payload builders and pytest fixtures for orgperms testing.

The builders produce dictionaries shaped like the GitHub GraphQL response of
the permissions query, so tests can script ``MockQueryExecutor`` pages
without spelling out the whole nesting.
"""

from collections.abc import Generator
from typing import Any

import pytest

from orgperms.testing.mock import MockQueryExecutor
from orgperms.types.permissions import PermissionRecord, TeamPermission


# ============================================================================
# Payload builders
# ============================================================================


def make_source(
    typename: str,
    permission: str,
    name: str | None = None,
) -> dict[str, Any]:
    """
    Build one ``permissionSources`` entry.

    Args:
        typename: "Organization", "Repository" or "Team"
        permission: Permission granted by the source
        name: Login, nameWithOwner or team name, depending on ``typename``
    """
    source: dict[str, Any] = {"__typename": typename}
    if typename == "Organization":
        source["login"] = name or "acme"
    elif typename == "Repository":
        source["nameWithOwner"] = name or "acme/repo"
    else:
        source["name"] = name or "team"
    return {"permission": permission, "source": source}


def make_edge(
    login: str,
    permission: str = "READ",
    sources: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a collaborator edge; without sources a direct repository grant is assumed."""
    if sources is None:
        sources = [make_source("Repository", permission)]
    return {
        "permission": permission,
        "permissionSources": sources,
        "node": {"login": login},
    }


def make_repository(
    name_with_owner: str | None,
    edges: list[dict[str, Any]],
    has_next_page: bool = False,
    end_cursor: str | None = None,
) -> dict[str, Any]:
    """Build a repository node with one page of collaborators."""
    return {
        "nameWithOwner": name_with_owner,
        "description": None,
        "url": f"https://github.com/{name_with_owner}" if name_with_owner else None,
        "collaborators": {
            "edges": edges,
            "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
        },
    }


def make_payload(
    repositories: list[dict[str, Any]],
    has_next_page: bool = False,
    end_cursor: str | None = None,
    remaining: int = 4999,
) -> dict[str, Any]:
    """Build a full response ``data`` object for one repository page."""
    return {
        "organization": {
            "repositories": {
                "nodes": repositories,
                "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
            }
        },
        "rateLimit": {
            "limit": 5000,
            "cost": 1,
            "remaining": remaining,
            "resetAt": "2024-01-01T00:00:00Z",
        },
    }


def create_mock_record(
    repository: str = "acme/repo",
    handle: str = "octocat",
    permission: str = "ADMIN",
    organization_permission: str | None = None,
    repository_permission: str | None = "ADMIN",
    team_permissions: list[tuple[str, str]] | None = None,
) -> PermissionRecord:
    """Create a PermissionRecord with sensible defaults."""
    return PermissionRecord(
        repository=repository,
        handle=handle,
        permission=permission,
        organization_permission=organization_permission,
        repository_permission=repository_permission,
        team_permissions=(
            tuple(TeamPermission(name, perm) for name, perm in team_permissions)
            if team_permissions is not None
            else ()
        ),
    )


def configure_acme(executor: MockQueryExecutor) -> MockQueryExecutor:
    """
    Script the "acme" organization.

    - acme/a: one page, collaborators alice and bob
    - acme/b: two collaborator pages, carol then dave
    - a single repository page
    """
    executor.configure_page(
        make_payload([
            make_repository("acme/a", [
                make_edge("bob", "WRITE"),
                make_edge("alice", "ADMIN", [
                    make_source("Organization", "READ"),
                    make_source("Team", "ADMIN", "core"),
                ]),
            ]),
            make_repository(
                "acme/b",
                [make_edge("carol", "READ")],
                has_next_page=True,
                end_cursor="b-1",
            ),
        ])
    )
    executor.configure_page(
        make_payload([
            make_repository("acme/a", []),
            make_repository("acme/b", [make_edge("dave", "ADMIN")]),
        ]),
        inner_cursor="b-1",
    )
    return executor


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_executor() -> Generator[MockQueryExecutor, None, None]:
    """
    Provide an empty MockQueryExecutor.

    Example:
        ```python
        def test_my_feature(mock_executor):
            mock_executor.configure_page(make_payload([...]))
            result = asyncio.run(retrieve_all(mock_executor, PERMISSIONS_QUERY, state))
            assert mock_executor.was_called_with()
        ```
    """
    executor = MockQueryExecutor()
    yield executor
    executor.reset()


@pytest.fixture
def acme_executor() -> MockQueryExecutor:
    """Provide a MockQueryExecutor scripted with the "acme" organization."""
    return configure_acme(MockQueryExecutor())


@pytest.fixture
def sample_record() -> PermissionRecord:
    """Provide a sample permission record."""
    return create_mock_record(team_permissions=[("core", "WRITE")])
