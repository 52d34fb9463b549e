"""Query state and response payload models.

The payload classes mirror the GraphQL response of the permissions query:

    organization.repositories.nodes[].collaborators.edges[]

Each ``from_dict`` tolerates missing optional data (``None``/empty) and raises
``PayloadError`` only when the response, or a value it must convert, is
unusable. Permission sources that cannot be resolved are skipped.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from orgperms.exceptions import PayloadError
from orgperms.logging import get_logger
from orgperms.types.permissions import PermissionSource, parse_permission_source

logger = get_logger("pagination")


@dataclass(frozen=True)
class PageInfo:
    """Page metadata of a GraphQL connection."""

    has_next_page: bool = False
    end_cursor: str | None = None

    @property
    def has_more(self) -> bool:
        """True when another page exists and a cursor to reach it was given."""
        return self.has_next_page and bool(self.end_cursor)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PageInfo":
        if not data:
            return cls()
        return cls(
            has_next_page=bool(data.get("hasNextPage")),
            end_cursor=data.get("endCursor"),
        )


@dataclass(frozen=True)
class PaginationState:
    """
    Position of one query execution in both connections.

    ``end_cursor`` walks the organization's repositories and
    ``inner_cursor`` walks one repository's collaborators. States are never
    mutated; each further page gets a derived copy.
    """

    organization: str
    end_cursor: str | None = None
    inner_cursor: str | None = None

    @classmethod
    def initial(cls, organization: str) -> "PaginationState":
        return cls(organization=organization)

    def next_outer(self, cursor: str) -> "PaginationState":
        """State for the next repository page; collaborators start over."""
        return replace(self, end_cursor=cursor, inner_cursor=None)

    def next_inner(self, cursor: str) -> "PaginationState":
        """State for the next collaborator page of the same repository page."""
        return replace(self, inner_cursor=cursor)

    def variables(self) -> dict[str, Any]:
        return {
            "orgname": self.organization,
            "endCursor": self.end_cursor,
            "innerCursor": self.inner_cursor,
        }


@dataclass(frozen=True)
class RateLimit:
    """Rate limit status reported alongside each response."""

    limit: int
    cost: int
    remaining: int
    reset_at: datetime | None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "RateLimit | None":
        if not data:
            return None
        reset_at = data.get("resetAt")
        try:
            return cls(
                limit=int(data.get("limit") or 0),
                cost=int(data.get("cost") or 0),
                remaining=int(data.get("remaining") or 0),
                reset_at=(
                    datetime.fromisoformat(reset_at.replace("Z", "+00:00"))
                    if reset_at
                    else None
                ),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise PayloadError(f"Malformed rateLimit: {e}") from e


@dataclass(frozen=True)
class CollaboratorEdge:
    """A collaborator of a repository and where their access comes from."""

    login: str
    permission: str
    sources: tuple[PermissionSource, ...] | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CollaboratorEdge":
        login = (data.get("node") or {})["login"]
        sources = data.get("permissionSources")
        return cls(
            login=login,
            permission=data.get("permission"),
            sources=None if sources is None else _parse_sources(login, sources),
        )


def _parse_sources(login: str, sources: list[Any]) -> tuple[PermissionSource, ...]:
    """Parse permission sources, skipping entries that cannot be resolved."""
    parsed = []
    for entry in sources:
        if not entry:
            continue
        try:
            parsed.append(parse_permission_source(entry))
        except PayloadError as e:
            logger.warning("Skipping permission source of %s: %s", login, e.message)
    return tuple(parsed)


@dataclass(frozen=True)
class CollaboratorConnection:
    edges: tuple[CollaboratorEdge, ...]
    page_info: PageInfo

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CollaboratorConnection":
        # Edges without a user behind them carry nothing to report.
        edges = tuple(
            CollaboratorEdge.from_dict(edge)
            for edge in data.get("edges") or []
            if edge and (edge.get("node") or {}).get("login")
        )
        return cls(edges=edges, page_info=PageInfo.from_dict(data.get("pageInfo")))


@dataclass(frozen=True)
class RepositoryNode:
    """A repository and one page of its collaborators."""

    name_with_owner: str | None
    description: str | None
    url: str | None
    collaborators: CollaboratorConnection | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RepositoryNode":
        collaborators = data.get("collaborators")
        return cls(
            name_with_owner=data.get("nameWithOwner"),
            description=data.get("description"),
            url=data.get("url"),
            collaborators=(
                CollaboratorConnection.from_dict(collaborators)
                if collaborators is not None
                else None
            ),
        )


@dataclass(frozen=True)
class RepositoryConnection:
    nodes: tuple[RepositoryNode, ...]
    page_info: PageInfo

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RepositoryConnection":
        return cls(
            nodes=tuple(
                RepositoryNode.from_dict(node) for node in data.get("nodes") or [] if node
            ),
            page_info=PageInfo.from_dict(data.get("pageInfo")),
        )


@dataclass(frozen=True)
class OrganizationPayload:
    """Parsed ``data`` object of one permissions query response."""

    repositories: RepositoryConnection
    rate_limit: RateLimit | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "OrganizationPayload":
        """
        Parse a response ``data`` object.

        Raises:
            PayloadError: If the organization or its repositories are missing
        """
        organization = (data or {}).get("organization")
        if not organization:
            raise PayloadError("Response has no organization data")
        repositories = organization.get("repositories")
        if repositories is None:
            raise PayloadError("Response has no repository connection")
        return cls(
            repositories=RepositoryConnection.from_dict(repositories),
            rate_limit=RateLimit.from_dict(data.get("rateLimit")),
        )
