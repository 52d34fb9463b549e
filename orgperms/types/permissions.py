"""Permission data models.

A collaborator's effective permission on a repository can come from several
sources at once: organization membership, a direct grant on the repository,
or one or more teams. The GraphQL API reports these as a polymorphic
``source`` object; here each variant is its own class and the variant is
chosen from ``__typename`` when the payload is parsed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from orgperms.exceptions import PayloadError


class SourceKind(str, Enum):
    """Discriminant of a permission source, as reported by ``__typename``."""

    ORGANIZATION = "Organization"
    REPOSITORY = "Repository"
    TEAM = "Team"


@dataclass(frozen=True)
class OrganizationSource:
    """Permission inherited from organization membership."""

    permission: str
    login: str | None = None
    kind: SourceKind = SourceKind.ORGANIZATION


@dataclass(frozen=True)
class RepositorySource:
    """Permission granted directly on the repository."""

    permission: str
    name_with_owner: str | None = None
    kind: SourceKind = SourceKind.REPOSITORY


@dataclass(frozen=True)
class TeamSource:
    """Permission granted through team membership."""

    permission: str
    name: str
    kind: SourceKind = SourceKind.TEAM


PermissionSource = Union[OrganizationSource, RepositorySource, TeamSource]


def parse_permission_source(data: dict[str, Any]) -> PermissionSource:
    """
    Parse one entry of a collaborator's ``permissionSources`` list.

    Args:
        data: Mapping with ``permission`` and a ``source`` object carrying
            ``__typename``

    Returns:
        The matching source variant

    Raises:
        PayloadError: If the source has no ``__typename`` or an unknown one
    """
    source = data.get("source") or {}
    typename = source.get("__typename")
    permission = data.get("permission")

    try:
        kind = SourceKind(typename)
    except ValueError:
        raise PayloadError(f"Unknown permission source type: {typename!r}") from None

    if kind is SourceKind.ORGANIZATION:
        return OrganizationSource(permission=permission, login=source.get("login"))
    if kind is SourceKind.REPOSITORY:
        return RepositorySource(
            permission=permission, name_with_owner=source.get("nameWithOwner")
        )
    return TeamSource(permission=permission, name=source.get("name", ""))


@dataclass(frozen=True)
class TeamPermission:
    """A team and the permission it grants."""

    name: str
    permission: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "permission": self.permission}


@dataclass(frozen=True)
class PermissionRecord:
    """One collaborator's permission breakdown on one repository."""

    repository: str
    handle: str
    permission: str
    organization_permission: str | None = None
    repository_permission: str | None = None
    team_permissions: tuple[TeamPermission, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire form used for JSON output and the dedup key."""
        teams = (
            None
            if self.team_permissions is None
            else [team.to_dict() for team in self.team_permissions]
        )
        return {
            "repository": self.repository,
            "handle": self.handle,
            "permission": self.permission,
            "organizationPermission": self.organization_permission,
            "teamPermission": teams,
            "repositoryPermission": self.repository_permission,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PermissionRecord":
        teams = data.get("teamPermission")
        return cls(
            repository=data["repository"],
            handle=data["handle"],
            permission=data["permission"],
            organization_permission=data.get("organizationPermission"),
            repository_permission=data.get("repositoryPermission"),
            team_permissions=(
                None
                if teams is None
                else tuple(TeamPermission(t["name"], t["permission"]) for t in teams)
            ),
        )
