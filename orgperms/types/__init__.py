"""orgperms type definitions.

This module exports all data model types used by the package.
"""

from orgperms.types.permissions import (
    OrganizationSource,
    PermissionRecord,
    PermissionSource,
    RepositorySource,
    SourceKind,
    TeamPermission,
    TeamSource,
    parse_permission_source,
)
from orgperms.types.query import (
    CollaboratorConnection,
    CollaboratorEdge,
    OrganizationPayload,
    PageInfo,
    PaginationState,
    RateLimit,
    RepositoryConnection,
    RepositoryNode,
)

__all__ = [
    # Permission records
    "PermissionRecord",
    "TeamPermission",
    # Permission sources
    "SourceKind",
    "PermissionSource",
    "OrganizationSource",
    "RepositorySource",
    "TeamSource",
    "parse_permission_source",
    # Query state
    "PageInfo",
    "PaginationState",
    # Response payload
    "OrganizationPayload",
    "RepositoryConnection",
    "RepositoryNode",
    "CollaboratorConnection",
    "CollaboratorEdge",
    "RateLimit",
]
