"""Collapsing of structurally identical permission records."""

from collections.abc import Iterable

from orgperms.canonical import canonicalize
from orgperms.types.permissions import PermissionRecord


def record_key(record: PermissionRecord) -> str:
    """Equality key covering every field, team order included."""
    return canonicalize(record.to_dict())


def unique(records: Iterable[PermissionRecord]) -> tuple[PermissionRecord, ...]:
    """
    Drop records whose every field equals an earlier record's.

    Records that share repository and handle but differ anywhere else in
    their permission breakdown are all kept.

    Args:
        records: Records, possibly repeated across overlapping pages

    Returns:
        One record per distinct content, first occurrence first
    """
    seen: dict[str, PermissionRecord] = {}
    for record in records:
        seen.setdefault(record_key(record), record)
    return tuple(seen.values())
