"""Ordering of permission records."""

import locale
from collections.abc import Callable, Iterable
from enum import Enum

from orgperms.exceptions import ConfigurationError
from orgperms.types.permissions import PermissionRecord


class SortColumn(str, Enum):
    """Primary sort column; the other identifying column breaks ties."""

    REPOSITORY = "repository"
    USER = "user"

    @classmethod
    def parse(cls, value: "SortColumn | str") -> "SortColumn":
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(c.value for c in cls)
            raise ConfigurationError(
                f"Invalid sort column: {value!r}. Must be one of: {choices}"
            ) from None


SortKey = Callable[[PermissionRecord], tuple[str, str]]

_SORT_KEYS: dict[SortColumn, SortKey] = {
    SortColumn.REPOSITORY: lambda r: (
        locale.strxfrm(r.repository),
        locale.strxfrm(r.handle),
    ),
    SortColumn.USER: lambda r: (
        locale.strxfrm(r.handle),
        locale.strxfrm(r.repository),
    ),
}


def sort_key(column: SortColumn | str) -> SortKey:
    """Locale-aware (primary, secondary) key for ``column``."""
    return _SORT_KEYS[SortColumn.parse(column)]


def sort_records(
    records: Iterable[PermissionRecord], column: SortColumn | str
) -> tuple[PermissionRecord, ...]:
    """
    Sort records by ``column``, then by the other identifying column.

    The sort is stable: records equal on both keys keep their input order.

    Raises:
        ConfigurationError: If ``column`` is not a known sort column
    """
    return tuple(sorted(records, key=sort_key(column)))
