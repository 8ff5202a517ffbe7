from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from storefront_access.access.roles import Role
from storefront_access.errors import InvalidPath, UnknownRole


def normalize_path(path: object) -> str:
    """Strip trailing slashes; reject empty or relative paths."""
    if not isinstance(path, str) or not path.strip():
        raise InvalidPath(path)
    if not path.startswith("/"):
        raise InvalidPath(path)
    stripped = path.rstrip("/")
    return stripped or "/"


@dataclass(frozen=True)
class PathPattern:
    """An allowed path.

    Plain patterns match the path itself and its descendants (``pattern + "/"``).
    Umbrella patterns additionally match any path that starts with the pattern
    string; only admin-shell roots are marked as such.
    """

    path: str
    umbrella: bool = False

    def __post_init__(self) -> None:
        if normalize_path(self.path) != self.path:
            raise InvalidPath(self.path)


class PermissionMatrix:
    """Immutable role -> ordered pattern table."""

    def __init__(self, table: Mapping[Role, Iterable[PathPattern]]):
        entries: dict[Role, tuple[PathPattern, ...]] = {}
        for role, patterns in table.items():
            if not isinstance(role, Role):
                raise UnknownRole(role)
            # keep declaration order, drop duplicates
            ordered = tuple(dict.fromkeys(patterns))
            if not ordered:
                raise ValueError(f"role {role.value} has no allowed paths")
            entries[role] = ordered
        missing = [r.value for r in Role if r not in entries]
        if missing:
            raise ValueError(f"permission matrix is missing roles: {missing}")
        self._table = MappingProxyType(entries)

    def allowed_prefixes_for(self, role: Role) -> tuple[PathPattern, ...]:
        if not isinstance(role, Role):
            raise UnknownRole(role)
        try:
            return self._table[role]
        except KeyError:
            raise UnknownRole(role) from None


_STOREFRONT = (
    PathPattern("/"),
    PathPattern("/my-orders"),
    PathPattern("/store"),
    PathPattern("/products"),
)

_BACK_OFFICE = (
    PathPattern("/"),
    PathPattern("/store"),
    PathPattern("/products"),
    PathPattern("/my-orders"),
    PathPattern("/customer-orders"),
    PathPattern("/admin/products"),
    PathPattern("/shipping"),
    PathPattern("/dashboard", umbrella=True),
    PathPattern("/pos"),
    PathPattern("/inventory"),
    PathPattern("/customers"),
    PathPattern("/suppliers"),
    PathPattern("/records"),
    PathPattern("/reports"),
    PathPattern("/permissions"),
    PathPattern("/settings"),
)

DEFAULT_MATRIX = PermissionMatrix(
    {
        Role.CUSTOMER: _STOREFRONT,
        Role.WHOLESALE_CUSTOMER: _STOREFRONT,
        Role.STAFF: _BACK_OFFICE,
        Role.OWNER_ADMIN: _BACK_OFFICE,
    }
)
