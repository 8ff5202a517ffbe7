from __future__ import annotations

from dataclasses import dataclass

from storefront_access.access.permission_matrix import (
    DEFAULT_MATRIX,
    PathPattern,
    PermissionMatrix,
    normalize_path,
)
from storefront_access.access.roles import Role
from storefront_access.configs.logging_config import get_logger
from storefront_access.errors import UnknownRole

log = get_logger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    matched_pattern: str | None = None


DENY = AccessDecision(allowed=False)


def _matches(pattern: PathPattern, path: str) -> bool:
    if path == pattern.path:
        return True
    if path.startswith(pattern.path + "/"):
        return True
    if pattern.umbrella and path.startswith(pattern.path):
        return True
    return False


class AccessDecisionEngine:
    """
    Decides whether a role may open a path.

    `strict` controls what happens when the matrix has no entry for the role:
    raise `UnknownRole` (development) or log and deny (production).
    """

    def __init__(self, matrix: PermissionMatrix = DEFAULT_MATRIX, *, strict: bool = True):
        self._matrix = matrix
        self._strict = strict

    @property
    def matrix(self) -> PermissionMatrix:
        return self._matrix

    def evaluate(self, role: Role | None, requested_path: str) -> AccessDecision:
        path = normalize_path(requested_path)
        if role is None:
            return DENY

        try:
            patterns = self._matrix.allowed_prefixes_for(role)
        except UnknownRole:
            if self._strict:
                raise
            log.error("access.unknown_role role=%r path=%s", role, path)
            return DENY

        # exact matches win over descendant matches
        for pattern in patterns:
            if path == pattern.path:
                return AccessDecision(allowed=True, matched_pattern=pattern.path)
        for pattern in patterns:
            if _matches(pattern, path):
                return AccessDecision(allowed=True, matched_pattern=pattern.path)
        return DENY

    def is_allowed(self, role: Role | None, requested_path: str) -> bool:
        return self.evaluate(role, requested_path).allowed


_default_engine = AccessDecisionEngine()


def is_allowed(role: Role | None, requested_path: str) -> bool:
    return _default_engine.is_allowed(role, requested_path)
