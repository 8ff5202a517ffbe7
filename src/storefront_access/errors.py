from __future__ import annotations


class AppError(Exception):
    """Base error for expected failures."""

    def __init__(self, message: str, *, http_status: int = 400):
        super().__init__(message)
        self.message = message
        self.http_status = http_status


class AuthError(AppError):
    def __init__(self, message: str = "unauthorized"):
        super().__init__(message, http_status=401)


class ForbiddenError(AppError):
    def __init__(self, message: str = "forbidden"):
        super().__init__(message, http_status=403)


class NotFoundError(AppError):
    def __init__(self, message: str = "not found"):
        super().__init__(message, http_status=404)


class UnknownRole(AppError):
    """Permission matrix and role enumeration are out of sync."""

    def __init__(self, role: object):
        super().__init__(f"unknown role: {role!r}", http_status=500)
        self.role = role


class InvalidPath(AppError):
    def __init__(self, path: object):
        super().__init__(f"invalid path: {path!r}", http_status=400)
        self.path = path


class ProfileUnavailable(AppError):
    def __init__(self, principal_id: str, reason: str = "profile not found"):
        super().__init__(f"profile unavailable for {principal_id}: {reason}", http_status=503)
        self.principal_id = principal_id


class TenantNotResolved(AppError):
    def __init__(self, message: str = "tenant not resolved"):
        super().__init__(message, http_status=400)


class AlreadyBoundToDifferentTenant(AppError):
    def __init__(self, principal_id: str, bound_tenant_id: str, requested_tenant_id: str):
        super().__init__("principal is already bound to a different tenant", http_status=409)
        self.principal_id = principal_id
        self.bound_tenant_id = bound_tenant_id
        self.requested_tenant_id = requested_tenant_id
