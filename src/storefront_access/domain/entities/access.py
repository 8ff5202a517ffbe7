from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class Envelope(BaseModel):
    request_id: str | None = None


class AccessCheckRequest(Envelope):
    path: str
    redirect: bool = False


class SessionEventRequest(Envelope):
    event: Literal["signed_in", "signed_out", "token_refreshed"]


class GuardSnapshot(BaseModel):
    """The only view of the guard the storefront UI depends on."""

    state: Literal["loading", "authorized", "unauthorized"]
    userRole: str | None = None
    hasAccess: bool = False
    isLoading: bool = True
    unauthorizedMessage: str | None = None
    redirectTarget: str | None = None
