from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ProfileRecord(BaseModel):
    """
    Mongo document model for the `user_profiles` collection.

    Only the fields the access core reads are declared; the rest of the
    document is owned by the storefront.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    role: str | None = None
    is_admin: bool = False
