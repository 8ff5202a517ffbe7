from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Fixed set of principal categories. A principal holds exactly one."""

    CUSTOMER = "customer"
    WHOLESALE_CUSTOMER = "wholesale-customer"
    STAFF = "staff"
    OWNER_ADMIN = "owner-admin"

    @classmethod
    def parse(cls, value: object) -> Role | None:
        """Return the Role for a stored value, or None if it is not recognised.

        Accepts the canonical values and the Arabic labels older profile
        records were written with.
        """
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip()
        if text in _LEGACY_LABELS:
            return _LEGACY_LABELS[text]
        try:
            return cls(text)
        except ValueError:
            return None

    @property
    def is_customer_family(self) -> bool:
        return self in (Role.CUSTOMER, Role.WHOLESALE_CUSTOMER)

    @property
    def is_back_office(self) -> bool:
        return self in (Role.STAFF, Role.OWNER_ADMIN)


DEFAULT_ROLE = Role.CUSTOMER
ADMIN_ROLE = Role.OWNER_ADMIN

_LEGACY_LABELS: dict[str, Role] = {
    "عميل": Role.CUSTOMER,
    "جملة": Role.WHOLESALE_CUSTOMER,
    "موظف": Role.STAFF,
    "أدمن رئيسي": Role.OWNER_ADMIN,
}
