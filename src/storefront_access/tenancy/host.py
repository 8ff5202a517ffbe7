from __future__ import annotations

import re
from dataclasses import dataclass

_SUBDOMAIN_RE = re.compile(r"^[a-z0-9]([a-z0-9-]{1,61}[a-z0-9])?$")

RESERVED_SUBDOMAINS = frozenset(
    {"www", "api", "admin", "app", "mail", "ftp", "localhost", "test", "staging", "dev", "demo"}
)


@dataclass(frozen=True)
class DomainInfo:
    hostname: str
    subdomain: str | None
    is_custom_domain: bool
    base_domain: str


def parse_domain(host: str, base_domain: str) -> DomainInfo:
    """
    Split a Host header into the pieces tenant lookup needs.

    "elmasry.mysystem.com:3000" -> subdomain "elmasry";
    "shop.example.org" -> custom domain.
    """
    hostname = host.split(":")[0].strip().lower()
    base = base_domain.lower()
    is_custom = not hostname.endswith(f".{base}") and hostname != base

    subdomain = None
    if not is_custom and hostname != base:
        subdomain = hostname.split(".")[0]

    return DomainInfo(hostname=hostname, subdomain=subdomain, is_custom_domain=is_custom, base_domain=base)


def is_valid_subdomain(subdomain: str) -> bool:
    return bool(_SUBDOMAIN_RE.match(subdomain)) and subdomain.lower() not in RESERVED_SUBDOMAINS

