from __future__ import annotations

from .base import DomainDefinition
from .gig import GIG_DOMAIN
from .stock import STOCK_DOMAIN

"""Known domains by configuration name."""

__all__ = [
    "DOMAINS",
    "get_domain",
]

DOMAINS: dict[str, DomainDefinition] = {
    GIG_DOMAIN.name: GIG_DOMAIN,
    STOCK_DOMAIN.name: STOCK_DOMAIN,
}


def get_domain(name: str) -> DomainDefinition:
    try:
        return DOMAINS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown domain: {name} (expected one of {', '.join(sorted(DOMAINS))})") from None
