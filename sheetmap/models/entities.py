from __future__ import annotations

from dataclasses import dataclass

"""Base of every row-backed entity."""

__all__ = [
    "RowEntity",
]


@dataclass
class RowEntity:
    """Row bookkeeping shared by all sheet entities.

    ``row_id`` is the 1-based sheet row number; 0 means the entity has not been
    written yet. ``action`` carries the intended write (INSERT/UPDATE/DELETE).
    """
    row_id: int = 0
    action: str = ""
    saved: bool = False
