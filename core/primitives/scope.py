"""
POSQ Outlet Scope Primitive
=============================
Every sellable item is either factory-wide (GLOBAL) or owned by a
single outlet. The backend historically encodes "factory-wide" in
several ways (null, '', '0', 0, 'null', 'undefined', 'factory');
OutletScope.parse() is the single place that knows those aliases.
Nothing downstream re-interprets raw outlet ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, FrozenSet, Optional


_GLOBAL_ALIASES: FrozenSet[str] = frozenset({"", "0", "null", "none", "undefined", "factory"})


@dataclass(frozen=True)
class OutletScope:
    """
    Outlet affiliation of a catalog record.

    outlet_id is None for the factory-wide scope.
    """

    outlet_id: Optional[str] = None

    GLOBAL: ClassVar["OutletScope"]

    def __post_init__(self):
        if self.outlet_id is not None:
            if not isinstance(self.outlet_id, str) or not self.outlet_id.strip():
                raise ValueError("outlet_id must be a non-empty string or None.")
            if self.outlet_id.strip().lower() in _GLOBAL_ALIASES:
                raise ValueError(
                    f"outlet_id {self.outlet_id!r} is a factory alias; "
                    "use OutletScope.parse() or OutletScope.GLOBAL."
                )

    @classmethod
    def outlet(cls, outlet_id: Any) -> "OutletScope":
        return cls(outlet_id=str(outlet_id).strip())

    @classmethod
    def parse(cls, raw: Any) -> "OutletScope":
        """Build a scope from a raw backend outlet id."""
        if raw is None or raw is False:
            return cls.GLOBAL
        if isinstance(raw, int) and raw == 0:
            return cls.GLOBAL
        text = str(raw).strip()
        if text.lower() in _GLOBAL_ALIASES:
            return cls.GLOBAL
        return cls(outlet_id=text)

    @property
    def is_global(self) -> bool:
        return self.outlet_id is None

    def to_raw(self) -> Optional[str]:
        return self.outlet_id

    def __str__(self) -> str:
        return "GLOBAL" if self.is_global else f"OUTLET:{self.outlet_id}"


OutletScope.GLOBAL = OutletScope()
