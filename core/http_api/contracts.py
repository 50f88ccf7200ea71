"""
POSQ HTTP API - Contracts
=========================
Framework-agnostic request/response DTOs for catalog and checkout endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from core.primitives.catalog import CatalogSnapshot
from core.primitives.scope import OutletScope
from engines.retail.policies import CartLine


@dataclass(frozen=True)
class CatalogReadRequest:
    snapshot: CatalogSnapshot
    now: Optional[datetime] = None
    store_id: Optional[str] = None
    outlet: Optional[OutletScope] = None

    def __post_init__(self):
        if not isinstance(self.snapshot, CatalogSnapshot):
            raise ValueError("snapshot must be CatalogSnapshot.")
        if self.outlet is not None and not isinstance(self.outlet, OutletScope):
            raise ValueError("outlet must be OutletScope or None.")


@dataclass(frozen=True)
class CheckoutValidateRequest:
    snapshot: CatalogSnapshot
    lines: tuple[CartLine, ...]
    now: Optional[datetime] = None
    store_id: Optional[str] = None
    outlet: Optional[OutletScope] = None

    def __post_init__(self):
        if not isinstance(self.snapshot, CatalogSnapshot):
            raise ValueError("snapshot must be CatalogSnapshot.")
        if not isinstance(self.lines, tuple):
            raise ValueError("lines must be a tuple.")
        if not self.lines:
            raise ValueError("lines must not be empty.")
        if self.outlet is not None and not isinstance(self.outlet, OutletScope):
            raise ValueError("outlet must be OutletScope or None.")


@dataclass(frozen=True)
class HttpApiErrorBody:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class HttpApiResponse:
    ok: bool
    data: Any = None
    error: Optional[HttpApiErrorBody] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        if self.error is None:
            raise ValueError("error must be set when ok is False.")
        return {"ok": False, "error": self.error.to_dict()}
