"""
POSQ HTTP API - Framework-Agnostic Handlers
===========================================
Pure handler functions over contracts and injected dependencies.
Each call derives from the snapshot in the request; nothing is cached
between calls.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from core.config import StoreRule
from core.http_api.contracts import CatalogReadRequest, CheckoutValidateRequest
from core.http_api.errors import rejection_response, success_response
from core.primitives.catalog import CatalogSnapshot
from core.primitives.scope import OutletScope
from core.time import resolve_now
from engines.inventory.stock_engine import collect_stock_issues, derive_catalog_stock
from engines.retail.policies import validate_checkout
from engines.retail.priced_stock import build_priced_stock_view

logger = logging.getLogger("posq.http")


def _scoped(snapshot: CatalogSnapshot, outlet: Optional[OutletScope]) -> CatalogSnapshot:
    if outlet is None:
        return snapshot
    return snapshot.scoped(outlet)


def _rule(dependencies, store_id: Optional[str]) -> StoreRule:
    return dependencies.config_store.rule_for(store_id)


def _now(dependencies, now: Optional[datetime]) -> datetime:
    return resolve_now(now, dependencies.clock)


def get_catalog_stock(
    request: CatalogReadRequest,
    dependencies,
) -> dict[str, Any]:
    snapshot = _scoped(request.snapshot, request.outlet)
    issues = collect_stock_issues(snapshot)
    return success_response(
        {
            "stock": derive_catalog_stock(snapshot),
            "issues": [issue.to_dict() for issue in issues],
            "snapshot_fetched_at": snapshot.fetched_at.isoformat(),
        }
    )


def get_priced_stock(
    request: CatalogReadRequest,
    dependencies,
) -> dict[str, Any]:
    snapshot = _scoped(request.snapshot, request.outlet)
    view = build_priced_stock_view(
        snapshot,
        _now(dependencies, request.now),
        _rule(dependencies, request.store_id),
    )
    return success_response(view.to_dict())


def post_checkout_validate(
    request: CheckoutValidateRequest,
    dependencies,
) -> dict[str, Any]:
    snapshot = _scoped(request.snapshot, request.outlet)
    result = validate_checkout(
        request.lines,
        snapshot,
        _now(dependencies, request.now),
        _rule(dependencies, request.store_id),
    )
    if not result.accepted:
        logger.info(
            "Checkout validation rejected %d line(s) for store %s",
            len(result.rejections), request.store_id or "default",
        )
        return rejection_response(
            result.rejections[0],
            extra_details={"rejections": [r.to_dict() for r in result.rejections]},
        )
    return success_response(result.to_dict())
