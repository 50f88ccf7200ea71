"""
POSQ Django Adapter Views
=========================
Pass-through HTTP views over core/http_api handlers.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
from core.http_api.contracts import CatalogReadRequest, CheckoutValidateRequest
from core.http_api.errors import error_response
from core.http_api.handlers import (
    get_catalog_stock,
    get_priced_stock,
    post_checkout_validate,
)
from core.primitives.catalog import CatalogSnapshot
from core.primitives.scope import OutletScope
from engines.retail.policies import CartLine

logger = logging.getLogger("posq.http")


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        error_response(code=code, message=message, details={}),
        status=status,
    )


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _parse_datetime(value: Any, field_name: str) -> datetime | None:
    if value is None or value == "":
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(f"{field_name} must be an ISO 8601 datetime.") from exc


def _parse_outlet(body: dict[str, Any]) -> OutletScope | None:
    if "outlet_id" not in body:
        return None
    return OutletScope.parse(body["outlet_id"])


def _parse_snapshot(body: dict[str, Any], *, require_fetched_at: bool) -> CatalogSnapshot:
    raw = body.get("snapshot")
    if not isinstance(raw, dict):
        raise ValueError("snapshot must be an object.")
    fetched_at = _parse_datetime(raw.get("fetched_at"), "snapshot.fetched_at")
    if fetched_at is None:
        if require_fetched_at:
            raise ValueError("snapshot.fetched_at is required.")
        fetched_at = build_dependencies().clock.now_utc()
    if fetched_at.tzinfo is None:
        raise ValueError("snapshot.fetched_at must include a UTC offset.")
    return CatalogSnapshot.from_dict(raw, fetched_at=fetched_at)


def _catalog_read_contract(body: dict[str, Any]) -> CatalogReadRequest:
    return CatalogReadRequest(
        snapshot=_parse_snapshot(body, require_fetched_at=False),
        now=_parse_datetime(body.get("now"), "now"),
        store_id=body.get("store_id"),
        outlet=_parse_outlet(body),
    )


def _checkout_contract(body: dict[str, Any]) -> CheckoutValidateRequest:
    raw_lines = body.get("lines")
    if not isinstance(raw_lines, list):
        raise ValueError("lines must be a list.")
    return CheckoutValidateRequest(
        snapshot=_parse_snapshot(body, require_fetched_at=True),
        lines=tuple(CartLine.from_dict(line) for line in raw_lines),
        now=_parse_datetime(body.get("now"), "now"),
        store_id=body.get("store_id"),
        outlet=_parse_outlet(body),
    )


def _dispatch(handler, contract_factory, request: HttpRequest, *, rejected_status: int = 409) -> JsonResponse:
    try:
        body = _parse_json_body(request)
        contract = contract_factory(body)
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("Rejected malformed %s request: %s", request.path, exc)
        return _json_error("INVALID_REQUEST", str(exc), status=400)

    payload = handler(contract, build_dependencies())
    return JsonResponse(payload, status=200 if payload["ok"] else rejected_status)


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
        status=405,
    )


@csrf_exempt
def catalog_stock_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch(get_catalog_stock, _catalog_read_contract, request)


@csrf_exempt
def priced_stock_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch(get_priced_stock, _catalog_read_contract, request)


@csrf_exempt
def checkout_validate_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch(post_checkout_validate, _checkout_contract, request)
