"""
POSQ HTTP API - Public API
==========================
"""

from core.http_api.contracts import (
    CatalogReadRequest,
    CheckoutValidateRequest,
    HttpApiErrorBody,
    HttpApiResponse,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    error_response,
    map_rejection_reason,
    rejection_response,
    success_response,
)
from core.http_api.handlers import (
    get_catalog_stock,
    get_priced_stock,
    post_checkout_validate,
)

__all__ = [
    "CatalogReadRequest",
    "CheckoutValidateRequest",
    "HttpApiDependencies",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "error_response",
    "get_catalog_stock",
    "get_priced_stock",
    "map_rejection_reason",
    "post_checkout_validate",
    "rejection_response",
    "success_response",
]
