"""
Plumbing shared by the services under marketplace/<context>/domain/services.

    from marketplace.services import ErrorCodes, service_err, service_ok

    if not cart.items.exists():
        return service_err(ErrorCodes.CART_EMPTY, "Cart is empty")
"""

from .base import BaseService, ErrorCodes, ServiceResult, http_status_for, service_err, service_ok

__all__ = [
    "BaseService",
    "ErrorCodes",
    "ServiceResult",
    "http_status_for",
    "service_err",
    "service_ok",
]
