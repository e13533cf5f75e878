"""
Shared service-layer plumbing.

Expected failures (missing product, empty cart, wrong owner) are returned, not
raised: a ServiceResult is either ok with a value, or carries an ErrorCodes
value plus a message the view passes to the client unchanged. Exceptions are
reserved for bugs and infrastructure faults.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None


def service_ok(value: T = None) -> ServiceResult[T]:
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """Failed result; `error_detail` defaults to the code itself."""
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class ErrorCodes:
    PRODUCT_NOT_FOUND = "product_not_found"
    PRODUCT_UNAVAILABLE = "product_unavailable"
    UPLOAD_FAILED = "upload_failed"

    CART_EMPTY = "cart_empty"
    INVALID_QUANTITY = "invalid_quantity"
    ITEM_NOT_IN_CART = "item_not_in_cart"
    INSUFFICIENT_STOCK = "insufficient_stock"

    ORDER_NOT_FOUND = "order_not_found"
    INVALID_ORDER_STATUS = "invalid_order_status"
    NOT_DIGITAL_ITEM = "not_digital_item"

    REVIEW_NOT_FOUND = "review_not_found"
    DUPLICATE_REVIEW = "duplicate_review"

    SELLER_NOT_FOUND = "seller_not_found"

    PERMISSION_DENIED = "permission_denied"
    VALIDATION_ERROR = "validation_error"
    INTERNAL_ERROR = "internal_error"


# Codes not listed here (upload and internal failures) are server errors.
ERROR_STATUS: Dict[str, int] = {
    ErrorCodes.PRODUCT_NOT_FOUND: 404,
    ErrorCodes.PRODUCT_UNAVAILABLE: 404,
    ErrorCodes.ITEM_NOT_IN_CART: 404,
    ErrorCodes.ORDER_NOT_FOUND: 404,
    ErrorCodes.REVIEW_NOT_FOUND: 404,
    ErrorCodes.SELLER_NOT_FOUND: 404,
    ErrorCodes.PERMISSION_DENIED: 403,
    ErrorCodes.CART_EMPTY: 400,
    ErrorCodes.INVALID_QUANTITY: 400,
    ErrorCodes.INSUFFICIENT_STOCK: 400,
    ErrorCodes.INVALID_ORDER_STATUS: 400,
    ErrorCodes.NOT_DIGITAL_ITEM: 400,
    ErrorCodes.DUPLICATE_REVIEW: 400,
    ErrorCodes.VALIDATION_ERROR: 400,
}


def http_status_for(error: Optional[str]) -> int:
    return ERROR_STATUS.get(error, 500)


class BaseService:
    """Gives each service a class-scoped logger and the timing decorator."""

    def __init__(self):
        self.logger = logging.getLogger(f"{type(self).__module__}.{type(self).__name__}")

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Log how long a service method took, at warning level when it returned
        a failed ServiceResult. Exceptions are logged with traceback and re-raised.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            label = f"{type(self).__name__}.{func.__name__}"
            started = time.perf_counter()
            try:
                result = func(self, *args, **kwargs)
            except Exception as e:
                self.logger.error(f"{label} raised after {(time.perf_counter() - started) * 1000:.1f}ms: {e}", exc_info=True)
                raise

            elapsed = (time.perf_counter() - started) * 1000
            if isinstance(result, ServiceResult) and not result.ok:
                self.logger.warning(f"{label} failed with {result.error} in {elapsed:.1f}ms")
            else:
                self.logger.info(f"{label} finished in {elapsed:.1f}ms")
            return result

        return wrapper

    def internal_error(self, operation: str, exc: Exception) -> ServiceResult:
        """Log an unexpected exception; the client only sees a generic message."""
        self.logger.error(f"{operation} failed: {exc}", exc_info=True)
        return service_err(ErrorCodes.INTERNAL_ERROR, "Something went wrong.")
