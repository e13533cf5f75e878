"""
OrderService - Checkout and Order Lifecycle

Turns a cart into an order in one transaction: snapshot lines, price them,
confirm payment, decrement physical stock and clear the cart. Also handles
status updates with a timeline entry and digital item unlocks.
"""

import logging
from typing import Dict, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from infrastructure.tracing import get_tracer
from marketplace.cart.domain.models import Cart
from marketplace.cart.domain.services.pricing_service import PricingService
from marketplace.catalog.domain.models import Product
from marketplace.infra.observability.metrics import (
    checkout_duration,
    order_status_updates_total,
    order_value,
    orders_placed_total,
    stock_clamped_total,
)
from marketplace.ordering.domain.models.order import Order, OrderItem
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.rbac import is_admin


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class OrderService(BaseService):
    """
    Service for managing order lifecycle.

    Dependencies:
    - PricingService: subtotal, shipping, tax, order type
    """

    def __init__(self, pricing_service: PricingService = None):
        super().__init__()
        self.pricing_service = pricing_service or PricingService()

    @BaseService.log_performance
    def create_order(
        self, user, payment_method: str, shipping_address: Optional[Dict] = None, customer_notes: str = ""
    ) -> ServiceResult[Order]:
        """
        Create an order from the user's cart.

        Steps (one transaction):
        1. Reject an empty cart before touching anything
        2. Snapshot each line, priced at its cart-item price
        3. Compute totals and order type
        4. Save the order as confirmed, payment completed, with the first timeline entry
        5. Decrement physical stock under row locks, clamped at zero
        6. Bump product sales counters and clear the cart

        Returns:
            ServiceResult with the created Order
        """
        with tracer.start_as_current_span("order_create_transaction") as span:
            span.set_attribute("user.id", str(user.id))

            try:
                with checkout_duration.time(), transaction.atomic():
                    cart = Cart.objects.for_user(user)
                    cart_items = list(cart.items.select_related("product"))

                    if not cart_items:
                        return service_err(ErrorCodes.CART_EMPTY, "Cart is empty")

                    # Step 1: Snapshot lines
                    with tracer.start_as_current_span("snapshot_lines"):
                        lines = [
                            {
                                "product": item.product,
                                "price": item.price,
                                "quantity": item.quantity,
                                "product_type": item.product.product_type,
                            }
                            for item in cart_items
                        ]

                    # Step 2: Calculate totals
                    with tracer.start_as_current_span("calculate_totals"):
                        total_result = self.pricing_service.calculate_order_total(lines)
                        if not total_result.ok:
                            return total_result
                        totals = total_result.value

                    # Step 3: Save order
                    with tracer.start_as_current_span("save_order"):
                        now = timezone.now()
                        order = Order.objects.create(
                            customer=user,
                            order_type=totals["order_type"],
                            status=Order.STATUS_CONFIRMED,
                            subtotal=totals["subtotal"],
                            shipping=totals["shipping"],
                            tax=totals["tax"],
                            discount=totals["discount"],
                            total=totals["total"],
                            payment_method=payment_method,
                            payment_status="completed",
                            paid_at=now,
                            shipping_address=shipping_address,
                            customer_notes=customer_notes or "",
                        )

                        OrderItem.objects.bulk_create(
                            [
                                OrderItem(
                                    order=order,
                                    product=line["product"],
                                    title=line["product"].title,
                                    image=line["product"].primary_image or "",
                                    product_type=line["product_type"],
                                    seller_id=line["product"].seller_id,
                                    quantity=line["quantity"],
                                    price=line["price"],
                                    download_limit=(
                                        line["product"].download_limit
                                        if line["product_type"] == Product.TYPE_DIGITAL
                                        else -1
                                    ),
                                )
                                for line in lines
                            ]
                        )

                        order.add_timeline_event(Order.STATUS_CONFIRMED, "Order confirmed", "Payment received")

                    # Step 4: Stock and sales counters
                    with tracer.start_as_current_span("decrement_stock"):
                        self._apply_stock(lines)

                    # Step 5: Clear cart
                    cart.items.all().delete()
                    cart.save(update_fields=["updated_at"])

                orders_placed_total.labels(order_type=order.order_type).inc()
                order_value.observe(float(order.total))
                span.set_attribute("order.number", order.order_number)
                span.set_attribute("order.total", str(order.total))
                self.logger.info(f"Order {order.order_number} placed by user {user.id}: total=${order.total}")

                return service_ok(order)

            except Exception as e:
                span.record_exception(e)
                return self.internal_error(f"create_order for user {user.id}", e)

    def _apply_stock(self, lines):
        """
        Decrement physical stock as max(0, stock - qty) and count sales.

        Products deleted since they were added to the cart are skipped.
        """
        for line in lines:
            product = Product.objects.select_for_update().filter(pk=line["product"].pk).first()
            if product is None:
                self.logger.warning(f"Product {line['product'].pk} vanished during checkout, skipping stock update")
                continue

            update_fields = ["sales_count", "updated_at"]
            if product.product_type == Product.TYPE_PHYSICAL:
                if line["quantity"] > product.stock:
                    stock_clamped_total.inc()
                    self.logger.warning(
                        f"Stock clamped for product {product.id}: stock={product.stock}, qty={line['quantity']}"
                    )
                product.stock = max(0, product.stock - line["quantity"])
                update_fields.append("stock")

            product.sales_count = F("sales_count") + line["quantity"]
            product.save(update_fields=update_fields)

    @BaseService.log_performance
    def my_orders(self, user) -> ServiceResult:
        """Most recent orders for the user (MY_ORDERS_LIMIT, default 20)."""
        try:
            limit = getattr(settings, "MY_ORDERS_LIMIT", 20)
            orders = (
                Order.objects.filter(customer=user)
                .prefetch_related("items", "timeline")
                .order_by("-created_at")[:limit]
            )
            return service_ok(list(orders))
        except Exception as e:
            return self.internal_error(f"my_orders for user {user.id}", e)

    def can_view(self, user, order: Order) -> bool:
        if order.customer_id == user.id or is_admin(user):
            return True
        return order.items.filter(seller=user).exists()

    @BaseService.log_performance
    def get_order(self, user, order_id) -> ServiceResult[Order]:
        """
        Get an order visible to the user.

        Visible to the customer, any seller with an item in the order, and admins.
        """
        try:
            order = Order.objects.prefetch_related("items", "timeline").filter(id=order_id).first()
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, "Order not found")
            if not self.can_view(user, order):
                return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized to view this order")
            return service_ok(order)
        except Exception as e:
            return self.internal_error(f"get_order {order_id}", e)

    @BaseService.log_performance
    @transaction.atomic
    def update_status(self, user, order_id, status: str, note: str = "") -> ServiceResult[Order]:
        """
        Set the order status and append a timeline entry.

        Any known status is accepted as the target; there is no transition table.
        """
        try:
            if status not in Order.STATUSES:
                return service_err(
                    ErrorCodes.INVALID_ORDER_STATUS,
                    f"Invalid status. Must be one of: {', '.join(Order.STATUSES)}",
                )

            order = Order.objects.select_for_update().filter(id=order_id).first()
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, "Order not found")

            previous = order.status
            order.status = status
            order.save(update_fields=["status", "updated_at"])
            order.add_timeline_event(status, status, note or "", updated_by=user)

            order_status_updates_total.labels(status=status).inc()
            self.logger.info(f"Order {order.order_number} status {previous} -> {status} by user {user.id}")
            return service_ok(order)

        except Exception as e:
            return self.internal_error(f"update_status for order {order_id}", e)

    @BaseService.log_performance
    @transaction.atomic
    def unlock_digital(self, user, order_id, item_id) -> ServiceResult[Order]:
        """
        Unlock a digital line of the user's order.

        Idempotent: unlocking an already unlocked item succeeds again. The
        download limit is recorded but not enforced here.
        """
        try:
            order = Order.objects.filter(id=order_id).first()
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, "Order not found")
            if order.customer_id != user.id and not is_admin(user):
                return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized to access this order")

            item = OrderItem.objects.select_for_update().filter(order=order, id=item_id).first()
            if item is None or not item.is_digital:
                return service_err(ErrorCodes.NOT_DIGITAL_ITEM, "Item not found or not a digital product")

            if not item.is_unlocked:
                item.is_unlocked = True
                item.unlocked_at = timezone.now()
                item.save(update_fields=["is_unlocked", "unlocked_at"])
                self.logger.info(f"Unlocked digital item {item.id} in order {order.order_number}")

            return service_ok(order)

        except Exception as e:
            return self.internal_error(f"unlock_digital for order {order_id}", e)
