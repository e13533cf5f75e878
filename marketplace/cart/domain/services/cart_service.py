"""
CartService - Shopping Cart Operations

Handles the per-user cart: add, update, remove, clear, and the saved-for-later
list. Totals are always derived from the lines, never stored.
"""

import logging
from typing import Dict

from django.db import transaction

from marketplace.cart.domain.models import Cart, CartItem, SavedItem
from marketplace.catalog.domain.models import Product
from marketplace.infra.observability.metrics import cart_operations_total
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .pricing_service import PricingService


logger = logging.getLogger(__name__)


class CartService(BaseService):
    """
    Service for managing shopping cart operations.

    Responsibilities:
    - Get user's cart (created lazily, never deleted)
    - Add items (active products only, stock checked for physical products)
    - Update quantities (0 or less removes the line)
    - Remove items, clear cart
    - Save for later / move back to cart

    Dependencies:
    - PricingService: derived totals
    """

    def __init__(self, pricing_service: PricingService = None):
        super().__init__()
        self.pricing_service = pricing_service or PricingService()

    def _serialize_cart(self, cart: Cart) -> Dict:
        cart_items = list(cart.items.select_related("product", "product__seller"))
        saved_items = list(cart.saved_items.select_related("product"))

        items_data = [
            {
                "id": item.id,
                "product": item.product,
                "quantity": item.quantity,
                "price": item.price,
                "line_total": item.line_total,
                "added_at": item.added_at,
            }
            for item in cart_items
        ]

        totals = self.pricing_service.calculate_cart_totals(
            {"price": item.price, "quantity": item.quantity} for item in cart_items
        )

        return {
            "id": cart.id,
            "items": items_data,
            "saved_items": [{"product": saved.product, "saved_at": saved.saved_at} for saved in saved_items],
            "totals": totals,
            "updated_at": cart.updated_at,
        }

    def _touch(self, cart: Cart):
        cart.save(update_fields=["updated_at"])

    def _add_line(self, cart: Cart, product: Product, quantity: int) -> ServiceResult:
        """Add quantity to the product's line, refreshing the captured price."""
        cart_item = CartItem.objects.select_for_update().filter(cart=cart, product=product).first()
        new_quantity = (cart_item.quantity if cart_item else 0) + quantity

        if not product.has_stock_for(new_quantity):
            return service_err(
                ErrorCodes.INSUFFICIENT_STOCK,
                f"Insufficient stock for {product.title}. Available: {product.stock}",
            )

        if cart_item:
            cart_item.quantity = new_quantity
            cart_item.price = product.price
            cart_item.save(update_fields=["quantity", "price"])
        else:
            CartItem.objects.create(cart=cart, product=product, quantity=quantity, price=product.price)

        return service_ok(new_quantity)

    @BaseService.log_performance
    def get_cart(self, user) -> ServiceResult[Dict]:
        """
        Get user's shopping cart with items and totals.

        Example:
            >>> result = cart_service.get_cart(user)
            >>> if result.ok:
            ...     subtotal = result.value["totals"]["subtotal"]
        """
        try:
            cart = Cart.objects.for_user(user)
            return service_ok(self._serialize_cart(cart))
        except Exception as e:
            return self.internal_error(f"get_cart for user {user.id}", e)

    @BaseService.log_performance
    @transaction.atomic
    def add_to_cart(self, user, product_id, quantity: int = 1) -> ServiceResult[Dict]:
        """
        Add item to cart.

        The product must be active. Adding a product already in the cart
        increments its line and refreshes the line price to the current
        catalog price.
        """
        try:
            if quantity <= 0:
                return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be at least 1")

            product = Product.objects.filter(id=product_id, status=Product.STATUS_ACTIVE).first()
            if product is None:
                cart_operations_total.labels(operation="add", status="unavailable").inc()
                return service_err(ErrorCodes.PRODUCT_UNAVAILABLE, "Product not available")

            cart = Cart.objects.for_user(user)
            added = self._add_line(cart, product, quantity)
            if not added.ok:
                cart_operations_total.labels(operation="add", status="insufficient_stock").inc()
                return added

            self._touch(cart)
            cart_operations_total.labels(operation="add", status="success").inc()
            self.logger.info(f"Added to cart for user {user.id}: {quantity}x {product.id} (line qty {added.value})")
            return service_ok(self._serialize_cart(cart))

        except Exception as e:
            return self.internal_error(f"add_to_cart for user {user.id}", e)

    @BaseService.log_performance
    @transaction.atomic
    def update_quantity(self, user, product_id, quantity: int) -> ServiceResult[Dict]:
        """
        Set the quantity of a line. A quantity of 0 or less removes it.
        """
        try:
            cart = Cart.objects.for_user(user)
            cart_item = CartItem.objects.select_related("product").filter(cart=cart, product_id=product_id).first()
            if cart_item is None:
                return service_err(ErrorCodes.ITEM_NOT_IN_CART, "Item not found in cart")

            if quantity <= 0:
                cart_item.delete()
                self.logger.info(f"Removed line via zero quantity for user {user.id}: {product_id}")
            else:
                if not cart_item.product.has_stock_for(quantity):
                    return service_err(
                        ErrorCodes.INSUFFICIENT_STOCK,
                        f"Insufficient stock. Requested: {quantity}, Available: {cart_item.product.stock}",
                    )
                old_quantity = cart_item.quantity
                cart_item.quantity = quantity
                cart_item.save(update_fields=["quantity"])
                self.logger.info(f"Updated cart quantity for user {user.id}: {product_id} {old_quantity} -> {quantity}")

            self._touch(cart)
            cart_operations_total.labels(operation="update", status="success").inc()
            return service_ok(self._serialize_cart(cart))

        except Exception as e:
            return self.internal_error(f"update_quantity for user {user.id}", e)

    @BaseService.log_performance
    @transaction.atomic
    def remove_from_cart(self, user, product_id) -> ServiceResult[Dict]:
        """Remove a line. Removing a product that is not in the cart is a no-op."""
        try:
            cart = Cart.objects.for_user(user)
            deleted, _ = CartItem.objects.filter(cart=cart, product_id=product_id).delete()
            if deleted:
                self._touch(cart)
                self.logger.info(f"Removed from cart for user {user.id}: {product_id}")
            cart_operations_total.labels(operation="remove", status="success").inc()
            return service_ok(self._serialize_cart(cart))

        except Exception as e:
            return self.internal_error(f"remove_from_cart for user {user.id}", e)

    @BaseService.log_performance
    @transaction.atomic
    def clear_cart(self, user) -> ServiceResult[Dict]:
        try:
            cart = Cart.objects.for_user(user)
            items_count = cart.items.count()
            cart.items.all().delete()
            self._touch(cart)
            self.logger.info(f"Cleared cart for user {user.id}: {items_count} items removed")
            return service_ok(self._serialize_cart(cart))

        except Exception as e:
            return self.internal_error(f"clear_cart for user {user.id}", e)

    @BaseService.log_performance
    @transaction.atomic
    def save_for_later(self, user, product_id) -> ServiceResult[Dict]:
        """Move a cart line into the saved list."""
        try:
            cart = Cart.objects.for_user(user)
            cart_item = CartItem.objects.filter(cart=cart, product_id=product_id).first()
            if cart_item is None:
                return service_err(ErrorCodes.ITEM_NOT_IN_CART, "Item not found in cart")

            SavedItem.objects.get_or_create(cart=cart, product_id=product_id)
            cart_item.delete()
            self._touch(cart)
            self.logger.info(f"Saved for later for user {user.id}: {product_id}")
            return service_ok(self._serialize_cart(cart))

        except Exception as e:
            return self.internal_error(f"save_for_later for user {user.id}", e)

    @BaseService.log_performance
    @transaction.atomic
    def move_to_cart(self, user, product_id) -> ServiceResult[Dict]:
        """Move a saved item back into the cart (quantity 1, current price)."""
        try:
            cart = Cart.objects.for_user(user)
            saved = SavedItem.objects.select_related("product").filter(cart=cart, product_id=product_id).first()
            if saved is None:
                return service_err(ErrorCodes.ITEM_NOT_IN_CART, "Item not found in saved items")

            product = saved.product
            if product.status != Product.STATUS_ACTIVE:
                return service_err(ErrorCodes.PRODUCT_UNAVAILABLE, "Product not available")

            added = self._add_line(cart, product, 1)
            if not added.ok:
                return added

            saved.delete()
            self._touch(cart)
            self.logger.info(f"Moved saved item to cart for user {user.id}: {product_id}")
            return service_ok(self._serialize_cart(cart))

        except Exception as e:
            return self.internal_error(f"move_to_cart for user {user.id}", e)
