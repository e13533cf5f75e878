import uuid
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import CartItem, Order
from marketplace.tests.factories import (
    AdminFactory,
    CartFactory,
    CartItemFactory,
    DigitalProductFactory,
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
    SellerFactory,
    UserFactory,
)


class OrderViewIntegrationTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()

        self.buyer = UserFactory()
        self.other_user = UserFactory()
        self.seller = SellerFactory()
        self.admin = AdminFactory()

        self.textbook = ProductFactory(seller=self.seller, price=Decimal("20.00"), stock=3)
        self.notes = DigitalProductFactory(seller=self.seller, price=Decimal("10.00"))

        self.create_url = reverse("marketplace:order-list")
        self.my_orders_url = reverse("marketplace:order-me")
        self.unlock_url = reverse("marketplace:order-unlock-digital")

    def fill_cart(self, *lines):
        cart = CartFactory(user=self.buyer)
        for product, quantity in lines:
            CartItemFactory(cart=cart, product=product, quantity=quantity, price=product.price)
        return cart

    def place_order(self, **extra):
        payload = {"payment_method": "card", "shipping_address": {"street": "1 Campus Way", "city": "Springfield"}}
        payload.update(extra)
        return self.client.post(self.create_url, payload, format="json")

    def test_empty_cart_is_rejected(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.place_order()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Cart is empty")
        self.assertFalse(Order.objects.exists())

    def test_place_mixed_order(self):
        self.fill_cart((self.textbook, 1), (self.notes, 1))
        self.client.force_authenticate(user=self.buyer)

        response = self.place_order(customer_notes="Leave at the dorm desk")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = response.data["data"]["order"]
        self.assertTrue(order["order_number"].startswith("ORD-"))
        self.assertEqual(order["order_type"], "mixed")
        self.assertEqual(order["status"], "confirmed")
        self.assertEqual(order["payment_status"], "completed")
        self.assertEqual(Decimal(order["subtotal"]), Decimal("30.00"))
        self.assertEqual(Decimal(order["shipping"]), Decimal("5.00"))
        self.assertEqual(Decimal(order["tax"]), Decimal("2.10"))
        self.assertEqual(Decimal(order["total"]), Decimal("37.10"))
        self.assertEqual(len(order["items"]), 2)
        self.assertEqual(order["timeline"][0]["title"], "Order confirmed")
        self.assertEqual(order["timeline"][0]["description"], "Payment received")

        # Cart emptied, stock and sales updated
        self.assertFalse(CartItem.objects.filter(cart__user=self.buyer).exists())
        self.textbook.refresh_from_db()
        self.notes.refresh_from_db()
        self.assertEqual(self.textbook.stock, 2)
        self.assertEqual(self.textbook.sales_count, 1)
        self.assertEqual(self.notes.sales_count, 1)

    def test_stock_is_clamped_at_zero(self):
        self.fill_cart((self.textbook, 5))
        self.client.force_authenticate(user=self.buyer)

        response = self.place_order()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.textbook.refresh_from_db()
        self.assertEqual(self.textbook.stock, 0)

    def test_items_keep_cart_price(self):
        cart = CartFactory(user=self.buyer)
        CartItemFactory(cart=cart, product=self.textbook, quantity=1, price=Decimal("15.00"))
        self.client.force_authenticate(user=self.buyer)

        response = self.place_order()

        item = response.data["data"]["order"]["items"][0]
        self.assertEqual(Decimal(item["price"]), Decimal("15.00"))
        self.assertEqual(item["title"], self.textbook.title)

    def test_invalid_payment_method(self):
        self.fill_cart((self.textbook, 1))
        self.client.force_authenticate(user=self.buyer)

        response = self.place_order(payment_method="bitcoin")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["errors"][0]["field"], "payment_method")

    def test_my_orders_only_lists_own_orders(self):
        OrderFactory(customer=self.buyer)
        OrderFactory(customer=self.buyer)
        OrderFactory(customer=self.other_user)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get(self.my_orders_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]["orders"]), 2)

    def test_order_detail_visibility(self):
        order = OrderFactory(customer=self.buyer)
        OrderItemFactory(order=order, product=self.textbook)
        url = reverse("marketplace:order-detail", args=[order.id])

        self.client.force_authenticate(user=self.buyer)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(user=self.seller)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(user=self.other_user)
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data["success"])

    def test_order_detail_not_found(self):
        self.client.force_authenticate(user=self.buyer)
        response = self.client.get(reverse("marketplace:order-detail", args=[uuid.uuid4()]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_status_appends_timeline(self):
        order = OrderFactory(customer=self.buyer)
        order.add_timeline_event(Order.STATUS_CONFIRMED, "Order confirmed", "Payment received")
        url = reverse("marketplace:order-update-status", args=[order.id])
        self.client.force_authenticate(user=self.seller)

        response = self.client.put(url, {"status": "shipped", "note": "Sent with campus mail"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        timeline = response.data["data"]["order"]["timeline"]
        self.assertEqual(response.data["data"]["order"]["status"], "shipped")
        self.assertEqual(len(timeline), 2)
        self.assertEqual(timeline[-1]["status"], "shipped")
        self.assertEqual(timeline[-1]["title"], "shipped")
        self.assertEqual(timeline[-1]["description"], "Sent with campus mail")

    def test_update_status_rejects_unknown_status(self):
        order = OrderFactory(customer=self.buyer)
        self.client.force_authenticate(user=self.admin)

        response = self.client.put(
            reverse("marketplace:order-update-status", args=[order.id]), {"status": "teleported"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Invalid status", response.data["message"])

    def test_update_status_requires_seller_or_admin(self):
        order = OrderFactory(customer=self.buyer)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.put(
            reverse("marketplace:order-update-status", args=[order.id]), {"status": "delivered"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unlock_digital_is_idempotent(self):
        order = OrderFactory(customer=self.buyer, order_type="digital")
        item = OrderItemFactory(order=order, product=self.notes)
        self.client.force_authenticate(user=self.buyer)
        payload = {"order_id": str(order.id), "item_id": str(item.id)}

        first = self.client.post(self.unlock_url, payload, format="json")
        second = self.client.post(self.unlock_url, payload, format="json")

        for response in (first, second):
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            unlocked = response.data["data"]["order"]["items"][0]
            self.assertTrue(unlocked["is_unlocked"])
            self.assertEqual(unlocked["download_url"], self.notes.digital_details["file_url"])

    def test_unlock_physical_item_is_rejected(self):
        order = OrderFactory(customer=self.buyer)
        item = OrderItemFactory(order=order, product=self.textbook)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            self.unlock_url, {"order_id": str(order.id), "item_id": str(item.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Item not found or not a digital product")

    def test_unlock_someone_elses_order(self):
        order = OrderFactory(customer=self.buyer)
        item = OrderItemFactory(order=order, product=self.notes)
        self.client.force_authenticate(user=self.other_user)

        response = self.client.post(
            self.unlock_url, {"order_id": str(order.id), "item_id": str(item.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
