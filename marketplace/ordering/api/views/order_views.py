from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from authentication.permissions import SellerOrAdminRequired
from infrastructure.container import container
from marketplace.ordering.api.serializers import (
    CreateOrderSerializer,
    OrderSerializer,
    UnlockDigitalSerializer,
    UpdateOrderStatusSerializer,
)
from marketplace.services import http_status_for
from utils.responses import result_error_response, success_response, validation_error_response

UUID_PATTERN = "[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}"


class OrderViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    def get_service(self):
        return container.order_service()

    def _order_response(self, result, message="Success", status_code=status.HTTP_200_OK):
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))
        return success_response({"order": OrderSerializer(result.value).data}, message=message, status=status_code)

    @extend_schema(
        operation_id="orders_create",
        summary="Place an order from the cart",
        description="""
        **What it receives:**
        - `payment_method`: card, paypal, campus-credits or cash-on-delivery
        - `shipping_address` (object, optional)
        - `customer_notes` (string, optional)

        **What happens:**
        - Every cart line is snapshotted at its cart price
        - Shipping 5.00 when any item is physical, tax 7%
        - Physical stock is decremented (never below zero)
        - The cart is emptied

        Payment is recorded as completed; there is no real payment provider.
        """,
        request=CreateOrderSerializer,
        responses={
            201: OpenApiResponse(response=OrderSerializer, description="Order placed"),
            400: OpenApiResponse(description="Cart is empty or validation failed"),
        },
        tags=["Marketplace - Orders"],
    )
    def create(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().create_order(
            request.user,
            payment_method=serializer.validated_data["payment_method"],
            shipping_address=serializer.validated_data.get("shipping_address"),
            customer_notes=serializer.validated_data.get("customer_notes", ""),
        )
        return self._order_response(result, "Order placed successfully", status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="orders_mine",
        summary="Most recent orders of the current user",
        responses={200: OpenApiResponse(response=OrderSerializer(many=True), description="Orders retrieved")},
        tags=["Marketplace - Orders"],
    )
    @action(detail=False, methods=["get"], url_path="me")
    def me(self, request):
        result = self.get_service().my_orders(request.user)
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))
        return success_response({"orders": OrderSerializer(result.value, many=True).data})

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Order detail with delivery timeline",
        description="Readable by the customer, a seller of any item in the order, or an admin.",
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order retrieved"),
            403: OpenApiResponse(description="Not authorized to view this order"),
            404: OpenApiResponse(description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def retrieve(self, request, pk=None):
        return self._order_response(self.get_service().get_order(request.user, pk))

    @extend_schema(
        operation_id="orders_update_status",
        summary="Move an order to another status",
        description="""
        Seller or admin only. Any known status may be set and a timeline entry
        is appended with the optional note.
        """,
        request=UpdateOrderStatusSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Status updated"),
            400: OpenApiResponse(description="Invalid status"),
            403: OpenApiResponse(description="Seller or admin role required"),
            404: OpenApiResponse(description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["put"], url_path="status", permission_classes=[SellerOrAdminRequired])
    def update_status(self, request, pk=None):
        serializer = UpdateOrderStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_status(
            request.user, pk, serializer.validated_data["status"], serializer.validated_data.get("note", "")
        )
        return self._order_response(result, "Order status updated")

    @extend_schema(
        operation_id="orders_unlock_digital",
        summary="Unlock a purchased digital item",
        description="Idempotent. Unlocked items expose their download url in the order payload.",
        request=UnlockDigitalSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Item unlocked"),
            400: OpenApiResponse(description="Item not found or not a digital product"),
            403: OpenApiResponse(description="Not your order"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=False, methods=["post"], url_path="digital/unlock")
    def unlock_digital(self, request):
        serializer = UnlockDigitalSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().unlock_digital(
            request.user, serializer.validated_data["order_id"], serializer.validated_data["item_id"]
        )
        return self._order_response(result, "Digital product unlocked")
