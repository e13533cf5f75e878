from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from infrastructure.container import container
from marketplace.cart.api.serializers import (
    AddToCartSerializer,
    CartOutputSerializer,
    CartProductSerializer,
    UpdateCartSerializer,
)
from marketplace.services import http_status_for
from utils.responses import result_error_response, success_response, validation_error_response


class CartViewSet(viewsets.ViewSet):
    """Shopping cart of the authenticated user. Every action answers with the whole cart."""

    permission_classes = [IsAuthenticated]

    def get_service(self):
        return container.cart_service()

    def _respond(self, result, message="Success"):
        if not result.ok:
            return result_error_response(result, http_status_for(result.error))
        return success_response({"cart": CartOutputSerializer(result.value).data}, message=message)

    def _product_action(self, request, operation, message):
        serializer = CartProductSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        result = operation(request.user, serializer.validated_data["product_id"])
        return self._respond(result, message)

    @extend_schema(
        operation_id="cart_get",
        summary="Get user's shopping cart",
        description="""
        **What it returns:**
        - Cart lines with product summary, captured price and line total
        - Saved-for-later items
        - Totals (subtotal, item count)
        """,
        responses={200: OpenApiResponse(response=CartOutputSerializer, description="Cart retrieved")},
        tags=["Marketplace - Cart"],
    )
    def list(self, request):
        return self._respond(self.get_service().get_cart(request.user))

    @extend_schema(
        operation_id="cart_add_item",
        summary="Add item to cart",
        description="""
        **What it receives:**
        - `product_id` (UUID): Product to add
        - `quantity` (integer, optional): Quantity to add (default: 1)

        Adding a product already in the cart increases its quantity.
        Physical products cannot exceed available stock.
        """,
        request=AddToCartSerializer,
        responses={
            200: OpenApiResponse(response=CartOutputSerializer, description="Item added"),
            400: OpenApiResponse(description="Invalid quantity or insufficient stock"),
            404: OpenApiResponse(description="Product not available"),
        },
        tags=["Marketplace - Cart"],
    )
    @action(detail=False, methods=["post"], url_path="add")
    def add(self, request):
        serializer = AddToCartSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().add_to_cart(
            request.user, serializer.validated_data["product_id"], serializer.validated_data["quantity"]
        )
        return self._respond(result, "Item added to cart")

    @extend_schema(
        operation_id="cart_update_item",
        summary="Set the quantity of a cart line",
        description="A quantity of 0 or less removes the line.",
        request=UpdateCartSerializer,
        responses={
            200: OpenApiResponse(response=CartOutputSerializer, description="Cart updated"),
            404: OpenApiResponse(description="Item not found in cart"),
        },
        tags=["Marketplace - Cart"],
    )
    @action(detail=False, methods=["put"], url_path="update")
    def update_item(self, request):
        serializer = UpdateCartSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_quantity(
            request.user, serializer.validated_data["product_id"], serializer.validated_data["quantity"]
        )
        return self._respond(result, "Cart updated")

    @extend_schema(
        operation_id="cart_remove_item",
        summary="Remove item from cart",
        request=CartProductSerializer,
        tags=["Marketplace - Cart"],
    )
    @action(detail=False, methods=["post"], url_path="remove")
    def remove(self, request):
        return self._product_action(request, self.get_service().remove_from_cart, "Item removed from cart")

    @extend_schema(operation_id="cart_clear", summary="Remove every line from the cart", tags=["Marketplace - Cart"])
    @action(detail=False, methods=["post"], url_path="clear")
    def clear(self, request):
        return self._respond(self.get_service().clear_cart(request.user), "Cart cleared")

    @extend_schema(
        operation_id="cart_save_for_later",
        summary="Move a cart line to saved items",
        request=CartProductSerializer,
        tags=["Marketplace - Cart"],
    )
    @action(detail=False, methods=["post"], url_path="save-for-later")
    def save_for_later(self, request):
        return self._product_action(request, self.get_service().save_for_later, "Item saved for later")

    @extend_schema(
        operation_id="cart_move_to_cart",
        summary="Move a saved item back into the cart",
        description="The product is added with quantity 1 and the current price.",
        request=CartProductSerializer,
        tags=["Marketplace - Cart"],
    )
    @action(detail=False, methods=["post"], url_path="move-to-cart")
    def move_to_cart(self, request):
        return self._product_action(request, self.get_service().move_to_cart, "Item moved to cart")
