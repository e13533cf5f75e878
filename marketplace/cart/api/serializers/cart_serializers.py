from rest_framework import serializers

from marketplace.catalog.api.serializers import ProductListSerializer


# Input serializers


class AddToCartSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartSerializer(serializers.Serializer):
    """Quantity 0 or less removes the line"""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField()


class CartProductSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()


# Output serializers (shape of CartService results)


class CartItemOutputSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    product = ProductListSerializer(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    added_at = serializers.DateTimeField(read_only=True)


class SavedItemOutputSerializer(serializers.Serializer):
    product = ProductListSerializer(read_only=True)
    saved_at = serializers.DateTimeField(read_only=True)


class CartTotalsSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    item_count = serializers.IntegerField(read_only=True)


class CartOutputSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    items = CartItemOutputSerializer(many=True, read_only=True)
    saved_items = SavedItemOutputSerializer(many=True, read_only=True)
    totals = CartTotalsSerializer(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
