from rest_framework import serializers

from marketplace.ordering.domain.models.order import Order, OrderItem, OrderTimelineEvent


class OrderItemSerializer(serializers.ModelSerializer):
    product = serializers.UUIDField(source="product_id", read_only=True)
    seller = serializers.UUIDField(source="seller_id", read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    download_url = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "title",
            "image",
            "product_type",
            "seller",
            "quantity",
            "price",
            "line_total",
            "is_unlocked",
            "unlocked_at",
            "download_count",
            "download_limit",
            "download_url",
        ]
        read_only_fields = fields

    def get_download_url(self, obj):
        # Only unlocked digital lines reveal the file
        if not (obj.is_digital and obj.is_unlocked and obj.product_id):
            return None
        return (obj.product.digital_details or {}).get("file_url")


class OrderTimelineEventSerializer(serializers.ModelSerializer):
    updated_by = serializers.UUIDField(source="updated_by_id", read_only=True)

    class Meta:
        model = OrderTimelineEvent
        fields = ["status", "title", "description", "updated_by", "timestamp"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    customer = serializers.UUIDField(source="customer_id", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    timeline = OrderTimelineEventSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "order_type",
            "status",
            "items",
            "subtotal",
            "shipping",
            "tax",
            "discount",
            "total",
            "payment_method",
            "payment_status",
            "paid_at",
            "shipping_address",
            "tracking_number",
            "customer_notes",
            "timeline",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# Input serializers


class ShippingAddressSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    street = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    zip_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)
    college = serializers.CharField(max_length=150, required=False, allow_blank=True)


class CreateOrderSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES)
    shipping_address = ShippingAddressSerializer(required=False, allow_null=True)
    customer_notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class UpdateOrderStatusSerializer(serializers.Serializer):
    # Unknown statuses are rejected by the service with the list of valid ones
    status = serializers.CharField(max_length=20)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class UnlockDigitalSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    item_id = serializers.UUIDField()
