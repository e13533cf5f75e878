import json
import logging

from rest_framework import serializers

from marketplace.catalog.domain.models import Product

from .user_serializers import SellerSummarySerializer


logger = logging.getLogger(__name__)


class FlexibleJSONField(serializers.Field):
    """Accepts JSON values or JSON-encoded strings, so multipart forms can send lists and objects"""

    def __init__(self, *args, empty_factory=list, **kwargs):
        self.empty_factory = empty_factory
        super().__init__(*args, **kwargs)

    def to_internal_value(self, data):
        if isinstance(data, str):
            if not data.strip():
                return self.empty_factory()
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, ValueError):
                raise serializers.ValidationError("Must be valid JSON")
        if data is None:
            return self.empty_factory()
        if not isinstance(data, type(self.empty_factory())):
            raise serializers.ValidationError(f"Must be a {type(self.empty_factory()).__name__}")
        return data

    def to_representation(self, value):
        return value if value is not None else self.empty_factory()


class ProductListSerializer(serializers.ModelSerializer):
    """Minimal product serializer for listings - just the essentials for product cards"""

    seller = SellerSummarySerializer(read_only=True)
    primary_image = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "slug",
            "short_description",
            "price",
            "stock",
            "category",
            "product_type",
            "condition",
            "primary_image",
            "is_featured",
            "rating_average",
            "rating_count",
            "view_count",
            "seller",
            "created_at",
        ]
        read_only_fields = fields


class ProductDetailSerializer(serializers.ModelSerializer):
    """Public product page. The digital file URL is only handed out through orders."""

    seller = SellerSummarySerializer(read_only=True)
    digital_details = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "short_description",
            "price",
            "stock",
            "category",
            "product_type",
            "condition",
            "tags",
            "images",
            "digital_details",
            "physical_details",
            "status",
            "is_featured",
            "rating_average",
            "rating_count",
            "rating_distribution",
            "view_count",
            "sales_count",
            "wishlist_count",
            "seller",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_digital_details(self, obj):
        if not obj.digital_details:
            return None
        return {key: value for key, value in obj.digital_details.items() if key != "file_url"}


class SellerProductSerializer(serializers.ModelSerializer):
    """The owning seller's view, including trust analysis and status history"""

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "short_description",
            "price",
            "stock",
            "category",
            "product_type",
            "condition",
            "tags",
            "images",
            "digital_details",
            "physical_details",
            "status",
            "status_history",
            "is_published",
            "is_featured",
            "is_flagged",
            "flag_reason",
            "suspicion_score",
            "ai_analysis",
            "last_analyzed_at",
            "rating_average",
            "rating_count",
            "view_count",
            "sales_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductCompareItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "price",
            "category",
            "product_type",
            "rating_average",
            "rating_count",
            "description",
            "images",
        ]
        read_only_fields = fields


class FlaggedProductSerializer(serializers.ModelSerializer):
    seller_name = serializers.CharField(source="seller.name", read_only=True)
    seller_email = serializers.EmailField(source="seller.email", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "slug",
            "price",
            "category",
            "status",
            "is_flagged",
            "flag_reason",
            "suspicion_score",
            "ai_analysis",
            "last_analyzed_at",
            "seller_name",
            "seller_email",
            "created_at",
        ]
        read_only_fields = fields


# Input serializers


class ProductCreateSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=3, max_length=100, trim_whitespace=True)
    description = serializers.CharField(min_length=10, max_length=2000, trim_whitespace=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0, required=False)
    category = serializers.ChoiceField(choices=Product.CATEGORY_CHOICES)
    product_type = serializers.ChoiceField(choices=Product.PRODUCT_TYPE_CHOICES)
    condition = serializers.ChoiceField(choices=Product.CONDITION_CHOICES, required=False)
    tags = FlexibleJSONField(required=False)
    physical_details = FlexibleJSONField(required=False, empty_factory=dict)
    digital_details = FlexibleJSONField(required=False, empty_factory=dict)
    is_published = serializers.BooleanField(required=False)

    def validate_tags(self, value):
        return [str(tag).strip().lower() for tag in value if str(tag).strip()]


class ProductUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=3, max_length=100, required=False, trim_whitespace=True)
    description = serializers.CharField(min_length=10, max_length=2000, required=False, trim_whitespace=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    stock = serializers.IntegerField(min_value=0, required=False)
    status = serializers.ChoiceField(choices=Product.STATUS_CHOICES, required=False)
    category = serializers.ChoiceField(choices=Product.CATEGORY_CHOICES, required=False)
    product_type = serializers.ChoiceField(choices=Product.PRODUCT_TYPE_CHOICES, required=False)
    condition = serializers.ChoiceField(choices=Product.CONDITION_CHOICES, required=False)


class ProductListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False)
    limit = serializers.IntegerField(min_value=1, required=False, help_text="Clamped to 50")
    category = serializers.ChoiceField(choices=Product.CATEGORY_CHOICES, required=False)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    sort = serializers.ChoiceField(
        choices=["newest", "price_asc", "price_desc", "rating", "trending"], required=False
    )
    featured = serializers.BooleanField(required=False)


class ProductCompareSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True, max_length=10)
