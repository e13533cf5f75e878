from django.contrib.auth import get_user_model
from rest_framework import serializers


User = get_user_model()


class SellerSummarySerializer(serializers.ModelSerializer):
    """Seller card shown on listings"""

    class Meta:
        model = User
        fields = ["id", "name", "college", "seller_rating"]
        read_only_fields = fields


class ReviewerSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "avatar"]
        read_only_fields = fields
