from rest_framework import serializers

from authentication.domain.models import SellerApplication


class PendingSellerSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(source="user.id", read_only=True)
    name = serializers.CharField(source="user.name", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    college = serializers.CharField(source="user.college", read_only=True)

    class Meta:
        model = SellerApplication
        fields = ["id", "user_id", "name", "email", "college", "business_name", "description", "status", "applied_at"]
        read_only_fields = fields


class ReviewSellerSerializer(serializers.Serializer):
    ACTION_CHOICES = [("approve", "Approve"), ("reject", "Reject")]

    seller_id = serializers.UUIDField()
    action = serializers.ChoiceField(choices=ACTION_CHOICES)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True)


class FlagProductSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    reason = serializers.CharField(max_length=500)
