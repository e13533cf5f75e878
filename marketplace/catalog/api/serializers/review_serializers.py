from rest_framework import serializers

from marketplace.catalog.api.serializers.user_serializers import ReviewerSerializer
from marketplace.catalog.domain.models import Review


class ReviewSerializer(serializers.ModelSerializer):
    reviewer = ReviewerSerializer(read_only=True)
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Review
        fields = [
            "id",
            "product_id",
            "reviewer",
            "rating",
            "title",
            "content",
            "pros",
            "cons",
            "status",
            "is_verified_purchase",
            "ai_analysis",
            "helpful_count",
            "not_helpful_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField()
    content = serializers.CharField(min_length=10, max_length=1000, trim_whitespace=True)
    title = serializers.CharField(max_length=100, required=False, allow_blank=True, trim_whitespace=True)
    pros = serializers.ListField(child=serializers.CharField(max_length=200), required=False)
    cons = serializers.ListField(child=serializers.CharField(max_length=200), required=False)

    def validate_rating(self, value):
        if not 1 <= value <= 5:
            raise serializers.ValidationError("Rating must be between 1 and 5")
        return value


class ReviewUpdateSerializer(ReviewCreateSerializer):
    rating = serializers.IntegerField(required=False)
    content = serializers.CharField(min_length=10, max_length=1000, required=False, trim_whitespace=True)


class HelpfulVoteSerializer(serializers.Serializer):
    is_helpful = serializers.BooleanField(default=True)
