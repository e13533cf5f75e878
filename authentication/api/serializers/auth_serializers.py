import re

from rest_framework import serializers

from authentication.domain.models import CustomUser, SellerApplication

PHONE_PATTERN = re.compile(r"^[+]?[\d\s-]+$")


def validate_password_strength(value: str, field_label: str = "Password") -> str:
    if len(value) < 6:
        raise serializers.ValidationError(f"{field_label} must be at least 6 characters")
    if not re.search(r"\d", value):
        raise serializers.ValidationError(f"{field_label} must contain a number")
    return value


class SellerApplicationSerializer(serializers.ModelSerializer):
    reviewed_by = serializers.SerializerMethodField()

    class Meta:
        model = SellerApplication
        fields = (
            "business_name",
            "description",
            "status",
            "applied_at",
            "reviewed_at",
            "reviewed_by",
            "rejection_reason",
        )
        read_only_fields = fields

    def get_reviewed_by(self, obj):
        return str(obj.reviewed_by_id) if obj.reviewed_by_id else None


class UserSerializer(serializers.ModelSerializer):
    seller_status = serializers.CharField(read_only=True)
    seller_application = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = (
            "id",
            "name",
            "email",
            "role",
            "avatar",
            "phone",
            "address",
            "student_id",
            "college",
            "is_verified_student",
            "is_active",
            "is_banned",
            "seller_status",
            "seller_application",
            "seller_rating",
            "date_joined",
        )
        read_only_fields = fields

    def get_seller_application(self, obj):
        application = getattr(obj, "seller_application", None)
        if application is None:
            return None
        return SellerApplicationSerializer(application).data


class PublicSellerSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ("id", "name", "college", "seller_rating")
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=50, trim_whitespace=True)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    student_id = serializers.CharField(min_length=3, max_length=50, required=False, allow_blank=False)
    college = serializers.CharField(min_length=2, max_length=150, required=False, allow_blank=False)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_password(self, value):
        return validate_password_strength(value)


class LoginUserSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate_email(self, value):
        return value.strip().lower()


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=50, required=False)
    phone = serializers.CharField(max_length=30, required=False)
    college = serializers.CharField(max_length=150, required=False, allow_blank=True)
    address = serializers.JSONField(required=False)

    def validate_phone(self, value):
        value = value.strip()
        if not PHONE_PATTERN.match(value):
            raise serializers.ValidationError("Please provide a valid phone number")
        return value

    def validate_address(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Address must be an object")
        return value


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_new_password(self, value):
        return validate_password_strength(value, "New password")


class SellerApplySerializer(serializers.Serializer):
    business_name = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(min_length=20, max_length=500)
