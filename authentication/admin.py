from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser, SellerApplication


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ("email", "name", "role", "college", "is_verified_student", "is_banned", "is_active", "date_joined")
    list_filter = ("role", "is_verified_student", "is_banned", "is_active", "is_staff")
    search_fields = ("email", "name", "student_id", "college")
    ordering = ("-date_joined",)
    readonly_fields = ("date_joined", "updated_at", "last_login")

    fieldsets = (
        (None, {"fields": ("email", "username", "password")}),
        ("Profile", {"fields": ("name", "avatar", "phone", "address", "student_id", "college", "is_verified_student")}),
        ("Role", {"fields": ("role", "seller_rating")}),
        ("Moderation", {"fields": ("is_active", "is_banned", "ban_reason")}),
        ("Permissions", {"fields": ("is_staff", "is_superuser", "groups", "user_permissions"), "classes": ("collapse",)}),
        ("Timestamps", {"fields": ("last_login", "date_joined", "updated_at"), "classes": ("collapse",)}),
    )
    add_fieldsets = ((None, {"classes": ("wide",), "fields": ("email", "username", "name", "password1", "password2")}),)


@admin.register(SellerApplication)
class SellerApplicationAdmin(admin.ModelAdmin):
    list_display = ("business_name", "user", "status", "applied_at", "reviewed_at", "reviewed_by")
    list_filter = ("status",)
    search_fields = ("business_name", "user__email")
    readonly_fields = ("applied_at", "reviewed_at", "reviewed_by")
