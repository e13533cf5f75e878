from django.contrib import admin

from .models import Cart, CartItem, Order, OrderItem, OrderTimelineEvent, Product, Review, SavedItem


class ReviewInline(admin.TabularInline):
    model = Review
    extra = 0
    fields = ("reviewer", "rating", "title", "status", "is_verified_purchase")
    readonly_fields = ("reviewer", "rating", "title", "is_verified_purchase")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("title", "seller", "category", "product_type", "price", "stock", "status", "is_flagged", "created_at")
    list_filter = ("status", "category", "product_type", "is_flagged", "is_featured", "is_published")
    search_fields = ("title", "description", "seller__email", "seller__name")
    readonly_fields = (
        "id",
        "slug",
        "status_history",
        "rating_average",
        "rating_count",
        "rating_distribution",
        "suspicion_score",
        "ai_analysis",
        "last_analyzed_at",
        "view_count",
        "sales_count",
        "created_at",
        "updated_at",
    )
    inlines = [ReviewInline]

    fieldsets = (
        ("Basic Information", {"fields": ("id", "title", "slug", "description", "short_description", "seller")}),
        ("Pricing & Inventory", {"fields": ("price", "stock")}),
        ("Classification", {"fields": ("category", "product_type", "condition", "tags")}),
        ("Media & Details", {"fields": ("images", "digital_details", "physical_details"), "classes": ("collapse",)}),
        ("Status & Visibility", {"fields": ("status", "status_history", "is_published", "is_featured")}),
        (
            "Trust Analysis",
            {"fields": ("is_flagged", "flag_reason", "suspicion_score", "ai_analysis", "last_analyzed_at")},
        ),
        (
            "Metrics",
            {
                "fields": ("rating_average", "rating_count", "rating_distribution", "view_count", "sales_count"),
                "classes": ("collapse",),
            },
        ),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    actions = ["make_featured", "remove_featured"]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("seller")

    @admin.action(description="Mark selected products as featured")
    def make_featured(self, request, queryset):
        updated = queryset.update(is_featured=True)
        self.message_user(request, f"{updated} products marked as featured.")

    @admin.action(description="Remove featured status from selected products")
    def remove_featured(self, request, queryset):
        updated = queryset.update(is_featured=False)
        self.message_user(request, f"{updated} products unmarked as featured.")


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("product", "reviewer", "rating", "status", "is_verified_purchase", "helpful_count", "created_at")
    list_filter = ("rating", "status", "is_verified_purchase")
    search_fields = ("product__title", "reviewer__email", "title", "content")
    readonly_fields = ("ai_analysis", "helpful_count", "not_helpful_count", "created_at", "updated_at")


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    readonly_fields = ("price", "added_at")


class SavedItemInline(admin.TabularInline):
    model = SavedItem
    extra = 0
    readonly_fields = ("saved_at",)


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("user", "item_count", "subtotal", "updated_at")
    search_fields = ("user__email",)
    inlines = [CartItemInline, SavedItemInline]


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "title", "product_type", "seller", "quantity", "price", "is_unlocked", "unlocked_at")


class OrderTimelineInline(admin.TabularInline):
    model = OrderTimelineEvent
    extra = 0
    readonly_fields = ("status", "title", "description", "updated_by", "timestamp")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "customer", "order_type", "status", "total", "payment_status", "created_at")
    list_filter = ("status", "order_type", "payment_status", "payment_method")
    search_fields = ("order_number", "customer__email", "tracking_number")
    readonly_fields = ("id", "order_number", "subtotal", "shipping", "tax", "total", "paid_at", "created_at", "updated_at")
    inlines = [OrderItemInline, OrderTimelineInline]
