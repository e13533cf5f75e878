import django_filters
from django.db.models import Q

from .catalog.domain.models import Product


class ProductFilter(django_filters.FilterSet):
    """
    Filter for the public product listing.

    Applied on top of the active and published queryset built by
    CatalogService.list_products.
    """

    # Price range filters
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    category = django_filters.ChoiceFilter(choices=Product.CATEGORY_CHOICES)
    product_type = django_filters.ChoiceFilter(choices=Product.PRODUCT_TYPE_CHOICES)
    condition = django_filters.ChoiceFilter(choices=Product.CONDITION_CHOICES)

    featured = django_filters.BooleanFilter(method="filter_featured")

    # Search in multiple fields
    search = django_filters.CharFilter(method="filter_search")

    # Sorting options
    sort = django_filters.CharFilter(method="filter_sort")

    SORTS = {
        "newest": ("-created_at",),
        "price_asc": ("price", "-created_at"),
        "price_desc": ("-price", "-created_at"),
        "rating": ("-rating_average", "-rating_count"),
        "trending": ("-view_count", "-created_at"),
    }

    class Meta:
        model = Product
        fields = ["category", "product_type", "condition"]

    def filter_featured(self, queryset, name, value):
        # Only featured=true narrows the listing
        if value:
            return queryset.filter(is_featured=True)
        return queryset

    def filter_search(self, queryset, name, value):
        """Search across title, description and tags"""
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) | Q(description__icontains=value) | Q(tags__icontains=value)
        )

    def filter_sort(self, queryset, name, value):
        return queryset.order_by(*self.SORTS.get(value, self.SORTS["newest"]))
