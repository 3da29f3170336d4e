import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    is_active = django_filters.BooleanFilter(field_name="is_active")
    sku = django_filters.CharFilter(field_name="sku", lookup_expr="iexact")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["is_active", "sku", "min_price", "max_price"]
