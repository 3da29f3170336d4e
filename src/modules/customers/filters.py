import django_filters

from modules.customers.constants import CustomerSegment
from modules.customers.models import Customer


class CustomerFilter(django_filters.FilterSet):
    is_active = django_filters.BooleanFilter(field_name="is_active")
    segment = django_filters.ChoiceFilter(choices=CustomerSegment.choices)
    email = django_filters.CharFilter(field_name="email", lookup_expr="iexact")

    class Meta:
        model = Customer
        fields = ["is_active", "segment", "email"]
