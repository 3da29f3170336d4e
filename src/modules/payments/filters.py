import django_filters

from modules.payments.models import Payment


class PaymentFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    method = django_filters.CharFilter(field_name="method", lookup_expr="iexact")
    invoice = django_filters.NumberFilter(field_name="invoice_id")
    reference = django_filters.CharFilter(field_name="reference_number", lookup_expr="iexact")

    class Meta:
        model = Payment
        fields = ["status", "method", "invoice", "reference"]
