"""Invoice API views.

Exposes ``BillingService`` (and payment capture through
``PaymentService``) via HTTP.  Domain exceptions propagate to
``DomainExceptionHandler``.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.billing.dtos import UpdateInvoiceStatusDTO
from modules.billing.filters import InvoiceFilter
from modules.billing.models import Invoice
from modules.billing.repositories.django_repository import InvoiceDjangoRepository
from modules.billing.serializers import InvoiceSerializer
from modules.billing.services import BillingService
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.payments.dtos import ProcessPaymentDTO
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.serializers import PaymentSerializer
from modules.payments.services import PaymentService


class InvoiceViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for invoices: queries, status changes and payments."""

    queryset = Invoice.objects.alive()
    serializer_class = InvoiceSerializer
    filterset_class = InvoiceFilter
    ordering_fields = ["invoice_date", "due_date", "total_amount", "status"]
    ordering = ["-invoice_date", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = BillingService(
            invoice_repository=InvoiceDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Payment capture has its own throttle scope."""
        self.throttle_scope = (
            "payment_processing"
            if self.action == "payments" and self.request.method == "POST"
            else None
        )
        return super().get_throttles()

    def get_queryset(self):
        return Invoice.objects.alive().select_related("order")

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/invoices/{pk}/"""
        return Response(InvoiceSerializer(self._service.get_invoice(pk)).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/invoices/{pk}/ ``{"status": "SENT"}``"""
        dto = UpdateInvoiceStatusDTO.model_validate(request.data)
        invoice = self._service.update_status(pk, dto.status)
        return Response(InvoiceSerializer(invoice).data)

    @action(detail=False, methods=["get"])
    def overdue(self, request: Request) -> Response:
        """GET /api/v1/invoices/overdue/"""
        invoices = self._service.list_overdue()
        return Response(InvoiceSerializer(invoices, many=True).data)

    @action(detail=True, methods=["post"], url_path="mark-paid")
    def mark_paid(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/invoices/{pk}/mark-paid/"""
        invoice = self._service.mark_as_paid(pk)
        return Response(InvoiceSerializer(invoice).data)

    @action(detail=True, methods=["get", "post"])
    def payments(self, request: Request, pk: str | None = None) -> Response:
        """GET / POST /api/v1/invoices/{pk}/payments/

        POST body: ``{"amount": "35.40", "method": "PIX"}``.
        """
        payment_service = PaymentService(
            payment_repository=PaymentDjangoRepository(),
            invoice_repository=InvoiceDjangoRepository(),
        )
        if request.method == "GET":
            payments = payment_service.list_for_invoice(pk)
            return Response(PaymentSerializer(payments, many=True).data)

        dto = ProcessPaymentDTO.model_validate(request.data)
        payment = payment_service.process(pk, dto)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)
