"""Payment API views.

Payments are captured through ``POST /invoices/{id}/payments/``; this
ViewSet covers queries and manual status changes.  Domain exceptions
propagate to ``DomainExceptionHandler``.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.billing.repositories.django_repository import InvoiceDjangoRepository
from modules.payments.dtos import UpdatePaymentStatusDTO
from modules.payments.filters import PaymentFilter
from modules.payments.models import Payment
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.serializers import PaymentSerializer
from modules.payments.services import PaymentService


class PaymentViewSet(ListModelMixin, GenericViewSet):
    queryset = Payment.objects.alive()
    serializer_class = PaymentSerializer
    filterset_class = PaymentFilter
    ordering_fields = ["created_at", "payment_date", "amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = PaymentService(
            payment_repository=PaymentDjangoRepository(),
            invoice_repository=InvoiceDjangoRepository(),
        )

    def get_queryset(self):
        return Payment.objects.alive().select_related("invoice")

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/payments/{pk}/"""
        return Response(PaymentSerializer(self._service.get_payment(pk)).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/payments/{pk}/ ``{"status": "FAILED"}``"""
        dto = UpdatePaymentStatusDTO.model_validate(request.data)
        payment = self._service.update_status(pk, dto.status)
        return Response(PaymentSerializer(payment).data)
