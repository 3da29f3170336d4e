"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Domain
exceptions propagate to ``DomainExceptionHandler``, which turns them
into the standard error body.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.billing.repositories.django_repository import InvoiceDjangoRepository
from modules.billing.serializers import InvoiceSerializer
from modules.billing.services import BillingService
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import CancelOrderDTO, CreateOrderDTO, UpdateOrderStatusDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderListSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: every write goes through the
    service/repository layer.
    """

    queryset = Order.objects.alive()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    search_fields = ["order_number", "customer__email", "customer__last_name"]
    ordering_fields = ["order_date", "created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Order creation has its own throttle scope."""
        self.throttle_scope = "order_creation" if self.action == "create" else None
        return super().get_throttles()

    def get_queryset(self):
        return Order.objects.alive().select_related("customer")

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Supports idempotency via the ``Idempotency-Key`` header.
        Returns 200 if the key was already used, 201 for new orders.
        """
        payload = dict(request.data)
        idempotency_key = request.headers.get("Idempotency-Key")
        if idempotency_key:
            payload["idempotency_key"] = idempotency_key
        dto = CreateOrderDTO.model_validate(payload)

        replay = bool(dto.idempotency_key) and (
            Order.objects.filter(idempotency_key=dto.idempotency_key).exists()
        )
        order = self._service.create_order(dto)
        return Response(
            OrderSerializer(order).data,
            status=status.HTTP_200_OK if replay else status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, customer, date range, total range) is handled
        by ``OrderFilter``; ordering by ``OrderingFilter``.  Results are
        paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        return Response(OrderSerializer(self._service.get_order(pk)).data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/ ``{"status": "CONFIRMED", "notes": "..."}``

        A ``CANCELLED`` target behaves exactly like ``POST .../cancel/``.
        """
        dto = UpdateOrderStatusDTO.model_validate(request.data)
        order = self._service.update_status(pk, dto.status, dto.notes)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Cancel / Invoice (dedicated actions)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/ ``{"reason": "..."}``"""
        dto = CancelOrderDTO.model_validate(request.data)
        order = self._service.cancel_order(pk, dto.reason)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def invoice(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/invoice/"""
        billing = BillingService(
            invoice_repository=InvoiceDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )
        invoice = billing.generate_for_order(pk)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)
