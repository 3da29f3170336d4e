"""Customer API views.

Exposes the ``CustomerService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``DomainExceptionHandler``, which
renders them with the matching HTTP status.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.filters import CustomerFilter
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import CustomerSerializer
from modules.customers.services import CustomerService


class CustomerViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Customer CRUD operations.

    Does **not** extend ``ModelViewSet``: writes go through the
    service/repository layer.
    """

    filterset_class = CustomerFilter
    search_fields = ["first_name", "last_name", "email", "customer_code"]
    ordering_fields = ["created_at", "id", "last_name", "total_spent"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Customer.objects.alive()
    serializer_class = CustomerSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    def get_queryset(self):
        return Customer.objects.alive()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_customer(pk)
        return Response(CustomerSerializer(customer).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        dto = CreateCustomerDTO.model_validate(request.data)
        customer = self._service.create_customer(dto)
        return Response(
            CustomerSerializer(customer).data, status=status.HTTP_201_CREATED
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        dto = UpdateCustomerDTO.model_validate(request.data)
        customer = self._service.update_customer(pk, dto)
        return Response(CustomerSerializer(customer).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete_customer(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
