"""Product API views.

Exposes ``ProductService`` via HTTP using DRF ViewSets.  Domain
exceptions propagate to ``DomainExceptionHandler``.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import AdjustStockDTO, CreateProductDTO, UpdateProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Product CRUD and manual stock adjustments."""

    filterset_class = ProductFilter
    search_fields = ["name", "sku", "description"]
    ordering_fields = ["name", "price", "created_at", "quantity_in_stock"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.alive()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_queryset(self):
        return Product.objects.alive()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        return Response(ProductSerializer(self._service.get_product(pk)).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        product = self._service.create_product(CreateProductDTO.model_validate(request.data))
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        dto = UpdateProductDTO.model_validate(request.data)
        return Response(ProductSerializer(self._service.update_product(pk, dto)).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        self._service.delete_product(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="adjust-stock")
    def adjust_stock(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/products/{pk}/adjust-stock/ ``{"delta": -3, "reason": "..."}``"""
        dto = AdjustStockDTO.model_validate(request.data)
        return Response(ProductSerializer(self._service.adjust_stock(pk, dto)).data)

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /api/v1/products/low-stock/"""
        products = self._service.list_low_stock()
        return Response(ProductSerializer(products, many=True).data)
