"""
Views for sales.

POST /api/sales is the checkout endpoint used by the web, mobile and
desktop POS clients. Errors are rendered as ``{"error": message}`` by
``apps.core.exceptions.pos_exception_handler``.
"""

from django.db.models import Count

from rest_framework import filters, generics, permissions, status
from rest_framework.response import Response

from apps.core import exceptions

from .models import Sale
from .serializers import SaleCreateSerializer, SaleDetailSerializer, SaleListSerializer


class SaleListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing sales and creating a new sale.

    Request body (POST):
    {
        "client_id": 3 (optional),
        "subtotal": "30.00" (optional, recomputed from items),
        "total": "30.00" (optional, defaults to subtotal),
        "payment_method": "cash",
        "items": [
            {"product_id": 1, "quantity": 3, "price_at_sale": "10.00"}
        ]
    }

    Responses:
    - 201 with the created sale and its items
    - 400 {"error": ...} on invalid input, unknown product or insufficient stock
    - 500 {"error": "Internal Server Error"} on database failure
    """

    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["created_at", "total"]
    ordering = ["-created_at", "-id"]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return SaleCreateSerializer
        return SaleListSerializer

    def get_queryset(self):
        queryset = Sale.objects.annotate(items_count=Count("items"))

        client_id = self.request.query_params.get("client")
        if client_id:
            queryset = queryset.filter(client_id=client_id)

        payment_method = self.request.query_params.get("payment_method")
        if payment_method:
            queryset = queryset.filter(payment_method=payment_method)

        return queryset

    def create(self, request, *args, **kwargs):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sale = serializer.save()
        return Response(SaleDetailSerializer(sale).data, status=status.HTTP_201_CREATED)


class SaleDetailView(generics.RetrieveAPIView):
    """
    API endpoint for retrieving a single sale with its items.
    """

    serializer_class = SaleDetailSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Sale.objects.select_related("client").prefetch_related("items__product")

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs["pk"])
        except Sale.DoesNotExist:
            raise exceptions.SaleNotFound()
