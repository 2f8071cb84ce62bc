"""
Views for purchase orders.

Creating an order does not change stock; ``PUT /api/purchases/<id>/receive``
does, exactly once per order.
"""

from django.db.models import Count

from rest_framework import filters, generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core import exceptions

from .models import PurchaseOrder
from .serializers import (
    PurchaseOrderCreateSerializer,
    PurchaseOrderDetailSerializer,
    PurchaseOrderListSerializer,
)
from .services import PurchaseOrderService


class PurchaseOrderListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing and recording purchase orders.

    Request body (POST):
    {
        "supplier_id": 2 (optional),
        "total": "25.00" (optional),
        "items": [
            {"product_id": 7, "quantity": 10, "cost_price": "2.50"}
        ]
    }
    """

    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["created_at", "total"]
    ordering = ["-created_at", "-id"]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return PurchaseOrderCreateSerializer
        return PurchaseOrderListSerializer

    def get_queryset(self):
        queryset = PurchaseOrder.objects.select_related("supplier").annotate(
            items_count=Count("items")
        )

        status_filter = self.request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        return queryset

    def create(self, request, *args, **kwargs):
        serializer = PurchaseOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = serializer.save()
        return Response(
            PurchaseOrderDetailSerializer(order).data, status=status.HTTP_201_CREATED
        )


class PurchaseOrderDetailView(generics.RetrieveAPIView):
    """
    API endpoint for retrieving a purchase order with its items.
    """

    serializer_class = PurchaseOrderDetailSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return PurchaseOrder.objects.select_related("supplier").prefetch_related("items__product")

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs["pk"])
        except PurchaseOrder.DoesNotExist:
            raise exceptions.PurchaseOrderNotFound()


@api_view(["PUT"])
@permission_classes([permissions.IsAuthenticated])
def purchase_order_receive(request, pk):
    """Receive a purchase order and credit its quantities to stock."""
    order = PurchaseOrderService.receive_purchase_order(pk)
    order = (
        PurchaseOrder.objects.select_related("supplier")
        .prefetch_related("items__product")
        .get(pk=order.pk)
    )
    return Response(
        {
            "message": "Purchase received and stock updated",
            "purchase": PurchaseOrderDetailSerializer(order).data,
        }
    )
