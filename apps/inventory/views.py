"""
Views for inventory stock lookups.
"""

from django.http import Http404

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core import exceptions

from .ledger import StockLedger


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def product_stock(request, product_id):
    """
    Return the current stock on hand for one product.

    Response:
    {
        "product_id": 1,
        "sku": "PARA-500",
        "stock": 5
    }
    """
    try:
        record = StockLedger.get_stock_record(product_id)
    except exceptions.ProductNotFound:
        raise Http404("Product not found")

    return Response(
        {"product_id": product_id, "sku": record["sku"], "stock": record["stock"]},
        status=status.HTTP_200_OK,
    )
