"""
Error taxonomy for the point-of-sale API.

Every business failure raised by the sale and purchase services is an
``APIException`` so that DRF maps it to the right HTTP status. The custom
exception handler renders all errors with a single ``{"error": message}``
body, which is the shape the web, mobile and desktop clients read.
"""

import logging

from django.db import DatabaseError

from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal Server Error"


class POSError(exceptions.APIException):
    """Base class for business and infrastructure errors of the POS core."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "pos_error"


class ValidationError(POSError):
    """Malformed or missing input. Recoverable by the caller."""

    default_detail = "Invalid input."
    default_code = "validation_error"


class NotFound(POSError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ProductNotFound(NotFound):
    """
    A product referenced from a request body does not exist.

    Reported as 400 because the request itself is invalid, not the URL.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "product_not_found"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class SaleNotFound(NotFound):
    default_detail = "Sale not found"
    default_code = "sale_not_found"


class PurchaseOrderNotFound(NotFound):
    default_detail = "Purchase not found"
    default_code = "purchase_not_found"


class InsufficientStock(POSError):
    """
    Requested quantity exceeds the product's stock on hand.

    The message always carries the product id and both quantities so the
    point-of-sale screen can show a precise error.
    """

    default_code = "insufficient_stock"

    def __init__(self, product_id, available, requested):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Available: {available}, Requested: {requested}"
        )


class AlreadyReceived(POSError):
    """A purchase order can only be received once."""

    default_detail = "Purchase already received"
    default_code = "already_received"


class PersistenceFailure(POSError):
    """Database failure. Never exposes internal detail to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_SERVER_ERROR
    default_code = "persistence_failure"


def _first_message(detail, path=""):
    """Return the first error message found in a (possibly nested) DRF detail."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            if key == "non_field_errors":
                prefix = path
            elif isinstance(key, int):
                # Newer DRF keys nested many=True errors by item index
                prefix = f"{path}[{key}]"
            else:
                prefix = f"{path}.{key}" if path else key
            message = _first_message(value, prefix)
            if message:
                return message
        return ""
    if isinstance(detail, list):
        for index, value in enumerate(detail):
            # Lists of dicts come from nested many=True serializers
            prefix = f"{path}[{index}]" if isinstance(value, dict) else path
            message = _first_message(value, prefix)
            if message:
                return message
        return ""
    return f"{path}: {detail}" if path else str(detail)


def pos_exception_handler(exc, context):
    """
    DRF exception handler rendering every error as ``{"error": message}``.

    Serializer field errors keep their structure under ``"fields"``.
    Database errors that escape a view are logged and reported as a generic
    500 with the transaction marked for rollback.
    """
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.error(
            f"Unhandled database error in {view.__class__.__name__ if view else 'view'}",
            exc_info=exc,
        )
        exc = PersistenceFailure()

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, PersistenceFailure):
        response.data = {"error": GENERIC_SERVER_ERROR}
        return response

    if isinstance(exc, exceptions.ValidationError):
        fields = response.data
        response.data = {"error": _first_message(fields) or "Invalid input.", "fields": fields}
        return response

    # Http404 and PermissionDenied are converted by DRF, so read the rendered detail
    detail = response.data.get("detail") if isinstance(response.data, dict) else response.data
    response.data = {"error": str(detail)}
    return response
