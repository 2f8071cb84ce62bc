"""
Stock ledger: the only code allowed to change ``Product.stock``.

All mutating operations must run inside the caller's ``transaction.atomic()``
block. Rows are locked with ``SELECT ... FOR UPDATE`` so that the
read-check-write sequence of one request cannot interleave with another
request touching the same product; the locks are released when the
enclosing transaction commits or rolls back.

Decrements are additionally written as a guarded conditional update
(``WHERE stock >= quantity``), so a backend without row locks still cannot
oversell.
"""

import logging
from typing import Dict, Iterable

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.core import exceptions

from .models import Product

logger = logging.getLogger(__name__)


class StockLedger:
    """Atomic access to the per-product quantity on hand."""

    @staticmethod
    def _require_atomic(operation):
        if not transaction.get_connection().in_atomic_block:
            raise transaction.TransactionManagementError(
                f"StockLedger.{operation} must run inside transaction.atomic()"
            )

    @staticmethod
    def _validate_quantity(quantity):
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise exceptions.ValidationError(
                f"Quantity must be an integer greater than or equal to 1, got {quantity!r}"
            )

    @staticmethod
    def get_stock_record(product_id) -> Dict[str, object]:
        """
        Return ``{"sku", "stock"}`` for a product, read in a single query.

        Raises:
            ProductNotFound: If the product does not exist
        """
        record = Product.objects.filter(pk=product_id).values("sku", "stock").first()
        if record is None:
            raise exceptions.ProductNotFound(product_id)
        return record

    @classmethod
    def get_quantity(cls, product_id) -> int:
        """
        Return the current stock of a product.

        Raises:
            ProductNotFound: If the product does not exist
        """
        return cls.get_stock_record(product_id)["stock"]

    @classmethod
    def lock_products(cls, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Lock product rows for the rest of the enclosing transaction.

        Rows are locked in ascending primary key order so two requests that
        touch overlapping products always acquire their locks in the same
        order and cannot deadlock each other.

        Returns:
            dict: Locked products keyed by id. Missing ids are simply absent.
        """
        cls._require_atomic("lock_products")
        ids = sorted(set(product_ids))
        products = Product.objects.select_for_update().filter(pk__in=ids).order_by("pk")
        return {product.pk: product for product in products}

    @classmethod
    def reserve_and_decrement(cls, product_id, quantity) -> int:
        """
        Deduct ``quantity`` from a product's stock.

        Args:
            product_id: Product to deduct from
            quantity: Units sold, at least 1

        Returns:
            int: Stock level after the deduction

        Raises:
            ProductNotFound: If the product does not exist
            InsufficientStock: If ``quantity`` exceeds the stock on hand
        """
        cls._require_atomic("reserve_and_decrement")
        cls._validate_quantity(quantity)

        product = cls.lock_products([product_id]).get(product_id)
        if product is None:
            raise exceptions.ProductNotFound(product_id)

        if not product.can_deduct_quantity(quantity):
            raise exceptions.InsufficientStock(product_id, product.stock, quantity)

        updated = Product.objects.filter(pk=product_id, stock__gte=quantity).update(
            stock=F("stock") - quantity, updated_at=timezone.now()
        )
        if updated != 1:
            available = cls.get_quantity(product_id)
            logger.warning(
                f"Guarded stock update rejected for product {product_id}: "
                f"available={available}, requested={quantity}"
            )
            raise exceptions.InsufficientStock(product_id, available, quantity)

        product.stock -= quantity
        return product.stock

    @classmethod
    def increment(cls, product_id, quantity) -> int:
        """
        Add ``quantity`` to a product's stock. There is no upper bound.

        Returns:
            int: Stock level after the credit

        Raises:
            ProductNotFound: If the product does not exist
        """
        cls._require_atomic("increment")
        cls._validate_quantity(quantity)

        product = cls.lock_products([product_id]).get(product_id)
        if product is None:
            raise exceptions.ProductNotFound(product_id)

        Product.objects.filter(pk=product_id).update(
            stock=F("stock") + quantity, updated_at=timezone.now()
        )
        product.stock += quantity
        return product.stock
