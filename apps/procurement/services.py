"""
Purchase order manager.

Creating an order records what was bought and never touches stock.
Receiving an order moves it from ``pending`` to ``received`` and credits
every line's quantity to the stock ledger, all in one transaction.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from django.db import DatabaseError, transaction

from django_fsm import TransitionNotAllowed

from apps.core import exceptions
from apps.core.fields import MAX_QUANTITY, max_amount
from apps.inventory.ledger import StockLedger
from apps.inventory.models import Product

from .models import PurchaseOrder, PurchaseOrderItem, Supplier

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PurchaseLine:
    """One line of a purchase order."""

    product_id: int
    quantity: int
    cost_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return (self.cost_price * self.quantity).quantize(CENTS)


class PurchaseOrderService:
    """Creates and receives purchase orders."""

    @staticmethod
    def _validate_request(lines, total):
        if not lines:
            raise exceptions.ValidationError("Purchase must have at least one item")

        price_limit = max_amount(PurchaseOrderItem, "cost_price")
        for index, line in enumerate(lines):
            quantity = line.quantity
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise exceptions.ValidationError(f"items[{index}].quantity must be at least 1")
            if quantity > MAX_QUANTITY:
                raise exceptions.ValidationError(
                    f"items[{index}].quantity must not exceed {MAX_QUANTITY}"
                )
            if line.cost_price < 0:
                raise exceptions.ValidationError(
                    f"items[{index}].cost_price must not be negative"
                )
            if line.cost_price > price_limit:
                raise exceptions.ValidationError(
                    f"items[{index}].cost_price must not exceed {price_limit}"
                )

        if total is not None and total < 0:
            raise exceptions.ValidationError("Total must not be negative")

    @classmethod
    def create_purchase_order(
        cls,
        lines: Sequence[PurchaseLine],
        supplier_id: Optional[int] = None,
        total: Optional[Decimal] = None,
    ) -> PurchaseOrder:
        """
        Record a pending purchase order with its line items.

        Args:
            lines: Purchased lines
            supplier_id: Optional supplier
            total: Order total; defaults to the sum of quantity times cost price

        Returns:
            PurchaseOrder: The persisted order in ``pending`` status

        Raises:
            ValidationError: Empty or malformed lines, or unknown supplier
            ProductNotFound: A line references a missing product
            PersistenceFailure: The database failed
        """
        cls._validate_request(lines, total)

        if total is None:
            total = sum((line.line_total for line in lines), Decimal("0.00"))
        else:
            total = Decimal(total).quantize(CENTS)

        total_limit = max_amount(PurchaseOrder, "total")
        if total > total_limit:
            raise exceptions.ValidationError(f"Total must not exceed {total_limit}")

        try:
            with transaction.atomic():
                supplier = None
                if supplier_id is not None:
                    supplier = Supplier.objects.filter(pk=supplier_id).first()
                    if supplier is None:
                        raise exceptions.ValidationError(f"Supplier {supplier_id} not found")

                product_ids = {line.product_id for line in lines}
                existing = set(
                    Product.objects.filter(pk__in=product_ids).values_list("pk", flat=True)
                )
                for line in lines:
                    if line.product_id not in existing:
                        raise exceptions.ProductNotFound(line.product_id)

                order = PurchaseOrder.objects.create(supplier=supplier, total=total)
                PurchaseOrderItem.objects.bulk_create(
                    [
                        PurchaseOrderItem(
                            purchase_order=order,
                            product_id=line.product_id,
                            quantity=line.quantity,
                            cost_price=line.cost_price,
                        )
                        for line in lines
                    ]
                )
        except exceptions.POSError as e:
            logger.info(f"Purchase order rejected: {e.detail}")
            raise
        except DatabaseError as e:
            logger.error(f"Purchase order creation failed: {str(e)}", exc_info=True)
            raise exceptions.PersistenceFailure() from e

        logger.info(f"Purchase order {order.pk} created: {len(lines)} line(s), total {order.total}")
        return order

    @staticmethod
    def receive_purchase_order(order_id) -> PurchaseOrder:
        """
        Receive a pending purchase order and credit its quantities to stock.

        The order row is locked for the whole transaction, so two concurrent
        receives of the same order serialize and the second one sees
        ``received`` and fails.

        Raises:
            PurchaseOrderNotFound: If the order does not exist
            AlreadyReceived: If the order was already received
            PersistenceFailure: The database failed
        """
        try:
            with transaction.atomic():
                try:
                    order = PurchaseOrder.objects.select_for_update().get(pk=order_id)
                except PurchaseOrder.DoesNotExist:
                    raise exceptions.PurchaseOrderNotFound()

                try:
                    order.receive()
                except TransitionNotAllowed:
                    raise exceptions.AlreadyReceived()
                order.save(update_fields=["status", "received_at"])

                items = list(order.items.all())
                StockLedger.lock_products(item.product_id for item in items)
                for item in items:
                    new_stock = StockLedger.increment(item.product_id, item.quantity)
                    logger.debug(
                        f"Purchase order {order.pk}: product {item.product_id} "
                        f"+{item.quantity} -> {new_stock}"
                    )
        except exceptions.POSError as e:
            logger.info(f"Purchase order {order_id} receive rejected: {e.detail}")
            raise
        except DatabaseError as e:
            logger.error(f"Purchase order {order_id} receive failed: {str(e)}", exc_info=True)
            raise exceptions.PersistenceFailure() from e

        logger.info(f"Purchase order {order.pk} received: {len(items)} line(s) credited")
        return order
