"""
Sale transaction manager.

Turns a list of requested lines into a durable Sale, or fails with no
partial effects. Stock checks, the sale rows and the stock decrements all
happen inside one ``transaction.atomic()`` block while the product rows are
locked, so concurrent checkouts of the same product cannot oversell.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from django.db import DatabaseError, transaction

from apps.core import exceptions
from apps.core.fields import MAX_QUANTITY, max_amount
from apps.crm.models import Client
from apps.inventory.ledger import StockLedger

from .models import Sale, SaleItem

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class SaleLine:
    """One requested line of a sale."""

    product_id: int
    quantity: int
    price_at_sale: Decimal

    @property
    def line_total(self) -> Decimal:
        return (self.price_at_sale * self.quantity).quantize(CENTS)


class SaleService:
    """Creates sales atomically against the stock ledger."""

    @staticmethod
    def _validate_request(lines, payment_method, total):
        """Reject malformed input before touching the database."""
        if not lines:
            raise exceptions.ValidationError("Sale must have at least one item")

        if payment_method is None or not str(payment_method).strip():
            raise exceptions.ValidationError("Payment method is required")

        price_limit = max_amount(SaleItem, "price_at_sale")
        for index, line in enumerate(lines):
            quantity = line.quantity
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise exceptions.ValidationError(f"items[{index}].quantity must be at least 1")
            if quantity > MAX_QUANTITY:
                raise exceptions.ValidationError(
                    f"items[{index}].quantity must not exceed {MAX_QUANTITY}"
                )
            if line.price_at_sale < 0:
                raise exceptions.ValidationError(
                    f"items[{index}].price_at_sale must not be negative"
                )
            if line.price_at_sale > price_limit:
                raise exceptions.ValidationError(
                    f"items[{index}].price_at_sale must not exceed {price_limit}"
                )

        if total is not None and total < 0:
            raise exceptions.ValidationError("Total must not be negative")

    @staticmethod
    def _validate_amounts(subtotal, total):
        """Reject amounts the sale row cannot store."""
        for name, amount in (("Subtotal", subtotal), ("Total", total)):
            limit = max_amount(Sale, name.lower())
            if amount > limit:
                raise exceptions.ValidationError(f"{name} must not exceed {limit}")

    @classmethod
    def create_sale(
        cls,
        lines: Sequence[SaleLine],
        payment_method: str,
        client_id: Optional[int] = None,
        total: Optional[Decimal] = None,
    ) -> Sale:
        """
        Create a sale with its line items and deduct stock.

        This method:
        1. Validates the request (non-empty cart, payment method, quantities)
        2. Locks every referenced product row in ascending id order
        3. Checks existence and availability of every line
        4. Inserts the sale and its line items
        5. Decrements stock through the stock ledger

        Any failure rolls back everything done by the call, including
        decrements already applied for earlier lines.

        Args:
            lines: Requested lines in cart order
            payment_method: Non-blank payment method
            client_id: Optional loyalty client
            total: Amount charged; defaults to the computed subtotal

        Returns:
            Sale: The persisted sale

        Raises:
            ValidationError: Malformed input or unknown client
            ProductNotFound: A line references a missing product
            InsufficientStock: A line asks for more than is on hand
            PersistenceFailure: The database failed
        """
        cls._validate_request(lines, payment_method, total)

        subtotal = sum((line.line_total for line in lines), Decimal("0.00"))
        total = subtotal if total is None else Decimal(total).quantize(CENTS)
        cls._validate_amounts(subtotal, total)

        try:
            with transaction.atomic():
                sale = cls._create_locked(
                    lines, str(payment_method).strip(), client_id, subtotal, total
                )
        except exceptions.POSError as e:
            logger.info(f"Sale rejected: {e.detail}")
            raise
        except DatabaseError as e:
            logger.error(f"Sale creation failed: {str(e)}", exc_info=True)
            raise exceptions.PersistenceFailure() from e

        logger.info(
            f"Sale {sale.pk} created: {len(lines)} line(s), total {sale.total}, "
            f"payment {sale.payment_method}"
        )
        return sale

    @staticmethod
    def _create_locked(lines, payment_method, client_id, subtotal, total):
        client = None
        if client_id is not None:
            client = Client.objects.filter(pk=client_id).first()
            if client is None:
                raise exceptions.ValidationError(f"Client {client_id} not found")

        products = StockLedger.lock_products(line.product_id for line in lines)

        # Validate all lines first; repeated lines of one product share its stock
        remaining = {product_id: product.stock for product_id, product in products.items()}
        for line in lines:
            if line.product_id not in remaining:
                raise exceptions.ProductNotFound(line.product_id)
            available = remaining[line.product_id]
            if available < line.quantity:
                raise exceptions.InsufficientStock(line.product_id, available, line.quantity)
            remaining[line.product_id] = available - line.quantity

        sale = Sale.objects.create(
            client=client,
            subtotal=subtotal,
            total=total,
            payment_method=payment_method,
            status=Sale.COMPLETED,
        )

        SaleItem.objects.bulk_create(
            [
                SaleItem(
                    sale=sale,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price_at_sale=line.price_at_sale,
                )
                for line in lines
            ]
        )

        for line in lines:
            StockLedger.reserve_and_decrement(line.product_id, line.quantity)

        return sale
