"""
Sales models for the pharmacy point of sale.

A Sale is created together with its line items in one transaction by
``apps.sales.services.SaleService``. Line items freeze the unit price at
the moment of sale; later catalog price changes do not affect them.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Sale(models.Model):
    """
    Completed point-of-sale transaction.

    Sales are immutable after creation except for their status.
    """

    # Status choices
    COMPLETED = "completed"

    STATUS_CHOICES = [
        (COMPLETED, "Completed"),
    ]

    client = models.ForeignKey(
        "crm.Client",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        help_text="Loyalty client who made the purchase (optional for walk-in sales)",
    )

    # Financial details
    subtotal = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of line totals",
    )

    total = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount charged",
    )

    payment_method = models.CharField(
        max_length=50,
        help_text="Payment method used (cash, card, transfer, ...)",
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=COMPLETED,
        help_text="Current status of the sale",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the sale was created",
    )

    class Meta:
        db_table = "sales"
        ordering = ["-created_at", "-id"]
        verbose_name = "Sale"
        verbose_name_plural = "Sales"
        indexes = [
            models.Index(fields=["client", "-created_at"], name="sale_client_date_idx"),
            models.Index(fields=["payment_method"], name="sale_payment_idx"),
        ]

    def __str__(self):
        return f"Sale #{self.pk} - {self.total}"


class SaleItem(models.Model):
    """
    Line item of a sale.

    ``price_at_sale`` is a copy of the unit price charged, not a reference
    to the product's current price.
    """

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Sale that this item belongs to",
    )

    product = models.ForeignKey(
        "inventory.Product",
        on_delete=models.PROTECT,
        related_name="sale_items",
        help_text="Product that was sold",
    )

    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity sold",
    )

    price_at_sale = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price at time of sale (may differ from current product price)",
    )

    class Meta:
        db_table = "sale_items"
        ordering = ["id"]
        verbose_name = "Sale Item"
        verbose_name_plural = "Sale Items"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="sale_item_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.product_id} x {self.quantity}"

    @property
    def line_total(self):
        """Quantity times the frozen unit price."""
        return self.price_at_sale * self.quantity
