"""
Inventory models for pharmacy stock management.

The product catalog row carries the stock on hand. Catalog attributes are
maintained through the admin; ``stock`` is only ever changed by
``apps.inventory.ledger.StockLedger``.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """
    Catalog product with its authoritative quantity on hand.

    The database enforces ``stock >= 0`` so that no code path, including a
    raw update, can leave the ledger negative.
    """

    sku = models.CharField(
        max_length=64,
        unique=True,
        help_text="Unique stock keeping unit",
    )

    name = models.CharField(
        max_length=255,
        help_text="Product name",
    )

    category = models.CharField(
        max_length=100,
        blank=True,
        help_text="Category name (e.g. 'Analgésicos', 'Antibióticos')",
    )

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Current unit selling price",
    )

    stock = models.PositiveIntegerField(
        default=0,
        help_text="Quantity on hand",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the product was added to the catalog",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the product or its stock was last updated",
    )

    class Meta:
        db_table = "products"
        ordering = ["-id"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="product_price_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["category"], name="product_category_idx"),
            models.Index(fields=["stock"], name="product_stock_idx"),
        ]

    def __str__(self):
        return f"{self.sku} - {self.name}"

    def can_deduct_quantity(self, quantity):
        """Check if we can deduct the specified quantity."""
        return self.stock >= quantity
