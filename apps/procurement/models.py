"""
Procurement models for supplier and purchase order management.

A purchase order is created ``pending`` and moves exactly once to
``received`` through a django-fsm transition. Receiving credits stock for
every line item; see ``apps.procurement.services.PurchaseOrderService``.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition


class Supplier(models.Model):
    """
    Supplier model for managing vendor relationships.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("inactive", "Inactive"),
    ]

    name = models.CharField(max_length=255, help_text="Supplier company name")
    contact = models.CharField(max_length=255, blank=True, help_text="Primary contact person name")

    # Contact Information
    email = models.EmailField(blank=True, help_text="Primary email address")
    phone = models.CharField(max_length=30, blank=True, help_text="Primary phone number")
    address = models.TextField(blank=True, help_text="Complete address")

    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default="active",
        help_text="Whether the supplier is currently used",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "suppliers"
        indexes = [
            models.Index(fields=["name"], name="supplier_name_idx"),
            models.Index(fields=["status"], name="supplier_status_idx"),
        ]
        ordering = ["name"]

    def __str__(self):
        return f"{self.name}"


class PurchaseOrder(models.Model):
    """
    Purchase Order model with Finite State Machine for the receiving workflow.

    ``received`` is terminal; a second receive raises ``TransitionNotAllowed``.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        RECEIVED = "received", "Received"

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchase_orders",
        help_text="Supplier for this purchase order",
    )

    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Total cost of the order",
    )

    # Workflow and Status
    status = FSMField(
        default=Status.PENDING,
        choices=Status.choices,
        help_text="Current status of the purchase order",
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    received_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "purchases"
        indexes = [
            models.Index(fields=["status"], name="purchase_status_idx"),
            models.Index(fields=["supplier"], name="purchase_supplier_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"PO #{self.pk} - {self.get_status_display()}"

    # FSM Transitions
    @transition(field=status, source=Status.PENDING, target=Status.RECEIVED)
    def receive(self):
        """Mark order as received. Stock is credited by the service."""
        self.received_at = timezone.now()

    @property
    def is_received(self):
        return self.status == self.Status.RECEIVED

    def calculate_total(self):
        """Sum of quantity times cost price over all line items."""
        return sum((item.line_total for item in self.items.all()), Decimal("0.00"))


class PurchaseOrderItem(models.Model):
    """
    Line items for purchase orders.
    """

    purchase_order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Purchase order this item belongs to",
    )

    product = models.ForeignKey(
        "inventory.Product",
        on_delete=models.PROTECT,
        related_name="purchase_items",
        help_text="Product being purchased",
    )

    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)], help_text="Ordered quantity"
    )

    cost_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Cost per unit",
    )

    class Meta:
        db_table = "purchase_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="purchase_item_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.product_id} - {self.quantity} units"

    @property
    def line_total(self):
        return self.cost_price * self.quantity
