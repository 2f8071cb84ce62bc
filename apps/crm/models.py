"""
CRM models for pharmacy client management.

Clients accumulate loyalty points from completed sales. Point accrual is
handled by ``apps.crm.services.LoyaltyService``; everything else on the
record is maintained through the admin.
"""

from django.db import models


class Client(models.Model):
    """
    Loyalty client.

    ``points`` never goes below zero and only grows through sales.
    """

    client_id = models.CharField(
        max_length=50,
        unique=True,
        help_text="External client identifier (e.g. national id or card number)",
    )

    name = models.CharField(
        max_length=255,
        help_text="Client's full name",
    )

    phone = models.CharField(
        max_length=30,
        blank=True,
        help_text="Client's phone number",
    )

    email = models.EmailField(
        blank=True,
        help_text="Client's email address",
    )

    points = models.PositiveIntegerField(
        default=0,
        help_text="Current loyalty points balance",
    )

    last_visit = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the client last made a purchase",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the client was registered",
    )

    class Meta:
        db_table = "clients"
        ordering = ["-created_at"]
        verbose_name = "Client"
        verbose_name_plural = "Clients"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points__gte=0),
                name="client_points_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["name"], name="client_name_idx"),
            models.Index(fields=["phone"], name="client_phone_idx"),
        ]

    def __str__(self):
        return f"{self.client_id} - {self.name}"
