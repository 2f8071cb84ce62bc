"""
Procurement app configuration.
"""

from django.apps import AppConfig


class ProcurementConfig(AppConfig):
    """Configuration for the procurement app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.procurement"
    verbose_name = "Suppliers and Purchases"
