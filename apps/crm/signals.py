"""
Signal handlers for CRM app.

Loyalty points are accrued once a sale with a client has been committed.
"""

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.sales.models import Sale

from .services import LoyaltyService


@receiver(post_save, sender=Sale)
def award_loyalty_points_on_sale(sender, instance, created, **kwargs):
    """
    Schedule loyalty accrual for a newly created completed sale.

    The accrual runs on commit, so a sale that rolls back (for example on
    insufficient stock for a later line) never earns points.
    """
    if not created or instance.client_id is None or instance.status != Sale.COMPLETED:
        return

    sale_id = instance.pk
    transaction.on_commit(lambda: LoyaltyService.award_points_for_sale(sale_id))
