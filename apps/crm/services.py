"""
Loyalty point accrual for completed sales.

Accrual is best-effort: it runs after the sale has committed and a failure
here never undoes or blocks the sale.
"""

import logging
from decimal import ROUND_DOWN, Decimal

from django.conf import settings
from django.db import DatabaseError
from django.db.models import F
from django.utils import timezone

from .models import Client

logger = logging.getLogger(__name__)


class LoyaltyService:
    """Client loyalty ledger."""

    @staticmethod
    def calculate_points(total):
        """
        Points earned for a sale total.

        One point per whole currency unit by default, scaled by
        ``LOYALTY_POINTS_PER_UNIT``. Fractions are dropped.
        """
        rate = getattr(settings, "LOYALTY_POINTS_PER_UNIT", 1)
        points = (Decimal(total) * rate).to_integral_value(rounding=ROUND_DOWN)
        return max(int(points), 0)

    @classmethod
    def award_points(cls, client_id, total):
        """
        Credit a client with the points for a sale total and stamp the visit.

        Args:
            client_id: Primary key of the Client
            total: Sale total as Decimal

        Returns:
            int: Points awarded (0 if the client no longer exists)
        """
        points = cls.calculate_points(total)
        updated = Client.objects.filter(pk=client_id).update(
            points=F("points") + points, last_visit=timezone.now()
        )
        if not updated:
            logger.warning(f"Loyalty points skipped: client {client_id} not found")
            return 0
        return points

    @classmethod
    def award_points_for_sale(cls, sale_id):
        """
        Award loyalty points for a committed sale.

        Database errors are logged and dropped: the sale is already durable
        and loyalty accrual carries no consistency guarantee.
        """
        from apps.sales.models import Sale

        try:
            sale = Sale.objects.only("id", "client_id", "total").get(pk=sale_id)
            if sale.client_id is None:
                return 0
            points = cls.award_points(sale.client_id, sale.total)
        except (Sale.DoesNotExist, DatabaseError) as e:
            logger.warning(f"Loyalty accrual failed for sale {sale_id}: {e}")
            return 0

        logger.info(
            f"Awarded {points} loyalty points to client {sale.client_id} for sale {sale_id}"
        )
        return points
