"""
Tests for loyalty point accrual on completed sales.

Points are awarded after the sale commits and never block or undo it.
"""

from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError

import pytest

from apps.core import exceptions
from apps.crm.services import LoyaltyService
from apps.sales.services import SaleLine, SaleService


@pytest.mark.django_db
class TestLoyaltyService:
    """Test point calculation and crediting."""

    @pytest.mark.parametrize(
        "total,expected",
        [
            (Decimal("30.00"), 30),
            (Decimal("30.99"), 30),
            (Decimal("0.50"), 0),
            (Decimal("0.00"), 0),
        ],
    )
    def test_calculate_points(self, total, expected):
        assert LoyaltyService.calculate_points(total) == expected

    def test_calculate_points_uses_rate(self, settings):
        settings.LOYALTY_POINTS_PER_UNIT = 2

        assert LoyaltyService.calculate_points(Decimal("12.40")) == 24

    def test_award_points(self, loyalty_client):
        assert LoyaltyService.award_points(loyalty_client.pk, Decimal("15.00")) == 15

        loyalty_client.refresh_from_db()
        assert loyalty_client.points == 15
        assert loyalty_client.last_visit is not None

    def test_award_points_missing_client(self):
        assert LoyaltyService.award_points(999, Decimal("15.00")) == 0


@pytest.mark.django_db
class TestLoyaltySignals:
    """Test accrual triggered by sale creation."""

    def test_points_awarded_after_commit(
        self, product, loyalty_client, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            SaleService.create_sale(
                [SaleLine(product.pk, 3, Decimal("10.00"))],
                payment_method="cash",
                client_id=loyalty_client.pk,
            )

        assert len(callbacks) == 1
        loyalty_client.refresh_from_db()
        assert loyalty_client.points == 30
        assert loyalty_client.last_visit is not None

    def test_points_follow_charged_total(
        self, product, loyalty_client, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            SaleService.create_sale(
                [SaleLine(product.pk, 3, Decimal("10.00"))],
                payment_method="cash",
                client_id=loyalty_client.pk,
                total=Decimal("27.50"),
            )

        loyalty_client.refresh_from_db()
        assert loyalty_client.points == 27

    def test_walk_in_sale_schedules_nothing(self, product, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks() as callbacks:
            SaleService.create_sale([SaleLine(product.pk, 1, Decimal("10.00"))], payment_method="cash")

        assert callbacks == []

    def test_failed_sale_awards_nothing(
        self, product, loyalty_client, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(exceptions.InsufficientStock):
                SaleService.create_sale(
                    [SaleLine(product.pk, 6, Decimal("10.00"))],
                    payment_method="cash",
                    client_id=loyalty_client.pk,
                )

        assert callbacks == []
        loyalty_client.refresh_from_db()
        assert loyalty_client.points == 0

    def test_accrual_failure_keeps_sale(
        self, product, loyalty_client, django_capture_on_commit_callbacks
    ):
        with patch.object(LoyaltyService, "award_points", side_effect=DatabaseError("locked")):
            with django_capture_on_commit_callbacks(execute=True):
                sale = SaleService.create_sale(
                    [SaleLine(product.pk, 2, Decimal("10.00"))],
                    payment_method="cash",
                    client_id=loyalty_client.pk,
                )

        assert sale.pk is not None
        product.refresh_from_db()
        assert product.stock == 3
        loyalty_client.refresh_from_db()
        assert loyalty_client.points == 0
