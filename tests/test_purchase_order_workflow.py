"""
Tests for purchase order workflow functionality.

Recording an order never changes stock; receiving it credits every line
exactly once.
"""

from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.urls import reverse

import pytest
from django_fsm import TransitionNotAllowed, can_proceed

from apps.core import exceptions
from apps.core.fields import MAX_QUANTITY
from apps.inventory.ledger import StockLedger
from apps.inventory.models import Product
from apps.procurement.models import PurchaseOrder, PurchaseOrderItem
from apps.procurement.services import PurchaseLine, PurchaseOrderService


@pytest.fixture
def product_seven(db):
    """Product with primary key 7 and no stock."""
    return Product.objects.create(
        pk=7, sku="AMOX-500", name="Amoxicilina 500mg", price=Decimal("6.00"), stock=0
    )


@pytest.mark.django_db
class TestPurchaseOrderModel:
    """Test the purchase order state machine."""

    def test_receive_transition(self):
        order = PurchaseOrder.objects.create(total=Decimal("10.00"))

        assert order.status == PurchaseOrder.Status.PENDING
        assert can_proceed(order.receive)

        order.receive()

        assert order.status == PurchaseOrder.Status.RECEIVED
        assert order.received_at is not None
        assert order.is_received

    def test_received_is_terminal(self):
        order = PurchaseOrder.objects.create()
        order.receive()

        assert not can_proceed(order.receive)
        with pytest.raises(TransitionNotAllowed):
            order.receive()

    def test_calculate_total(self, product, second_product):
        order = PurchaseOrder.objects.create()
        PurchaseOrderItem.objects.create(
            purchase_order=order, product=product, quantity=10, cost_price=Decimal("2.50")
        )
        PurchaseOrderItem.objects.create(
            purchase_order=order, product=second_product, quantity=3, cost_price=Decimal("1.20")
        )

        assert order.calculate_total() == Decimal("28.60")


@pytest.mark.django_db
class TestPurchaseOrderService:
    """Test PurchaseOrderService."""

    def test_create_does_not_change_stock(self, product, supplier):
        order = PurchaseOrderService.create_purchase_order(
            [PurchaseLine(product.pk, 10, Decimal("2.50"))], supplier_id=supplier.pk
        )

        assert order.status == PurchaseOrder.Status.PENDING
        assert order.supplier == supplier
        assert order.total == Decimal("25.00")
        assert order.items.count() == 1
        assert StockLedger.get_quantity(product.pk) == 5

    def test_create_with_explicit_total(self, product):
        order = PurchaseOrderService.create_purchase_order(
            [PurchaseLine(product.pk, 10, Decimal("2.50"))], total=Decimal("24.00")
        )

        assert order.total == Decimal("24.00")
        assert order.supplier is None

    def test_create_empty(self, django_assert_num_queries):
        with django_assert_num_queries(0):
            with pytest.raises(exceptions.ValidationError) as exc_info:
                PurchaseOrderService.create_purchase_order([])

        assert str(exc_info.value.detail) == "Purchase must have at least one item"

    def test_create_unknown_product(self, product):
        with pytest.raises(exceptions.ProductNotFound):
            PurchaseOrderService.create_purchase_order(
                [
                    PurchaseLine(product.pk, 1, Decimal("1.00")),
                    PurchaseLine(999, 1, Decimal("1.00")),
                ]
            )

        assert PurchaseOrder.objects.count() == 0

    def test_create_unknown_supplier(self, product):
        with pytest.raises(exceptions.ValidationError):
            PurchaseOrderService.create_purchase_order(
                [PurchaseLine(product.pk, 1, Decimal("1.00"))], supplier_id=999
            )

        assert PurchaseOrder.objects.count() == 0

    def test_create_total_above_column_limit(self, product, django_assert_num_queries):
        with django_assert_num_queries(0):
            with pytest.raises(exceptions.ValidationError) as exc_info:
                PurchaseOrderService.create_purchase_order(
                    [PurchaseLine(product.pk, 1000, Decimal("99999999.99"))]
                )

        assert str(exc_info.value.detail) == "Total must not exceed 9999999999.99"

    def test_create_quantity_above_column_limit(self, product):
        with pytest.raises(exceptions.ValidationError):
            PurchaseOrderService.create_purchase_order(
                [PurchaseLine(product.pk, MAX_QUANTITY + 1, Decimal("1.00"))]
            )

        assert PurchaseOrder.objects.count() == 0

    def test_receive_credits_stock(self, product_seven):
        order = PurchaseOrderService.create_purchase_order(
            [PurchaseLine(7, 10, Decimal("2.50"))]
        )

        received = PurchaseOrderService.receive_purchase_order(order.pk)

        assert received.status == PurchaseOrder.Status.RECEIVED
        assert received.received_at is not None
        assert StockLedger.get_quantity(7) == 10

    def test_receive_twice_credits_once(self, product):
        order = PurchaseOrderService.create_purchase_order(
            [PurchaseLine(product.pk, 4, Decimal("3.00"))]
        )
        PurchaseOrderService.receive_purchase_order(order.pk)

        with pytest.raises(exceptions.AlreadyReceived):
            PurchaseOrderService.receive_purchase_order(order.pk)

        assert StockLedger.get_quantity(product.pk) == 9

    def test_receive_repeated_product_lines(self, product):
        order = PurchaseOrderService.create_purchase_order(
            [
                PurchaseLine(product.pk, 2, Decimal("3.00")),
                PurchaseLine(product.pk, 3, Decimal("3.10")),
            ]
        )

        PurchaseOrderService.receive_purchase_order(order.pk)

        assert StockLedger.get_quantity(product.pk) == 10

    def test_receive_missing_order(self):
        with pytest.raises(exceptions.PurchaseOrderNotFound):
            PurchaseOrderService.receive_purchase_order(999)

    def test_receive_failure_rolls_back_status(self, product, second_product):
        order = PurchaseOrderService.create_purchase_order(
            [
                PurchaseLine(product.pk, 2, Decimal("3.00")),
                PurchaseLine(second_product.pk, 3, Decimal("1.00")),
            ]
        )
        real_increment = StockLedger.increment
        applied = []

        def fail_on_second_line(product_id, quantity):
            if applied:
                raise DatabaseError("connection lost")
            applied.append(product_id)
            return real_increment(product_id, quantity)

        with patch.object(StockLedger, "increment", side_effect=fail_on_second_line):
            with pytest.raises(exceptions.PersistenceFailure):
                PurchaseOrderService.receive_purchase_order(order.pk)

        order.refresh_from_db()
        assert order.status == PurchaseOrder.Status.PENDING
        assert order.received_at is None
        assert StockLedger.get_quantity(product.pk) == 5
        assert StockLedger.get_quantity(second_product.pk) == 10


@pytest.mark.django_db
class TestPurchaseOrderAPI:
    """Test the /api/purchases endpoints."""

    def test_create_purchase(self, authenticated_client, product_seven, supplier):
        url = reverse("procurement:purchase_list_create")
        response = authenticated_client.post(
            url,
            {
                "supplier_id": supplier.pk,
                "items": [{"product_id": 7, "quantity": 10, "cost_price": 2.5}],
            },
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["supplier_name"] == "Droguería Central"
        assert data["total"] == "25.00"
        assert data["received_at"] is None
        assert data["items"][0]["cost_price"] == "2.50"
        assert StockLedger.get_quantity(7) == 0

    def test_create_purchase_without_items(self, authenticated_client):
        url = reverse("procurement:purchase_list_create")
        response = authenticated_client.post(url, {"items": []}, format="json")

        assert response.status_code == 400
        assert "Purchase must have at least one item" in response.json()["error"]
        assert PurchaseOrder.objects.count() == 0

    def test_create_purchase_quantity_overflow(self, authenticated_client, product):
        url = reverse("procurement:purchase_list_create")
        response = authenticated_client.post(
            url,
            {"items": [{"product_id": product.pk, "quantity": 10**20, "cost_price": "1.00"}]},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("items[0].quantity")
        assert PurchaseOrder.objects.count() == 0

    def test_create_purchase_total_overflow(self, authenticated_client, product):
        url = reverse("procurement:purchase_list_create")
        response = authenticated_client.post(
            url,
            {"items": [{"product_id": product.pk, "quantity": 1000, "cost_price": "99999999.99"}]},
            format="json",
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Total must not exceed 9999999999.99"}
        assert PurchaseOrder.objects.count() == 0

    def test_receive_purchase(self, authenticated_client, product_seven):
        order = PurchaseOrderService.create_purchase_order(
            [PurchaseLine(7, 10, Decimal("2.50"))]
        )

        response = authenticated_client.put(
            reverse("procurement:purchase_receive", args=[order.pk])
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Purchase received and stock updated"
        assert data["purchase"]["id"] == order.pk
        assert data["purchase"]["status"] == "received"
        assert data["purchase"]["received_at"] is not None
        assert StockLedger.get_quantity(7) == 10

    def test_receive_order_nine(self, authenticated_client, product, second_product):
        order = PurchaseOrder.objects.create(pk=9, total=Decimal("13.00"))
        PurchaseOrderItem.objects.create(
            purchase_order=order, product=product, quantity=2, cost_price=Decimal("5.00")
        )
        PurchaseOrderItem.objects.create(
            purchase_order=order, product=second_product, quantity=3, cost_price=Decimal("1.00")
        )

        response = authenticated_client.put("/api/purchases/9/receive")

        assert response.status_code == 200
        assert response.json()["purchase"]["status"] == "received"
        assert StockLedger.get_quantity(product.pk) == 7
        assert StockLedger.get_quantity(second_product.pk) == 13

    def test_receive_purchase_twice(self, authenticated_client, product):
        order = PurchaseOrderService.create_purchase_order(
            [PurchaseLine(product.pk, 4, Decimal("3.00"))]
        )
        url = reverse("procurement:purchase_receive", args=[order.pk])

        assert authenticated_client.put(url).status_code == 200
        response = authenticated_client.put(url)

        assert response.status_code == 400
        assert response.json() == {"error": "Purchase already received"}
        assert StockLedger.get_quantity(product.pk) == 9

    def test_receive_missing_purchase(self, authenticated_client):
        response = authenticated_client.put(reverse("procurement:purchase_receive", args=[999]))

        assert response.status_code == 404
        assert response.json() == {"error": "Purchase not found"}

    def test_receive_requires_put(self, authenticated_client, product):
        order = PurchaseOrderService.create_purchase_order(
            [PurchaseLine(product.pk, 1, Decimal("3.00"))]
        )

        response = authenticated_client.post(
            reverse("procurement:purchase_receive", args=[order.pk])
        )

        assert response.status_code == 405
        order.refresh_from_db()
        assert order.status == PurchaseOrder.Status.PENDING

    def test_list_purchases(self, authenticated_client, product, supplier):
        pending = PurchaseOrderService.create_purchase_order(
            [PurchaseLine(product.pk, 1, Decimal("3.00"))], supplier_id=supplier.pk
        )
        received = PurchaseOrderService.create_purchase_order(
            [
                PurchaseLine(product.pk, 1, Decimal("3.00")),
                PurchaseLine(product.pk, 2, Decimal("3.00")),
            ]
        )
        PurchaseOrderService.receive_purchase_order(received.pk)

        response = authenticated_client.get(reverse("procurement:purchase_list_create"))

        assert response.status_code == 200
        results = response.json()["results"]
        assert [row["id"] for row in results] == [received.pk, pending.pk]
        assert results[0]["items_count"] == 2
        assert results[0]["supplier_name"] is None
        assert results[1]["supplier_name"] == "Droguería Central"

        response = authenticated_client.get(
            reverse("procurement:purchase_list_create"), {"status": "pending"}
        )
        assert [row["status"] for row in response.json()["results"]] == ["pending"]

    def test_purchase_detail_not_found(self, authenticated_client):
        response = authenticated_client.get(reverse("procurement:purchase_detail", args=[999]))

        assert response.status_code == 404
        assert response.json() == {"error": "Purchase not found"}
