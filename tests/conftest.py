"""
Pytest configuration and fixtures for the pharmacy point-of-sale backend.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def user(django_user_model):
    """
    Fixture for a cashier account.
    """
    return django_user_model.objects.create_user(
        username="cashier", email="cashier@example.com", password="testpass123"
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """
    Fixture for authenticated API client.
    """
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def product(db):
    """Product with five units on hand."""
    from apps.inventory.models import Product

    return Product.objects.create(
        sku="PARA-500",
        name="Paracetamol 500mg",
        category="Analgésicos",
        price=Decimal("10.00"),
        stock=5,
    )


@pytest.fixture
def second_product(db):
    """Product with ten units on hand."""
    from apps.inventory.models import Product

    return Product.objects.create(
        sku="IBU-400",
        name="Ibuprofeno 400mg",
        category="Analgésicos",
        price=Decimal("4.50"),
        stock=10,
    )


@pytest.fixture
def loyalty_client(db):
    """Registered loyalty client with no points."""
    from apps.crm.models import Client

    return Client.objects.create(client_id="V-12345678", name="María Pérez", phone="555-0101")


@pytest.fixture
def supplier(db):
    """Active supplier."""
    from apps.procurement.models import Supplier

    return Supplier.objects.create(
        name="Droguería Central", contact="Luis Gómez", email="ventas@drogueria.example"
    )
