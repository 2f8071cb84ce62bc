"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("products/<int:product_id>/stock", views.product_stock, name="product_stock"),
]
