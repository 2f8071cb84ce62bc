"""
URL configuration for procurement app.
"""

from django.urls import path

from . import views

app_name = "procurement"

urlpatterns = [
    path("purchases", views.PurchaseOrderListCreateView.as_view(), name="purchase_list_create"),
    path("purchases/<int:pk>", views.PurchaseOrderDetailView.as_view(), name="purchase_detail"),
    path(
        "purchases/<int:pk>/receive",
        views.purchase_order_receive,
        name="purchase_receive",
    ),
]
