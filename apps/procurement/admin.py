"""
Admin configuration for procurement models.
"""

from django.contrib import admin

from .models import PurchaseOrder, PurchaseOrderItem, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    """Admin interface for Supplier model."""

    list_display = ["name", "contact", "email", "phone", "status", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["name", "contact", "email", "phone"]
    readonly_fields = ["created_at"]

    fieldsets = (
        ("Basic Information", {"fields": ("name", "contact", "status")}),
        ("Contact Information", {"fields": ("email", "phone", "address")}),
        ("Audit Information", {"fields": ("created_at",), "classes": ("collapse",)}),
    )


class PurchaseOrderItemInline(admin.TabularInline):
    """Inline admin for PurchaseOrderItem."""

    model = PurchaseOrderItem
    extra = 0
    fields = ["product", "quantity", "cost_price"]
    readonly_fields = ["product", "quantity", "cost_price"]
    can_delete = False


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    """
    Admin interface for PurchaseOrder model.

    Orders are recorded and received through the API so that receiving
    always credits stock; the admin only displays them.
    """

    list_display = ["id", "supplier", "status", "total", "created_at", "received_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["id", "supplier__name"]
    readonly_fields = ["supplier", "total", "status", "created_at", "received_at"]
    date_hierarchy = "created_at"
    inlines = [PurchaseOrderItemInline]

    def has_add_permission(self, request):
        return False
