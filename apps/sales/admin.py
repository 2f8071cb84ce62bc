"""
Admin configuration for sales models.

Sales are created only through the POS API; the admin is read-only.
"""

from django.contrib import admin

from .models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    """Inline admin for sale items."""

    model = SaleItem
    extra = 0
    fields = ["product", "quantity", "price_at_sale"]
    readonly_fields = ["product", "quantity", "price_at_sale"]
    can_delete = False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """Admin interface for Sale."""

    list_display = ["id", "client", "subtotal", "total", "payment_method", "status", "created_at"]
    list_filter = ["status", "payment_method", "created_at"]
    search_fields = ["id", "client__name", "client__client_id"]
    readonly_fields = ["client", "subtotal", "total", "payment_method", "status", "created_at"]
    date_hierarchy = "created_at"
    inlines = [SaleItemInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
