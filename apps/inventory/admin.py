"""
Admin configuration for inventory models.

The admin is the catalog editor. Stock can be set when a product is first
entered, after which it is read-only: sales and purchase receipts are the
only paths that move it.
"""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product."""

    list_display = ["sku", "name", "category", "price", "stock", "updated_at"]
    list_filter = ["category", "created_at"]
    search_fields = ["sku", "name", "category"]
    readonly_fields = ["created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("sku", "name", "category", "price"),
            },
        ),
        (
            "Stock",
            {
                "fields": ("stock",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return [*self.readonly_fields, "stock"]
        return self.readonly_fields
