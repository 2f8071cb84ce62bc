"""
Admin configuration for CRM models.
"""

from django.contrib import admin

from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    """Admin interface for Client. Points are earned through sales only."""

    list_display = ["client_id", "name", "phone", "email", "points", "last_visit"]
    search_fields = ["client_id", "name", "phone", "email"]
    readonly_fields = ["points", "last_visit", "created_at"]
