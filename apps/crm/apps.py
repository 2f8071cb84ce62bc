from django.apps import AppConfig


class CrmConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.crm"
    verbose_name = "Clients and Loyalty"

    def ready(self):
        """Register the loyalty accrual signal handler."""
        import apps.crm.signals  # noqa: F401
