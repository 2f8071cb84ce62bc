from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "client_id",
                    models.CharField(
                        help_text="External client identifier (e.g. national id or card number)",
                        max_length=50,
                        unique=True,
                    ),
                ),
                ("name", models.CharField(help_text="Client's full name", max_length=255)),
                (
                    "phone",
                    models.CharField(blank=True, help_text="Client's phone number", max_length=30),
                ),
                (
                    "email",
                    models.EmailField(
                        blank=True, help_text="Client's email address", max_length=254
                    ),
                ),
                (
                    "points",
                    models.PositiveIntegerField(
                        default=0, help_text="Current loyalty points balance"
                    ),
                ),
                (
                    "last_visit",
                    models.DateTimeField(
                        blank=True, help_text="When the client last made a purchase", null=True
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the client was registered"
                    ),
                ),
            ],
            options={
                "verbose_name": "Client",
                "verbose_name_plural": "Clients",
                "db_table": "clients",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["name"], name="client_name_idx"),
                    models.Index(fields=["phone"], name="client_phone_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(points__gte=0), name="client_points_non_negative"
                    ),
                ],
            },
        ),
    ]
