from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "sku",
                    models.CharField(
                        help_text="Unique stock keeping unit", max_length=64, unique=True
                    ),
                ),
                ("name", models.CharField(help_text="Product name", max_length=255)),
                (
                    "category",
                    models.CharField(
                        blank=True,
                        help_text="Category name (e.g. 'Analgésicos', 'Antibióticos')",
                        max_length=100,
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Current unit selling price",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "stock",
                    models.PositiveIntegerField(default=0, help_text="Quantity on hand"),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the product was added to the catalog"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="When the product or its stock was last updated"
                    ),
                ),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "products",
                "ordering": ["-id"],
                "indexes": [
                    models.Index(fields=["category"], name="product_category_idx"),
                    models.Index(fields=["stock"], name="product_stock_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(stock__gte=0), name="product_stock_non_negative"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(price__gte=0), name="product_price_non_negative"
                    ),
                ],
            },
        ),
    ]
