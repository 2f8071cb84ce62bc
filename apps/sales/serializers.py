"""
Serializers for sales app.

The create serializer converts the loosely typed POS request body into
``SaleLine`` values (integer quantities, Decimal prices) and hands them to
``SaleService``; the detail and list serializers render stored sales.
"""

from rest_framework import serializers

from apps.core.fields import MoneyField, QuantityField

from .models import Sale, SaleItem
from .services import SaleLine, SaleService


class SaleItemCreateSerializer(serializers.Serializer):
    """Serializer for one requested sale line."""

    product_id = serializers.IntegerField(min_value=1)
    quantity = QuantityField()
    price_at_sale = MoneyField()


class SaleCreateSerializer(serializers.Serializer):
    """
    Serializer for creating a new sale through the POS.

    ``subtotal`` is accepted for compatibility with the POS clients but the
    stored subtotal is always recomputed from the lines. ``total`` defaults
    to that subtotal.
    """

    client_id = serializers.IntegerField(required=False, allow_null=True)
    subtotal = MoneyField(required=False, allow_null=True, write_only=True)
    total = MoneyField(required=False, allow_null=True)
    payment_method = serializers.CharField(
        max_length=50,
        error_messages={
            "required": "Payment method is required",
            "blank": "Payment method is required",
            "null": "Payment method is required",
        },
    )
    items = SaleItemCreateSerializer(many=True)

    def validate_items(self, value):
        """Validate that at least one item is provided."""
        if not value:
            raise serializers.ValidationError("Sale must have at least one item")
        return value

    def create(self, validated_data):
        lines = [
            SaleLine(
                product_id=item["product_id"],
                quantity=item["quantity"],
                price_at_sale=item["price_at_sale"],
            )
            for item in validated_data["items"]
        ]
        return SaleService.create_sale(
            lines,
            payment_method=validated_data["payment_method"],
            client_id=validated_data.get("client_id"),
            total=validated_data.get("total"),
        )


class SaleItemDetailSerializer(serializers.ModelSerializer):
    """Serializer for sale item details."""

    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "product_sku",
            "quantity",
            "price_at_sale",
            "line_total",
        ]


class SaleDetailSerializer(serializers.ModelSerializer):
    """Serializer for sale details."""

    items = SaleItemDetailSerializer(many=True, read_only=True)
    client_id = serializers.IntegerField(read_only=True)
    client_name = serializers.CharField(source="client.name", read_only=True, default=None)

    class Meta:
        model = Sale
        fields = [
            "id",
            "client_id",
            "client_name",
            "subtotal",
            "total",
            "payment_method",
            "status",
            "created_at",
            "items",
        ]


class SaleListSerializer(serializers.ModelSerializer):
    """Serializer for sale list."""

    client_id = serializers.IntegerField(read_only=True)
    items_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "client_id",
            "subtotal",
            "total",
            "payment_method",
            "status",
            "items_count",
            "created_at",
        ]
