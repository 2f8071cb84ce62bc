"""
Serializers for procurement app.
"""

from rest_framework import serializers

from apps.core.fields import MoneyField, QuantityField

from .models import PurchaseOrder, PurchaseOrderItem
from .services import PurchaseLine, PurchaseOrderService


class PurchaseOrderItemCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = QuantityField()
    cost_price = MoneyField()


class PurchaseOrderCreateSerializer(serializers.Serializer):
    """
    Serializer for recording a purchase order.

    ``total`` defaults to the sum of quantity times cost price.
    """

    supplier_id = serializers.IntegerField(required=False, allow_null=True)
    total = MoneyField(required=False, allow_null=True, max_digits=12)
    items = PurchaseOrderItemCreateSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("Purchase must have at least one item")
        return value

    def create(self, validated_data):
        lines = [
            PurchaseLine(
                product_id=item["product_id"],
                quantity=item["quantity"],
                cost_price=item["cost_price"],
            )
            for item in validated_data["items"]
        ]
        return PurchaseOrderService.create_purchase_order(
            lines,
            supplier_id=validated_data.get("supplier_id"),
            total=validated_data.get("total"),
        )


class PurchaseOrderItemDetailSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = PurchaseOrderItem
        fields = ["id", "product_id", "product_name", "quantity", "cost_price", "line_total"]


class PurchaseOrderDetailSerializer(serializers.ModelSerializer):
    """Serializer for purchase order details."""

    supplier_id = serializers.IntegerField(read_only=True)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)
    items = PurchaseOrderItemDetailSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            "id",
            "supplier_id",
            "supplier_name",
            "total",
            "status",
            "created_at",
            "received_at",
            "items",
        ]


class PurchaseOrderListSerializer(serializers.ModelSerializer):
    """Serializer for purchase order list."""

    supplier_id = serializers.IntegerField(read_only=True)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)
    items_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            "id",
            "supplier_id",
            "supplier_name",
            "total",
            "status",
            "items_count",
            "created_at",
            "received_at",
        ]
