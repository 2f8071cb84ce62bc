"""
Serializer fields shared by the sales and procurement APIs.
"""

from decimal import ROUND_HALF_UP, Decimal

from rest_framework import serializers

# Largest value a PositiveIntegerField holds on every supported backend
MAX_QUANTITY = 2147483647


def max_amount(model, field_name):
    """Largest amount the model's DecimalField ``field_name`` can store."""
    field = model._meta.get_field(field_name)
    step = Decimal(1).scaleb(-field.decimal_places)
    return Decimal(10) ** (field.max_digits - field.decimal_places) - step


class MoneyField(serializers.DecimalField):
    """
    Non-negative amount with two decimal places.

    Clients send prices computed in floating point (``0.1 * 3``), so input is
    rounded half-up to cents instead of being rejected for excess precision.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("max_digits", 10)
        kwargs.setdefault("decimal_places", 2)
        kwargs.setdefault("min_value", Decimal("0.00"))
        super().__init__(**kwargs)

    def validate_precision(self, value):
        step = Decimal(1).scaleb(-self.decimal_places)
        return super().validate_precision(value.quantize(step, rounding=ROUND_HALF_UP))


class QuantityField(serializers.IntegerField):
    """Whole number of units, from 1 up to what the line item column can hold."""

    def __init__(self, **kwargs):
        kwargs.setdefault("min_value", 1)
        kwargs.setdefault("max_value", MAX_QUANTITY)
        super().__init__(**kwargs)
