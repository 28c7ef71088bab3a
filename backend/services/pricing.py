"""Package price arithmetic. Works on Decimals; results are rounded to cents."""

from decimal import ROUND_HALF_UP, Decimal

DISCOUNT_PERCENTAGE = "percentage"
DISCOUNT_FIXED = "fixed"

CENTS = Decimal("0.01")


class PricingError(ValueError):
    pass


def _money(value):
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def items_total(items):
    """Sum of ``quantity * unit_price`` over ``(quantity, unit_price)`` pairs."""
    total = Decimal("0")
    for quantity, unit_price in items:
        if quantity < 1:
            raise PricingError("Quantity must be at least 1.")
        if unit_price < 0:
            raise PricingError("Unit price cannot be negative.")
        total += Decimal(quantity) * Decimal(unit_price)
    return _money(total)


def apply_discount(total, discount_type, discount_value):
    total = Decimal(total)
    discount_value = Decimal(discount_value)

    if discount_value < 0:
        raise PricingError("Discount cannot be negative.")

    if discount_type == DISCOUNT_PERCENTAGE:
        if discount_value > 100:
            raise PricingError("Percentage discount cannot exceed 100.")
        final = total - (total * discount_value / Decimal("100"))
    elif discount_type == DISCOUNT_FIXED:
        final = total - discount_value
    else:
        raise PricingError(f"Unknown discount type '{discount_type}'.")

    return _money(max(final, Decimal("0")))
