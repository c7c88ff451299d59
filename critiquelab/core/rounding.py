from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float | int | Decimal) -> int:
    """Round to the nearest integer, .5 going up (2.5 -> 3, 70.5 -> 71)."""
    if not isinstance(value, Decimal):
        value = Decimal(value)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
