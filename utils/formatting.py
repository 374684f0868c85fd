from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value, digits=0):
    """Rounds halves away from zero (92.5 -> 93) rather than to even."""
    quantum = Decimal(1).scaleb(-digits)
    result = Decimal(str(value or 0)).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(result)
    return float(result)


def percent(part, whole):
    if not whole:
        return 0
    return round_half_up(part * 100 / whole)
