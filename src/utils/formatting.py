from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

AMOUNT_PLACES = Decimal("0.0001")


def format_amount(value: Decimal) -> str:
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the 4 places.
        ctx.prec = max(ctx.prec, value.adjusted() + 6)
        quantized = value.quantize(AMOUNT_PLACES, rounding=ROUND_HALF_UP)
    # Avoid "-0.0000" for balances that round to zero.
    if quantized == 0:
        quantized = abs(quantized)
    return f"{quantized:.4f}"


def format_flag(value: bool) -> str:
    return "true" if value else "false"
