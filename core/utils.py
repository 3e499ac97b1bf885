"""Assorted utility helpers."""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext


def nz(x, default=0.0):
    """Return a float for ``x`` or a fallback value.

    Form widgets and JSON payloads hand back ``None``, empty strings or
    ``NaN`` for values the applicant has not entered yet.  Treating those as
    ``default`` keeps the arithmetic downstream from breaking.
    """

    try:
        if x is None or (isinstance(x, str) and not x.strip()):
            return default
        f = float(x)
        if math.isnan(f):
            return default
        return f
    except (TypeError, ValueError):
        return default


def round2(value) -> float:
    """Round half-up to two decimals, the way the portal presents money and ratios.

    Precision grows with the magnitude so extreme ratios still round instead
    of overflowing the default decimal context.
    """

    d = Decimal(str(value))
    if not d.is_finite():
        return float(value)
    with localcontext() as ctx:
        ctx.prec = max(28, d.adjusted() + 4)
        return float(d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_inr(amount, symbol: str = "₹") -> str:
    """Format an amount with Indian digit grouping, e.g. ``₹12,34,567.00``."""
    value = round2(nz(amount))
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}{symbol}{whole}.{frac}"
