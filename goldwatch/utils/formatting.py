"""
Number formatting for Indonesian Rupiah display.
"""

from typing import Union

Number = Union[int, float]


def format_idr(value: Number) -> str:
    """
    Format a whole-rupiah amount with id-ID digit grouping.

    >>> format_idr(2950000)
    '2.950.000'
    """
    rounded = int(round(value))
    sign = "-" if rounded < 0 else ""
    return sign + f"{abs(rounded):,}".replace(",", ".")


def format_price(value: Number, currency: str = "IDR") -> str:
    """Currency code followed by the grouped amount, e.g. 'IDR 2.950.000'."""
    return f"{currency.upper()} {format_idr(value)}"


def format_idr_short(value: Number) -> str:
    """Compact axis label in thousands, e.g. 'Rp2950k'."""
    return f"Rp{value / 1000:.0f}k"


def format_pct(value: float) -> str:
    """Signed percentage with two decimals."""
    return f"{value * 100:+.2f}%"
