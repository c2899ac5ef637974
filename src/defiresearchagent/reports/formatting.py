"""Formatting helpers used by the report composer.

Stateless, side-effect free. ``None`` always renders as :data:`NOT_AVAILABLE`
so a missing value can never be mistaken for a real zero.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

__all__ = [
    "NOT_AVAILABLE",
    "format_number",
    "format_percentage",
    "format_count",
    "format_price",
    "format_score",
    "format_fraction_percentage",
    "format_one_decimal",
    "format_date",
    "strip_markup",
    "truncate_text",
    "capitalize_first",
    "or_na",
]

NOT_AVAILABLE = "N/A"

Number = Union[int, float]

_MARKUP_RE = re.compile(r"<[^>]*>")

# (threshold, divisor, suffix), checked from the largest magnitude down
_ABBREVIATIONS = (
    (1e9, 1e9, "B"),
    (1e6, 1e6, "M"),
    (1e3, 1e3, "K"),
)


def format_number(value: Optional[Number]) -> str:
    """Abbreviated USD amount.

    >>> format_number(1_500)
    '$1.50K'
    >>> format_number(None)
    'N/A'
    """
    if value is None:
        return NOT_AVAILABLE
    for threshold, divisor, suffix in _ABBREVIATIONS:
        if value >= threshold:
            return f"${value / divisor:.2f}{suffix}"
    return f"${value:.2f}"


def format_percentage(value: Optional[Number]) -> str:
    """Signed percentage with two decimals; zero counts as non-negative.

    >>> format_percentage(0)
    '+0.00%'
    """
    if value is None:
        return NOT_AVAILABLE
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def format_count(value: Optional[Number]) -> str:
    """Thousands-separated number, keeping at most three fraction digits."""
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return text


def format_price(value: Optional[Number]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"${format_count(value)}"


def format_score(value: Optional[Number]) -> str:
    """Shortest decimal rendering of a score: ``0.25``, ``-0.1``, ``1``."""
    if value is None:
        return NOT_AVAILABLE
    if value == 0:
        return "0"
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_one_decimal(value: Optional[Number]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.1f}"


def format_fraction_percentage(value: Optional[Number]) -> str:
    """Render a 0-1 fraction as a percentage with one decimal (0.456 -> 45.6%)."""
    if value is None:
        return NOT_AVAILABLE
    return f"{value * 100:.1f}%"


def format_date(value: Union[date, datetime, str, None]) -> str:
    """Date-only ``M/D/YYYY`` rendering of a date, datetime or ISO-8601 string."""
    if value is None or value == "":
        return NOT_AVAILABLE
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return f"{value.month}/{value.day}/{value.year}"


def strip_markup(text: Optional[str]) -> str:
    """Remove every ``<...>`` tag from ``text``."""
    if not text:
        return ""
    return _MARKUP_RE.sub("", text)


def truncate_text(text: str, max_length: int, ellipsis: str = "...") -> str:
    """Cut ``text`` to ``max_length`` characters, appending ``ellipsis`` only when cut."""
    if len(text) > max_length:
        return text[:max_length] + ellipsis
    return text


def capitalize_first(text: str) -> str:
    """Upper-case the first character only (``very positive`` -> ``Very positive``)."""
    if not text:
        return text
    return text[0].upper() + text[1:]


def or_na(value: Optional[object]) -> str:
    """String form of ``value`` or ``N/A`` when it is missing or empty."""
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)
