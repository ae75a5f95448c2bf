"""Date and money normalization helpers."""

import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

_MONEY_NOISE = re.compile(r"[$,\s]")


def to_date(value: Any) -> Optional[date]:
    """Coerce a date-like value to a calendar date.

    Accepts ``date``, ``datetime`` and ISO 8601 strings with or without a
    time part. Time of day is dropped. ``None`` and empty strings give ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    raise ValueError(f"Cannot interpret {value!r} as a date")


def to_amount(value: Any) -> float:
    """Coerce a monetary or percentage value to float.

    Missing values count as zero. Currency symbols and thousands separators
    are stripped from strings. NaN passes through untouched.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"Cannot interpret {value!r} as an amount")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = _MONEY_NOISE.sub("", value)
        if not text:
            return 0.0
        return float(text)
    raise ValueError(f"Cannot interpret {value!r} as an amount")


def percent_of(amount: float, percentage: float) -> float:
    """Return ``percentage`` percent of ``amount``."""
    return amount * (percentage / 100)


def gross_commission_income(sale_price: float, commission_rate: float) -> float:
    """GCI: sale price times the commission rate (a 0-100 percentage)."""
    return percent_of(sale_price, commission_rate)


def rebase_to_year(day: date, year: int) -> date:
    """Move ``day`` onto ``year`` keeping month and day.

    29 February on a non-leap year overflows to 1 March.
    """
    try:
        return day.replace(year=year)
    except ValueError:
        return date(year, 2, 28) + timedelta(days=1)


def is_nan(value: float) -> bool:
    return isinstance(value, float) and math.isnan(value)
