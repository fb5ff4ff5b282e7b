"""
Display formatting for quotation documents.

Every monetary figure in a document goes through format_currency(), so the
currency and locale are changed in one place (settings.LOCALE).
"""

import logging
import re
from datetime import date
from typing import Optional

from .calculator import parse_number
from .config import settings

logger = logging.getLogger(__name__)


# symbol, symbol position, group separator, decimal separator, grouping, date pattern
LOCALE_PROFILES = {
    "en_IN": {
        "symbol": "₹",
        "position": "prefix",
        "group": ",",
        "decimal": ".",
        "grouping": "indian",
        "date": "dd/mm/yyyy",
    },
    "en_US": {
        "symbol": "$",
        "position": "prefix",
        "group": ",",
        "decimal": ".",
        "grouping": "western",
        "date": "m/d/yyyy",
    },
    "en_GB": {
        "symbol": "£",
        "position": "prefix",
        "group": ",",
        "decimal": ".",
        "grouping": "western",
        "date": "dd/mm/yyyy",
    },
    "de_DE": {
        "symbol": "€",
        "position": "suffix",
        "group": ".",
        "decimal": ",",
        "grouping": "western",
        "date": "dd.mm.yyyy",
    },
    "sv_SE": {
        "symbol": "kr",
        "position": "suffix",
        "group": " ",
        "decimal": ",",
        "grouping": "western",
        "date": "yyyy-mm-dd",
    },
}

FALLBACK_LOCALE = "en_US"

_DATE_TOKENS = re.compile(r"yyyy|dd|mm|d|m")


def get_profile(locale: Optional[str] = None) -> dict:
    """Look up a locale profile; unknown keys fall back to en_US."""
    key = locale or settings.LOCALE
    profile = LOCALE_PROFILES.get(key)
    if profile is None:
        logger.warning("Unknown locale %r, formatting as %s", key, FALLBACK_LOCALE)
        profile = LOCALE_PROFILES[FALLBACK_LOCALE]
    return profile


def _group_digits(digits: str, separator: str, grouping: str) -> str:
    """Insert thousands separators. Indian grouping is 3 then 2s: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    if grouping == "indian":
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        return separator.join(groups + [tail])
    return f"{int(digits):,}".replace(",", separator)


def format_currency(amount, locale: Optional[str] = None) -> str:
    """
    Format a monetary value with two fixed decimals, grouping and symbol.

    format_currency(123456.5, "en_IN") -> '₹1,23,456.50'
    format_currency(1234.5, "de_DE")   -> '1.234,50 €'
    """
    profile = get_profile(locale)
    value = parse_number(amount)
    fixed = f"{abs(value):.2f}"
    int_part, frac_part = fixed.split(".")
    number = _group_digits(int_part, profile["group"], profile["grouping"])
    number = f"{number}{profile['decimal']}{frac_part}"

    if profile["position"] == "suffix":
        text = f"{number} {profile['symbol']}"
    else:
        text = f"{profile['symbol']}{number}"

    # No "-0.00" for values that round to zero
    if value < 0 and fixed != "0.00":
        text = "-" + text
    return text


def format_date(value: Optional[date], locale: Optional[str] = None) -> str:
    """Short date in the locale's pattern. Absent dates render empty."""
    if value is None:
        return ""
    tokens = {
        "yyyy": f"{value.year:04d}",
        "dd": f"{value.day:02d}",
        "mm": f"{value.month:02d}",
        "d": str(value.day),
        "m": str(value.month),
    }
    return _DATE_TOKENS.sub(lambda m: tokens[m.group(0)], get_profile(locale)["date"])


def format_number(value) -> str:
    """Plain number without a trailing '.0': 2 -> '2', 1.5 -> '1.5', 18.25 -> '18.25'."""
    number = parse_number(value)
    if number == int(number):
        return str(int(number))
    return f"{number:.6f}".rstrip("0").rstrip(".")
