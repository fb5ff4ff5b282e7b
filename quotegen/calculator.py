"""
Quotation Calculator.

Pure math over the line items: quantity x rate per line, then subtotal,
tax, discount and grand total. No rounding happens here; rounding is a
presentation concern handled by formatting.format_currency().
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Parse a numeric value from user input, falling back to `default`.

    This is the only place where lenient numeric coercion happens: absent,
    blank or non-numeric values become 0 so a half-filled draft still prices.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except (ValueError, TypeError):
            return default
    # NaN and infinities count as non-numeric
    if number != number or number in (float("inf"), float("-inf")):
        return default
    return number


class DerivedFinancials(BaseModel):
    """Figures computed from the line items. Never supplied by the caller."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    line_amounts: List[float] = []
    subtotal: float = 0.0
    tax_amount: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0


def line_amount(item) -> float:
    """quantity x rate for one line item (model or plain dict)."""
    if isinstance(item, dict):
        quantity, rate = item.get("quantity"), item.get("rate")
    else:
        quantity, rate = getattr(item, "quantity", None), getattr(item, "rate", None)
    return parse_number(quantity) * parse_number(rate)


def compute(record) -> DerivedFinancials:
    """
    Derive subtotal, tax, discount and total for a quotation record.

    Accepts a QuotationRecord or the raw camelCase dict. An empty item list
    yields all zeros. The total is not clamped: a discount above 100% plus
    tax produces a negative total.
    """
    if isinstance(record, dict):
        items = record.get("items") or []
        tax_rate = parse_number(record.get("gstRate"))
        discount_pct = parse_number(record.get("discountPercentage"))
    else:
        items = record.items or []
        tax_rate = parse_number(record.gst_rate)
        discount_pct = parse_number(record.discount_percentage)

    amounts = [line_amount(item) for item in items]
    subtotal = sum(amounts)
    tax_amount = subtotal * tax_rate / 100
    discount_amount = subtotal * discount_pct / 100

    return DerivedFinancials(
        line_amounts=amounts,
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total=subtotal + tax_amount - discount_amount,
    )
