"""
Quotation Calculator tests.

Tests:
1-4.   parse_number leniency
5-8.   Line amounts, subtotal, tax/discount/total
9-10.  Empty items, negative total
11-12. Raw dict input, idempotence
"""

import itertools

import pytest

from quotegen.calculator import DerivedFinancials, compute, line_amount, parse_number
from quotegen.schemas import LineItem

from conftest import sample_payload, sample_record


# ============================================================
# 1-4. parse_number
# ============================================================

def test_parse_number_accepts_numbers_and_numeric_strings():
    assert parse_number(3) == 3.0
    assert parse_number(2.5) == 2.5
    assert parse_number(" 18.5 ") == 18.5


def test_parse_number_defaults_absent_and_garbage_to_zero():
    for value in (None, "", "abc", "12abc", [], {}):
        assert parse_number(value) == 0.0


def test_parse_number_rejects_nan_and_infinity():
    assert parse_number("nan") == 0.0
    assert parse_number(float("inf")) == 0.0
    assert parse_number("-inf", default=1.0) == 1.0


def test_parse_number_ignores_booleans():
    assert parse_number(True) == 0.0


# ============================================================
# 5-8. Financials
# ============================================================

def test_reference_scenario():
    """Widget 2 x 100 + Service 1 x 50, 18% GST, 10% discount."""
    derived = compute(sample_record())
    assert derived.line_amounts == [200.0, 50.0]
    assert derived.subtotal == pytest.approx(250.0)
    assert derived.tax_amount == pytest.approx(45.0)
    assert derived.discount_amount == pytest.approx(25.0)
    assert derived.total == pytest.approx(270.0)


def test_subtotal_independent_of_item_order():
    items = [
        {"name": "A", "quantity": 3, "rate": 19.99},
        {"name": "B", "quantity": 0.5, "rate": 1200},
        {"name": "C", "quantity": 7, "rate": 0.35},
    ]
    expected = sum(i["quantity"] * i["rate"] for i in items)
    for ordering in itertools.permutations(items):
        derived = compute(sample_record(items=list(ordering)))
        assert derived.subtotal == pytest.approx(expected)


@pytest.mark.parametrize("tax, discount", [(0, 0), (18, 0), (0, 15), (5.5, 2.25), (28, 100)])
def test_total_formula(tax, discount):
    derived = compute(sample_record(gstRate=tax, discountPercentage=discount))
    subtotal = 250.0
    assert derived.total == pytest.approx(subtotal + subtotal * tax / 100 - subtotal * discount / 100)


def test_no_rounding_during_computation():
    derived = compute(sample_record(items=[{"name": "Bolt", "quantity": 3, "rate": 0.333}], gstRate=7.25))
    assert derived.subtotal == pytest.approx(0.999)
    assert derived.tax_amount == pytest.approx(0.999 * 7.25 / 100)


def test_non_numeric_quantity_and_rate_become_zero():
    derived = compute(sample_record(items=[
        {"name": "Draft", "quantity": "", "rate": "tbd"},
        {"name": "Real", "quantity": "2", "rate": "40"},
    ]))
    assert derived.line_amounts == [0.0, 80.0]


def test_discount_absent_or_unparseable_is_zero():
    payload = sample_payload(discountPercentage="ten")
    assert compute(sample_record(**payload)).discount_amount == 0.0
    del payload["discountPercentage"]
    assert compute(payload).discount_amount == 0.0


# ============================================================
# 9-10. Boundaries
# ============================================================

def test_empty_items_yield_all_zero():
    derived = compute(sample_record(items=[]))
    assert derived == DerivedFinancials()
    assert derived.subtotal == derived.tax_amount == derived.discount_amount == derived.total == 0


def test_discount_over_100_gives_negative_total_unclamped():
    derived = compute(sample_record(gstRate=0, discountPercentage=150))
    assert derived.total == pytest.approx(-125.0)


# ============================================================
# 11-12. Input shapes
# ============================================================

def test_compute_accepts_raw_camelcase_dict():
    assert compute(sample_payload()).total == pytest.approx(270.0)


def test_line_amount_for_model_and_dict():
    assert line_amount(LineItem(name="x", quantity=4, rate=2.5)) == 10.0
    assert line_amount({"quantity": "4", "rate": None}) == 0.0


def test_compute_is_idempotent():
    record = sample_record()
    assert compute(record) == compute(record)
