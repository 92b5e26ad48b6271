"""Unit tests for total amount computation and numeric coercion."""

from decimal import Decimal

import pytest

from expense_tracker.core.totals import coerce_decimal, compute_total
from expense_tracker.models.transaction import TaxType


class TestComputeTotal:
    """Test compute_total for both tax types."""

    @pytest.mark.parametrize(
        "amount,tax_amount",
        [("0", "0"), ("100", "5"), ("19.99", "0.01"), ("1000000", "250.50")],
    )
    def test_flat_adds_tax_amount(self, amount, tax_amount):
        amount, tax_amount = Decimal(amount), Decimal(tax_amount)
        assert compute_total(amount, TaxType.FLAT, tax_amount) == amount + tax_amount

    @pytest.mark.parametrize(
        "amount,tax_amount",
        [("0", "10"), ("100", "10"), ("59.90", "18"), ("250", "0")],
    )
    def test_percentage_adds_share_of_amount(self, amount, tax_amount):
        amount, tax_amount = Decimal(amount), Decimal(tax_amount)
        expected = amount + amount * tax_amount / 100
        assert compute_total(amount, TaxType.PERCENTAGE, tax_amount) == expected

    def test_percentage_example(self):
        assert compute_total(Decimal("100"), TaxType.PERCENTAGE, Decimal("10")) == Decimal("110.00")

    def test_accepts_plain_string_tax_type(self):
        assert compute_total(Decimal("100"), "percentage", Decimal("10")) == Decimal("110")
        assert compute_total(Decimal("100"), "flat", Decimal("5")) == Decimal("105")

    def test_unknown_tax_type_is_treated_as_flat(self):
        assert compute_total(Decimal("100"), "vat", Decimal("7")) == Decimal("107")


class TestCoerceDecimal:
    """Malformed numeric input becomes zero instead of being rejected."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("12.5", Decimal("12.5")),
            (7, Decimal("7")),
            (0.25, Decimal("0.25")),
            (Decimal("3.10"), Decimal("3.10")),
            (" 42 ", Decimal("42")),
        ],
    )
    def test_valid_numbers_pass_through(self, value, expected):
        assert coerce_decimal(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "NaN", "Infinity", "-5", -1, True, [1]])
    def test_invalid_numbers_become_zero(self, value):
        assert coerce_decimal(value) == Decimal("0")
