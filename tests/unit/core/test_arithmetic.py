# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the decimal arithmetic helpers.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from longview.core.arithmetic import (
    apply_growth,
    average,
    calculate_zakat,
    clamp,
    compound_growth,
    divide,
    divide_safe,
    is_in_range,
    is_within_tolerance,
    maximum,
    minimum,
    percentage_of,
    power,
    round_half_up_int,
    round_to_nearest,
    sqrt,
    straight_line_depreciation,
    to_decimal,
    total,
)
from longview.core.primitives import DecimalContext


class TestConversion:
    """Tests for to_decimal."""

    def test_float_goes_through_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_string(self):
        assert to_decimal(5) == Decimal(5)
        assert to_decimal("12.50") == Decimal("12.50")

    def test_boolean_rejected(self):
        with pytest.raises(TypeError):
            to_decimal(True)


class TestBasicOperations:
    """Division, roots and powers."""

    def test_divide_by_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            divide(Decimal(10), Decimal(0))

    def test_zero_over_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            divide(Decimal(0), Decimal(0))

    def test_divide_safe_returns_default(self):
        assert divide_safe(Decimal(10), Decimal(0)) == Decimal(0)
        assert divide_safe(Decimal(10), Decimal(0), Decimal(-1)) == Decimal(-1)
        assert divide_safe(Decimal(10), Decimal(4)) == Decimal("2.5")

    def test_divide_uses_context_precision(self):
        ctx = DecimalContext(precision=5)
        assert divide(Decimal(1), Decimal(3), ctx) == Decimal("0.33333")

    def test_sqrt(self):
        assert sqrt(Decimal(16)) == Decimal(4)
        with pytest.raises(ValueError):
            sqrt(Decimal(-1))

    def test_power(self):
        assert power(Decimal("1.1"), 2) == Decimal("1.21")


class TestAggregates:
    """Sum, mean and extrema."""

    def test_total_of_empty_is_zero(self):
        assert total([]) == Decimal(0)

    def test_average(self):
        assert average([Decimal(1), Decimal(2), Decimal(3)]) == Decimal(2)
        assert average([]) == Decimal(0)

    def test_extrema_require_values(self):
        assert maximum(Decimal(1), Decimal(3)) == Decimal(3)
        assert minimum(Decimal(1), Decimal(3)) == Decimal(1)
        with pytest.raises(ValueError):
            maximum()
        with pytest.raises(ValueError):
            minimum()


class TestFinancialHelpers:
    """Growth, depreciation and zakat helpers."""

    def test_percentage_of(self):
        assert percentage_of(Decimal(1000), Decimal(5)) == Decimal(50)

    def test_growth(self):
        assert apply_growth(Decimal(100), Decimal("0.05")) == Decimal(105)
        assert compound_growth(Decimal(100), Decimal("0.1"), 2) == Decimal(121)

    def test_straight_line_depreciation(self):
        assert straight_line_depreciation(Decimal("10000000"), 20) == Decimal("500000")
        with pytest.raises(ValueError):
            straight_line_depreciation(Decimal(1000), 0)

    def test_zakat_on_positive_base(self):
        zakat = calculate_zakat(Decimal("1000000"), Decimal("500000"), Decimal("0.025"))
        assert zakat == Decimal("12500")

    def test_zakat_zero_when_base_not_positive(self):
        assert calculate_zakat(Decimal("500000"), Decimal("500000"), Decimal("0.025")) == 0
        assert calculate_zakat(Decimal("100000"), Decimal("500000"), Decimal("0.025")) == 0


class TestRoundingAndBounds:
    """Rounding modes, tolerance and clamping."""

    def test_round_half_up_int(self):
        assert round_half_up_int(Decimal("202.5")) == 203
        assert round_half_up_int(Decimal("202.4")) == 202
        assert round_half_up_int(Decimal("-2.5")) == -3

    def test_round_to_nearest_half_up(self):
        assert round_to_nearest(Decimal("2.345")) == Decimal("2.35")
        assert round_to_nearest(Decimal("2.344")) == Decimal("2.34")

    def test_within_tolerance(self):
        assert is_within_tolerance(Decimal("100.005"), Decimal("100"))
        assert not is_within_tolerance(Decimal("100.02"), Decimal("100"))
        assert is_within_tolerance(Decimal("100.5"), Decimal("100"), Decimal("1"))

    def test_in_range_is_inclusive(self):
        assert is_in_range(Decimal(1), Decimal(1), Decimal(2))
        assert not is_in_range(Decimal(3), Decimal(1), Decimal(2))

    def test_clamp(self):
        assert clamp(Decimal(5), Decimal(0), Decimal(3)) == Decimal(3)
        assert clamp(Decimal(-1), Decimal(0), Decimal(3)) == Decimal(0)
        with pytest.raises(ValueError):
            clamp(Decimal(1), Decimal(3), Decimal(0))
