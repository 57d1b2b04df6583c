# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the staff cost models.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from longview.assumptions import (
    FixedPlusVariableStaffCost,
    RatioBasedStaffCost,
    RevenuePercentStaffCost,
)
from longview.periods import DynamicPeriodInput

from tests.conftest import dynamic_input


def ratio_model(**overrides) -> RatioBasedStaffCost:
    data = dict(
        students_per_teacher=15,
        students_per_non_teacher=50,
        avg_teacher_salary=Decimal("10000"),
        avg_admin_salary=Decimal("6000"),
        cpi_rate=Decimal("0.02"),
        cpi_frequency=2,
    )
    data.update(overrides)
    return RatioBasedStaffCost(**data)


class TestFixedPlusVariable:
    """Fixed base plus a per-student cost."""

    def test_calculate(self):
        model = FixedPlusVariableStaffCost(
            fixed_staff_cost=Decimal("5000000"),
            variable_staff_cost_per_student=Decimal("3000"),
        )
        assert model.calculate(1000, Decimal("0"), 2030) == Decimal("8000000")

    def test_no_students(self):
        model = FixedPlusVariableStaffCost(fixed_staff_cost=Decimal("5000000"))
        assert model.calculate(0, Decimal("0"), 2030) == Decimal("5000000")

    def test_negative_cost_rejected(self):
        with pytest.raises(ValidationError):
            FixedPlusVariableStaffCost(fixed_staff_cost=Decimal("-1"))


class TestRevenuePercent:
    """Share of total revenue."""

    def test_calculate(self):
        model = RevenuePercentStaffCost(staff_cost_as_revenue_percent=Decimal("0.4"))
        assert model.calculate(800, Decimal("20000000"), 2030) == Decimal("8000000")

    def test_share_above_one_rejected(self):
        with pytest.raises(ValidationError):
            RevenuePercentStaffCost(staff_cost_as_revenue_percent=Decimal("1.2"))


class TestRatioBased:
    """Head counts, monthly salaries and CPI steps."""

    def test_head_counts_round_up(self):
        model = ratio_model()
        assert model.teachers(600) == 40
        assert model.teachers(601) == 41
        assert model.non_teachers(600) == 12

    def test_base_year_cost(self):
        # (40 x 10000 + 12 x 6000) x 12
        assert ratio_model().calculate(600, Decimal("0"), 2028) == Decimal("5664000")

    def test_cpi_steps(self):
        model = ratio_model()
        assert model.calculate(600, Decimal("0"), 2029) == Decimal("5664000")
        assert model.calculate(600, Decimal("0"), 2030) == Decimal("5777280")

    def test_no_cpi_before_base_year(self):
        assert ratio_model().cpi_factor(2026) == 1

    def test_zero_ratio_rejected(self):
        with pytest.raises(ValidationError):
            ratio_model(students_per_teacher=0)


class TestDiscriminatedUnion:
    """Dynamic inputs select the staff model by ``kind``."""

    def test_dict_selects_model(self):
        data = dynamic_input().model_dump()
        data["staff"] = {
            "kind": "RATIO_BASED",
            "students_per_teacher": 15,
            "students_per_non_teacher": 50,
            "avg_teacher_salary": "10000",
            "avg_admin_salary": "6000",
        }
        parsed = DynamicPeriodInput.model_validate(data)
        assert isinstance(parsed.staff, RatioBasedStaffCost)

    def test_unknown_kind_rejected(self):
        data = dynamic_input().model_dump()
        data["staff"] = {"kind": "OUTSOURCED"}
        with pytest.raises(ValidationError):
            DynamicPeriodInput.model_validate(data)
