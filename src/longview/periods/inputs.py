# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Per-year inputs for the three period calculators.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from ..assumptions.curriculum import CurriculumConfig
from ..assumptions.enrollment import EnrollmentConfig
from ..assumptions.rent import AnyRentModel
from ..assumptions.staff import AnyStaffCostModel
from ..capex.assets import CapExConfiguration
from ..core.constants import ZERO
from ..core.primitives import Model, ValidationMixin, Year


class HistoricalProfitLossInput(Model):
    """Actual P&L lines as reported."""

    tuition_revenue: Decimal
    other_revenue: Decimal = ZERO
    rent_expense: Decimal = ZERO
    staff_costs: Decimal = ZERO
    other_opex: Decimal = ZERO
    depreciation: Decimal = ZERO
    interest_expense: Decimal = ZERO
    interest_income: Decimal = ZERO
    zakat_expense: Decimal = ZERO


class HistoricalBalanceSheetInput(Model):
    """
    Actual balance-sheet lines as reported.

    ``property_plant_equipment`` is net of ``accumulated_depreciation``;
    gross PP&E is reconstructed as their sum. ``equity`` is total equity
    including the year's net income.
    """

    cash: Decimal
    accounts_receivable: Decimal = ZERO
    prepaid_expenses: Decimal = ZERO
    property_plant_equipment: Decimal = ZERO
    accumulated_depreciation: Decimal = ZERO
    accounts_payable: Decimal = ZERO
    accrued_expenses: Decimal = ZERO
    deferred_revenue: Decimal = ZERO
    debt: Decimal = ZERO
    equity: Decimal

    @property
    def gross_ppe(self) -> Decimal:
        return self.property_plant_equipment + self.accumulated_depreciation


class HistoricalPeriodInput(Model):
    """
    One year of actuals.

    ``immutable`` marks confirmed figures. Enforcing it is up to whoever
    edits the inputs; the calculator only records it as a diagnostic.
    """

    year: Year
    profit_loss: HistoricalProfitLossInput
    balance_sheet: HistoricalBalanceSheetInput
    immutable: bool = True


class TransitionPeriodInput(Model, ValidationMixin):
    """
    Assumptions for one transition year.

    Tuition is ``number_of_students x average_tuition_per_student`` when
    both are given, otherwise the prior year's tuition grown by
    ``revenue_growth_rate``. With ``pre_fill_from_prior_year`` the staff
    cost ratio always carries over from the prior year; without it an
    explicit ``staff_costs_ratio`` takes precedence.

    Attributes:
        year: Fiscal year
        pre_fill_from_prior_year: Carry ratios forward from the prior year
        number_of_students: Head count override
        average_tuition_per_student: Fee paired with ``number_of_students``
        revenue_growth_rate: Growth on prior tuition when no head count is given
        rent_growth_percent: Growth on prior rent
        rent_amount: Explicit rent, replacing the growth rule
        staff_costs_ratio: Staff cost / total revenue override
        other_opex: Explicit other opex; prior year's otherwise
        capex_config: CapEx configuration driving spending and depreciation
    """

    year: Year
    pre_fill_from_prior_year: bool = True
    number_of_students: Optional[int] = Field(default=None, ge=0)
    average_tuition_per_student: Optional[Decimal] = Field(default=None, ge=0)
    revenue_growth_rate: Optional[Decimal] = None
    rent_growth_percent: Optional[Decimal] = None
    rent_amount: Optional[Decimal] = Field(default=None, ge=0)
    staff_costs_ratio: Optional[Decimal] = Field(default=None, ge=0, le=1)
    other_opex: Optional[Decimal] = None
    capex_config: Optional[CapExConfiguration] = None

    @model_validator(mode="after")
    def validate_student_override(self) -> "TransitionPeriodInput":
        self.validate_all_or_none(
            ["number_of_students", "average_tuition_per_student"],
            "number_of_students and average_tuition_per_student must be provided together",
        )
        return self

    @property
    def has_student_override(self) -> bool:
        return self.number_of_students is not None and self.average_tuition_per_student is not None


class DynamicPeriodInput(Model, ValidationMixin):
    """
    Fully modeled assumptions for one dynamic year.

    Exactly one of ``other_opex`` (fixed amount) and ``other_opex_percent``
    (share of total revenue) must be given.
    """

    year: Year
    enrollment: EnrollmentConfig
    curriculum: CurriculumConfig
    staff: AnyStaffCostModel
    rent: AnyRentModel
    other_opex: Optional[Decimal] = None
    other_opex_percent: Optional[Decimal] = Field(default=None, ge=0, le=1)
    capex_config: Optional[CapExConfiguration] = None

    @model_validator(mode="after")
    def validate_other_opex(self) -> "DynamicPeriodInput":
        self.validate_either_or_required("other_opex", "other_opex_percent")
        return self
