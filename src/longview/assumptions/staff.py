# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Staff cost models for the dynamic band.

Three mutually exclusive models, selected by ``kind``:

- ``FixedPlusVariableStaffCost``: fixed base plus a cost per student
- ``RevenuePercentStaffCost``: share of total revenue
- ``RatioBasedStaffCost``: teacher and admin head counts from
  student ratios, monthly salaries, CPI escalation every ``cpi_frequency``
  years from the first dynamic year
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Literal, Union

from pydantic import Field
from typing_extensions import Annotated

from ..core.constants import DYNAMIC_START_YEAR, MONTHS_PER_YEAR, ONE, ZERO
from ..core.primitives import (
    DEFAULT_DECIMAL_CONTEXT,
    DecimalContext,
    Model,
    NonNegativeDecimal,
    StaffCostModelKind,
)


class StaffCostModel(Model, ABC):
    """Base class for staff cost models."""

    kind: StaffCostModelKind

    @abstractmethod
    def calculate(
        self,
        total_students: int,
        total_revenue: Decimal,
        year: int,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        """Annual staff cost for ``year``."""
        pass


class FixedPlusVariableStaffCost(StaffCostModel):
    """
    Fixed base plus a per-student cost.

    Example:
        >>> model = FixedPlusVariableStaffCost(
        ...     fixed_staff_cost=Decimal("5000000"),
        ...     variable_staff_cost_per_student=Decimal("3000"),
        ... )
        >>> model.calculate(1000, Decimal("18000000"), 2030)
        Decimal('8000000')
    """

    kind: Literal[StaffCostModelKind.FIXED_PLUS_VARIABLE] = StaffCostModelKind.FIXED_PLUS_VARIABLE
    fixed_staff_cost: NonNegativeDecimal = ZERO
    variable_staff_cost_per_student: NonNegativeDecimal = ZERO

    def calculate(
        self,
        total_students: int,
        total_revenue: Decimal,
        year: int,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        with ctx.local():
            return self.fixed_staff_cost + Decimal(total_students) * self.variable_staff_cost_per_student


class RevenuePercentStaffCost(StaffCostModel):
    """Staff cost as a share of total revenue."""

    kind: Literal[StaffCostModelKind.REVENUE_PERCENT] = StaffCostModelKind.REVENUE_PERCENT
    staff_cost_as_revenue_percent: Decimal = Field(..., ge=0, le=1)

    def calculate(
        self,
        total_students: int,
        total_revenue: Decimal,
        year: int,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        with ctx.local():
            return total_revenue * self.staff_cost_as_revenue_percent


class RatioBasedStaffCost(StaffCostModel):
    """
    Head count from student ratios, paid monthly, escalated by CPI.

    Teachers = ceil(students / students_per_teacher) and admin staff =
    ceil(students / students_per_non_teacher). Salaries are monthly; CPI
    compounds once every ``cpi_frequency`` years after ``base_year``.
    """

    kind: Literal[StaffCostModelKind.RATIO_BASED] = StaffCostModelKind.RATIO_BASED
    students_per_teacher: int = Field(..., gt=0)
    students_per_non_teacher: int = Field(..., gt=0)
    avg_teacher_salary: NonNegativeDecimal = ZERO
    avg_admin_salary: NonNegativeDecimal = ZERO
    cpi_rate: Decimal = ZERO
    cpi_frequency: int = Field(default=1, gt=0)
    base_year: int = DYNAMIC_START_YEAR

    def teachers(self, total_students: int) -> int:
        return math.ceil(total_students / self.students_per_teacher)

    def non_teachers(self, total_students: int) -> int:
        return math.ceil(total_students / self.students_per_non_teacher)

    def cpi_factor(self, year: int, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
        periods = max(0, (year - self.base_year) // self.cpi_frequency)
        with ctx.local():
            return (ONE + self.cpi_rate) ** periods

    def calculate(
        self,
        total_students: int,
        total_revenue: Decimal,
        year: int,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        months = Decimal(MONTHS_PER_YEAR)
        with ctx.local():
            base_cost = (
                Decimal(self.teachers(total_students)) * self.avg_teacher_salary * months
                + Decimal(self.non_teachers(total_students)) * self.avg_admin_salary * months
            )
            return base_cost * self.cpi_factor(year, ctx)


AnyStaffCostModel = Annotated[
    Union[FixedPlusVariableStaffCost, RevenuePercentStaffCost, RatioBasedStaffCost],
    Field(discriminator="kind"),
]
