# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Dynamic period calculator.

Dynamic years are fully modeled: enrollment drives tuition, and rent and
staff costs come from their configured models.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..assumptions.curriculum import calculate_tuition_revenue, validate_curriculum_config
from ..assumptions.enrollment import calculate_enrollment, validate_enrollment_config
from ..assumptions.working_capital import WorkingCapitalRatios
from ..core.primitives import PeriodType, ProjectionSettings, SystemConfiguration
from ..statements.models import FinancialPeriod
from .base import OperatingLines, ProjectedPeriodCalculator
from .inputs import DynamicPeriodInput

logger = logging.getLogger(__name__)


class DynamicPeriodCalculator(ProjectedPeriodCalculator):
    """Operating lines from enrollment, curriculum, rent and staff models."""

    period_type = PeriodType.DYNAMIC

    def operating_lines(
        self,
        year_input: DynamicPeriodInput,
        prior_period: FinancialPeriod,
        working_capital_ratios: WorkingCapitalRatios,
    ) -> OperatingLines:
        year = year_input.year
        ctx = self.ctx

        validate_enrollment_config(year_input.enrollment).raise_if_invalid(
            f"Year {year} enrollment"
        )
        validate_curriculum_config(year_input.curriculum).raise_if_invalid(
            f"Year {year} curriculum"
        )

        students = calculate_enrollment(year, year_input.enrollment)
        tuition = calculate_tuition_revenue(
            students, year_input.curriculum, year, ctx, self.settings.dynamic_start_year
        )
        with ctx.local():
            other_revenue = tuition * working_capital_ratios.other_revenue_ratio
            total_revenue = tuition + other_revenue

        rent = year_input.rent.calculate(year, total_revenue, ctx)
        staff_costs = year_input.staff.calculate(students, total_revenue, year, ctx)

        if year_input.other_opex_percent is not None:
            with ctx.local():
                other_opex = total_revenue * year_input.other_opex_percent
        else:
            other_opex = year_input.other_opex

        logger.debug(
            f"Dynamic {year}: students={students} tuition={tuition:.2f} "
            f"rent={rent:.2f} staff={staff_costs:.2f}"
        )

        return OperatingLines(
            tuition_revenue=tuition,
            other_revenue=other_revenue,
            rent_expense=rent,
            staff_costs=staff_costs,
            other_opex=other_opex,
            total_students=students,
        )


def calculate_dynamic_period(
    year_input: DynamicPeriodInput,
    system_config: SystemConfiguration,
    prior_period: Optional[FinancialPeriod],
    working_capital_ratios: WorkingCapitalRatios,
    settings: Optional[ProjectionSettings] = None,
) -> FinancialPeriod:
    """
    Build one dynamic year on top of ``prior_period``.

    Raises:
        ValueError: If ``prior_period`` is missing, or the enrollment or
            curriculum configuration is invalid
    """
    calculator = DynamicPeriodCalculator(settings)
    return calculator.calculate(year_input, system_config, prior_period, working_capital_ratios)
