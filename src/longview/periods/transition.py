# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Transition period calculator.

Transition years are projected from the prior year's actuals or results
with light overrides rather than a full assumption model.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ..assumptions.working_capital import WorkingCapitalRatios
from ..core.arithmetic import divide_safe
from ..core.constants import ONE, ZERO
from ..core.primitives import PeriodType, ProjectionSettings, SystemConfiguration
from ..statements.models import FinancialPeriod
from .base import OperatingLines, ProjectedPeriodCalculator
from .inputs import TransitionPeriodInput

logger = logging.getLogger(__name__)


class TransitionPeriodCalculator(ProjectedPeriodCalculator):
    """
    Operating lines for transition years.

    - Tuition: head count x fee when both are given, otherwise prior tuition
      grown by ``revenue_growth_rate``
    - Other revenue: tuition x the locked other-revenue ratio
    - Rent: explicit amount, otherwise prior rent grown by ``rent_growth_percent``
    - Staff costs: staff ratio x total revenue
    - Other opex: explicit amount, otherwise carried from the prior year
    """

    period_type = PeriodType.TRANSITION

    def staff_costs_ratio(
        self, year_input: TransitionPeriodInput, prior_period: FinancialPeriod
    ) -> Decimal:
        prior_pl = prior_period.profit_loss
        prior_ratio = divide_safe(prior_pl.staff_costs, prior_pl.total_revenue, ZERO, self.ctx)
        if year_input.pre_fill_from_prior_year or year_input.staff_costs_ratio is None:
            return prior_ratio
        return year_input.staff_costs_ratio

    def operating_lines(
        self,
        year_input: TransitionPeriodInput,
        prior_period: FinancialPeriod,
        working_capital_ratios: WorkingCapitalRatios,
    ) -> OperatingLines:
        prior_pl = prior_period.profit_loss
        staff_ratio = self.staff_costs_ratio(year_input, prior_period)

        with self.ctx.local():
            if year_input.has_student_override:
                tuition = (
                    Decimal(year_input.number_of_students)
                    * year_input.average_tuition_per_student
                )
            else:
                growth = year_input.revenue_growth_rate or ZERO
                tuition = prior_pl.tuition_revenue * (ONE + growth)

            other_revenue = tuition * working_capital_ratios.other_revenue_ratio

            if year_input.rent_amount is not None:
                rent = year_input.rent_amount
            else:
                rent_growth = year_input.rent_growth_percent or ZERO
                rent = prior_pl.rent_expense * (ONE + rent_growth)

            staff_costs = (tuition + other_revenue) * staff_ratio

        other_opex = year_input.other_opex if year_input.other_opex is not None else prior_pl.other_opex

        logger.debug(
            f"Transition {year_input.year}: tuition={tuition:.2f} rent={rent:.2f} "
            f"staff_ratio={staff_ratio:.4f}"
        )

        return OperatingLines(
            tuition_revenue=tuition,
            other_revenue=other_revenue,
            rent_expense=rent,
            staff_costs=staff_costs,
            other_opex=other_opex,
            total_students=year_input.number_of_students,
        )


def calculate_transition_period(
    year_input: TransitionPeriodInput,
    system_config: SystemConfiguration,
    prior_period: Optional[FinancialPeriod],
    working_capital_ratios: WorkingCapitalRatios,
    settings: Optional[ProjectionSettings] = None,
) -> FinancialPeriod:
    """
    Build one transition year on top of ``prior_period``.

    Args:
        year_input: Overrides for the year
        system_config: Shared rates and minimum cash
        prior_period: The previous year, historical or transition
        working_capital_ratios: Locked baseline ratios
        settings: Decimal policy and solver settings

    Returns:
        The balanced period

    Raises:
        ValueError: If ``prior_period`` is missing or not the previous year
    """
    calculator = TransitionPeriodCalculator(settings)
    return calculator.calculate(year_input, system_config, prior_period, working_capital_ratios)
