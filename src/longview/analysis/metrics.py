# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Summary metrics over a computed period chain.

Two windows are measured:

- **Full chain** (historical through the end of the contract): totals,
  averages, peak debt, final cash, and NPV / IRR / payback of the yearly
  net change in cash.
- **Contract window** (the dynamic band): rent and EBITDA present values
  and their equivalent annual values. The Net Annualized Value
  ``annualized EBITDA - annualized rent`` is the headline figure for
  comparing rent proposals on contracts of different length.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from ..core.calculations import FinancialCalculations
from ..core.constants import ZERO
from ..core.primitives import (
    DecimalContext,
    Model,
    PeriodType,
    ProjectionSettings,
    SystemConfiguration,
)
from ..statements.models import FinancialPeriod

logger = logging.getLogger(__name__)


class ProjectionMetrics(Model):
    """
    Headline figures of one projection.

    Attributes:
        discount_rate: Rate used for every present value below
        total_net_income: Sum of net income over all periods
        total_rent: Sum of rent expense over all periods
        total_ebitda: Sum of EBITDA over all periods
        average_ebitda: ``total_ebitda`` per period
        average_roe: Total net income / total of year-end equity; zero
            when that equity total is not positive
        peak_debt: Highest year-end debt balance
        final_cash: Cash at the end of the last period
        npv: NPV of the yearly net change in cash
        irr: IRR of the same flows; None when it cannot be found
        payback_period: Years until the cumulative flows recover; None if never
        contract_start_year: First year of the contract window
        contract_end_year: Last year of the contract window
        contract_total_rent: Rent within the window
        contract_total_ebitda: EBITDA within the window
        contract_final_cash: Cash at the end of the window
        contract_rent_npv: NPV of rent as outflows (negative)
        contract_ebitda_npv: NPV of EBITDA
        net_tenant_surplus: ``contract_ebitda_npv - |contract_rent_npv|``
        annualization_factor: Capital recovery factor over the window
        annualized_ebitda: Equivalent annual EBITDA
        annualized_rent: Equivalent annual rent (positive)
        net_annualized_value: ``annualized_ebitda - annualized_rent``
    """

    discount_rate: Decimal

    total_net_income: Decimal
    total_rent: Decimal
    total_ebitda: Decimal
    average_ebitda: Decimal
    average_roe: Decimal
    peak_debt: Decimal
    final_cash: Decimal
    npv: Decimal
    irr: Optional[Decimal] = None
    payback_period: Optional[Decimal] = None

    contract_start_year: int
    contract_end_year: int
    contract_total_rent: Decimal
    contract_total_ebitda: Decimal
    contract_final_cash: Decimal
    contract_rent_npv: Decimal
    contract_ebitda_npv: Decimal
    net_tenant_surplus: Decimal
    annualization_factor: Decimal
    annualized_ebitda: Decimal
    annualized_rent: Decimal
    net_annualized_value: Decimal


def calculate_projection_metrics(
    periods: Sequence[FinancialPeriod],
    system_config: SystemConfiguration,
    settings: Optional[ProjectionSettings] = None,
    ctx: Optional[DecimalContext] = None,
) -> ProjectionMetrics:
    """
    Compute :class:`ProjectionMetrics` for a period chain.

    Args:
        periods: Periods in year order
        system_config: Supplies the discount rate (debt rate when unset)
        settings: Year bands; the dynamic band is the contract window
        ctx: Decimal policy; the settings' context when omitted

    Returns:
        The metrics

    Raises:
        ValueError: If ``periods`` is empty
    """
    if not periods:
        raise ValueError("Cannot calculate metrics: no periods provided")

    settings = settings or ProjectionSettings()
    ctx = ctx or settings.decimal_context
    rate = system_config.effective_discount_rate
    calc = FinancialCalculations

    if len(periods) != settings.total_period_count:
        logger.warning(
            f"Expected {settings.total_period_count} periods "
            f"({settings.historical_start_year}-{settings.dynamic_end_year}), got {len(periods)}"
        )

    net_incomes = [p.profit_loss.net_income for p in periods]
    ebitdas = [p.profit_loss.ebitda for p in periods]
    cash_changes = [p.cash_flow.net_change_in_cash for p in periods]

    with ctx.local():
        total_net_income = sum(net_incomes, ZERO)
        total_rent = sum((p.profit_loss.rent_expense for p in periods), ZERO)
        total_ebitda = sum(ebitdas, ZERO)
        average_ebitda = total_ebitda / Decimal(len(periods))
        total_equity = sum((p.balance_sheet.total_equity for p in periods), ZERO)
        average_roe = total_net_income / total_equity if total_equity > 0 else ZERO

    contract_start = settings.dynamic_start_year
    contract_end = settings.dynamic_end_year
    contract: List[FinancialPeriod] = [
        p for p in periods
        if p.period_type is PeriodType.DYNAMIC and contract_start <= p.year <= contract_end
    ]
    contract_rents = [p.profit_loss.rent_expense for p in contract]
    contract_ebitdas = [p.profit_loss.ebitda for p in contract]

    rent_npv = calc.calculate_npv([-rent for rent in contract_rents], rate, ctx)
    ebitda_npv = calc.calculate_npv(contract_ebitdas, rate, ctx)
    factor = calc.calculate_annualization_factor(rate, settings.contract_period_years, ctx)

    with ctx.local():
        contract_total_rent = sum(contract_rents, ZERO)
        contract_total_ebitda = sum(contract_ebitdas, ZERO)
        net_tenant_surplus = ebitda_npv - abs(rent_npv)
        annualized_ebitda = ebitda_npv * factor
        annualized_rent = abs(rent_npv) * factor
        net_annualized_value = annualized_ebitda - annualized_rent

    irr = calc.calculate_irr(cash_changes, ctx=ctx)
    if irr is None:
        logger.debug("IRR of the net cash change could not be determined")

    return ProjectionMetrics(
        discount_rate=rate,
        total_net_income=total_net_income,
        total_rent=total_rent,
        total_ebitda=total_ebitda,
        average_ebitda=average_ebitda,
        average_roe=average_roe,
        peak_debt=max(p.balance_sheet.debt_balance for p in periods),
        final_cash=periods[-1].balance_sheet.cash,
        npv=calc.calculate_npv(cash_changes, rate, ctx),
        irr=irr,
        payback_period=calc.calculate_payback_period(cash_changes, ctx),
        contract_start_year=contract_start,
        contract_end_year=contract_end,
        contract_total_rent=contract_total_rent,
        contract_total_ebitda=contract_total_ebitda,
        contract_final_cash=contract[-1].balance_sheet.cash if contract else ZERO,
        contract_rent_npv=rent_npv,
        contract_ebitda_npv=ebitda_npv,
        net_tenant_surplus=net_tenant_surplus,
        annualization_factor=factor,
        annualized_ebitda=annualized_ebitda,
        annualized_rent=annualized_rent,
        net_annualized_value=net_annualized_value,
    )
