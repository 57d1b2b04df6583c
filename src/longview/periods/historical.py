# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Historical period calculator.

Actual figures are taken as reported: debt is an input, not a plug, and
the balance sheet reports whatever ``balance_difference`` the actuals
carry. The cash flow statement is reconstructed from balance-sheet deltas:

    CapEx = -max(0, gross PP&E - prior gross PP&E)
    CFF   = debt change + untracked financing adjustment

where the untracked adjustment is the part of the actual cash movement
the indirect method cannot explain (equity injections, asset sales,
timing). Historical cash flow is therefore reconciled by construction.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..assumptions.working_capital import WorkingCapitalRatios
from ..core.constants import ZERO
from ..core.primitives import (
    DiagnosticCode,
    DiagnosticSeverity,
    NetInterestConvention,
    PeriodType,
    ProjectionSettings,
    SystemConfiguration,
)
from ..statements.balance_sheet import BalanceSheetInput, generate_balance_sheet
from ..statements.cash_flow import (
    CashFlowInput,
    WorkingCapitalChanges,
    calculate_debt_change,
    calculate_working_capital_changes,
    generate_cash_flow_statement,
)
from ..statements.models import DiagnosticEvent, FinancialPeriod
from ..statements.profit_loss import ProfitLossInput, generate_profit_loss_statement
from .inputs import HistoricalPeriodInput

logger = logging.getLogger(__name__)


def calculate_historical_period(
    year_input: HistoricalPeriodInput,
    system_config: SystemConfiguration,
    prior_period: Optional[FinancialPeriod] = None,
    working_capital_ratios: Optional[WorkingCapitalRatios] = None,
    settings: Optional[ProjectionSettings] = None,
) -> FinancialPeriod:
    """
    Build a historical period from actuals.

    ``system_config`` and ``working_capital_ratios`` are accepted for a
    uniform calculator signature; actuals need neither.

    Args:
        year_input: Reported P&L and balance sheet
        system_config: Shared rates
        prior_period: Previous historical year; ``None`` for the first year
        working_capital_ratios: Unused for actuals
        settings: Decimal policy and tolerance

    Returns:
        The period, with ``cash_flow_reconciled`` always true
    """
    settings = settings or ProjectionSettings()
    ctx = settings.decimal_context
    year = year_input.year
    pl_in = year_input.profit_loss
    bs_in = year_input.balance_sheet
    diagnostics: List[DiagnosticEvent] = []

    if year_input.immutable:
        logger.debug(f"Year {year}: historical figures are confirmed and immutable")
        diagnostics.append(
            DiagnosticEvent(
                year=year,
                code=DiagnosticCode.IMMUTABLE_HISTORICAL_DATA,
                severity=DiagnosticSeverity.INFO,
                message="Historical figures are confirmed; edits must be refused upstream",
            )
        )

    profit_loss = generate_profit_loss_statement(
        ProfitLossInput(
            year=year,
            tuition_revenue=pl_in.tuition_revenue,
            other_revenue=pl_in.other_revenue,
            rent_expense=pl_in.rent_expense,
            staff_costs=pl_in.staff_costs,
            other_opex=pl_in.other_opex,
            depreciation=pl_in.depreciation,
            interest_expense=pl_in.interest_expense,
            interest_income=pl_in.interest_income,
            zakat_expense=pl_in.zakat_expense,
        ),
        convention=NetInterestConvention.for_period(PeriodType.HISTORICAL),
        ctx=ctx,
    )

    with ctx.local():
        retained_earnings = bs_in.equity - profit_loss.net_income
        gross_ppe = bs_in.gross_ppe

    balance_sheet = generate_balance_sheet(
        BalanceSheetInput(
            year=year,
            cash=bs_in.cash,
            accounts_receivable=bs_in.accounts_receivable,
            prepaid_expenses=bs_in.prepaid_expenses,
            gross_ppe=gross_ppe,
            accumulated_depreciation=bs_in.accumulated_depreciation,
            accounts_payable=bs_in.accounts_payable,
            accrued_expenses=bs_in.accrued_expenses,
            deferred_revenue=bs_in.deferred_revenue,
            retained_earnings=retained_earnings,
            net_income_current_year=profit_loss.net_income,
        ),
        use_debt_plug=False,
        fixed_debt_balance=bs_in.debt,
        ctx=ctx,
    )

    balanced = abs(balance_sheet.balance_difference) <= ctx.tolerance
    if not balanced:
        logger.warning(
            f"Year {year}: historical balance sheet does not balance "
            f"(difference {balance_sheet.balance_difference:.2f})"
        )
        diagnostics.append(
            DiagnosticEvent(
                year=year,
                code=DiagnosticCode.BALANCE_SHEET_IMBALANCE,
                message="Reported assets differ from liabilities plus equity",
                amount=balance_sheet.balance_difference,
            )
        )

    if prior_period is not None:
        prior_bs = prior_period.balance_sheet
        working_capital = calculate_working_capital_changes(balance_sheet, prior_bs, ctx)
        with ctx.local():
            gross_ppe_change = balance_sheet.gross_ppe - prior_bs.gross_ppe
        # A fall in gross PP&E (disposals) lands in the untracked adjustment
        capex = -max(gross_ppe_change, ZERO)
        issuance, repayment = calculate_debt_change(
            balance_sheet.debt_balance, prior_bs.debt_balance, ctx
        )
        beginning_cash = prior_bs.cash
    else:
        working_capital = WorkingCapitalChanges()
        capex = ZERO
        issuance, repayment = ZERO, ZERO
        beginning_cash = ZERO

    with ctx.local():
        cfo = profit_loss.net_income + profit_loss.depreciation + working_capital.cash_impact
        explained_change = cfo + capex + issuance - repayment
        actual_change = balance_sheet.cash - beginning_cash
        untracked = actual_change - explained_change

    if untracked != 0:
        logger.debug(f"Year {year}: untracked financing adjustment {untracked:.2f}")
        diagnostics.append(
            DiagnosticEvent(
                year=year,
                code=DiagnosticCode.UNTRACKED_FINANCING_ADJUSTMENT,
                severity=DiagnosticSeverity.INFO,
                message="Cash movement not explained by operations, CapEx or debt",
                amount=untracked,
            )
        )

    # Beginning and ending cash are both actuals, so the reconciliation
    # difference is zero by construction.
    cash_flow = generate_cash_flow_statement(
        CashFlowInput(
            year=year,
            net_income=profit_loss.net_income,
            depreciation=profit_loss.depreciation,
            working_capital=working_capital,
            capex=capex,
            debt_issuance=issuance,
            debt_repayment=repayment,
            untracked_financing_adjustment=untracked,
            beginning_cash=beginning_cash,
        ),
        ctx,
    )

    return FinancialPeriod(
        year=year,
        period_type=PeriodType.HISTORICAL,
        profit_loss=profit_loss,
        balance_sheet=balance_sheet,
        cash_flow=cash_flow,
        converged=True,
        balance_sheet_balanced=balanced,
        cash_flow_reconciled=True,
        iterations_required=0,
        diagnostics=tuple(diagnostics),
    )
