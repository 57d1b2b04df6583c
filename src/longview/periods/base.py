# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Shared pipeline for projected (transition and dynamic) periods.

Subclasses only decide the operating lines (revenue, rent, staff, other
opex). Everything downstream is common and runs in a fixed order:

    1. CapEx roll-forward (spending, depreciation, PP&E)
    2. Working-capital balances from the locked ratios
    3. Circular solver: interest, zakat, net income, cash, required debt
    4. P&L
    5. Balance sheet around the solved cash, debt as the plug
    6. Cash flow from the balance-sheet deltas, reconciled against BS cash
    7. Diagnostics and flags

Because cash is solved before the balance sheet, the plugged debt equals
the solver's required debt whenever the prior balance sheet balanced, and
the cash flow ending cash equals balance-sheet cash. An imbalance carried
in from the prior year shows up in both the plug and the reconciliation
difference rather than being hidden.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple, Union

from ..assumptions.working_capital import WorkingCapitalRatios
from ..capex.assets import (
    AssetDepreciationState,
    CapExConfiguration,
    CapExVirtualAsset,
    CapExYearResult,
    HistoricalDepreciationState,
)
from ..capex.calculator import calculate_capex_year_result
from ..core.primitives import (
    DiagnosticCode,
    DiagnosticSeverity,
    Model,
    NetInterestConvention,
    PeriodType,
    ProjectionSettings,
    SystemConfiguration,
)
from ..solvers.circular import CircularSolverInput, CircularSolverResult, solve_circular_dependencies
from ..statements.balance_sheet import (
    BalanceSheetInput,
    generate_balance_sheet,
    update_retained_earnings,
)
from ..statements.cash_flow import create_cash_flow_from_statements
from ..statements.models import (
    BalanceSheet,
    CashFlowStatement,
    DiagnosticEvent,
    FinancialPeriod,
)
from ..statements.profit_loss import ProfitLossInput, generate_profit_loss_statement
from .inputs import DynamicPeriodInput, TransitionPeriodInput

logger = logging.getLogger(__name__)

ProjectedPeriodInput = Union[TransitionPeriodInput, DynamicPeriodInput]


class OperatingLines(Model):
    """Revenue and operating expense lines of one projected year."""

    tuition_revenue: Decimal
    other_revenue: Decimal
    rent_expense: Decimal
    staff_costs: Decimal
    other_opex: Decimal
    total_students: Optional[int] = None

    @property
    def total_revenue(self) -> Decimal:
        return self.tuition_revenue + self.other_revenue

    @property
    def total_opex(self) -> Decimal:
        return self.rent_expense + self.staff_costs + self.other_opex


def resolve_capex_state(
    config: CapExConfiguration,
    prior_period: FinancialPeriod,
) -> Tuple[
    Tuple[CapExVirtualAsset, ...],
    Optional[HistoricalDepreciationState],
    Optional[Tuple[AssetDepreciationState, ...]],
]:
    """
    Virtual-asset pool, historical depreciation base and pool-asset states
    carried into the year after ``prior_period``.

    A projected prior period carries all three on its ``capex_result``.
    After the last historical year the pool starts from the configured
    manual virtual assets, and the historical base is the configured one
    or, when no existing assets describe the base, derived from the
    historical period itself.
    """
    prior_result = prior_period.capex_result
    if prior_result is not None:
        return (
            prior_result.virtual_asset_pool,
            prior_result.historical_state,
            prior_result.asset_states,
        )

    historical_state = config.historical_state
    if historical_state is None and not config.existing_assets:
        historical_state = HistoricalDepreciationState.from_period(prior_period)
        logger.debug(
            f"Historical depreciation base derived from {prior_period.year}: "
            f"net PP&E {historical_state.remaining_to_depreciate:.2f}, "
            f"annual {historical_state.annual_depreciation:.2f}"
        )
    return tuple(config.virtual_assets), historical_state, None


class ProjectedPeriodCalculator(ABC):
    """
    Template for transition and dynamic period calculators.

    Subclasses provide :attr:`period_type` and :meth:`operating_lines`;
    :meth:`calculate` runs the shared balancing pipeline.
    """

    period_type: PeriodType

    def __init__(self, settings: Optional[ProjectionSettings] = None):
        self.settings = settings or ProjectionSettings()
        self.ctx = self.settings.decimal_context

    @abstractmethod
    def operating_lines(
        self,
        year_input: ProjectedPeriodInput,
        prior_period: FinancialPeriod,
        working_capital_ratios: WorkingCapitalRatios,
    ) -> OperatingLines:
        """Revenue and operating expenses for the year."""
        pass

    def calculate(
        self,
        year_input: ProjectedPeriodInput,
        system_config: SystemConfiguration,
        prior_period: Optional[FinancialPeriod],
        working_capital_ratios: WorkingCapitalRatios,
    ) -> FinancialPeriod:
        """
        Build the period for ``year_input.year``.

        Raises:
            ValueError: If ``prior_period`` is missing or not the previous year
        """
        year = year_input.year
        if prior_period is None:
            raise ValueError(f"Year {year}: a projected period requires the prior period")
        if prior_period.year != year - 1:
            raise ValueError(
                f"Year {year}: prior period is {prior_period.year}, expected {year - 1}"
            )

        ctx = self.ctx
        prior_bs = prior_period.balance_sheet
        lines = self.operating_lines(year_input, prior_period, working_capital_ratios)

        capex = self._capex_result(year_input, prior_period)
        capex_outflow = -capex.spending

        with ctx.local():
            total_revenue = lines.total_revenue
            total_opex = lines.total_opex
            ebit = total_revenue - total_opex - capex.total_depreciation
        working_capital = working_capital_ratios.apply(total_revenue, total_opex, ctx)

        solved = solve_circular_dependencies(
            CircularSolverInput(
                year=year,
                prior_balance_sheet=prior_bs,
                ebit=ebit,
                depreciation=capex.total_depreciation,
                working_capital=working_capital,
                net_ppe=capex.net_ppe,
                capex=capex_outflow,
            ),
            system_config,
            self.settings.solver,
            ctx,
        )

        profit_loss = generate_profit_loss_statement(
            ProfitLossInput(
                year=year,
                tuition_revenue=lines.tuition_revenue,
                other_revenue=lines.other_revenue,
                rent_expense=lines.rent_expense,
                staff_costs=lines.staff_costs,
                other_opex=lines.other_opex,
                depreciation=capex.total_depreciation,
                interest_expense=solved.interest_expense,
                interest_income=solved.interest_income,
                zakat_expense=solved.zakat_expense,
            ),
            convention=NetInterestConvention.for_period(self.period_type),
            ctx=ctx,
        )

        balance_sheet = generate_balance_sheet(
            BalanceSheetInput(
                year=year,
                cash=solved.cash,
                accounts_receivable=working_capital.accounts_receivable,
                prepaid_expenses=working_capital.prepaid_expenses,
                gross_ppe=capex.gross_ppe,
                accumulated_depreciation=capex.accumulated_depreciation,
                accounts_payable=working_capital.accounts_payable,
                accrued_expenses=working_capital.accrued_expenses,
                deferred_revenue=working_capital.deferred_revenue,
                retained_earnings=update_retained_earnings(prior_bs),
                net_income_current_year=profit_loss.net_income,
            ),
            use_debt_plug=True,
            ctx=ctx,
        )

        cash_flow = create_cash_flow_from_statements(
            profit_loss, balance_sheet, prior_bs, capex_outflow, ctx
        )

        balanced = abs(balance_sheet.balance_difference) <= ctx.tolerance
        reconciled = abs(cash_flow.cash_reconciliation_diff) <= ctx.tolerance
        diagnostics = self._diagnostics(year, solved, balance_sheet, cash_flow, balanced, reconciled)

        logger.debug(
            f"{self.period_type.value} {year}: revenue={total_revenue:.2f} "
            f"net_income={profit_loss.net_income:.2f} cash={balance_sheet.cash:.2f} "
            f"debt={balance_sheet.debt_balance:.2f} iterations={solved.iterations}"
        )

        return FinancialPeriod(
            year=year,
            period_type=self.period_type,
            profit_loss=profit_loss,
            balance_sheet=balance_sheet,
            cash_flow=cash_flow,
            converged=solved.converged,
            balance_sheet_balanced=balanced,
            cash_flow_reconciled=reconciled,
            iterations_required=solved.iterations,
            diagnostics=tuple(diagnostics),
            capex_result=capex,
        )

    def _capex_result(
        self, year_input: ProjectedPeriodInput, prior_period: FinancialPeriod
    ) -> CapExYearResult:
        config = year_input.capex_config or CapExConfiguration()
        pool, historical_state, prior_states = resolve_capex_state(config, prior_period)
        return calculate_capex_year_result(
            year_input.year,
            config,
            self.period_type,
            prior_period.balance_sheet.gross_ppe,
            prior_period.balance_sheet.accumulated_depreciation,
            historical_state=historical_state,
            virtual_assets=pool,
            prior_asset_states=prior_states,
            ctx=self.ctx,
            base_year=self.settings.dynamic_start_year,
        )

    def _diagnostics(
        self,
        year: int,
        solved: CircularSolverResult,
        balance_sheet: BalanceSheet,
        cash_flow: CashFlowStatement,
        balanced: bool,
        reconciled: bool,
    ) -> Sequence[DiagnosticEvent]:
        events: List[DiagnosticEvent] = []

        if not solved.converged:
            events.append(
                DiagnosticEvent(
                    year=year,
                    code=DiagnosticCode.SOLVER_NOT_CONVERGED,
                    message=f"Circular solver stopped after {solved.iterations} iterations",
                    amount=solved.final_difference,
                )
            )
        if solved.minimum_cash_borrowing > 0:
            events.append(
                DiagnosticEvent(
                    year=year,
                    code=DiagnosticCode.MINIMUM_CASH_BORROWING,
                    severity=DiagnosticSeverity.INFO,
                    message="Debt drawn to restore the minimum cash balance",
                    amount=solved.minimum_cash_borrowing,
                )
            )
        if balance_sheet.debt_plug_clamped:
            events.append(
                DiagnosticEvent(
                    year=year,
                    code=DiagnosticCode.DEBT_PLUG_CLAMPED,
                    message="Debt plug was negative and has been floored at zero",
                    amount=balance_sheet.balance_difference,
                )
            )
        if not balanced:
            logger.warning(
                f"Year {year}: balance sheet out of balance by "
                f"{balance_sheet.balance_difference:.2f}"
            )
            events.append(
                DiagnosticEvent(
                    year=year,
                    code=DiagnosticCode.BALANCE_SHEET_IMBALANCE,
                    message="Assets differ from liabilities plus equity",
                    amount=balance_sheet.balance_difference,
                )
            )
        if not reconciled:
            logger.warning(
                f"Year {year}: cash flow ending cash differs from balance sheet cash by "
                f"{cash_flow.cash_reconciliation_diff:.2f}"
            )
            events.append(
                DiagnosticEvent(
                    year=year,
                    code=DiagnosticCode.CASH_FLOW_UNRECONCILED,
                    message="Cash flow ending cash differs from balance sheet cash",
                    amount=cash_flow.cash_reconciliation_diff,
                )
            )
        return events
