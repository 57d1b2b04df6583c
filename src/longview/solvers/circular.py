# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Circular dependency solver for projected years.

Interest depends on the closing debt, zakat on earnings after interest,
net income on zakat, cash on net income and the closing debt on whether
cash falls below the minimum balance. The solver settles the loop by
fixed-point iteration over the debt balance:

    1. interest expense = avg(opening debt, debt estimate) x debt rate
    2. interest income  = max(0, avg(opening cash, cash estimate) - minimum cash)
                          x deposit rate
    3. EBT              = EBIT - (interest expense - interest income)
    4. zakat            = max(0, (opening equity + EBT) - net PP&E) x zakat rate
    5. net income       = EBT - zakat
    6. cash before financing = opening cash + CFO + CFI
    7. required debt    = opening debt + max(0, minimum cash - cash before financing)
    8. closing cash     = cash before financing + (required debt - opening debt)

Debt is never repaid by the solver: surplus cash accumulates and a
shortfall below the minimum balance is borrowed. Each iteration moves the
estimate toward the required debt with the configured relaxation::

    estimate' = estimate x relax + required x (1 - relax)

Iteration stops once both the debt and the cash estimates move by less
than the tolerance. The result is always internally consistent: the
reported cash and debt are those implied by the reported net income.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..assumptions.working_capital import WorkingCapitalBalances
from ..core.arithmetic import calculate_zakat
from ..core.constants import ONE, ZERO
from ..core.primitives import (
    DEFAULT_DECIMAL_CONTEXT,
    CircularSolverSettings,
    DecimalContext,
    Model,
    SystemConfiguration,
    Year,
)
from ..statements.models import BalanceSheet

logger = logging.getLogger(__name__)

TWO = Decimal(2)


class CircularSolverInput(Model):
    """
    Everything the solver needs for one year.

    Attributes:
        year: Fiscal year being solved
        prior_balance_sheet: Opening balances; ``None`` starts from zero
        ebit: Operating profit after depreciation
        depreciation: Non-cash charge added back in CFO
        working_capital: Closing working-capital balances
        net_ppe: Closing net PP&E (the zakat deduction)
        capex: Capital spending as a non-positive outflow
    """

    year: Year
    prior_balance_sheet: Optional[BalanceSheet] = None
    ebit: Decimal
    depreciation: Decimal = ZERO
    working_capital: WorkingCapitalBalances
    net_ppe: Decimal = ZERO
    capex: Decimal = Field(default=ZERO, le=0)


class CircularSolverResult(Model):
    """Settled values for one year."""

    converged: bool
    iterations: int
    final_difference: Decimal
    interest_expense: Decimal
    interest_income: Decimal
    net_interest: Decimal = Field(description="Expense minus income.")
    ebt: Decimal
    zakat_expense: Decimal
    net_income: Decimal
    cash_flow_from_operations: Decimal
    cash_before_financing: Decimal
    debt_balance: Decimal
    cash: Decimal

    @property
    def minimum_cash_borrowing(self) -> Decimal:
        """Debt drawn this year to restore the minimum cash balance."""
        return self.cash - self.cash_before_financing


def calculate_interest_expense(
    average_debt: Decimal, rate: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT
) -> Decimal:
    with ctx.local():
        return average_debt * rate


def calculate_interest_income(
    average_cash: Decimal,
    min_cash_balance: Decimal,
    rate: Decimal,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Decimal:
    """Deposit interest earned on cash above the minimum balance only."""
    with ctx.local():
        return max(average_cash - min_cash_balance, ZERO) * rate


def meets_minimum_cash(cash: Decimal, min_cash_balance: Decimal) -> bool:
    return cash >= min_cash_balance


def _iterate(
    solver_input: CircularSolverInput,
    debt_estimate: Decimal,
    cash_estimate: Decimal,
    system_config: SystemConfiguration,
    ctx: DecimalContext,
) -> CircularSolverResult:
    """One evaluation of the loop for the given debt and cash estimates."""
    prior = solver_input.prior_balance_sheet
    wc = solver_input.working_capital

    prior_cash = prior.cash if prior else ZERO
    prior_debt = prior.debt_balance if prior else ZERO
    prior_equity = prior.total_equity if prior else ZERO

    with ctx.local():
        interest_expense = calculate_interest_expense(
            (prior_debt + debt_estimate) / TWO, system_config.debt_interest_rate, ctx
        )
        interest_income = calculate_interest_income(
            (prior_cash + cash_estimate) / TWO,
            system_config.min_cash_balance,
            system_config.deposit_interest_rate,
            ctx,
        )
        net_interest = interest_expense - interest_income
        ebt = solver_input.ebit - net_interest
        zakat = calculate_zakat(
            prior_equity + ebt, solver_input.net_ppe, system_config.zakat_rate, ctx
        )
        net_income = ebt - zakat

        working_capital_impact = (
            -(wc.accounts_receivable - (prior.accounts_receivable if prior else ZERO))
            - (wc.prepaid_expenses - (prior.prepaid_expenses if prior else ZERO))
            + (wc.accounts_payable - (prior.accounts_payable if prior else ZERO))
            + (wc.accrued_expenses - (prior.accrued_expenses if prior else ZERO))
            + (wc.deferred_revenue - (prior.deferred_revenue if prior else ZERO))
        )
        cfo = net_income + solver_input.depreciation + working_capital_impact
        cash_before_financing = prior_cash + cfo + solver_input.capex

        shortfall = max(system_config.min_cash_balance - cash_before_financing, ZERO)
        required_debt = prior_debt + shortfall
        cash = cash_before_financing + (required_debt - prior_debt)

        difference = max(abs(required_debt - debt_estimate), abs(cash - cash_estimate))

    return CircularSolverResult(
        converged=False,
        iterations=0,
        final_difference=difference,
        interest_expense=interest_expense,
        interest_income=interest_income,
        net_interest=net_interest,
        ebt=ebt,
        zakat_expense=zakat,
        net_income=net_income,
        cash_flow_from_operations=cfo,
        cash_before_financing=cash_before_financing,
        debt_balance=required_debt,
        cash=cash,
    )


def solve_circular_dependencies(
    solver_input: CircularSolverInput,
    system_config: SystemConfiguration,
    settings: Optional[CircularSolverSettings] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> CircularSolverResult:
    """
    Settle interest, zakat, net income, cash and debt for one year.

    Args:
        solver_input: Operating results and closing balances for the year
        system_config: Rates and minimum cash balance
        settings: Iteration cap, tolerance and relaxation
        ctx: Decimal policy

    Returns:
        The last evaluated state, with ``converged`` and ``iterations`` set.
        A non-converged result is still internally consistent; callers
        surface it through the period's ``converged`` flag.
    """
    settings = settings or CircularSolverSettings()
    relax = settings.relaxation_factor
    prior = solver_input.prior_balance_sheet

    debt_estimate = prior.debt_balance if prior else ZERO
    cash_estimate = prior.cash if prior else ZERO

    state = None
    for iteration in range(1, settings.max_iterations + 1):
        state = _iterate(solver_input, debt_estimate, cash_estimate, system_config, ctx)
        if state.final_difference < settings.convergence_tolerance:
            logger.debug(
                f"Year {solver_input.year}: solver converged in {iteration} iterations "
                f"(debt {state.debt_balance:.2f}, cash {state.cash:.2f})"
            )
            return state.model_copy(update={"converged": True, "iterations": iteration})

        with ctx.local():
            debt_estimate = debt_estimate * relax + state.debt_balance * (ONE - relax)
            cash_estimate = cash_estimate * relax + state.cash * (ONE - relax)

    logger.warning(
        f"Year {solver_input.year}: solver did not converge after {settings.max_iterations} "
        f"iterations (difference {state.final_difference:.4f})"
    )
    return state.model_copy(update={"iterations": settings.max_iterations})
