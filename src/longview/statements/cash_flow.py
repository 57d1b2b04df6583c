# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Cash flow statement generator (indirect method).

    CFO = Net Income + Depreciation - dAR - dPrepaid + dAP + dAccrued + dDeferred
    CFI = CapEx (a non-positive outflow)
    CFF = Debt Issuance - Debt Repayment + Untracked Adjustment
    Ending Cash = Beginning Cash + CFO + CFI + CFF

Working-capital deltas are ``current - prior`` balances. Debt repayment is
stored as a positive amount.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Tuple

from pydantic import Field

from ..core.constants import ZERO
from ..core.primitives import DEFAULT_DECIMAL_CONTEXT, DecimalContext, Model, Year
from .models import BalanceSheet, CashFlowStatement, ProfitLossStatement


class WorkingCapitalChanges(Model):
    """Year-over-year change of each working-capital balance."""

    change_in_ar: Decimal = ZERO
    change_in_prepaid: Decimal = ZERO
    change_in_ap: Decimal = ZERO
    change_in_accrued: Decimal = ZERO
    change_in_deferred_revenue: Decimal = ZERO

    @property
    def cash_impact(self) -> Decimal:
        """Net effect on CFO: asset increases use cash, liability increases provide it."""
        return (
            -self.change_in_ar
            - self.change_in_prepaid
            + self.change_in_ap
            + self.change_in_accrued
            + self.change_in_deferred_revenue
        )


class CashFlowInput(Model):
    """Line items feeding :func:`generate_cash_flow_statement`."""

    year: Year
    net_income: Decimal
    depreciation: Decimal = ZERO
    working_capital: WorkingCapitalChanges = Field(default_factory=WorkingCapitalChanges)
    capex: Decimal = ZERO
    debt_issuance: Decimal = ZERO
    debt_repayment: Decimal = ZERO
    untracked_financing_adjustment: Decimal = ZERO
    beginning_cash: Decimal = ZERO


def calculate_working_capital_changes(
    current: BalanceSheet,
    prior: BalanceSheet,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> WorkingCapitalChanges:
    """Working-capital deltas between two balance sheets."""
    with ctx.local():
        return WorkingCapitalChanges(
            change_in_ar=current.accounts_receivable - prior.accounts_receivable,
            change_in_prepaid=current.prepaid_expenses - prior.prepaid_expenses,
            change_in_ap=current.accounts_payable - prior.accounts_payable,
            change_in_accrued=current.accrued_expenses - prior.accrued_expenses,
            change_in_deferred_revenue=current.deferred_revenue - prior.deferred_revenue,
        )


def calculate_debt_change(
    current_debt: Decimal,
    prior_debt: Decimal,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Tuple[Decimal, Decimal]:
    """
    Split a debt movement into ``(issuance, repayment)``.

    Both are non-negative; at most one is non-zero.
    """
    with ctx.local():
        change = current_debt - prior_debt
    if change >= 0:
        return change, ZERO
    return ZERO, -change


def generate_cash_flow_statement(
    line_items: CashFlowInput,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> CashFlowStatement:
    """
    Build the cash flow statement.

    ``cash_reconciliation_diff`` is left at zero; see
    :func:`reconcile_cash_flow_with_balance_sheet`.
    """
    wc = line_items.working_capital
    with ctx.local():
        cfo = line_items.net_income + line_items.depreciation + wc.cash_impact
        cfi = line_items.capex
        cff = (
            line_items.debt_issuance
            - line_items.debt_repayment
            + line_items.untracked_financing_adjustment
        )
        net_change = cfo + cfi + cff
        ending_cash = line_items.beginning_cash + net_change

    return CashFlowStatement(
        year=line_items.year,
        net_income=line_items.net_income,
        depreciation=line_items.depreciation,
        change_in_ar=wc.change_in_ar,
        change_in_prepaid=wc.change_in_prepaid,
        change_in_ap=wc.change_in_ap,
        change_in_accrued=wc.change_in_accrued,
        change_in_deferred_revenue=wc.change_in_deferred_revenue,
        cash_flow_from_operations=cfo,
        capex=line_items.capex,
        cash_flow_from_investing=cfi,
        debt_issuance=line_items.debt_issuance,
        debt_repayment=line_items.debt_repayment,
        untracked_financing_adjustment=line_items.untracked_financing_adjustment,
        cash_flow_from_financing=cff,
        net_change_in_cash=net_change,
        beginning_cash=line_items.beginning_cash,
        ending_cash=ending_cash,
    )


def reconcile_cash_flow_with_balance_sheet(
    cash_flow: CashFlowStatement,
    balance_sheet: BalanceSheet,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> CashFlowStatement:
    """Copy of ``cash_flow`` with ``cash_reconciliation_diff`` = CF ending cash - BS cash."""
    with ctx.local():
        diff = cash_flow.ending_cash - balance_sheet.cash
    return cash_flow.model_copy(update={"cash_reconciliation_diff": diff})


def create_cash_flow_from_statements(
    profit_loss: ProfitLossStatement,
    current: BalanceSheet,
    prior: BalanceSheet,
    capex: Decimal,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> CashFlowStatement:
    """
    Derive the cash flow statement from the P&L and two balance sheets.

    Working-capital and debt movements come from the balance-sheet deltas,
    beginning cash from the prior sheet, and the result is reconciled
    against ``current.cash``.

    Args:
        profit_loss: Current-year P&L
        current: Current-year balance sheet
        prior: Prior-year balance sheet
        capex: Capital spending as a non-positive outflow
    """
    issuance, repayment = calculate_debt_change(current.debt_balance, prior.debt_balance, ctx)
    cash_flow = generate_cash_flow_statement(
        CashFlowInput(
            year=profit_loss.year,
            net_income=profit_loss.net_income,
            depreciation=profit_loss.depreciation,
            working_capital=calculate_working_capital_changes(current, prior, ctx),
            capex=capex,
            debt_issuance=issuance,
            debt_repayment=repayment,
            beginning_cash=prior.cash,
        ),
        ctx,
    )
    return reconcile_cash_flow_with_balance_sheet(cash_flow, current, ctx)
