# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Statement, cross-statement and period-linkage validators.

Validators never raise on a failed check. Each failure becomes a
:class:`ValidationIssue` carrying the actual and expected values so the
caller can decide whether to reject or accept the period.

Checks performed:

- Per statement: every derived field is recomputed from its inputs and
  compared within the tolerance (0.01 by default).
- Cross statement: net income agrees across P&L, balance sheet and cash
  flow; depreciation agrees between P&L and cash flow; the sheet balances
  and the cash flow reconciles with balance-sheet cash.
- Linkage: prior ending cash equals current beginning cash, prior total
  equity equals current retained earnings, accumulated depreciation does
  not decrease, and ``debt = prior debt + issuance - repayment``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from ..core.primitives import DEFAULT_DECIMAL_CONTEXT, DecimalContext, DiagnosticSeverity, Model
from .models import (
    BalanceSheet,
    CashFlowStatement,
    FinancialPeriod,
    ProfitLossStatement,
    ValidationIssue,
    ValidationResult,
)


class PeriodLinkageValidation(Model):
    """Linkage result between two consecutive periods."""

    result: ValidationResult
    cash_continuity: bool
    retained_earnings_continuity: bool
    ppe_continuity: bool
    debt_continuity: bool

    @property
    def valid(self) -> bool:
        return self.result.valid


def _tolerance(tolerance: Optional[Decimal], ctx: DecimalContext) -> Decimal:
    return ctx.tolerance if tolerance is None else tolerance


def _check(
    issues: List[ValidationIssue],
    year: int,
    check: str,
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal,
    message: str,
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR,
) -> bool:
    """
    Record an issue when ``|actual - expected| > tolerance``; return whether it passed.

    Runs in the caller's decimal context.
    """
    difference = actual - expected
    if abs(difference) <= tolerance:
        return True
    issues.append(
        ValidationIssue(
            year=year,
            check=check,
            message=f"Year {year}: {message} (diff: {difference:.2f})",
            actual=actual,
            expected=expected,
            difference=difference,
            severity=severity,
        )
    )
    return False


def validate_profit_loss_statement(
    statement: ProfitLossStatement,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> ValidationResult:
    """Recompute every derived P&L line and compare."""
    tol = _tolerance(tolerance, ctx)
    s = statement
    issues: List[ValidationIssue] = []
    convention = s.net_interest_convention

    with ctx.local():
        _check(issues, s.year, "total_revenue", s.total_revenue,
               s.tuition_revenue + s.other_revenue, tol, "Total revenue mismatch")
        _check(issues, s.year, "total_opex", s.total_opex,
               s.rent_expense + s.staff_costs + s.other_opex, tol, "Total OpEx mismatch")
        _check(issues, s.year, "ebitda", s.ebitda,
               s.total_revenue - s.total_opex, tol, "EBITDA mismatch")
        _check(issues, s.year, "ebit", s.ebit,
               s.ebitda - s.depreciation, tol, "EBIT mismatch")
        _check(issues, s.year, "net_interest", s.net_interest,
               convention.net_interest(s.interest_expense, s.interest_income), tol,
               "Net interest mismatch")
        _check(issues, s.year, "ebt", s.ebt,
               convention.apply(s.ebit, s.net_interest), tol, "EBT mismatch")
        _check(issues, s.year, "net_income", s.net_income,
               s.ebt - s.zakat_expense, tol, "Net income mismatch")

    if s.zakat_expense < 0:
        issues.append(
            ValidationIssue(
                year=s.year,
                check="zakat_expense",
                message=f"Year {s.year}: Zakat expense is negative",
                actual=s.zakat_expense,
            )
        )
    return ValidationResult(issues=tuple(issues))


def validate_balance_sheet(
    statement: BalanceSheet,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> ValidationResult:
    """Recompute every balance-sheet total and compare."""
    tol = _tolerance(tolerance, ctx)
    s = statement
    issues: List[ValidationIssue] = []

    with ctx.local():
        _check(issues, s.year, "total_current_assets", s.total_current_assets,
               s.cash + s.accounts_receivable + s.prepaid_expenses, tol,
               "Total current assets mismatch")
        _check(issues, s.year, "property_plant_equipment", s.property_plant_equipment,
               s.gross_ppe - s.accumulated_depreciation, tol, "Net PP&E mismatch")
        _check(issues, s.year, "total_assets", s.total_assets,
               s.total_current_assets + s.total_non_current_assets, tol,
               "Total assets mismatch")
        _check(issues, s.year, "total_current_liabilities", s.total_current_liabilities,
               s.accounts_payable + s.accrued_expenses + s.deferred_revenue, tol,
               "Total current liabilities mismatch")
        _check(issues, s.year, "total_liabilities", s.total_liabilities,
               s.total_current_liabilities + s.debt_balance, tol,
               "Total liabilities mismatch")
        _check(issues, s.year, "total_equity", s.total_equity,
               s.retained_earnings + s.net_income_current_year, tol, "Total equity mismatch")

    if s.debt_balance < 0:
        issues.append(
            ValidationIssue(
                year=s.year,
                check="debt_balance",
                message=f"Year {s.year}: Debt balance is negative",
                actual=s.debt_balance,
            )
        )
    return ValidationResult(issues=tuple(issues))


def validate_cash_flow_statement(
    statement: CashFlowStatement,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> ValidationResult:
    """Recompute CFO, CFI, CFF, net change and ending cash and compare."""
    tol = _tolerance(tolerance, ctx)
    s = statement
    issues: List[ValidationIssue] = []

    with ctx.local():
        expected_cfo = (
            s.net_income
            + s.depreciation
            - s.change_in_ar
            - s.change_in_prepaid
            + s.change_in_ap
            + s.change_in_accrued
            + s.change_in_deferred_revenue
        )
        _check(issues, s.year, "cash_flow_from_operations", s.cash_flow_from_operations,
               expected_cfo, tol, "CFO mismatch")
        _check(issues, s.year, "cash_flow_from_investing", s.cash_flow_from_investing,
               s.capex, tol, "CFI mismatch")
        _check(issues, s.year, "cash_flow_from_financing", s.cash_flow_from_financing,
               s.debt_issuance - s.debt_repayment + s.untracked_financing_adjustment, tol,
               "CFF mismatch")
        _check(issues, s.year, "net_change_in_cash", s.net_change_in_cash,
               s.cash_flow_from_operations + s.cash_flow_from_investing
               + s.cash_flow_from_financing, tol, "Net change in cash mismatch")
        _check(issues, s.year, "ending_cash", s.ending_cash,
               s.beginning_cash + s.net_change_in_cash, tol, "Ending cash mismatch")

    return ValidationResult(issues=tuple(issues))


def validate_financial_period(
    period: FinancialPeriod,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> ValidationResult:
    """
    Validate one period: each statement, the cross-statement identities and
    the period flags.

    A balance difference on a sheet whose debt plug was clamped at zero is
    reported as a warning rather than an error.
    """
    tol = _tolerance(tolerance, ctx)
    pl, bs, cf = period.profit_loss, period.balance_sheet, period.cash_flow
    year = period.year
    issues: List[ValidationIssue] = []

    imbalance_severity = (
        DiagnosticSeverity.WARNING if bs.debt_plug_clamped else DiagnosticSeverity.ERROR
    )
    with ctx.local():
        _check(issues, year, "balance_sheet_balanced", bs.balance_difference, Decimal(0), tol,
               "Balance sheet not balanced", imbalance_severity)
        _check(issues, year, "cash_flow_reconciled", cf.ending_cash - bs.cash, Decimal(0), tol,
               "Cash flow not reconciled with balance sheet")
        _check(issues, year, "net_income_pl_bs", pl.net_income, bs.net_income_current_year,
               tol, "Net income mismatch between P&L and balance sheet")
        _check(issues, year, "net_income_cf_pl", cf.net_income, pl.net_income, tol,
               "Net income mismatch between cash flow and P&L")
        _check(issues, year, "depreciation_pl_cf", pl.depreciation, cf.depreciation, tol,
               "Depreciation mismatch between P&L and cash flow")

    flags = (
        (period.balance_sheet_balanced, "balance_sheet_balanced_flag",
         "Balance sheet balanced flag is false"),
        (period.cash_flow_reconciled, "cash_flow_reconciled_flag",
         "Cash flow reconciled flag is false"),
        (period.converged, "converged_flag",
         "Period did not converge (circular solver may have failed)"),
    )
    for flag, check, message in flags:
        if not flag:
            issues.append(
                ValidationIssue(
                    year=year,
                    check=check,
                    message=f"Year {year}: {message}",
                    severity=DiagnosticSeverity.WARNING,
                )
            )

    return ValidationResult(issues=tuple(issues)).merge(
        validate_profit_loss_statement(pl, tol, ctx),
        validate_balance_sheet(bs, tol, ctx),
        validate_cash_flow_statement(cf, tol, ctx),
    )


def validate_historical_period(
    period: FinancialPeriod,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> ValidationResult:
    """:func:`validate_financial_period` plus warnings on negative cash or equity."""
    result = validate_financial_period(period, tolerance, ctx)
    bs = period.balance_sheet
    warnings: List[ValidationIssue] = []
    if bs.cash < 0:
        warnings.append(
            ValidationIssue(
                year=period.year,
                check="negative_cash",
                message=f"Year {period.year}: Negative cash balance",
                actual=bs.cash,
                severity=DiagnosticSeverity.WARNING,
            )
        )
    if bs.total_equity < 0:
        warnings.append(
            ValidationIssue(
                year=period.year,
                check="negative_equity",
                message=f"Year {period.year}: Negative equity",
                actual=bs.total_equity,
                severity=DiagnosticSeverity.WARNING,
            )
        )
    return result.merge(ValidationResult(issues=tuple(warnings)))


def validate_period_linkage(
    prior: FinancialPeriod,
    current: FinancialPeriod,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> PeriodLinkageValidation:
    """Continuity checks between two consecutive periods."""
    tol = _tolerance(tolerance, ctx)
    year = current.year
    issues: List[ValidationIssue] = []

    if current.year != prior.year + 1:
        issues.append(
            ValidationIssue(
                year=year,
                check="year_sequence",
                message=f"Year {year} does not follow {prior.year}",
            )
        )

    with ctx.local():
        cash_ok = _check(issues, year, "cash_continuity", current.cash_flow.beginning_cash,
                         prior.balance_sheet.cash, tol,
                         f"Cash continuity broken between {prior.year} and {year}")
        equity_ok = _check(issues, year, "retained_earnings_continuity",
                           current.balance_sheet.retained_earnings,
                           prior.balance_sheet.total_equity, tol,
                           f"Retained earnings continuity broken between {prior.year} and {year}")

    ppe_ok = (
        current.balance_sheet.accumulated_depreciation
        >= prior.balance_sheet.accumulated_depreciation
    )
    if not ppe_ok:
        with ctx.local():
            difference = (
                current.balance_sheet.accumulated_depreciation
                - prior.balance_sheet.accumulated_depreciation
            )
        issues.append(
            ValidationIssue(
                year=year,
                check="ppe_continuity",
                message=f"Accumulated depreciation decreased between {prior.year} and {year}",
                actual=current.balance_sheet.accumulated_depreciation,
                expected=prior.balance_sheet.accumulated_depreciation,
                difference=difference,
            )
        )

    with ctx.local():
        expected_debt = (
            prior.balance_sheet.debt_balance
            + current.cash_flow.debt_issuance
            - current.cash_flow.debt_repayment
        )
        debt_ok = _check(issues, year, "debt_continuity", current.balance_sheet.debt_balance,
                         expected_debt, tol,
                         f"Debt continuity broken between {prior.year} and {year}")

    return PeriodLinkageValidation(
        result=ValidationResult(issues=tuple(issues)),
        cash_continuity=cash_ok,
        retained_earnings_continuity=equity_ok,
        ppe_continuity=ppe_ok,
        debt_continuity=debt_ok,
    )


def validate_period_sequence(
    periods: Sequence[FinancialPeriod],
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> ValidationResult:
    """Validate every period and the linkage between each consecutive pair."""
    result = ValidationResult()
    for period in periods:
        if period.is_historical:
            result = result.merge(validate_historical_period(period, tolerance, ctx))
        else:
            result = result.merge(validate_financial_period(period, tolerance, ctx))
    for prior, current in zip(periods, periods[1:]):
        result = result.merge(validate_period_linkage(prior, current, tolerance, ctx).result)
    return result


def is_balance_sheet_balanced(
    period: FinancialPeriod,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> bool:
    return abs(period.balance_sheet.balance_difference) <= _tolerance(tolerance, ctx)


def is_cash_flow_reconciled(
    period: FinancialPeriod,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> bool:
    with ctx.local():
        diff = period.cash_flow.ending_cash - period.balance_sheet.cash
    return abs(diff) <= _tolerance(tolerance, ctx)
