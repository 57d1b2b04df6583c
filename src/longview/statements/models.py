# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Statement records produced for every fiscal year.

All records are frozen Pydantic models. A period is never patched after it
has been produced; re-running the calculator for that year with corrected
inputs is the only way to change it.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Tuple

from pydantic import Field, model_validator

from ..capex.assets import CapExYearResult
from ..core.constants import ZERO
from ..core.primitives import (
    DiagnosticCode,
    DiagnosticSeverity,
    Model,
    NetInterestConvention,
    PeriodType,
    Year,
)


class ProfitLossStatement(Model):
    """
    Income statement for one fiscal year.

    ``net_interest`` is stored under the convention recorded in
    ``net_interest_convention``: historical actuals carry income minus
    expense (added to EBIT), projected years carry expense minus income
    (subtracted from EBIT). EBT is identical under both.
    """

    year: Year

    # Revenue
    tuition_revenue: Decimal
    other_revenue: Decimal
    total_revenue: Decimal

    # Operating expenses
    rent_expense: Decimal
    staff_costs: Decimal
    other_opex: Decimal
    total_opex: Decimal

    ebitda: Decimal
    depreciation: Decimal
    ebit: Decimal

    # Interest
    interest_expense: Decimal
    interest_income: Decimal
    net_interest: Decimal
    net_interest_convention: NetInterestConvention

    ebt: Decimal
    zakat_expense: Decimal
    net_income: Decimal


class BalanceSheet(Model):
    """
    Balance sheet at fiscal year end.

    ``balance_difference`` is ``total_assets - (total_liabilities +
    total_equity)``. ``debt_plug_clamped`` is set when the solved debt plug
    was negative and floored at zero, in which case a non-zero difference
    is expected.
    """

    year: Year

    # Current assets
    cash: Decimal
    accounts_receivable: Decimal
    prepaid_expenses: Decimal
    total_current_assets: Decimal

    # Non-current assets
    gross_ppe: Decimal
    accumulated_depreciation: Decimal
    property_plant_equipment: Decimal
    total_non_current_assets: Decimal

    total_assets: Decimal

    # Current liabilities
    accounts_payable: Decimal
    accrued_expenses: Decimal
    deferred_revenue: Decimal
    total_current_liabilities: Decimal

    # Non-current liabilities
    debt_balance: Decimal
    total_non_current_liabilities: Decimal

    total_liabilities: Decimal

    # Equity
    retained_earnings: Decimal
    net_income_current_year: Decimal
    total_equity: Decimal

    balance_difference: Decimal
    debt_plug_clamped: bool = False


class CashFlowStatement(Model):
    """
    Indirect-method cash flow statement.

    Working-capital deltas are ``current - prior`` balances; asset increases
    reduce CFO and liability increases add to it. ``debt_repayment`` is a
    positive amount subtracted in financing.
    """

    year: Year

    # Operating
    net_income: Decimal
    depreciation: Decimal
    change_in_ar: Decimal
    change_in_prepaid: Decimal
    change_in_ap: Decimal
    change_in_accrued: Decimal
    change_in_deferred_revenue: Decimal
    cash_flow_from_operations: Decimal

    # Investing
    capex: Decimal = Field(le=0, description="Capital spending as a cash outflow.")
    cash_flow_from_investing: Decimal

    # Financing
    debt_issuance: Decimal = Field(ge=0)
    debt_repayment: Decimal = Field(ge=0)
    untracked_financing_adjustment: Decimal = Field(
        default=ZERO,
        description="Historical cash movement not explained by the statements.",
    )
    cash_flow_from_financing: Decimal

    net_change_in_cash: Decimal
    beginning_cash: Decimal
    ending_cash: Decimal

    cash_reconciliation_diff: Decimal = Field(
        default=ZERO, description="Calculated ending cash minus balance-sheet cash."
    )


class DiagnosticEvent(Model):
    """Structured record of a deviation observed while computing a period."""

    year: Year
    code: DiagnosticCode
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    message: str
    amount: Optional[Decimal] = None


class FinancialPeriod(Model):
    """
    One fiscal year's complete result.

    Attributes:
        converged: Whether the circular solver met its tolerance
            (always true for historical years)
        balance_sheet_balanced: ``|balance_difference| <= tolerance``
        cash_flow_reconciled: ``|cash_reconciliation_diff| <= tolerance``
        iterations_required: Solver iterations used (0 for historical years)
        diagnostics: Warnings raised while computing the period
        capex_result: CapEx roll-forward for the year when a CapEx
            configuration drives depreciation
    """

    year: Year
    period_type: PeriodType
    profit_loss: ProfitLossStatement
    balance_sheet: BalanceSheet
    cash_flow: CashFlowStatement

    converged: bool = True
    balance_sheet_balanced: bool
    cash_flow_reconciled: bool
    iterations_required: int = Field(default=0, ge=0)

    diagnostics: Tuple[DiagnosticEvent, ...] = Field(default_factory=tuple)
    capex_result: Optional[CapExYearResult] = None

    @model_validator(mode="after")
    def validate_statement_years(self) -> "FinancialPeriod":
        """All three statements must belong to the period's year."""
        for statement in (self.profit_loss, self.balance_sheet, self.cash_flow):
            if statement.year != self.year:
                raise ValueError(
                    f"{type(statement).__name__} year {statement.year} "
                    f"does not match period year {self.year}"
                )
        return self

    @property
    def is_historical(self) -> bool:
        return self.period_type is PeriodType.HISTORICAL

    @property
    def has_warnings(self) -> bool:
        return bool(self.diagnostics)


class ValidationIssue(Model):
    """
    One failed consistency check.

    Attributes:
        year: Fiscal year the check ran on
        check: Name of the identity or linkage that failed
        message: Human-readable description
        actual: Value found on the statement
        expected: Value implied by the identity
        difference: ``actual - expected``
        severity: ``ERROR`` fails validation; ``WARNING`` is informational
    """

    year: Year
    check: str
    message: str
    actual: Optional[Decimal] = None
    expected: Optional[Decimal] = None
    difference: Optional[Decimal] = None
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR


class ValidationResult(Model):
    """Issues collected by a validator; valid when no issue is an error."""

    issues: Tuple[ValidationIssue, ...] = Field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.issues if i.severity is DiagnosticSeverity.ERROR)

    @property
    def warnings(self) -> Tuple[ValidationIssue, ...]:
        return tuple(i for i in self.issues if i.severity is DiagnosticSeverity.WARNING)

    def merge(self, *others: "ValidationResult") -> "ValidationResult":
        issues = self.issues
        for other in others:
            issues = issues + other.issues
        return ValidationResult(issues=issues)
