# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal
from enum import Enum


class PeriodType(str, Enum):
    """
    Band of the projection a fiscal year belongs to.

    The bands form a strict left-to-right sequence; a chain never re-enters
    an earlier band.
    """

    HISTORICAL = "HISTORICAL"  # Actuals, debt taken as input
    TRANSITION = "TRANSITION"  # Ratio-projected bridge years
    DYNAMIC = "DYNAMIC"  # Fully modeled contract years

    @property
    def is_projected(self) -> bool:
        return self is not PeriodType.HISTORICAL


class NetInterestConvention(str, Enum):
    """
    Sign convention of the ``net_interest`` line on the P&L.

    Historical actuals report interest as income minus expense and add it to
    EBIT; projected years report expense minus income and subtract it.
    Both give the same EBT, but the stored ``net_interest`` differs in sign.
    """

    INCOME_LESS_EXPENSE = "INCOME_LESS_EXPENSE"
    EXPENSE_LESS_INCOME = "EXPENSE_LESS_INCOME"

    @classmethod
    def for_period(cls, period_type: PeriodType) -> "NetInterestConvention":
        if period_type is PeriodType.HISTORICAL:
            return cls.INCOME_LESS_EXPENSE
        return cls.EXPENSE_LESS_INCOME

    def net_interest(self, interest_expense: Decimal, interest_income: Decimal) -> Decimal:
        """Signed net interest line under this convention."""
        if self is NetInterestConvention.INCOME_LESS_EXPENSE:
            return interest_income - interest_expense
        return interest_expense - interest_income

    def apply(self, ebit: Decimal, net_interest: Decimal) -> Decimal:
        """EBT from EBIT and a net interest line stored under this convention."""
        if self is NetInterestConvention.INCOME_LESS_EXPENSE:
            return ebit + net_interest
        return ebit - net_interest


class DepreciationMethod(str, Enum):
    """Depreciation methods recognized on asset records."""

    STRAIGHT_LINE = "STRAIGHT_LINE"
    DECLINING_BALANCE = "DECLINING_BALANCE"  # Reserved: validated, computes zero


class CapExCategoryType(str, Enum):
    """Categories used to group capital spending into virtual assets."""

    IT_EQUIPMENT = "IT_EQUIPMENT"
    FURNITURE = "FURNITURE"
    EDUCATIONAL_EQUIPMENT = "EDUCATIONAL_EQUIPMENT"
    BUILDING = "BUILDING"
    OTHER = "OTHER"


class RentModelKind(str, Enum):
    """Discriminator for the rent model union."""

    FIXED_ESCALATION = "FIXED_ESCALATION"
    REVENUE_SHARE = "REVENUE_SHARE"
    PARTNER_INVESTMENT = "PARTNER_INVESTMENT"


class StaffCostModelKind(str, Enum):
    """Discriminator for the staff cost model union."""

    FIXED_PLUS_VARIABLE = "FIXED_PLUS_VARIABLE"
    REVENUE_PERCENT = "REVENUE_PERCENT"
    RATIO_BASED = "RATIO_BASED"


class DiagnosticSeverity(str, Enum):
    """Severity attached to a diagnostic event."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class DiagnosticCode(str, Enum):
    """
    Machine-readable codes for events recorded while computing a period.

    Deviations are surfaced through these events and the period flags;
    none of them interrupts the calculation.
    """

    BALANCE_SHEET_IMBALANCE = "BALANCE_SHEET_IMBALANCE"
    CASH_FLOW_UNRECONCILED = "CASH_FLOW_UNRECONCILED"
    DEBT_PLUG_CLAMPED = "DEBT_PLUG_CLAMPED"
    SOLVER_NOT_CONVERGED = "SOLVER_NOT_CONVERGED"
    UNTRACKED_FINANCING_ADJUSTMENT = "UNTRACKED_FINANCING_ADJUSTMENT"
    MINIMUM_CASH_BORROWING = "MINIMUM_CASH_BORROWING"
    IMMUTABLE_HISTORICAL_DATA = "IMMUTABLE_HISTORICAL_DATA"
