# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Working-capital ratios.

Ratios are measured once on a baseline (the last historical year) and
then applied to every projected year::

    AR       = total revenue x ar_percent
    Deferred = total revenue x deferred_revenue_percent
    Prepaid  = total opex    x prepaid_percent
    AP       = total opex    x ap_percent
    Accrued  = total opex    x accrued_percent

plus ``other_revenue_ratio`` (other revenue / tuition revenue) which
drives other revenue in the dynamic band. A zero denominator yields a
zero ratio.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from pydantic import Field

from ..core.arithmetic import divide_safe
from ..core.constants import (
    DEFAULT_ACCRUED_PERCENT,
    DEFAULT_AP_PERCENT,
    DEFAULT_AR_PERCENT,
    DEFAULT_DEFERRED_REVENUE_PERCENT,
    DEFAULT_PREPAID_PERCENT,
    ZERO,
)
from ..core.primitives import DEFAULT_DECIMAL_CONTEXT, DecimalContext, Model
from ..statements.models import BalanceSheet, FinancialPeriod, ProfitLossStatement

logger = logging.getLogger(__name__)


class WorkingCapitalBalances(Model):
    """Working-capital balance-sheet lines for one projected year."""

    accounts_receivable: Decimal
    prepaid_expenses: Decimal
    accounts_payable: Decimal
    accrued_expenses: Decimal
    deferred_revenue: Decimal


class WorkingCapitalRatios(Model):
    """
    Baseline ratios applied multiplicatively to revenue and opex.

    Attributes:
        ar_percent: Accounts receivable / total revenue
        prepaid_percent: Prepaid expenses / total opex
        ap_percent: Accounts payable / total opex
        accrued_percent: Accrued expenses / total opex
        deferred_revenue_percent: Deferred revenue / total revenue
        other_revenue_ratio: Other revenue / tuition revenue
        locked: Set once the ratios are fixed for the projection
    """

    ar_percent: Decimal = DEFAULT_AR_PERCENT
    prepaid_percent: Decimal = DEFAULT_PREPAID_PERCENT
    ap_percent: Decimal = DEFAULT_AP_PERCENT
    accrued_percent: Decimal = DEFAULT_ACCRUED_PERCENT
    deferred_revenue_percent: Decimal = DEFAULT_DEFERRED_REVENUE_PERCENT
    other_revenue_ratio: Decimal = ZERO
    locked: bool = Field(default=False, description="Locked ratios are never re-derived.")

    @classmethod
    def from_statements(
        cls,
        profit_loss: ProfitLossStatement,
        balance_sheet: BalanceSheet,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> "WorkingCapitalRatios":
        """Measure every ratio on one year's P&L and balance sheet."""
        revenue = profit_loss.total_revenue
        opex = profit_loss.total_opex
        ratios = cls(
            ar_percent=divide_safe(balance_sheet.accounts_receivable, revenue, ZERO, ctx),
            prepaid_percent=divide_safe(balance_sheet.prepaid_expenses, opex, ZERO, ctx),
            ap_percent=divide_safe(balance_sheet.accounts_payable, opex, ZERO, ctx),
            accrued_percent=divide_safe(balance_sheet.accrued_expenses, opex, ZERO, ctx),
            deferred_revenue_percent=divide_safe(balance_sheet.deferred_revenue, revenue, ZERO, ctx),
            other_revenue_ratio=divide_safe(
                profit_loss.other_revenue, profit_loss.tuition_revenue, ZERO, ctx
            ),
        )
        logger.debug(
            f"Working capital ratios from {profit_loss.year}: "
            f"AR {ratios.ar_percent:.4f}, prepaid {ratios.prepaid_percent:.4f}, "
            f"AP {ratios.ap_percent:.4f}, accrued {ratios.accrued_percent:.4f}, "
            f"deferred {ratios.deferred_revenue_percent:.4f}, "
            f"other revenue {ratios.other_revenue_ratio:.4f}"
        )
        return ratios

    @classmethod
    def from_period(
        cls, period: FinancialPeriod, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT
    ) -> "WorkingCapitalRatios":
        return cls.from_statements(period.profit_loss, period.balance_sheet, ctx)

    def lock(self) -> "WorkingCapitalRatios":
        """Locked copy; the original is left untouched."""
        if self.locked:
            return self
        return self.model_copy(update={"locked": True})

    def apply(
        self,
        total_revenue: Decimal,
        total_opex: Decimal,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> WorkingCapitalBalances:
        """Working-capital balances for a year with the given revenue and opex."""
        with ctx.local():
            return WorkingCapitalBalances(
                accounts_receivable=total_revenue * self.ar_percent,
                prepaid_expenses=total_opex * self.prepaid_percent,
                accounts_payable=total_opex * self.ap_percent,
                accrued_expenses=total_opex * self.accrued_percent,
                deferred_revenue=total_revenue * self.deferred_revenue_percent,
            )


def calculate_working_capital_ratios(
    baseline: FinancialPeriod, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT
) -> WorkingCapitalRatios:
    """Ratios measured on the baseline period, not yet locked."""
    return WorkingCapitalRatios.from_period(baseline, ctx)
