# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Profit & loss statement generator.

Builds the income statement from already-computed line items:

    Total Revenue = Tuition + Other
    Total OpEx    = Rent + Staff + Other OpEx
    EBITDA        = Total Revenue - Total OpEx
    EBIT          = EBITDA - Depreciation
    EBT           = EBIT -/+ Net Interest (see NetInterestConvention)
    Net Income    = EBT - Zakat

Interest and zakat arrive pre-computed (the circular solver settles them
for projected years).
"""

from __future__ import annotations

from decimal import Decimal

from ..core.constants import ZERO
from ..core.primitives import (
    DEFAULT_DECIMAL_CONTEXT,
    DecimalContext,
    Model,
    NetInterestConvention,
    Year,
)
from .models import ProfitLossStatement


class ProfitLossInput(Model):
    """Line items feeding :func:`generate_profit_loss_statement`."""

    year: Year

    tuition_revenue: Decimal
    other_revenue: Decimal = ZERO

    rent_expense: Decimal = ZERO
    staff_costs: Decimal = ZERO
    other_opex: Decimal = ZERO

    depreciation: Decimal = ZERO
    interest_expense: Decimal = ZERO
    interest_income: Decimal = ZERO
    zakat_expense: Decimal = ZERO


def generate_profit_loss_statement(
    line_items: ProfitLossInput,
    convention: NetInterestConvention = NetInterestConvention.EXPENSE_LESS_INCOME,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> ProfitLossStatement:
    """
    Build a P&L from its line items.

    Args:
        line_items: Revenue, expense, depreciation, interest and zakat
        convention: Sign convention for the stored net interest line
        ctx: Decimal policy

    Returns:
        Statement whose derived fields follow the identities above exactly

    Example:
        ```python
        pl = generate_profit_loss_statement(
            ProfitLossInput(year=2028, tuition_revenue=Decimal("15000000"),
                            staff_costs=Decimal("6000000"))
        )
        pl.ebitda  # Decimal("9000000")
        ```
    """
    with ctx.local():
        total_revenue = line_items.tuition_revenue + line_items.other_revenue
        total_opex = line_items.rent_expense + line_items.staff_costs + line_items.other_opex
        ebitda = total_revenue - total_opex
        ebit = ebitda - line_items.depreciation
        net_interest = convention.net_interest(
            line_items.interest_expense, line_items.interest_income
        )
        ebt = convention.apply(ebit, net_interest)
        net_income = ebt - line_items.zakat_expense

    return ProfitLossStatement(
        year=line_items.year,
        tuition_revenue=line_items.tuition_revenue,
        other_revenue=line_items.other_revenue,
        total_revenue=total_revenue,
        rent_expense=line_items.rent_expense,
        staff_costs=line_items.staff_costs,
        other_opex=line_items.other_opex,
        total_opex=total_opex,
        ebitda=ebitda,
        depreciation=line_items.depreciation,
        ebit=ebit,
        interest_expense=line_items.interest_expense,
        interest_income=line_items.interest_income,
        net_interest=net_interest,
        net_interest_convention=convention,
        ebt=ebt,
        zakat_expense=line_items.zakat_expense,
        net_income=net_income,
    )


def create_simple_profit_loss(
    year: int,
    revenue: Decimal,
    expenses: Decimal,
    depreciation: Decimal = ZERO,
    interest_expense: Decimal = ZERO,
    zakat_expense: Decimal = ZERO,
) -> ProfitLossStatement:
    """P&L with all revenue as tuition and all expenses as other OpEx."""
    return generate_profit_loss_statement(
        ProfitLossInput(
            year=year,
            tuition_revenue=revenue,
            other_opex=expenses,
            depreciation=depreciation,
            interest_expense=interest_expense,
            zakat_expense=zakat_expense,
        )
    )
