# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Balance sheet generator and debt plug.

For projected years debt is solved, not input:

    Debt = max(0, Total Assets - Total Current Liabilities - Total Equity)

which makes Assets = Liabilities + Equity by construction. When the plug
would be negative (cash and equity already cover all assets) debt is
floored at zero, the sheet is flagged ``debt_plug_clamped`` and carries the
resulting imbalance in ``balance_difference``.

Historical years pass the actual debt as ``fixed_debt_balance`` and report
``balance_difference`` without forcing it to zero.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ..core.constants import ZERO
from ..core.primitives import DEFAULT_DECIMAL_CONTEXT, DecimalContext, Model, Year
from .models import BalanceSheet

logger = logging.getLogger(__name__)


class BalanceSheetInput(Model):
    """Independently computed lines feeding :func:`generate_balance_sheet`."""

    year: Year

    # Current assets
    cash: Decimal
    accounts_receivable: Decimal = ZERO
    prepaid_expenses: Decimal = ZERO

    # Non-current assets
    gross_ppe: Decimal = ZERO
    accumulated_depreciation: Decimal = ZERO

    # Current liabilities
    accounts_payable: Decimal = ZERO
    accrued_expenses: Decimal = ZERO
    deferred_revenue: Decimal = ZERO

    # Used only when neither the plug nor a fixed balance applies
    debt_balance: Optional[Decimal] = None

    # Equity
    retained_earnings: Decimal
    net_income_current_year: Decimal


def calculate_debt_plug(
    total_assets: Decimal,
    total_current_liabilities: Decimal,
    total_equity: Decimal,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Decimal:
    """
    Debt that balances the sheet, floored at zero.

    Example:
        ```python
        calculate_debt_plug(Decimal("1000"), Decimal("200"), Decimal("300"))
        # Decimal("500")
        ```
    """
    with ctx.local():
        return max(total_assets - total_current_liabilities - total_equity, ZERO)


def update_retained_earnings(prior: BalanceSheet) -> Decimal:
    """Opening retained earnings: the prior year's total equity."""
    return prior.total_equity


def generate_balance_sheet(
    lines: BalanceSheetInput,
    use_debt_plug: bool = True,
    fixed_debt_balance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> BalanceSheet:
    """
    Build a balance sheet.

    Args:
        lines: Asset, working-capital and equity lines
        use_debt_plug: Solve debt as the balancing plug
        fixed_debt_balance: Use this debt instead of the plug
        ctx: Decimal policy

    Returns:
        Balance sheet with totals and ``balance_difference``
    """
    with ctx.local():
        total_current_assets = lines.cash + lines.accounts_receivable + lines.prepaid_expenses
        property_plant_equipment = lines.gross_ppe - lines.accumulated_depreciation
        total_non_current_assets = property_plant_equipment
        total_assets = total_current_assets + total_non_current_assets

        total_current_liabilities = (
            lines.accounts_payable + lines.accrued_expenses + lines.deferred_revenue
        )
        total_equity = lines.retained_earnings + lines.net_income_current_year

        clamped = False
        if fixed_debt_balance is not None:
            debt_balance = fixed_debt_balance
        elif use_debt_plug:
            unclamped = total_assets - total_current_liabilities - total_equity
            debt_balance = max(unclamped, ZERO)
            if unclamped < 0:
                clamped = True
                logger.warning(
                    f"Year {lines.year}: debt plug is negative ({unclamped:.2f}); setting debt to zero"
                )
        else:
            debt_balance = lines.debt_balance if lines.debt_balance is not None else ZERO

        total_non_current_liabilities = debt_balance
        total_liabilities = total_current_liabilities + total_non_current_liabilities
        balance_difference = total_assets - (total_liabilities + total_equity)

    return BalanceSheet(
        year=lines.year,
        cash=lines.cash,
        accounts_receivable=lines.accounts_receivable,
        prepaid_expenses=lines.prepaid_expenses,
        total_current_assets=total_current_assets,
        gross_ppe=lines.gross_ppe,
        accumulated_depreciation=lines.accumulated_depreciation,
        property_plant_equipment=property_plant_equipment,
        total_non_current_assets=total_non_current_assets,
        total_assets=total_assets,
        accounts_payable=lines.accounts_payable,
        accrued_expenses=lines.accrued_expenses,
        deferred_revenue=lines.deferred_revenue,
        total_current_liabilities=total_current_liabilities,
        debt_balance=debt_balance,
        total_non_current_liabilities=total_non_current_liabilities,
        total_liabilities=total_liabilities,
        retained_earnings=lines.retained_earnings,
        net_income_current_year=lines.net_income_current_year,
        total_equity=total_equity,
        balance_difference=balance_difference,
        debt_plug_clamped=clamped,
    )
