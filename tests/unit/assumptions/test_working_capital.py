# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for working-capital ratios.
"""

from __future__ import annotations

from decimal import Decimal

from longview.assumptions import WorkingCapitalRatios, calculate_working_capital_ratios
from longview.statements import create_simple_profit_loss


class TestRatioMeasurement:
    """Ratios measured on a baseline period."""

    def test_other_revenue_ratio(self, last_historical):
        ratios = calculate_working_capital_ratios(last_historical)
        assert ratios.other_revenue_ratio == Decimal("0.05")
        assert not ratios.locked

    def test_apply_reproduces_baseline(self, last_historical):
        ratios = WorkingCapitalRatios.from_period(last_historical)
        pl = last_historical.profit_loss
        bs = last_historical.balance_sheet
        balances = ratios.apply(pl.total_revenue, pl.total_opex)

        assert abs(balances.accounts_receivable - bs.accounts_receivable) < Decimal("0.01")
        assert abs(balances.prepaid_expenses - bs.prepaid_expenses) < Decimal("0.01")
        assert abs(balances.accounts_payable - bs.accounts_payable) < Decimal("0.01")
        assert abs(balances.accrued_expenses - bs.accrued_expenses) < Decimal("0.01")
        assert abs(balances.deferred_revenue - bs.deferred_revenue) < Decimal("0.01")

    def test_zero_denominators_give_zero_ratios(self, last_historical):
        pl = create_simple_profit_loss(2024, Decimal("0"), Decimal("0"))
        ratios = WorkingCapitalRatios.from_statements(pl, last_historical.balance_sheet)
        assert ratios.ar_percent == 0
        assert ratios.ap_percent == 0
        assert ratios.other_revenue_ratio == 0


class TestApply:
    """Balances from revenue and opex."""

    def test_default_ratios(self):
        balances = WorkingCapitalRatios().apply(Decimal("1000"), Decimal("500"))
        assert balances.accounts_receivable == Decimal("100")
        assert balances.prepaid_expenses == Decimal("25")
        assert balances.accounts_payable == Decimal("40")
        assert balances.accrued_expenses == Decimal("25")
        assert balances.deferred_revenue == Decimal("150")


class TestLocking:
    """Locked ratios are frozen copies."""

    def test_lock_returns_copy(self):
        ratios = WorkingCapitalRatios()
        locked = ratios.lock()
        assert locked.locked
        assert not ratios.locked
        assert locked.ar_percent == ratios.ar_percent

    def test_lock_is_idempotent(self):
        locked = WorkingCapitalRatios().lock()
        assert locked.lock() is locked
