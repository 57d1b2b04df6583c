# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for period, cross-statement and linkage validators.
"""

from __future__ import annotations

from decimal import Decimal

from longview.core.primitives import DecimalContext, DiagnosticSeverity
from longview.statements import (
    is_balance_sheet_balanced,
    is_cash_flow_reconciled,
    validate_financial_period,
    validate_historical_period,
    validate_period_linkage,
    validate_period_sequence,
)


class TestFinancialPeriod:
    """Tests for validate_financial_period."""

    def test_historical_actuals_validate(self, historical_periods):
        for period in historical_periods:
            result = validate_financial_period(period)
            assert result.valid, [issue.message for issue in result.errors]

    def test_cross_statement_net_income(self, last_historical):
        cf = last_historical.cash_flow
        tampered = last_historical.model_copy(
            update={"cash_flow": cf.model_copy(update={"net_income": cf.net_income + 1})}
        )
        checks = {issue.check for issue in validate_financial_period(tampered).errors}
        assert "net_income_cf_pl" in checks

    def test_depreciation_mismatch(self, last_historical):
        cf = last_historical.cash_flow
        tampered = last_historical.model_copy(
            update={"cash_flow": cf.model_copy(update={"depreciation": Decimal("0")})}
        )
        checks = {issue.check for issue in validate_financial_period(tampered).errors}
        assert "depreciation_pl_cf" in checks

    def test_clamped_imbalance_is_a_warning(self, last_historical):
        bs = last_historical.balance_sheet.model_copy(
            update={"balance_difference": Decimal("-400"), "debt_plug_clamped": True}
        )
        period = last_historical.model_copy(update={"balance_sheet": bs})
        result = validate_financial_period(period)
        imbalance = [i for i in result.issues if i.check == "balance_sheet_balanced"]
        assert imbalance[0].severity is DiagnosticSeverity.WARNING

    def test_flag_warnings(self, last_historical):
        period = last_historical.model_copy(update={"converged": False})
        result = validate_financial_period(period)
        assert result.valid
        assert [w.check for w in result.warnings] == ["converged_flag"]

    def test_negative_cash_warning_on_historical(self, last_historical):
        bs = last_historical.balance_sheet.model_copy(update={"cash": Decimal("-1")})
        period = last_historical.model_copy(update={"balance_sheet": bs})
        checks = {w.check for w in validate_historical_period(period).warnings}
        assert "negative_cash" in checks


class TestLinkage:
    """Tests for validate_period_linkage."""

    def test_consecutive_actuals_link(self, historical_periods):
        prior, current = historical_periods
        linkage = validate_period_linkage(prior, current)
        assert linkage.valid
        assert linkage.cash_continuity
        assert linkage.retained_earnings_continuity
        assert linkage.ppe_continuity
        assert linkage.debt_continuity

    def test_broken_cash_continuity(self, historical_periods):
        prior, current = historical_periods
        cf = current.cash_flow.model_copy(update={"beginning_cash": Decimal("0")})
        linkage = validate_period_linkage(prior, current.model_copy(update={"cash_flow": cf}))
        assert not linkage.cash_continuity
        assert not linkage.valid

    def test_accumulated_depreciation_must_not_decrease(self, historical_periods):
        prior, current = historical_periods
        bs = current.balance_sheet.model_copy(update={"accumulated_depreciation": Decimal("0")})
        linkage = validate_period_linkage(prior, current.model_copy(update={"balance_sheet": bs}))
        assert not linkage.ppe_continuity

    def test_debt_continuity(self, historical_periods):
        prior, current = historical_periods
        cf = current.cash_flow.model_copy(update={"debt_repayment": Decimal("0")})
        linkage = validate_period_linkage(prior, current.model_copy(update={"cash_flow": cf}))
        assert not linkage.debt_continuity

    def test_year_gap(self, historical_periods):
        prior, current = historical_periods
        linkage = validate_period_linkage(current, prior)
        assert any(issue.check == "year_sequence" for issue in linkage.result.issues)


class TestSequence:
    """Tests for validate_period_sequence and the quick checks."""

    def test_sequence_valid(self, historical_periods):
        assert validate_period_sequence(historical_periods).valid

    def test_sequence_with_transition(self, historical_periods, transition_periods):
        result = validate_period_sequence(historical_periods + transition_periods)
        assert result.valid, [issue.message for issue in result.errors]

    def test_quick_checks(self, last_historical):
        assert is_balance_sheet_balanced(last_historical)
        assert is_cash_flow_reconciled(last_historical)


class TestRunContext:
    """Validators take their tolerance and arithmetic from the run's context."""

    @staticmethod
    def offset_cash_flow(period, amount: str):
        cf = period.cash_flow
        shifted = cf.model_copy(update={"net_income": cf.net_income + Decimal(amount)})
        return period.model_copy(update={"cash_flow": shifted})

    def test_context_tolerance_is_the_default(self, last_historical):
        tampered = self.offset_cash_flow(last_historical, "0.5")
        loose = DecimalContext(tolerance=Decimal("1"))
        assert "net_income_cf_pl" in {i.check for i in validate_financial_period(tampered).errors}
        assert "net_income_cf_pl" not in {
            i.check for i in validate_financial_period(tampered, ctx=loose).errors
        }

    def test_explicit_tolerance_wins_over_context(self, last_historical):
        tampered = self.offset_cash_flow(last_historical, "0.5")
        loose = DecimalContext(tolerance=Decimal("1"))
        checks = {
            i.check for i in validate_financial_period(tampered, Decimal("0.01"), loose).errors
        }
        assert "net_income_cf_pl" in checks

    def test_sequence_and_quick_checks_accept_context(self, historical_periods):
        ctx = DecimalContext(precision=28)
        assert validate_period_sequence(historical_periods, ctx=ctx).valid
        assert is_balance_sheet_balanced(historical_periods[-1], ctx=ctx)
        assert is_cash_flow_reconciled(historical_periods[-1], ctx=ctx)
