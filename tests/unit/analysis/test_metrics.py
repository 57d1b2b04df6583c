# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for projection metrics.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from longview.analysis import calculate_projection_metrics
from longview.core.calculations import FinancialCalculations
from longview.core.primitives import PeriodType, SystemConfiguration


def close(actual: Decimal, expected: Decimal, tolerance: str = "0.0001") -> bool:
    return abs(actual - expected) <= Decimal(tolerance)


class TestFullChain:
    """Totals and cash metrics over every period."""

    def test_empty_chain_rejected(self, system_config):
        with pytest.raises(ValueError, match="no periods"):
            calculate_projection_metrics([], system_config)

    def test_totals(self, projection_result):
        periods = projection_result.periods
        metrics = projection_result.metrics
        assert close(metrics.total_net_income, sum(p.profit_loss.net_income for p in periods))
        assert close(metrics.total_rent, sum(p.profit_loss.rent_expense for p in periods))
        assert close(metrics.average_ebitda, metrics.total_ebitda / len(periods))

    def test_balances(self, projection_result):
        periods = projection_result.periods
        metrics = projection_result.metrics
        assert metrics.peak_debt == max(p.balance_sheet.debt_balance for p in periods)
        assert metrics.final_cash == periods[-1].balance_sheet.cash

    def test_average_roe(self, projection_result):
        periods = projection_result.periods
        equity = sum(p.balance_sheet.total_equity for p in periods)
        metrics = projection_result.metrics
        assert close(metrics.average_roe, metrics.total_net_income / equity, "1E-12")

    def test_discount_rate_falls_back_to_debt_rate(self, projection_result):
        assert projection_result.metrics.discount_rate == Decimal("0.05")

    def test_explicit_discount_rate(self, projection_result):
        metrics = calculate_projection_metrics(
            projection_result.periods, SystemConfiguration(discount_rate=Decimal("0.08"))
        )
        assert metrics.discount_rate == Decimal("0.08")
        assert metrics.npv != projection_result.metrics.npv

    def test_npv_of_cash_changes(self, projection_result):
        flows = [p.cash_flow.net_change_in_cash for p in projection_result.periods]
        expected = FinancialCalculations.calculate_npv(flows, Decimal("0.05"))
        assert close(projection_result.metrics.npv, expected)


class TestContractWindow:
    """Rent and EBITDA over the dynamic band."""

    def test_window(self, projection_result):
        metrics = projection_result.metrics
        assert metrics.contract_start_year == 2028
        assert metrics.contract_end_year == 2052

    def test_contract_totals(self, projection_result):
        dynamic = projection_result.periods_of(PeriodType.DYNAMIC)
        metrics = projection_result.metrics
        assert close(metrics.contract_total_rent, sum(p.profit_loss.rent_expense for p in dynamic))
        assert metrics.contract_final_cash == dynamic[-1].balance_sheet.cash

    def test_rent_npv_is_an_outflow(self, projection_result):
        metrics = projection_result.metrics
        assert metrics.contract_rent_npv < 0
        assert metrics.annualized_rent > 0

    def test_net_annualized_value(self, projection_result):
        metrics = projection_result.metrics
        factor = FinancialCalculations.calculate_annualization_factor(Decimal("0.05"), 25)
        assert close(metrics.annualization_factor, factor, "1E-15")
        assert close(metrics.annualized_rent, abs(metrics.contract_rent_npv) * factor)
        assert close(metrics.annualized_ebitda, metrics.contract_ebitda_npv * factor)
        assert close(
            metrics.net_annualized_value, metrics.annualized_ebitda - metrics.annualized_rent
        )
        assert close(
            metrics.net_tenant_surplus,
            metrics.contract_ebitda_npv - abs(metrics.contract_rent_npv),
        )

    def test_historical_only_chain_has_empty_window(self, historical_periods, system_config):
        metrics = calculate_projection_metrics(historical_periods, system_config)
        assert metrics.contract_total_rent == 0
        assert metrics.contract_rent_npv == 0
        assert metrics.contract_final_cash == 0
        assert metrics.total_net_income == Decimal("4200000")
