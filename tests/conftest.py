# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for Longview testing.

The builders return a small but internally consistent school: two years of
balanced actuals whose equity links year to year, a dynamic assumption set
with a five-year enrollment ramp, and a ProjectionInput wiring them
together.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

import pytest

from longview.analysis import ProjectionInput, calculate_financial_projections
from longview.assumptions import (
    CurriculumConfig,
    EnrollmentConfig,
    FixedEscalationRent,
    FixedPlusVariableStaffCost,
    WorkingCapitalRatios,
)
from longview.capex import CapExCategory, CapExConfiguration, CapExTransitionEntry
from longview.core.primitives import CapExCategoryType, ProjectionSettings, SystemConfiguration
from longview.periods import (
    DynamicPeriodInput,
    HistoricalBalanceSheetInput,
    HistoricalPeriodInput,
    HistoricalProfitLossInput,
    TransitionPeriodCalculator,
    TransitionPeriodInput,
    calculate_historical_period,
)
from longview.statements import FinancialPeriod


# Historical Utilities
def historical_inputs() -> Tuple[HistoricalPeriodInput, HistoricalPeriodInput]:
    """
    Two balanced years of actuals.

    2023 net income is 1,870,000 and 2024 net income is 2,330,000; 2024
    equity (10,230,000) is 2023 equity plus 2024 net income, and
    accumulated depreciation grows by exactly the 2024 charge.
    """
    year_2023 = HistoricalPeriodInput(
        year=2023,
        profit_loss=HistoricalProfitLossInput(
            tuition_revenue=Decimal("10000000"),
            other_revenue=Decimal("500000"),
            rent_expense=Decimal("2000000"),
            staff_costs=Decimal("5000000"),
            other_opex=Decimal("1000000"),
            depreciation=Decimal("500000"),
            interest_expense=Decimal("100000"),
            interest_income=Decimal("20000"),
            zakat_expense=Decimal("50000"),
        ),
        balance_sheet=HistoricalBalanceSheetInput(
            cash=Decimal("3000000"),
            accounts_receivable=Decimal("1000000"),
            prepaid_expenses=Decimal("400000"),
            property_plant_equipment=Decimal("8000000"),
            accumulated_depreciation=Decimal("2000000"),
            accounts_payable=Decimal("600000"),
            accrued_expenses=Decimal("400000"),
            deferred_revenue=Decimal("1500000"),
            debt=Decimal("2000000"),
            equity=Decimal("7900000"),
        ),
    )
    year_2024 = HistoricalPeriodInput(
        year=2024,
        profit_loss=HistoricalProfitLossInput(
            tuition_revenue=Decimal("11000000"),
            other_revenue=Decimal("550000"),
            rent_expense=Decimal("2100000"),
            staff_costs=Decimal("5400000"),
            other_opex=Decimal("1050000"),
            depreciation=Decimal("550000"),
            interest_expense=Decimal("90000"),
            interest_income=Decimal("25000"),
            zakat_expense=Decimal("55000"),
        ),
        balance_sheet=HistoricalBalanceSheetInput(
            cash=Decimal("5020000"),
            accounts_receivable=Decimal("1100000"),
            prepaid_expenses=Decimal("430000"),
            property_plant_equipment=Decimal("8200000"),
            accumulated_depreciation=Decimal("2550000"),
            accounts_payable=Decimal("650000"),
            accrued_expenses=Decimal("420000"),
            deferred_revenue=Decimal("1650000"),
            debt=Decimal("1800000"),
            equity=Decimal("10230000"),
        ),
    )
    return year_2023, year_2024


def build_historical_periods(
    system_config: Optional[SystemConfiguration] = None,
) -> List[FinancialPeriod]:
    """Historical periods for 2023 and 2024, linked in order."""
    system_config = system_config or SystemConfiguration()
    periods: List[FinancialPeriod] = []
    prior = None
    for year_input in historical_inputs():
        prior = calculate_historical_period(year_input, system_config, prior_period=prior)
        periods.append(prior)
    return periods


# Dynamic Utilities
def dynamic_input(year: int = 2028, **overrides) -> DynamicPeriodInput:
    """
    Dynamic assumptions: 1,200 students reached through a 2028-2032 ramp,
    a 15,000 national fee growing 3% every two years, fixed-plus-variable
    staff, escalating fixed rent and other opex at 8% of revenue.
    """
    data = dict(
        year=year,
        enrollment=EnrollmentConfig(
            ramp_up_enabled=True,
            ramp_up_start_year=2028,
            ramp_up_end_year=2032,
            ramp_up_target_students=1200,
            steady_state_students=1200,
        ),
        curriculum=CurriculumConfig(
            national_curriculum_fee=Decimal("15000"),
            national_tuition_growth_rate=Decimal("0.03"),
            national_tuition_growth_frequency=2,
        ),
        staff=FixedPlusVariableStaffCost(
            fixed_staff_cost=Decimal("5000000"),
            variable_staff_cost_per_student=Decimal("3000"),
        ),
        rent=FixedEscalationRent(
            base_rent=Decimal("2000000"),
            growth_rate=Decimal("0.03"),
            frequency=2,
        ),
        other_opex_percent=Decimal("0.08"),
    )
    data.update(overrides)
    return DynamicPeriodInput(**data)


def capex_config() -> CapExConfiguration:
    """IT reinvested every 5 years, furniture every 10, plus one transition purchase."""
    return CapExConfiguration(
        categories=(
            CapExCategory(
                category_type=CapExCategoryType.IT_EQUIPMENT,
                name="IT Equipment",
                useful_life=5,
                reinvest_frequency=5,
                reinvest_amount=Decimal("500000"),
            ),
            CapExCategory(
                category_type=CapExCategoryType.FURNITURE,
                name="Furniture",
                useful_life=10,
                reinvest_frequency=10,
                reinvest_amount=Decimal("300000"),
            ),
        ),
        transition_entries=(
            CapExTransitionEntry(
                year=2026,
                category_type=CapExCategoryType.IT_EQUIPMENT,
                amount=Decimal("400000"),
            ),
        ),
    )


def projection_input(**overrides) -> ProjectionInput:
    """Full run input with a 25-year contract unless overridden."""
    data = dict(
        historical=historical_inputs(),
        transition=(
            TransitionPeriodInput(year=2025, revenue_growth_rate=Decimal("0.05")),
            TransitionPeriodInput(
                year=2026,
                revenue_growth_rate=Decimal("0.05"),
                rent_growth_percent=Decimal("0.03"),
            ),
            TransitionPeriodInput(year=2027, revenue_growth_rate=Decimal("0.04")),
        ),
        dynamic=dynamic_input(),
    )
    data.update(overrides)
    return ProjectionInput(**data)


# Fixtures
@pytest.fixture
def system_config():
    """Default rates: 2.5% zakat, 5% debt, 2% deposits, 1M minimum cash."""
    return SystemConfiguration()


@pytest.fixture
def settings():
    """Default 25-year contract settings."""
    return ProjectionSettings()


@pytest.fixture
def historical_periods(system_config):
    return build_historical_periods(system_config)


@pytest.fixture
def last_historical(historical_periods):
    return historical_periods[-1]


@pytest.fixture
def locked_ratios(last_historical):
    """Working-capital ratios measured on 2024 and locked."""
    return WorkingCapitalRatios.from_period(last_historical).lock()


@pytest.fixture
def transition_periods(last_historical, system_config, locked_ratios):
    """2025-2027 projected with default pre-fill on top of the 2024 actuals."""
    calculator = TransitionPeriodCalculator()
    periods = []
    prior = last_historical
    for year in (2025, 2026, 2027):
        prior = calculator.calculate(
            TransitionPeriodInput(year=year), system_config, prior, locked_ratios
        )
        periods.append(prior)
    return periods


@pytest.fixture
def base_input():
    return projection_input()


@pytest.fixture(scope="session")
def projection_result():
    """Full 2023-2052 run, computed once per session."""
    return calculate_financial_projections(projection_input())


@pytest.fixture(scope="session")
def capex_projection_result():
    """Full run with a CapEx configuration shared by every projected year."""
    return calculate_financial_projections(projection_input(capex_config=capex_config()))
