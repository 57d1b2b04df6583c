# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Period Calculators

Per-year inputs and the historical, transition and dynamic calculators.
Every calculator shares the contract
``(year_input, system_config, prior_period, working_capital_ratios) -> FinancialPeriod``.
"""

from .base import OperatingLines, ProjectedPeriodCalculator, resolve_capex_state
from .dynamic import DynamicPeriodCalculator, calculate_dynamic_period
from .historical import calculate_historical_period
from .inputs import (
    DynamicPeriodInput,
    HistoricalBalanceSheetInput,
    HistoricalPeriodInput,
    HistoricalProfitLossInput,
    TransitionPeriodInput,
)
from .transition import TransitionPeriodCalculator, calculate_transition_period

__all__ = [
    # Inputs
    "DynamicPeriodInput",
    "HistoricalBalanceSheetInput",
    "HistoricalPeriodInput",
    "HistoricalProfitLossInput",
    "TransitionPeriodInput",
    # Calculators
    "DynamicPeriodCalculator",
    "OperatingLines",
    "ProjectedPeriodCalculator",
    "TransitionPeriodCalculator",
    "calculate_dynamic_period",
    "calculate_historical_period",
    "calculate_transition_period",
    "resolve_capex_state",
]
