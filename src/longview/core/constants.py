# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Engine-wide constants: numeric policy, default rates, tolerances and the
fiscal-year layout of the projection.
"""

from decimal import Decimal

ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)

# Numeric policy
DECIMAL_PRECISION = 20
CURRENCY_TOLERANCE = Decimal("0.01")
BALANCE_SHEET_TOLERANCE = CURRENCY_TOLERANCE
CASH_FLOW_TOLERANCE = CURRENCY_TOLERANCE
CONVERGENCE_TOLERANCE = CURRENCY_TOLERANCE

# IRR search
DEFAULT_IRR_GUESS = Decimal("0.1")
DEFAULT_IRR_MAX_ITERATIONS = 100
DEFAULT_IRR_TOLERANCE = Decimal("0.0001")

# System defaults
DEFAULT_ZAKAT_RATE = Decimal("0.025")
DEFAULT_DEBT_INTEREST_RATE = Decimal("0.05")
DEFAULT_DEPOSIT_INTEREST_RATE = Decimal("0.02")
DEFAULT_MIN_CASH_BALANCE = Decimal("1000000")

# Circular solver
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_RELAXATION_FACTOR = Decimal("0.5")

# Working capital defaults (share of revenue or OpEx)
DEFAULT_AR_PERCENT = Decimal("0.10")
DEFAULT_PREPAID_PERCENT = Decimal("0.05")
DEFAULT_AP_PERCENT = Decimal("0.08")
DEFAULT_ACCRUED_PERCENT = Decimal("0.05")
DEFAULT_DEFERRED_REVENUE_PERCENT = Decimal("0.15")

# Fiscal-year layout
HISTORICAL_START_YEAR = 2023
HISTORICAL_END_YEAR = 2024
TRANSITION_START_YEAR = 2025
TRANSITION_END_YEAR = 2027
DYNAMIC_START_YEAR = 2028
CONTRACT_PERIOD_OPTIONS = (25, 30)
DEFAULT_CONTRACT_PERIOD_YEARS = 25

# Ramp-up tables index at most this many years from the ramp start
RAMP_PLAN_YEARS = 5

# CapEx limits
MIN_REINVEST_FREQUENCY = 1
MAX_REINVEST_FREQUENCY = 30
MONTHS_PER_YEAR = 12
