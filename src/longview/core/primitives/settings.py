# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from ..constants import (
    DEFAULT_CONTRACT_PERIOD_YEARS,
    DEFAULT_DEBT_INTEREST_RATE,
    DEFAULT_DEPOSIT_INTEREST_RATE,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_MIN_CASH_BALANCE,
    DEFAULT_RELAXATION_FACTOR,
    DEFAULT_ZAKAT_RATE,
    CONVERGENCE_TOLERANCE,
    DYNAMIC_START_YEAR,
    HISTORICAL_END_YEAR,
    HISTORICAL_START_YEAR,
    TRANSITION_END_YEAR,
    TRANSITION_START_YEAR,
)
from .decimal_context import DecimalContext
from .enums import PeriodType
from .model import Model
from .types import DecimalBetween0And1, NonNegativeDecimal, PositiveInt, Year
from .validation import ValidationMixin


class SystemConfiguration(Model):
    """
    Shared, externally supplied rates used by every projected year.

    Usage Examples:
        # Defaults (2.5% zakat, 5% debt, 2% deposits, 1M minimum cash)
        config = SystemConfiguration()

        # Discount future flows at a hurdle instead of the debt rate
        config = SystemConfiguration(discount_rate=Decimal("0.08"))
    """

    zakat_rate: DecimalBetween0And1 = Field(
        default=DEFAULT_ZAKAT_RATE,
        description="Zakat levied on (equity - non-current assets).",
    )
    debt_interest_rate: DecimalBetween0And1 = Field(
        default=DEFAULT_DEBT_INTEREST_RATE,
        description="Annual rate charged on average debt.",
    )
    deposit_interest_rate: DecimalBetween0And1 = Field(
        default=DEFAULT_DEPOSIT_INTEREST_RATE,
        description="Annual rate earned on average cash above the minimum balance.",
    )
    min_cash_balance: NonNegativeDecimal = Field(
        default=DEFAULT_MIN_CASH_BALANCE,
        description="Cash floor; shortfalls below it are funded with new debt.",
    )
    discount_rate: Optional[DecimalBetween0And1] = Field(
        default=None,
        description="Rate for NPV metrics. Falls back to the debt interest rate.",
    )

    @property
    def effective_discount_rate(self) -> Decimal:
        if self.discount_rate is not None:
            return self.discount_rate
        return self.debt_interest_rate


class CircularSolverSettings(Model):
    """Fixed-point iteration controls for the debt/interest/zakat solver."""

    max_iterations: PositiveInt = Field(
        default=DEFAULT_MAX_ITERATIONS, gt=0, description="Iteration cap per year."
    )
    convergence_tolerance: NonNegativeDecimal = Field(
        default=CONVERGENCE_TOLERANCE,
        description="Largest debt/cash change accepted as converged.",
    )
    relaxation_factor: Decimal = Field(
        default=DEFAULT_RELAXATION_FACTOR,
        ge=0,
        lt=1,
        description="Weight kept on the previous estimate (0 = plain substitution).",
    )


class ProjectionSettings(Model, ValidationMixin):
    """
    Year bands, contract length and numeric policy for a projection run.

    The dynamic band starts at ``dynamic_start_year`` and runs for
    ``contract_period_years``; with the default 25-year contract the chain
    spans 30 fiscal years (2023-2052).
    """

    historical_start_year: Year = HISTORICAL_START_YEAR
    historical_end_year: Year = HISTORICAL_END_YEAR
    transition_start_year: Year = TRANSITION_START_YEAR
    transition_end_year: Year = TRANSITION_END_YEAR
    dynamic_start_year: Year = DYNAMIC_START_YEAR
    contract_period_years: Literal[25, 30] = Field(
        default=DEFAULT_CONTRACT_PERIOD_YEARS,
        description="Length of the dynamic (contract) band in years.",
    )
    decimal_context: DecimalContext = Field(default_factory=DecimalContext)
    solver: CircularSolverSettings = Field(default_factory=CircularSolverSettings)

    @model_validator(mode="after")
    def validate_contiguous_bands(self) -> "ProjectionSettings":
        """Bands must be non-empty and follow each other without gaps."""
        self.validate_year_ordering("historical_start_year", "historical_end_year")
        self.validate_year_ordering("transition_start_year", "transition_end_year")
        if self.transition_start_year != self.historical_end_year + 1:
            raise ValueError("Transition band must start the year after the historical band")
        if self.dynamic_start_year != self.transition_end_year + 1:
            raise ValueError("Dynamic band must start the year after the transition band")
        return self

    @property
    def dynamic_end_year(self) -> int:
        return self.dynamic_start_year + self.contract_period_years - 1

    @property
    def total_period_count(self) -> int:
        return self.dynamic_end_year - self.historical_start_year + 1

    def years(self, period_type: Optional[PeriodType] = None) -> List[int]:
        """Fiscal years of one band, or of the whole chain when omitted."""
        bounds = {
            PeriodType.HISTORICAL: (self.historical_start_year, self.historical_end_year),
            PeriodType.TRANSITION: (self.transition_start_year, self.transition_end_year),
            PeriodType.DYNAMIC: (self.dynamic_start_year, self.dynamic_end_year),
        }
        if period_type is None:
            start, end = self.historical_start_year, self.dynamic_end_year
        else:
            start, end = bounds[period_type]
        return list(range(start, end + 1))

    def period_type_for(self, year: int) -> PeriodType:
        """Band containing ``year``; raises ``ValueError`` outside the chain."""
        if self.historical_start_year <= year <= self.historical_end_year:
            return PeriodType.HISTORICAL
        if self.transition_start_year <= year <= self.transition_end_year:
            return PeriodType.TRANSITION
        if self.dynamic_start_year <= year <= self.dynamic_end_year:
            return PeriodType.DYNAMIC
        raise ValueError(
            f"Year {year} is outside the projection "
            f"({self.historical_start_year}-{self.dynamic_end_year})"
        )
