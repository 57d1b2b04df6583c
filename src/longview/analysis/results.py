# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Projection result models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from ..assumptions.working_capital import WorkingCapitalRatios
from ..core.primitives import PeriodType
from ..statements.models import DiagnosticEvent, FinancialPeriod, ValidationResult
from .inputs import ProjectionInput
from .metrics import ProjectionMetrics


@dataclass
class ValidationSummary:
    """
    Chain-level consistency summary.

    Attributes:
        all_balanced: Every balance sheet within tolerance
        all_reconciled: Every projected cash flow within tolerance
        max_balance_difference: Largest ``|balance_difference|`` in the chain
        max_reconciliation_difference: Largest projected ``|cash_reconciliation_diff|``
        details: Every statement and linkage check that was run
    """

    all_balanced: bool
    all_reconciled: bool
    max_balance_difference: Decimal
    max_reconciliation_difference: Decimal
    details: ValidationResult

    @property
    def valid(self) -> bool:
        return self.all_balanced and self.all_reconciled and self.details.valid


@dataclass
class PerformanceStats:
    """Timing and solver effort of one run."""

    calculated_at: datetime
    elapsed_ms: float
    total_iterations: int
    average_iterations: float
    projected_periods: int


@dataclass
class ProjectionResult:
    """
    Results of :func:`~longview.analysis.calculate_financial_projections`.

    Attributes:
        periods: One period per fiscal year, in order
        metrics: Headline figures over the chain
        validation: Chain-level consistency summary
        performance: Timing and solver effort
        working_capital_ratios: Locked ratios used for every projected year
        projection_input: The input that produced this result
    """

    periods: List[FinancialPeriod]
    metrics: ProjectionMetrics
    validation: ValidationSummary
    performance: PerformanceStats
    working_capital_ratios: WorkingCapitalRatios
    projection_input: ProjectionInput
    _by_year: Dict[int, FinancialPeriod] = field(init=False, repr=False)

    def __post_init__(self):
        self._by_year = {period.year: period for period in self.periods}

    def period(self, year: int) -> FinancialPeriod:
        """Period for ``year``; raises ``KeyError`` outside the chain."""
        return self._by_year[year]

    def periods_of(self, period_type: PeriodType) -> List[FinancialPeriod]:
        return [p for p in self.periods if p.period_type is period_type]

    @property
    def diagnostics(self) -> List[DiagnosticEvent]:
        """Every diagnostic raised along the chain, in year order."""
        return [event for period in self.periods for event in period.diagnostics]

    @property
    def first_year(self) -> Optional[int]:
        return self.periods[0].year if self.periods else None

    @property
    def last_year(self) -> Optional[int]:
        return self.periods[-1].year if self.periods else None

    def __str__(self) -> str:
        m = self.metrics
        return (
            f"ProjectionResult(\n"
            f"  Years: {self.first_year}-{self.last_year}\n"
            f"  Total Net Income: {m.total_net_income:,.2f}\n"
            f"  Peak Debt: {m.peak_debt:,.2f}\n"
            f"  Final Cash: {m.final_cash:,.2f}\n"
            f"  NAV: {m.net_annualized_value:,.2f}\n"
            f"  Valid: {self.validation.valid}\n"
            f")"
        )
