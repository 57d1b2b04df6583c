# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Projection orchestration.

Runs the chain strictly in year order:

1. **Validation**: the shared and per-year CapEx configurations are checked
   up front; a bad configuration raises before any year is computed.
2. **Historical**: actuals, each year linked to the one before.
3. **Ratios**: working-capital ratios are measured on the last historical
   year and locked, unless the input supplies its own.
4. **Transition**: prior-year driven projections.
5. **Dynamic**: fully modeled years to the end of the contract.
6. **Summary**: validation across the chain, metrics and timings.

Each projected calculator receives only the prior period; the CapEx
state (historical depreciation base, virtual-asset pool and per-asset
states) travels on the prior period's ``capex_result``.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import List, Optional

from ..assumptions.working_capital import WorkingCapitalRatios, calculate_working_capital_ratios
from ..capex.calculator import validate_capex_config
from ..core.constants import ZERO
from ..core.primitives import DecimalContext, PeriodType
from ..periods.dynamic import DynamicPeriodCalculator
from ..periods.historical import calculate_historical_period
from ..periods.transition import TransitionPeriodCalculator
from ..statements.models import FinancialPeriod
from ..statements.validators import validate_period_sequence
from .inputs import ProjectionInput
from .metrics import calculate_projection_metrics
from .results import PerformanceStats, ProjectionResult, ValidationSummary

logger = logging.getLogger(__name__)


def calculate_financial_projections(projection_input: ProjectionInput) -> ProjectionResult:
    """
    Compute every period of the projection and summarize the chain.

    Args:
        projection_input: Complete run input

    Returns:
        ProjectionResult with periods, metrics, validation and timings

    Raises:
        ValueError: If the shared or a per-year CapEx configuration is
            invalid, or a dynamic year's enrollment or curriculum
            configuration is invalid

    Example:
        ```python
        result = calculate_financial_projections(projection_input)
        result.period(2030).balance_sheet.debt_balance
        result.metrics.net_annualized_value
        ```
    """
    start = time.perf_counter()
    calculated_at = datetime.now()
    settings = projection_input.settings
    system_config = projection_input.system_config
    ctx = settings.decimal_context

    _validate_capex_configs(projection_input)

    logger.info(
        f"Projection started: {settings.historical_start_year}-{settings.dynamic_end_year} "
        f"({settings.total_period_count} periods, {settings.contract_period_years}-year contract)"
    )

    periods: List[FinancialPeriod] = []
    prior: Optional[FinancialPeriod] = None

    for year_input in projection_input.historical:
        prior = calculate_historical_period(
            year_input, system_config, prior_period=prior, settings=settings
        )
        periods.append(prior)
    logger.info(f"Historical periods completed: {len(periods)}")

    ratios = _resolve_ratios(projection_input, prior, ctx)

    transition = TransitionPeriodCalculator(settings)
    for year in settings.years(PeriodType.TRANSITION):
        prior = transition.calculate(
            projection_input.transition_input(year), system_config, prior, ratios
        )
        periods.append(prior)
    logger.info(f"Transition periods completed through {settings.transition_end_year}")

    dynamic = DynamicPeriodCalculator(settings)
    for year in settings.years(PeriodType.DYNAMIC):
        prior = dynamic.calculate(
            projection_input.dynamic_input(year), system_config, prior, ratios
        )
        periods.append(prior)
    logger.info(f"Dynamic periods completed through {settings.dynamic_end_year}")

    validation = _summarize_validation(periods, ctx)
    metrics = calculate_projection_metrics(periods, system_config, settings, ctx)

    projected = [p for p in periods if not p.is_historical]
    total_iterations = sum(p.iterations_required for p in projected)
    performance = PerformanceStats(
        calculated_at=calculated_at,
        elapsed_ms=(time.perf_counter() - start) * 1000,
        total_iterations=total_iterations,
        average_iterations=total_iterations / len(projected) if projected else 0.0,
        projected_periods=len(projected),
    )

    if not validation.valid:
        logger.warning(
            f"Projection completed with {len(validation.details.errors)} validation errors "
            f"(max imbalance {validation.max_balance_difference:.2f}, "
            f"max reconciliation difference {validation.max_reconciliation_difference:.2f})"
        )
    logger.info(
        f"Projection completed in {performance.elapsed_ms:.1f}ms "
        f"({performance.average_iterations:.1f} solver iterations per projected year)"
    )

    return ProjectionResult(
        periods=periods,
        metrics=metrics,
        validation=validation,
        performance=performance,
        working_capital_ratios=ratios,
        projection_input=projection_input,
    )


def _validate_capex_configs(projection_input: ProjectionInput) -> None:
    """
    Check the shared CapEx configuration and every per-year one.

    Raises:
        ValueError: On the first invalid configuration, naming the year that
            carries it when it is not the shared one
    """
    settings = projection_input.settings
    if projection_input.capex_config is not None:
        validate_capex_config(
            projection_input.capex_config, settings
        ).raise_if_invalid("Invalid CapEx configuration")

    checked = {id(projection_input.capex_config)}
    year_inputs = [
        projection_input.transition_input(year) for year in settings.years(PeriodType.TRANSITION)
    ]
    year_inputs += [
        projection_input.dynamic_input(year) for year in settings.years(PeriodType.DYNAMIC)
    ]
    for year_input in year_inputs:
        config = year_input.capex_config
        if config is None or id(config) in checked:
            continue
        checked.add(id(config))
        validate_capex_config(config, settings).raise_if_invalid(
            f"Invalid CapEx configuration for {year_input.year}"
        )


def _resolve_ratios(
    projection_input: ProjectionInput,
    last_historical: Optional[FinancialPeriod],
    ctx: DecimalContext,
) -> WorkingCapitalRatios:
    if projection_input.working_capital_ratios is not None:
        return projection_input.working_capital_ratios.lock()
    if last_historical is None:
        return WorkingCapitalRatios().lock()
    ratios = calculate_working_capital_ratios(last_historical, ctx).lock()
    logger.info(f"Working capital ratios locked from {last_historical.year}")
    return ratios


def _summarize_validation(periods: List[FinancialPeriod], ctx: DecimalContext) -> ValidationSummary:
    balance_differences = [abs(p.balance_sheet.balance_difference) for p in periods]
    reconciliation_differences = [
        abs(p.cash_flow.cash_reconciliation_diff) for p in periods if not p.is_historical
    ]
    return ValidationSummary(
        all_balanced=all(p.balance_sheet_balanced for p in periods),
        all_reconciled=all(p.cash_flow_reconciled for p in periods if not p.is_historical),
        max_balance_difference=max(balance_differences, default=ZERO),
        max_reconciliation_difference=max(reconciliation_differences, default=ZERO),
        details=validate_period_sequence(periods, ctx.tolerance, ctx),
    )
