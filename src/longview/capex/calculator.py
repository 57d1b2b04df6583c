# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
CapEx spending, virtual-asset creation and PP&E roll-forward.

Spending sources by band:

- Historical: none (PP&E is an actual).
- Transition: manual :class:`CapExTransitionEntry` amounts for the year,
  each category's total becoming one new virtual asset.
- Dynamic: categories whose reinvestment cycle is due (when
  auto-reinvestment is enabled), each becoming one new virtual asset, plus
  manually entered virtual assets already in the pool and dated this year.
- Transition and dynamic: planned pool assets (``new_assets``) purchased
  this year.

Depreciation for a projected year is the historical base charge, plus
pool-convention depreciation of configured assets, plus
category-convention depreciation of the whole virtual-asset pool
(including assets created this year).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import Field

from ..core.constants import (
    DYNAMIC_START_YEAR,
    MAX_REINVEST_FREQUENCY,
    MIN_REINVEST_FREQUENCY,
    ZERO,
)
from ..core.primitives import (
    DEFAULT_DECIMAL_CONTEXT,
    CapExCategoryType,
    ConfigValidation,
    DecimalContext,
    Model,
    PeriodType,
    ProjectionSettings,
)
from .assets import (
    AssetDepreciationState,
    CapExCategory,
    CapExConfiguration,
    CapExVirtualAsset,
    CapExYearResult,
    HistoricalDepreciationState,
)
from .depreciation import CategoryDepreciation, calculate_total_depreciation, validate_asset

logger = logging.getLogger(__name__)


class CapExSpending(Model):
    """Spending booked in one year."""

    total: Decimal
    by_category: Dict[CapExCategoryType, Decimal] = Field(default_factory=dict)
    asset_generating: Dict[CapExCategoryType, Decimal] = Field(
        default_factory=dict,
        description="Category amounts that create new virtual assets this year.",
    )


def is_reinvestment_due(
    category: CapExCategory,
    year: int,
    base_year: int = DYNAMIC_START_YEAR,
) -> bool:
    """
    Whether ``category`` reinvests in ``year``.

    The cycle starts at ``reinvest_start_year`` (or ``base_year``) and fires
    every ``reinvest_frequency`` years after it; the start year itself
    never fires.
    """
    if not category.reinvest_frequency:
        return False
    start_year = (
        category.reinvest_start_year if category.reinvest_start_year is not None else base_year
    )
    years_since_start = year - start_year
    if years_since_start <= 0:
        return False
    return years_since_start % category.reinvest_frequency == 0


def calculate_capex_spending(
    year: int,
    config: CapExConfiguration,
    period_type: PeriodType,
    virtual_assets: Sequence[CapExVirtualAsset] = (),
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    base_year: int = DYNAMIC_START_YEAR,
) -> CapExSpending:
    """
    Spending for ``year`` in the given band.

    Args:
        year: Fiscal year
        config: CapEx configuration
        period_type: Band of ``year``
        virtual_assets: Pool carried in from the prior year
        base_year: First dynamic year; reinvestment cycles without their
            own start year count from it

    Returns:
        Total and per-category spending, and the portion that creates new
        virtual assets
    """
    if period_type is PeriodType.HISTORICAL:
        return CapExSpending(total=ZERO)

    by_category: Dict[CapExCategoryType, Decimal] = {}
    asset_generating: Dict[CapExCategoryType, Decimal] = {}

    with ctx.local():
        if period_type is PeriodType.TRANSITION:
            for entry in config.transition_entries:
                if entry.year == year:
                    _accumulate(by_category, entry.category_type, entry.amount)
                    _accumulate(asset_generating, entry.category_type, entry.amount)
        else:
            if config.auto_reinvest_enabled:
                for category in config.categories:
                    if is_reinvestment_due(category, year, base_year) and category.reinvest_amount:
                        _accumulate(by_category, category.category_type, category.reinvest_amount)
                        _accumulate(
                            asset_generating, category.category_type, category.reinvest_amount
                        )
        # Manual virtual assets already sit in the pool; count their cost only
        for asset in virtual_assets:
            if asset.purchase_year == year and not asset.auto_generated:
                _accumulate(by_category, asset.category_type, asset.purchase_amount)

        total = sum(by_category.values(), ZERO)
        for asset in config.new_assets:
            if asset.purchase_year == year:
                total += asset.purchase_amount

    return CapExSpending(total=total, by_category=by_category, asset_generating=asset_generating)


def create_virtual_asset(
    category: CapExCategory, year: int, amount: Decimal
) -> CapExVirtualAsset:
    """Virtual asset for one category's spending in ``year``."""
    return CapExVirtualAsset(
        id=f"{category.category_type.value}-{year}",
        category_type=category.category_type,
        purchase_year=year,
        purchase_amount=amount,
        useful_life=category.useful_life,
        auto_generated=True,
    )


def generate_virtual_assets_for_year(
    year: int,
    spending_by_category: Dict[CapExCategoryType, Decimal],
    config: CapExConfiguration,
) -> Tuple[CapExVirtualAsset, ...]:
    """
    One virtual asset per category with positive spending.

    Spending on a category that is not configured creates no asset (the
    configuration validator reports such entries).
    """
    assets: List[CapExVirtualAsset] = []
    for category_type, amount in spending_by_category.items():
        if amount <= 0:
            continue
        category = config.category(category_type)
        if category is None:
            logger.warning(
                f"Year {year}: no CapEx category {category_type.value}; "
                f"spending not capitalized as an asset"
            )
            continue
        assets.append(create_virtual_asset(category, year, amount))
    return tuple(assets)


def calculate_capex_year_result(
    year: int,
    config: CapExConfiguration,
    period_type: PeriodType,
    prior_gross_ppe: Decimal,
    prior_accumulated_depreciation: Decimal,
    historical_state: Optional[HistoricalDepreciationState] = None,
    virtual_assets: Optional[Sequence[CapExVirtualAsset]] = None,
    prior_asset_states: Optional[Sequence[AssetDepreciationState]] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    base_year: int = DYNAMIC_START_YEAR,
) -> CapExYearResult:
    """
    Spending, depreciation and PP&E roll-forward for one year.

    Args:
        year: Fiscal year
        config: CapEx configuration
        period_type: Band of ``year``
        prior_gross_ppe: Gross PP&E at the end of the prior year
        prior_accumulated_depreciation: Accumulated depreciation at the end
            of the prior year
        historical_state: Historical depreciation base before this year
        virtual_assets: Pool carried from the prior year; defaults to the
            configured manual virtual assets
        prior_asset_states: Prior pool-asset states
        base_year: First dynamic year, anchoring reinvestment cycles

    Returns:
        Year result carrying the pool, historical state and asset states
        to thread into the next year
    """
    pool = tuple(config.virtual_assets if virtual_assets is None else virtual_assets)

    spending = calculate_capex_spending(year, config, period_type, pool, ctx, base_year)
    new_virtual_assets = generate_virtual_assets_for_year(year, spending.asset_generating, config)
    updated_pool = pool + new_virtual_assets

    historical_depreciation = ZERO
    next_historical_state = historical_state
    if historical_state is not None and period_type.is_projected:
        historical_depreciation = historical_state.depreciation_for_year()
        next_historical_state = historical_state.advance()

    pool_result = calculate_total_depreciation(
        config.existing_assets, config.new_assets, year, prior_asset_states, ctx
    )
    virtual_asset_depreciation = CategoryDepreciation(ctx).total_expense(updated_pool, year)

    with ctx.local():
        total_depreciation = (
            historical_depreciation + pool_result.total_depreciation + virtual_asset_depreciation
        )
        gross_ppe = prior_gross_ppe + spending.total
        accumulated_depreciation = prior_accumulated_depreciation + total_depreciation
        net_ppe = gross_ppe - accumulated_depreciation

    logger.debug(
        f"CapEx {year}: spending={spending.total} depreciation={total_depreciation} "
        f"new_assets={len(new_virtual_assets)} pool={len(updated_pool)}"
    )

    return CapExYearResult(
        year=year,
        spending=spending.total,
        spending_by_category=spending.by_category,
        historical_depreciation=historical_depreciation,
        pool_depreciation=pool_result.total_depreciation,
        virtual_asset_depreciation=virtual_asset_depreciation,
        total_depreciation=total_depreciation,
        gross_ppe=gross_ppe,
        accumulated_depreciation=accumulated_depreciation,
        net_ppe=net_ppe,
        new_virtual_assets=new_virtual_assets,
        virtual_asset_pool=updated_pool,
        asset_states=pool_result.asset_states,
        historical_state=next_historical_state,
    )


def generate_capex_schedule(
    config: CapExConfiguration,
    settings: Optional[ProjectionSettings] = None,
) -> Dict[int, CapExYearResult]:
    """
    CapEx roll-forward for every projected year.

    Starts from ``config.historical_state`` (required) at the end of the
    last historical year and runs through the end of the contract.

    Raises:
        ValueError: If the configuration has no historical state
    """
    settings = settings or ProjectionSettings()
    if config.historical_state is None:
        raise ValueError("generate_capex_schedule requires a historical depreciation state")

    ctx = settings.decimal_context
    results: Dict[int, CapExYearResult] = {}
    gross_ppe = config.historical_state.gross_ppe
    accumulated = config.historical_state.accumulated_depreciation
    historical_state: Optional[HistoricalDepreciationState] = config.historical_state
    pool: Tuple[CapExVirtualAsset, ...] = config.virtual_assets
    asset_states: Optional[Tuple[AssetDepreciationState, ...]] = None

    for year in range(settings.transition_start_year, settings.dynamic_end_year + 1):
        result = calculate_capex_year_result(
            year,
            config,
            settings.period_type_for(year),
            gross_ppe,
            accumulated,
            historical_state,
            pool,
            asset_states,
            ctx,
            settings.dynamic_start_year,
        )
        results[year] = result
        gross_ppe = result.gross_ppe
        accumulated = result.accumulated_depreciation
        historical_state = result.historical_state
        pool = result.virtual_asset_pool
        asset_states = result.asset_states

    return results


def get_reinvestment_schedule(
    config: CapExConfiguration,
    dynamic_start_year: int = DYNAMIC_START_YEAR,
    end_year: Optional[int] = None,
) -> Dict[CapExCategoryType, List[int]]:
    """Years in which each category reinvests, omitting categories that never do."""
    end_year = end_year if end_year is not None else ProjectionSettings().dynamic_end_year
    schedule: Dict[CapExCategoryType, List[int]] = {}
    for category in config.categories:
        start_year = (
            category.reinvest_start_year
            if category.reinvest_start_year is not None
            else dynamic_start_year
        )
        years = [
            year
            for year in range(start_year, end_year + 1)
            if is_reinvestment_due(category, year, dynamic_start_year)
        ]
        if years:
            schedule[category.category_type] = years
    return schedule


def validate_capex_config(
    config: CapExConfiguration,
    settings: Optional[ProjectionSettings] = None,
) -> ConfigValidation:
    """
    Configuration errors for a CapEx setup.

    Must be checked before running a projection; the calculators assume a
    valid configuration.

    Returns:
        ``ConfigValidation`` listing every problem found
    """
    settings = settings or ProjectionSettings()
    errors: List[str] = []

    if not config.categories:
        errors.append("No CapEx categories configured")

    for category in config.categories:
        if category.useful_life <= 0:
            errors.append(f"Category {category.name}: Invalid useful life")
        if category.reinvest_frequency is not None and not (
            MIN_REINVEST_FREQUENCY <= category.reinvest_frequency <= MAX_REINVEST_FREQUENCY
        ):
            errors.append(
                f"Category {category.name}: Reinvestment frequency must be "
                f"{MIN_REINVEST_FREQUENCY}-{MAX_REINVEST_FREQUENCY} years"
            )
        if category.reinvest_amount is not None and category.reinvest_amount <= 0:
            errors.append(f"Category {category.name}: Reinvestment amount must be positive")

    state = config.historical_state
    if state is not None:
        if state.gross_ppe <= 0:
            errors.append("Invalid historical depreciation state: gross PP&E must be positive")
        if state.annual_depreciation < 0 or state.remaining_to_depreciate < 0:
            errors.append("Invalid historical depreciation state: negative depreciation values")
        if config.existing_assets:
            errors.append(
                "Historical PP&E defined twice: use either historical_state or existing_assets"
            )

    for entry in config.transition_entries:
        if not settings.transition_start_year <= entry.year <= settings.transition_end_year:
            errors.append(f"Transition CapEx entry year {entry.year} is outside the transition period")
        if entry.amount <= 0:
            errors.append(f"Transition CapEx entry {entry.year}: Amount must be positive")
        if config.category(entry.category_type) is None:
            errors.append(
                f"Transition CapEx entry {entry.year}: Unknown category {entry.category_type.value}"
            )

    for asset in config.pool_assets + config.virtual_assets:
        errors.extend(
            validate_asset(asset, settings.historical_start_year, settings.dynamic_end_year)
        )

    return ConfigValidation.from_errors(errors)


def _accumulate(
    totals: Dict[CapExCategoryType, Decimal], category_type: CapExCategoryType, amount: Decimal
) -> None:
    totals[category_type] = totals.get(category_type, ZERO) + amount
