# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Straight-line depreciation under two age conventions.

Configured assets and category (virtual) assets count an asset's age
differently, and both conventions are in use:

- :class:`PoolDepreciation`: ``age = year - purchase_year + 1``; the
  purchase year is age 1 and the asset depreciates while
  ``1 <= age <= useful_life``.
- :class:`CategoryDepreciation`: ``age = year - purchase_year``; the
  purchase year is age 0 and the asset depreciates while
  ``0 <= age < useful_life``.

Both charge ``purchase_amount / useful_life`` per depreciating year, so an
asset depreciates for exactly ``useful_life`` years starting in its
purchase year under either convention. They differ only in the reported
``age``. The two are kept as separate named variants behind
:class:`DepreciationConvention` rather than unified.

Declining balance is a recognized method that charges nothing yet;
:func:`validate_asset` still requires its rate.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import Field

from ..core.arithmetic import straight_line_depreciation
from ..core.constants import HISTORICAL_START_YEAR, ZERO
from ..core.primitives import DEFAULT_DECIMAL_CONTEXT, DecimalContext, DepreciationMethod, Model
from .assets import AssetDepreciationState, CapExAsset, DepreciableAsset

logger = logging.getLogger(__name__)


class DepreciationConvention(ABC):
    """
    Template for one age convention.

    Subclasses define how age is counted and which ages depreciate; the
    expense, accumulation cap and net book value rules are shared.
    """

    def __init__(self, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT):
        self.ctx = ctx

    @abstractmethod
    def age(self, asset: DepreciableAsset, year: int) -> int:
        """Age of ``asset`` in ``year`` under this convention."""
        pass

    @abstractmethod
    def is_depreciating(self, age: int, useful_life: int) -> bool:
        pass

    @abstractmethod
    def is_fully_depreciated(self, age: int, useful_life: int) -> bool:
        pass

    @abstractmethod
    def years_charged(self, age: int) -> int:
        """Number of charges booked up to and including ``age``."""
        pass

    def annual_expense(self, asset: DepreciableAsset, year: int) -> Decimal:
        """Charge for ``year``; zero before purchase and after useful life."""
        if year < asset.purchase_year:
            return ZERO
        if not self.is_depreciating(self.age(asset, year), asset.useful_life):
            return ZERO
        return self._method_expense(asset)

    def asset_state(
        self,
        asset: DepreciableAsset,
        year: int,
        prior_accumulated_depreciation: Optional[Decimal] = None,
    ) -> AssetDepreciationState:
        """
        Depreciation position of ``asset`` in ``year``.

        Pure in its arguments: re-deriving the same year from the same
        prior accumulated depreciation always yields the same state.

        Args:
            asset: Asset to depreciate
            year: Fiscal year
            prior_accumulated_depreciation: Accumulated depreciation at the
                end of the previous year; when omitted it is reconstructed
                from the number of charges since purchase

        Returns:
            State with accumulated depreciation capped at the purchase
            amount and net book value floored at zero
        """
        if year < asset.purchase_year:
            return AssetDepreciationState(
                asset_id=asset.id,
                year=year,
                age=0,
                depreciation_expense=ZERO,
                accumulated_depreciation=ZERO,
                net_book_value=asset.purchase_amount,
                fully_depreciated=False,
            )

        age = self.age(asset, year)
        if self.is_fully_depreciated(age, asset.useful_life):
            return AssetDepreciationState(
                asset_id=asset.id,
                year=year,
                age=age,
                depreciation_expense=ZERO,
                accumulated_depreciation=asset.purchase_amount,
                net_book_value=ZERO,
                fully_depreciated=True,
            )

        expense = self._method_expense(asset)
        with self.ctx.local():
            if prior_accumulated_depreciation is not None:
                accumulated = prior_accumulated_depreciation + expense
            else:
                accumulated = expense * self.years_charged(age)
            accumulated = min(accumulated, asset.purchase_amount)
            net_book_value = max(asset.purchase_amount - accumulated, ZERO)

        return AssetDepreciationState(
            asset_id=asset.id,
            year=year,
            age=age,
            depreciation_expense=expense,
            accumulated_depreciation=accumulated,
            net_book_value=net_book_value,
            fully_depreciated=False,
        )

    def total_expense(self, assets: Iterable[DepreciableAsset], year: int) -> Decimal:
        with self.ctx.local():
            return sum((self.annual_expense(asset, year) for asset in assets), ZERO)

    def _method_expense(self, asset: DepreciableAsset) -> Decimal:
        if asset.depreciation_method is DepreciationMethod.STRAIGHT_LINE:
            return straight_line_depreciation(asset.purchase_amount, asset.useful_life, self.ctx)
        # Declining balance is not active yet
        return ZERO


class PoolDepreciation(DepreciationConvention):
    """Configured assets: the purchase year is age 1."""

    def age(self, asset: DepreciableAsset, year: int) -> int:
        return year - asset.purchase_year + 1

    def is_depreciating(self, age: int, useful_life: int) -> bool:
        return 1 <= age <= useful_life

    def is_fully_depreciated(self, age: int, useful_life: int) -> bool:
        return age > useful_life

    def years_charged(self, age: int) -> int:
        return age


class CategoryDepreciation(DepreciationConvention):
    """Category (virtual) assets: the purchase year is age 0."""

    def age(self, asset: DepreciableAsset, year: int) -> int:
        return year - asset.purchase_year

    def is_depreciating(self, age: int, useful_life: int) -> bool:
        return 0 <= age < useful_life

    def is_fully_depreciated(self, age: int, useful_life: int) -> bool:
        return age >= useful_life

    def years_charged(self, age: int) -> int:
        return age + 1


class TotalDepreciationResult(Model):
    """Pool depreciation for one year, split by existing and planned assets."""

    year: int
    existing_assets_depreciation: Decimal
    new_assets_depreciation: Decimal
    total_depreciation: Decimal
    asset_states: Tuple[AssetDepreciationState, ...] = Field(default_factory=tuple)


class PPETracker(Model):
    """PP&E position of the asset pool at year end."""

    year: int
    gross_ppe: Decimal
    accumulated_depreciation: Decimal
    net_ppe: Decimal
    active_assets: int
    fully_depreciated_assets: int


def calculate_total_depreciation(
    existing_assets: Sequence[CapExAsset],
    new_assets: Sequence[CapExAsset],
    year: int,
    prior_asset_states: Optional[Sequence[AssetDepreciationState]] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> TotalDepreciationResult:
    """
    Depreciate every configured asset for ``year`` with the pool convention.

    Args:
        existing_assets: Assets owned at the base date
        new_assets: Planned assets
        year: Fiscal year
        prior_asset_states: Previous year's states, used to roll
            accumulated depreciation forward by asset id
    """
    convention = PoolDepreciation(ctx)
    prior_by_id: Dict[str, Decimal] = {
        state.asset_id: state.accumulated_depreciation for state in prior_asset_states or ()
    }

    states: List[AssetDepreciationState] = []
    existing_total = ZERO
    new_total = ZERO
    with ctx.local():
        for asset in existing_assets:
            state = convention.asset_state(asset, year, prior_by_id.get(asset.id))
            states.append(state)
            existing_total += state.depreciation_expense
        for asset in new_assets:
            state = convention.asset_state(asset, year, prior_by_id.get(asset.id))
            states.append(state)
            new_total += state.depreciation_expense
        total = existing_total + new_total

    return TotalDepreciationResult(
        year=year,
        existing_assets_depreciation=existing_total,
        new_assets_depreciation=new_total,
        total_depreciation=total,
        asset_states=tuple(states),
    )


def generate_depreciation_schedule(
    existing_assets: Sequence[CapExAsset],
    new_assets: Sequence[CapExAsset],
    start_year: int,
    end_year: int,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> List[TotalDepreciationResult]:
    """Pool depreciation for each year in ``[start_year, end_year]``."""
    if end_year < start_year:
        raise ValueError(f"end_year {end_year} precedes start_year {start_year}")

    schedule: List[TotalDepreciationResult] = []
    prior_states: Optional[Tuple[AssetDepreciationState, ...]] = None
    for year in range(start_year, end_year + 1):
        result = calculate_total_depreciation(existing_assets, new_assets, year, prior_states, ctx)
        schedule.append(result)
        prior_states = result.asset_states
    logger.debug(
        f"Depreciation schedule {start_year}-{end_year}: "
        f"{len(existing_assets) + len(new_assets)} pool assets"
    )
    return schedule


def calculate_ppe_tracker(
    depreciation_result: TotalDepreciationResult,
    prior_gross_ppe: Decimal,
    capex_spending: Decimal,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> PPETracker:
    """Roll gross PP&E forward and count active vs fully depreciated assets."""
    states = depreciation_result.asset_states
    with ctx.local():
        gross_ppe = prior_gross_ppe + capex_spending
        accumulated = sum((state.accumulated_depreciation for state in states), ZERO)
        net_ppe = max(gross_ppe - accumulated, ZERO)
    fully_depreciated = sum(1 for state in states if state.fully_depreciated)

    return PPETracker(
        year=depreciation_result.year,
        gross_ppe=gross_ppe,
        accumulated_depreciation=accumulated,
        net_ppe=net_ppe,
        active_assets=len(states) - fully_depreciated,
        fully_depreciated_assets=fully_depreciated,
    )


def validate_asset(
    asset: DepreciableAsset,
    earliest_year: int = HISTORICAL_START_YEAR,
    latest_year: Optional[int] = None,
) -> List[str]:
    """
    Configuration errors for one asset.

    Args:
        asset: Asset to check
        earliest_year: First acceptable purchase year
        latest_year: Last acceptable purchase year (unbounded when omitted)

    Returns:
        Error messages; empty when the asset is valid
    """
    errors: List[str] = []
    if asset.purchase_amount <= 0:
        errors.append(f"Asset {asset.id}: Purchase amount must be positive")
    if asset.useful_life <= 0:
        errors.append(f"Asset {asset.id}: Useful life must be positive")
    if asset.purchase_year < earliest_year or (
        latest_year is not None and asset.purchase_year > latest_year
    ):
        errors.append(f"Asset {asset.id}: Invalid purchase year {asset.purchase_year}")
    if (
        asset.depreciation_method is DepreciationMethod.DECLINING_BALANCE
        and not asset.depreciation_rate
    ):
        errors.append(f"Asset {asset.id}: Declining balance requires depreciation rate")
    if asset.accumulated_depreciation > asset.purchase_amount:
        errors.append(f"Asset {asset.id}: Accumulated depreciation exceeds purchase amount")
    return errors
