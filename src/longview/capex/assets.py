# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
CapEx records: depreciable assets, spending categories, transition entries,
the historical depreciation base and the per-year roll-forward result.

Asset fields are deliberately unconstrained beyond their types. Invalid
useful lives, amounts or purchase years are reported by
:func:`longview.capex.calculator.validate_capex_config` as an error list
instead of failing at construction, so a caller can surface every problem
in one pass.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from pydantic import Field

from ..core.constants import ZERO
from ..core.primitives import CapExCategoryType, DepreciationMethod, Model

if TYPE_CHECKING:
    from ..statements.models import FinancialPeriod


class DepreciableAsset(Model):
    """Fields shared by every depreciable unit."""

    id: str
    purchase_year: int
    purchase_amount: Decimal
    useful_life: int
    depreciation_method: DepreciationMethod = DepreciationMethod.STRAIGHT_LINE
    depreciation_rate: Optional[Decimal] = Field(
        default=None, description="Required for declining balance."
    )
    accumulated_depreciation: Decimal = ZERO


class CapExAsset(DepreciableAsset):
    """
    Explicitly configured asset (existing at the base date or planned).

    Depreciated with the pool convention, see
    :class:`~longview.capex.depreciation.PoolDepreciation`.
    """

    name: Optional[str] = None


class CapExVirtualAsset(DepreciableAsset):
    """
    Asset created from category spending.

    Virtual assets are appended to the pool carried into the next year and
    are never removed. Depreciated with the category convention, see
    :class:`~longview.capex.depreciation.CategoryDepreciation`.
    """

    category_type: CapExCategoryType
    auto_generated: bool = Field(
        default=False, description="True for assets created by the engine from spending."
    )


class AssetDepreciationState(Model):
    """Depreciation position of one asset in one year."""

    asset_id: str
    year: int
    age: int
    depreciation_expense: Decimal
    accumulated_depreciation: Decimal
    net_book_value: Decimal
    fully_depreciated: bool


class CapExCategory(Model):
    """
    Spending category with its useful life and reinvestment cycle.

    Reinvestment is due in ``year`` when ``year > start`` and
    ``(year - start) % reinvest_frequency == 0``, where ``start`` is
    ``reinvest_start_year`` or the first dynamic year.
    """

    category_type: CapExCategoryType
    name: str
    useful_life: int
    reinvest_frequency: Optional[int] = None
    reinvest_amount: Optional[Decimal] = None
    reinvest_start_year: Optional[int] = None


class CapExTransitionEntry(Model):
    """Manual spending booked in a transition year."""

    year: int
    category_type: CapExCategoryType
    amount: Decimal
    description: Optional[str] = None


class HistoricalDepreciationState(Model):
    """
    PP&E carried over from the last historical year.

    The historical base keeps depreciating at ``annual_depreciation`` until
    ``remaining_to_depreciate`` is exhausted; the final charge is capped at
    what remains.
    """

    gross_ppe: Decimal
    accumulated_depreciation: Decimal
    annual_depreciation: Decimal
    remaining_to_depreciate: Decimal

    @classmethod
    def from_period(cls, period: "FinancialPeriod") -> "HistoricalDepreciationState":
        """Derive the base from a historical period's balance sheet and P&L."""
        balance_sheet = period.balance_sheet
        return cls(
            gross_ppe=balance_sheet.gross_ppe,
            accumulated_depreciation=balance_sheet.accumulated_depreciation,
            annual_depreciation=period.profit_loss.depreciation,
            remaining_to_depreciate=max(balance_sheet.property_plant_equipment, ZERO),
        )

    def depreciation_for_year(self) -> Decimal:
        if self.remaining_to_depreciate <= 0:
            return ZERO
        return min(self.annual_depreciation, self.remaining_to_depreciate)

    def advance(self) -> "HistoricalDepreciationState":
        """State after one more year of depreciation."""
        charge = self.depreciation_for_year()
        return HistoricalDepreciationState(
            gross_ppe=self.gross_ppe,
            accumulated_depreciation=self.accumulated_depreciation + charge,
            annual_depreciation=self.annual_depreciation,
            remaining_to_depreciate=max(self.remaining_to_depreciate - charge, ZERO),
        )


class CapExConfiguration(Model):
    """
    Everything that drives capital spending and depreciation.

    Attributes:
        categories: Spending categories with useful lives and cycles
        historical_state: Depreciation base carried from actuals; derived
            from the last historical period when omitted and no
            ``existing_assets`` describe the base instead
        transition_entries: Manual spending in transition years
        virtual_assets: Manually entered category assets (seed of the pool)
        existing_assets: Assets owned at the base date
        new_assets: Explicitly planned future assets
        auto_reinvest_enabled: Whether category reinvestment cycles fire
    """

    categories: Tuple[CapExCategory, ...] = Field(default_factory=tuple)
    historical_state: Optional[HistoricalDepreciationState] = None
    transition_entries: Tuple[CapExTransitionEntry, ...] = Field(default_factory=tuple)
    virtual_assets: Tuple[CapExVirtualAsset, ...] = Field(default_factory=tuple)
    existing_assets: Tuple[CapExAsset, ...] = Field(default_factory=tuple)
    new_assets: Tuple[CapExAsset, ...] = Field(default_factory=tuple)
    auto_reinvest_enabled: bool = True

    def category(self, category_type: CapExCategoryType) -> Optional[CapExCategory]:
        for category in self.categories:
            if category.category_type is category_type:
                return category
        return None

    @property
    def pool_assets(self) -> Tuple[CapExAsset, ...]:
        return self.existing_assets + self.new_assets


class CapExYearResult(Model):
    """
    CapEx roll-forward for one year.

    ``virtual_asset_pool`` and ``historical_state`` are the values to carry
    into the next year; ``asset_states`` are the pool-asset positions used
    as the next year's prior accumulated depreciation.
    """

    year: int
    spending: Decimal
    spending_by_category: Dict[CapExCategoryType, Decimal] = Field(default_factory=dict)
    historical_depreciation: Decimal
    pool_depreciation: Decimal
    virtual_asset_depreciation: Decimal
    total_depreciation: Decimal
    gross_ppe: Decimal
    accumulated_depreciation: Decimal
    net_ppe: Decimal
    new_virtual_assets: Tuple[CapExVirtualAsset, ...] = Field(default_factory=tuple)
    virtual_asset_pool: Tuple[CapExVirtualAsset, ...] = Field(default_factory=tuple)
    asset_states: Tuple[AssetDepreciationState, ...] = Field(default_factory=tuple)
    historical_state: Optional[HistoricalDepreciationState] = None
