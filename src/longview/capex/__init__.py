# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
CapEx & Depreciation

Configured and virtual assets, the two straight-line age conventions,
category reinvestment cycles and the yearly PP&E roll-forward.
"""

from .assets import (
    AssetDepreciationState,
    CapExAsset,
    CapExCategory,
    CapExConfiguration,
    CapExTransitionEntry,
    CapExVirtualAsset,
    CapExYearResult,
    DepreciableAsset,
    HistoricalDepreciationState,
)
from .calculator import (
    CapExSpending,
    calculate_capex_spending,
    calculate_capex_year_result,
    create_virtual_asset,
    generate_capex_schedule,
    generate_virtual_assets_for_year,
    get_reinvestment_schedule,
    is_reinvestment_due,
    validate_capex_config,
)
from .depreciation import (
    CategoryDepreciation,
    DepreciationConvention,
    PoolDepreciation,
    PPETracker,
    TotalDepreciationResult,
    calculate_ppe_tracker,
    calculate_total_depreciation,
    generate_depreciation_schedule,
    validate_asset,
)

__all__ = [
    # Assets
    "AssetDepreciationState",
    "CapExAsset",
    "CapExCategory",
    "CapExConfiguration",
    "CapExTransitionEntry",
    "CapExVirtualAsset",
    "CapExYearResult",
    "DepreciableAsset",
    "HistoricalDepreciationState",
    # Depreciation
    "CategoryDepreciation",
    "DepreciationConvention",
    "PoolDepreciation",
    "PPETracker",
    "TotalDepreciationResult",
    "calculate_ppe_tracker",
    "calculate_total_depreciation",
    "generate_depreciation_schedule",
    "validate_asset",
    # Calculator
    "CapExSpending",
    "calculate_capex_spending",
    "calculate_capex_year_result",
    "create_virtual_asset",
    "generate_capex_schedule",
    "generate_virtual_assets_for_year",
    "get_reinvestment_schedule",
    "is_reinvestment_due",
    "validate_capex_config",
]
