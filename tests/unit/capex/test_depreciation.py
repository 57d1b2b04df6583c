# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the pool and category depreciation conventions.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from longview.capex import (
    CapExAsset,
    CapExVirtualAsset,
    CategoryDepreciation,
    PoolDepreciation,
    calculate_ppe_tracker,
    calculate_total_depreciation,
    generate_depreciation_schedule,
    validate_asset,
)
from longview.core.primitives import CapExCategoryType, DepreciationMethod


def building(purchase_year: int = 2028, amount: str = "10000000", life: int = 20) -> CapExAsset:
    return CapExAsset(
        id="building",
        name="Main building",
        purchase_year=purchase_year,
        purchase_amount=Decimal(amount),
        useful_life=life,
    )


def laptops(purchase_year: int = 2028, life: int = 5) -> CapExVirtualAsset:
    return CapExVirtualAsset(
        id=f"IT_EQUIPMENT-{purchase_year}",
        category_type=CapExCategoryType.IT_EQUIPMENT,
        purchase_year=purchase_year,
        purchase_amount=Decimal("500000"),
        useful_life=life,
    )


class TestPoolDepreciation:
    """Configured assets: the purchase year is age 1."""

    def test_purchase_year_charge(self):
        state = PoolDepreciation().asset_state(building(), 2028)
        assert state.age == 1
        assert state.depreciation_expense == Decimal("500000")
        assert state.accumulated_depreciation == Decimal("500000")
        assert state.net_book_value == Decimal("9500000")
        assert not state.fully_depreciated

    def test_last_charge_in_final_year_of_life(self):
        convention = PoolDepreciation()
        asset = building(life=5)
        assert convention.annual_expense(asset, 2032) == Decimal("2000000")
        assert convention.annual_expense(asset, 2033) == 0

    def test_fully_depreciated_after_life(self):
        state = PoolDepreciation().asset_state(building(), 2048)
        assert state.age == 21
        assert state.depreciation_expense == 0
        assert state.accumulated_depreciation == Decimal("10000000")
        assert state.net_book_value == 0
        assert state.fully_depreciated

    def test_before_purchase(self):
        convention = PoolDepreciation()
        assert convention.annual_expense(building(), 2027) == 0
        state = convention.asset_state(building(), 2027)
        assert state.net_book_value == Decimal("10000000")
        assert state.accumulated_depreciation == 0

    def test_reconstructs_accumulated_without_prior(self):
        state = PoolDepreciation().asset_state(building(), 2030)
        assert state.accumulated_depreciation == Decimal("1500000")

    def test_accumulated_capped_at_cost(self):
        state = PoolDepreciation().asset_state(building(), 2040, Decimal("9800000"))
        assert state.accumulated_depreciation == Decimal("10000000")
        assert state.net_book_value == 0

    def test_recompute_is_pure(self):
        convention = PoolDepreciation()
        first = convention.asset_state(building(), 2031, Decimal("1500000"))
        second = convention.asset_state(building(), 2031, Decimal("1500000"))
        assert first == second


class TestCategoryDepreciation:
    """Virtual assets: the purchase year is age 0."""

    def test_purchase_year_is_age_zero(self):
        state = CategoryDepreciation().asset_state(laptops(), 2028)
        assert state.age == 0
        assert state.depreciation_expense == Decimal("100000")

    def test_depreciates_for_exactly_useful_life_years(self):
        convention = CategoryDepreciation()
        charges = [convention.annual_expense(laptops(), year) for year in range(2028, 2035)]
        assert charges == [Decimal("100000")] * 5 + [Decimal(0)] * 2

    def test_same_charge_years_as_pool(self):
        asset = laptops()
        pool_asset = CapExAsset(
            id="pool",
            purchase_year=asset.purchase_year,
            purchase_amount=asset.purchase_amount,
            useful_life=asset.useful_life,
        )
        for year in range(2027, 2036):
            assert CategoryDepreciation().annual_expense(asset, year) == PoolDepreciation(
            ).annual_expense(pool_asset, year)

    def test_fully_depreciated_at_age_life(self):
        state = CategoryDepreciation().asset_state(laptops(), 2033)
        assert state.age == 5
        assert state.fully_depreciated
        assert state.net_book_value == 0

    def test_declining_balance_charges_nothing(self):
        asset = laptops().clone(
            depreciation_method=DepreciationMethod.DECLINING_BALANCE,
            depreciation_rate=Decimal("0.3"),
        )
        assert CategoryDepreciation().annual_expense(asset, 2029) == 0

    def test_total_expense(self):
        assets = [laptops(2028), laptops(2030)]
        assert CategoryDepreciation().total_expense(assets, 2030) == Decimal("200000")
        assert CategoryDepreciation().total_expense(assets, 2033) == Decimal("100000")


class TestPoolTotals:
    """Totals, schedules and the PP&E tracker."""

    def test_total_depreciation_splits_existing_and_new(self):
        existing = [building(2025, "2000000", 10)]
        new = [building(2030, "1000000", 10).clone(id="extension")]
        result = calculate_total_depreciation(existing, new, 2030)
        assert result.existing_assets_depreciation == Decimal("200000")
        assert result.new_assets_depreciation == Decimal("100000")
        assert result.total_depreciation == Decimal("300000")
        assert len(result.asset_states) == 2

    def test_prior_states_roll_forward_by_id(self):
        asset = building()
        first = calculate_total_depreciation([asset], [], 2028)
        second = calculate_total_depreciation([asset], [], 2029, first.asset_states)
        assert second.asset_states[0].accumulated_depreciation == Decimal("1000000")

    def test_schedule_over_range(self):
        schedule = generate_depreciation_schedule([building(life=2)], [], 2028, 2031)
        assert [r.year for r in schedule] == [2028, 2029, 2030, 2031]
        assert [r.total_depreciation for r in schedule] == [
            Decimal("5000000"),
            Decimal("5000000"),
            Decimal(0),
            Decimal(0),
        ]
        assert schedule[-1].asset_states[0].fully_depreciated

    def test_schedule_rejects_reversed_range(self):
        with pytest.raises(ValueError):
            generate_depreciation_schedule([building()], [], 2030, 2028)

    def test_ppe_tracker_counts_assets(self):
        existing = [building(2020, "1000000", 5), building(2028).clone(id="new-building")]
        result = calculate_total_depreciation(existing, [], 2028)
        tracker = calculate_ppe_tracker(result, Decimal("11000000"), Decimal("0"))
        assert tracker.fully_depreciated_assets == 1
        assert tracker.active_assets == 1
        assert tracker.accumulated_depreciation == Decimal("1500000")
        assert tracker.net_ppe == Decimal("9500000")


class TestValidateAsset:
    """Asset configuration errors are reported, not raised."""

    def test_valid_asset(self):
        assert validate_asset(building(), 2023, 2052) == []

    def test_invalid_fields(self):
        asset = CapExAsset(
            id="broken",
            purchase_year=2060,
            purchase_amount=Decimal("-1"),
            useful_life=0,
        )
        errors = validate_asset(asset, 2023, 2052)
        assert any("Purchase amount" in e for e in errors)
        assert any("Useful life" in e for e in errors)
        assert any("purchase year" in e for e in errors)

    def test_declining_balance_requires_rate(self):
        asset = building().clone(depreciation_method=DepreciationMethod.DECLINING_BALANCE)
        errors = validate_asset(asset)
        assert errors == ["Asset building: Declining balance requires depreciation rate"]

    def test_accumulated_above_cost(self):
        asset = building().clone(accumulated_depreciation=Decimal("20000000"))
        assert any("exceeds purchase amount" in e for e in validate_asset(asset))
