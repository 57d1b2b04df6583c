# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for CapEx spending, virtual-asset creation, the PP&E
roll-forward and configuration validation.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from longview.capex import (
    CapExAsset,
    CapExCategory,
    CapExConfiguration,
    CapExTransitionEntry,
    CapExVirtualAsset,
    HistoricalDepreciationState,
    calculate_capex_spending,
    calculate_capex_year_result,
    generate_capex_schedule,
    generate_virtual_assets_for_year,
    get_reinvestment_schedule,
    is_reinvestment_due,
    validate_capex_config,
)
from longview.core.primitives import CapExCategoryType, PeriodType, ProjectionSettings

IT = CapExCategoryType.IT_EQUIPMENT
FURNITURE = CapExCategoryType.FURNITURE


def it_category(**overrides) -> CapExCategory:
    data = dict(
        category_type=IT,
        name="IT Equipment",
        useful_life=5,
        reinvest_frequency=5,
        reinvest_amount=Decimal("500000"),
    )
    data.update(overrides)
    return CapExCategory(**data)


def historical_state(**overrides) -> HistoricalDepreciationState:
    data = dict(
        gross_ppe=Decimal("10000000"),
        accumulated_depreciation=Decimal("2000000"),
        annual_depreciation=Decimal("500000"),
        remaining_to_depreciate=Decimal("8000000"),
    )
    data.update(overrides)
    return HistoricalDepreciationState(**data)


class TestReinvestmentCycle:
    """Tests for is_reinvestment_due and the reinvestment schedule."""

    def test_start_year_never_fires(self):
        assert not is_reinvestment_due(it_category(), 2028)

    def test_fires_every_frequency_years(self):
        category = it_category()
        assert is_reinvestment_due(category, 2033)
        assert is_reinvestment_due(category, 2038)
        assert not is_reinvestment_due(category, 2030)
        assert not is_reinvestment_due(category, 2025)

    def test_custom_start_year(self):
        category = it_category(reinvest_start_year=2030)
        assert not is_reinvestment_due(category, 2033)
        assert is_reinvestment_due(category, 2035)

    def test_no_frequency_never_fires(self):
        assert not is_reinvestment_due(it_category(reinvest_frequency=None), 2033)

    def test_schedule_lists_years(self):
        config = CapExConfiguration(
            categories=(
                it_category(),
                CapExCategory(category_type=FURNITURE, name="Furniture", useful_life=10),
            )
        )
        schedule = get_reinvestment_schedule(config, 2028, 2052)
        assert schedule == {IT: [2033, 2038, 2043, 2048]}


class TestSpending:
    """Tests for calculate_capex_spending by band."""

    def test_historical_has_no_spending(self):
        config = CapExConfiguration(categories=(it_category(),))
        spending = calculate_capex_spending(2024, config, PeriodType.HISTORICAL)
        assert spending.total == 0

    def test_transition_entries_for_the_year(self):
        config = CapExConfiguration(
            categories=(it_category(),),
            transition_entries=(
                CapExTransitionEntry(year=2026, category_type=IT, amount=Decimal("400000")),
                CapExTransitionEntry(year=2026, category_type=IT, amount=Decimal("100000")),
                CapExTransitionEntry(year=2027, category_type=IT, amount=Decimal("250000")),
            ),
        )
        spending = calculate_capex_spending(2026, config, PeriodType.TRANSITION)
        assert spending.total == Decimal("500000")
        assert spending.asset_generating == {IT: Decimal("500000")}

    def test_dynamic_reinvestment(self):
        config = CapExConfiguration(categories=(it_category(),))
        assert calculate_capex_spending(2033, config, PeriodType.DYNAMIC).total == Decimal(
            "500000"
        )
        assert calculate_capex_spending(2034, config, PeriodType.DYNAMIC).total == 0

    def test_reinvestment_counts_from_base_year(self):
        config = CapExConfiguration(categories=(it_category(),))
        assert calculate_capex_spending(2033, config, PeriodType.DYNAMIC, base_year=2029).total == 0
        assert calculate_capex_spending(
            2034, config, PeriodType.DYNAMIC, base_year=2029
        ).total == Decimal("500000")

    def test_auto_reinvest_disabled(self):
        config = CapExConfiguration(categories=(it_category(),), auto_reinvest_enabled=False)
        assert calculate_capex_spending(2033, config, PeriodType.DYNAMIC).total == 0

    def test_manual_virtual_asset_counted_once(self):
        manual = CapExVirtualAsset(
            id="smartboards",
            category_type=IT,
            purchase_year=2030,
            purchase_amount=Decimal("200000"),
            useful_life=5,
        )
        generated = manual.clone(id="IT_EQUIPMENT-2030", auto_generated=True)
        config = CapExConfiguration(categories=(it_category(),))
        spending = calculate_capex_spending(
            2030, config, PeriodType.DYNAMIC, (manual, generated)
        )
        assert spending.total == Decimal("200000")
        assert spending.by_category == {IT: Decimal("200000")}
        assert spending.asset_generating == {}

    def test_planned_pool_asset_adds_to_total(self):
        config = CapExConfiguration(
            categories=(it_category(),),
            new_assets=(
                CapExAsset(
                    id="library",
                    purchase_year=2029,
                    purchase_amount=Decimal("3000000"),
                    useful_life=20,
                ),
            ),
        )
        spending = calculate_capex_spending(2029, config, PeriodType.DYNAMIC)
        assert spending.total == Decimal("3000000")
        assert spending.by_category == {}


class TestVirtualAssets:
    """Tests for generate_virtual_assets_for_year."""

    def test_one_asset_per_category(self):
        config = CapExConfiguration(categories=(it_category(),))
        assets = generate_virtual_assets_for_year(2033, {IT: Decimal("500000")}, config)
        assert len(assets) == 1
        asset = assets[0]
        assert asset.id == "IT_EQUIPMENT-2033"
        assert asset.useful_life == 5
        assert asset.auto_generated

    def test_unconfigured_category_is_skipped(self):
        config = CapExConfiguration(categories=(it_category(),))
        assets = generate_virtual_assets_for_year(2033, {FURNITURE: Decimal("100")}, config)
        assert assets == ()

    def test_zero_spending_creates_nothing(self):
        config = CapExConfiguration(categories=(it_category(),))
        assert generate_virtual_assets_for_year(2033, {IT: Decimal("0")}, config) == ()


class TestYearResult:
    """Tests for calculate_capex_year_result."""

    def test_historical_base_depreciation(self):
        config = CapExConfiguration(categories=(it_category(),))
        result = calculate_capex_year_result(
            2025,
            config,
            PeriodType.TRANSITION,
            Decimal("10000000"),
            Decimal("2000000"),
            historical_state=historical_state(),
        )
        assert result.historical_depreciation == Decimal("500000")
        assert result.total_depreciation == Decimal("500000")
        assert result.gross_ppe == Decimal("10000000")
        assert result.accumulated_depreciation == Decimal("2500000")
        assert result.net_ppe == Decimal("7500000")
        assert result.historical_state.remaining_to_depreciate == Decimal("7500000")

    def test_historical_base_charge_capped_at_remaining(self):
        config = CapExConfiguration()
        result = calculate_capex_year_result(
            2025,
            config,
            PeriodType.TRANSITION,
            Decimal("10000000"),
            Decimal("9700000"),
            historical_state=historical_state(remaining_to_depreciate=Decimal("300000")),
        )
        assert result.historical_depreciation == Decimal("300000")
        assert result.historical_state.remaining_to_depreciate == 0
        assert result.historical_state.depreciation_for_year() == 0

    def test_new_virtual_asset_depreciates_in_purchase_year(self):
        config = CapExConfiguration(categories=(it_category(),))
        result = calculate_capex_year_result(
            2033, config, PeriodType.DYNAMIC, Decimal("10000000"), Decimal("2000000")
        )
        assert result.spending == Decimal("500000")
        assert result.virtual_asset_depreciation == Decimal("100000")
        assert result.gross_ppe == Decimal("10500000")
        assert [a.id for a in result.virtual_asset_pool] == ["IT_EQUIPMENT-2033"]

    def test_pool_is_replaced_not_mutated(self):
        config = CapExConfiguration(categories=(it_category(),))
        existing = CapExVirtualAsset(
            id="IT_EQUIPMENT-2026",
            category_type=IT,
            purchase_year=2026,
            purchase_amount=Decimal("400000"),
            useful_life=5,
            auto_generated=True,
        )
        pool = (existing,)
        result = calculate_capex_year_result(
            2033,
            config,
            PeriodType.DYNAMIC,
            Decimal("10000000"),
            Decimal("2000000"),
            virtual_assets=pool,
        )
        assert pool == (existing,)
        assert len(result.virtual_asset_pool) == 2

    def test_historical_state_not_advanced_in_historical_year(self):
        state = historical_state()
        result = calculate_capex_year_result(
            2024,
            CapExConfiguration(),
            PeriodType.HISTORICAL,
            Decimal("10000000"),
            Decimal("2000000"),
            historical_state=state,
        )
        assert result.historical_depreciation == 0
        assert result.historical_state == state


class TestSchedule:
    """Tests for generate_capex_schedule."""

    def test_requires_historical_state(self):
        with pytest.raises(ValueError):
            generate_capex_schedule(CapExConfiguration(categories=(it_category(),)))

    def test_covers_every_projected_year(self):
        config = CapExConfiguration(
            categories=(it_category(),),
            historical_state=historical_state(),
            transition_entries=(
                CapExTransitionEntry(year=2026, category_type=IT, amount=Decimal("400000")),
            ),
        )
        schedule = generate_capex_schedule(config, ProjectionSettings())
        assert min(schedule) == 2025
        assert max(schedule) == 2052
        assert schedule[2026].spending == Decimal("400000")
        assert schedule[2033].spending == Decimal("500000")
        # 2026 transition asset plus reinvestments in 2033, 2038, 2043 and 2048
        assert len(schedule[2052].virtual_asset_pool) == 5

    def test_reinvestment_follows_moved_dynamic_band(self):
        config = CapExConfiguration(
            categories=(it_category(),), historical_state=historical_state()
        )
        settings = ProjectionSettings(transition_end_year=2028, dynamic_start_year=2029)
        schedule = generate_capex_schedule(config, settings)
        assert min(schedule) == 2025
        assert max(schedule) == 2053
        assert schedule[2033].spending == 0
        assert schedule[2034].spending == Decimal("500000")
        assert [asset.id for asset in schedule[2034].new_virtual_assets] == ["IT_EQUIPMENT-2034"]

    def test_accumulated_depreciation_never_decreases(self):
        config = CapExConfiguration(
            categories=(it_category(),), historical_state=historical_state()
        )
        schedule = generate_capex_schedule(config)
        accumulated = [schedule[year].accumulated_depreciation for year in sorted(schedule)]
        assert accumulated == sorted(accumulated)


class TestValidateCapexConfig:
    """Configuration errors are collected, never raised."""

    def test_valid_config(self):
        config = CapExConfiguration(
            categories=(it_category(),),
            historical_state=historical_state(),
            transition_entries=(
                CapExTransitionEntry(year=2026, category_type=IT, amount=Decimal("400000")),
            ),
        )
        assert validate_capex_config(config).valid

    def test_no_categories(self):
        result = validate_capex_config(CapExConfiguration())
        assert result.errors == ("No CapEx categories configured",)

    def test_category_errors(self):
        config = CapExConfiguration(
            categories=(
                it_category(
                    useful_life=0, reinvest_frequency=0, reinvest_amount=Decimal("-5")
                ),
            )
        )
        errors = validate_capex_config(config).errors
        assert "Category IT Equipment: Invalid useful life" in errors
        assert any("Reinvestment frequency must be 1-30 years" in e for e in errors)
        assert "Category IT Equipment: Reinvestment amount must be positive" in errors

    def test_transition_entry_errors(self):
        config = CapExConfiguration(
            categories=(it_category(),),
            transition_entries=(
                CapExTransitionEntry(year=2030, category_type=IT, amount=Decimal("100")),
                CapExTransitionEntry(year=2026, category_type=FURNITURE, amount=Decimal("0")),
            ),
        )
        errors = validate_capex_config(config).errors
        assert any("outside the transition period" in e for e in errors)
        assert any("Amount must be positive" in e for e in errors)
        assert any("Unknown category FURNITURE" in e for e in errors)

    def test_base_defined_twice(self):
        config = CapExConfiguration(
            categories=(it_category(),),
            historical_state=historical_state(),
            existing_assets=(
                CapExAsset(
                    id="campus",
                    purchase_year=2023,
                    purchase_amount=Decimal("10000000"),
                    useful_life=20,
                ),
            ),
        )
        errors = validate_capex_config(config).errors
        assert any("defined twice" in e for e in errors)

    def test_asset_year_outside_projection(self):
        config = CapExConfiguration(
            categories=(it_category(),),
            new_assets=(
                CapExAsset(
                    id="late",
                    purchase_year=2060,
                    purchase_amount=Decimal("100"),
                    useful_life=5,
                ),
            ),
        )
        errors = validate_capex_config(config).errors
        assert errors == ("Asset late: Invalid purchase year 2060",)
