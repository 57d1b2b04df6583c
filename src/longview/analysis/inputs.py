# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Complete input of one projection run.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from pydantic import Field, model_validator

from ..assumptions.working_capital import WorkingCapitalRatios
from ..capex.assets import CapExConfiguration
from ..core.primitives import Model, PeriodType, ProjectionSettings, SystemConfiguration
from ..periods.inputs import DynamicPeriodInput, HistoricalPeriodInput, TransitionPeriodInput


class ProjectionInput(Model):
    """
    Everything needed to compute the full period chain.

    ``dynamic`` is the assumption set applied to every dynamic year; its
    ``year`` is replaced per year. ``dynamic_overrides`` replace it for the
    years they name. Transition years without an entry pre-fill from the
    prior year with no growth. ``capex_config`` applies to every projected
    input that does not carry its own.

    Attributes:
        system_config: Rates and minimum cash
        settings: Year bands, contract length, decimal policy and solver settings
        historical: One input per historical year, in order
        transition: Transition overrides, at most one per transition year
        dynamic: Assumptions for every dynamic year
        dynamic_overrides: Per-year replacements for ``dynamic``
        capex_config: CapEx configuration shared by the projected years
        working_capital_ratios: Ratios to use; measured on the last
            historical year and locked when omitted
    """

    system_config: SystemConfiguration = Field(default_factory=SystemConfiguration)
    settings: ProjectionSettings = Field(default_factory=ProjectionSettings)
    historical: Tuple[HistoricalPeriodInput, ...]
    transition: Tuple[TransitionPeriodInput, ...] = Field(default_factory=tuple)
    dynamic: DynamicPeriodInput
    dynamic_overrides: Tuple[DynamicPeriodInput, ...] = Field(default_factory=tuple)
    capex_config: Optional[CapExConfiguration] = None
    working_capital_ratios: Optional[WorkingCapitalRatios] = None

    @model_validator(mode="after")
    def validate_years(self) -> "ProjectionInput":
        """Every input must sit in its band, once."""
        settings = self.settings
        historical_years = [item.year for item in self.historical]
        if historical_years != settings.years(PeriodType.HISTORICAL):
            raise ValueError(
                f"Historical inputs must cover {settings.historical_start_year}-"
                f"{settings.historical_end_year} in order, got {historical_years}"
            )
        _check_band(
            [item.year for item in self.transition],
            settings.years(PeriodType.TRANSITION),
            "Transition",
        )
        _check_band(
            [item.year for item in self.dynamic_overrides],
            settings.years(PeriodType.DYNAMIC),
            "Dynamic override",
        )
        return self

    def transition_input(self, year: int) -> TransitionPeriodInput:
        """Input for transition ``year``, with the shared CapEx configuration applied."""
        year_input = next(
            (item for item in self.transition if item.year == year),
            TransitionPeriodInput(year=year),
        )
        return self._with_capex(year_input)

    def dynamic_input(self, year: int) -> DynamicPeriodInput:
        """Input for dynamic ``year``, with the shared CapEx configuration applied."""
        year_input = next(
            (item for item in self.dynamic_overrides if item.year == year),
            self.dynamic.model_copy(update={"year": year}),
        )
        return self._with_capex(year_input)

    def fork(self, **updates: Any) -> "ProjectionInput":
        """
        Independent copy with overrides, for side-by-side scenarios.

        Example:
            ```python
            stressed = base.fork(
                system_config=base.system_config.clone(debt_interest_rate=Decimal("0.08"))
            )
            ```
        """
        return self.clone(**updates)

    def _with_capex(self, year_input):
        if year_input.capex_config is None and self.capex_config is not None:
            return year_input.model_copy(update={"capex_config": self.capex_config})
        return year_input


def _check_band(years: List[int], band: List[int], label: str) -> None:
    outside = [year for year in years if year not in band]
    if outside:
        raise ValueError(f"{label} years {outside} are outside {band[0]}-{band[-1]}")
    if len(set(years)) != len(years):
        raise ValueError(f"{label} years must be unique, got {years}")
