# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Student enrollment with an optional ramp-up.

Two ramp shapes are supported:

- **Linear**: between ``ramp_up_start_year`` and ``ramp_up_end_year`` the
  head count is ``target x (elapsed + 1) / (total + 1)``, so the first ramp
  year is already partially filled and the last one reaches the target.
- **Ramp plan**: when at least five ``ramp_plan_percentages`` are given they
  are indexed directly by the offset from the start year; the linear ramp
  and the ``ramp_up_enabled`` switch are then ignored.

Outside the ramp the steady-state head count applies; years before the
ramp starts have no students.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from pydantic import Field

from ..core.arithmetic import round_half_up_int
from ..core.constants import RAMP_PLAN_YEARS
from ..core.primitives import ConfigValidation, Model

logger = logging.getLogger(__name__)


class EnrollmentConfig(Model):
    """
    Enrollment assumptions for the dynamic band.

    Example:
        ```python
        config = EnrollmentConfig(
            ramp_up_enabled=True,
            ramp_up_start_year=2028,
            ramp_up_end_year=2032,
            ramp_up_target_students=1200,
            steady_state_students=1200,
        )
        calculate_enrollment(2028, config)  # 240
        ```
    """

    ramp_up_enabled: bool = False
    ramp_up_start_year: int = 2028
    ramp_up_end_year: int = 2032
    ramp_up_target_students: int = 0
    steady_state_students: int
    ramp_plan_percentages: Optional[Tuple[Decimal, ...]] = Field(
        default=None,
        description="Share of the target enrolled in each ramp year, by offset from the start year.",
    )

    @property
    def uses_ramp_plan(self) -> bool:
        return (
            self.ramp_plan_percentages is not None
            and len(self.ramp_plan_percentages) >= RAMP_PLAN_YEARS
        )


def calculate_enrollment(year: int, config: EnrollmentConfig) -> int:
    """
    Total students enrolled in ``year``.

    Args:
        year: Fiscal year
        config: Enrollment assumptions

    Returns:
        Whole-number head count; fractional results round half up
    """
    if config.uses_ramp_plan:
        offset = year - config.ramp_up_start_year
        if offset < 0:
            return 0
        if offset < RAMP_PLAN_YEARS:
            share = config.ramp_plan_percentages[offset]
            return round_half_up_int(Decimal(config.ramp_up_target_students) * share)
        return config.steady_state_students

    if not config.ramp_up_enabled:
        return config.steady_state_students

    if year < config.ramp_up_start_year:
        return 0

    if year <= config.ramp_up_end_year:
        total_years = config.ramp_up_end_year - config.ramp_up_start_year
        elapsed = year - config.ramp_up_start_year
        progress = Decimal(elapsed + 1) / Decimal(total_years + 1)
        students = round_half_up_int(Decimal(config.ramp_up_target_students) * progress)
        logger.debug(f"Year {year}: ramp-up progress {progress:.4f} -> {students} students")
        return students

    return config.steady_state_students


def validate_enrollment_config(config: EnrollmentConfig) -> ConfigValidation:
    """Check ramp ordering and positive head counts."""
    errors: List[str] = []

    if config.ramp_up_enabled:
        if config.ramp_up_start_year >= config.ramp_up_end_year:
            errors.append("Ramp-up start year must be before end year")
        if config.ramp_up_target_students <= 0:
            errors.append("Ramp-up target students must be positive")

    if config.steady_state_students <= 0:
        errors.append("Steady state students must be positive")

    return ConfigValidation.from_errors(errors)
