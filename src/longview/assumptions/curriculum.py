# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Dual-curriculum tuition revenue (National and IB).

Each curriculum fee compounds on its own schedule from the first dynamic
year::

    fee_t = fee x (1 + rate) ** floor((year - base_year) / frequency)

Once the IB programme has started, ``round_half_up(total x ib_share)``
students pay the IB fee and the rest pay the national fee.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ..core.arithmetic import round_half_up_int
from ..core.constants import DYNAMIC_START_YEAR, ONE, ZERO
from ..core.primitives import DEFAULT_DECIMAL_CONTEXT, ConfigValidation, DecimalContext, Model


class CurriculumConfig(Model):
    """
    Tuition fees, their growth and the IB student split.

    Attributes:
        ib_program_enabled: Whether an IB stream exists at all
        ib_start_year: First year IB students are enrolled (immediately when None)
        national_curriculum_fee: Annual fee per national student
        ib_curriculum_fee: Annual fee per IB student
        national_tuition_growth_rate: Growth applied every ``national_tuition_growth_frequency`` years
        ib_tuition_growth_rate: Growth applied every ``ib_tuition_growth_frequency`` years
        ib_student_percentage: Share of students in the IB stream (0-1)
    """

    ib_program_enabled: bool = False
    ib_start_year: Optional[int] = None
    national_curriculum_fee: Decimal
    ib_curriculum_fee: Decimal = ZERO
    national_tuition_growth_rate: Optional[Decimal] = None
    national_tuition_growth_frequency: Optional[int] = None
    ib_tuition_growth_rate: Optional[Decimal] = None
    ib_tuition_growth_frequency: Optional[int] = None
    ib_student_percentage: Optional[Decimal] = Field(default=None)

    def ib_active(self, year: int) -> bool:
        if not self.ib_program_enabled:
            return False
        return self.ib_start_year is None or year >= self.ib_start_year


def grown_fee(
    base_fee: Decimal,
    year: int,
    growth_rate: Optional[Decimal] = None,
    growth_frequency: Optional[int] = None,
    base_year: int = DYNAMIC_START_YEAR,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Decimal:
    """Fee for ``year`` after stepwise compounding; unchanged without a rate and frequency."""
    if not growth_rate or not growth_frequency:
        return base_fee
    steps = (year - base_year) // growth_frequency
    with ctx.local():
        return base_fee * (ONE + growth_rate) ** steps


def calculate_tuition_revenue(
    total_students: int,
    curriculum: CurriculumConfig,
    year: int,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    base_year: int = DYNAMIC_START_YEAR,
) -> Decimal:
    """
    Tuition revenue for ``year``.

    Fees compound from ``base_year``, the first dynamic year of the run.

    Example:
        ```python
        config = CurriculumConfig(national_curriculum_fee=Decimal("15000"))
        calculate_tuition_revenue(1000, config, 2030)  # Decimal("15000000")
        ```
    """
    if total_students == 0:
        return ZERO

    national_fee = grown_fee(
        curriculum.national_curriculum_fee,
        year,
        curriculum.national_tuition_growth_rate,
        curriculum.national_tuition_growth_frequency,
        base_year,
        ctx,
    )

    if not curriculum.ib_active(year):
        with ctx.local():
            return Decimal(total_students) * national_fee

    ib_share = curriculum.ib_student_percentage or ZERO
    ib_students = round_half_up_int(Decimal(total_students) * ib_share)
    national_students = total_students - ib_students
    ib_fee = grown_fee(
        curriculum.ib_curriculum_fee,
        year,
        curriculum.ib_tuition_growth_rate,
        curriculum.ib_tuition_growth_frequency,
        base_year,
        ctx,
    )

    with ctx.local():
        return Decimal(national_students) * national_fee + Decimal(ib_students) * ib_fee


def validate_curriculum_config(config: CurriculumConfig) -> ConfigValidation:
    """Check positive fees and an IB share within 0-1."""
    errors: List[str] = []

    if config.national_curriculum_fee <= 0:
        errors.append("National curriculum fee must be positive")

    if config.ib_program_enabled:
        if config.ib_curriculum_fee <= 0:
            errors.append("IB curriculum fee must be positive when IB is enabled")
        share = config.ib_student_percentage
        if share is not None and not (ZERO <= share <= ONE):
            errors.append("IB student percentage must be between 0 and 1")

    return ConfigValidation.from_errors(errors)
