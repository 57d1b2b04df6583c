# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Rent models for the dynamic band.

- ``FixedEscalationRent``: base rent stepped up every ``frequency`` years
- ``RevenueShareRent``: share of total revenue
- ``PartnerInvestmentRent``: yield on the partner's land and construction
  outlay, stepped up every ``frequency`` years

Escalation counts whole steps from ``base_year`` (the first dynamic year
by default) and never de-escalates before it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Literal, Union

from pydantic import Field
from typing_extensions import Annotated

from ..core.constants import DYNAMIC_START_YEAR, ONE, ZERO
from ..core.primitives import (
    DEFAULT_DECIMAL_CONTEXT,
    DecimalContext,
    Model,
    NonNegativeDecimal,
    RentModelKind,
)


def escalation_factor(
    year: int,
    base_year: int,
    growth_rate: Decimal,
    frequency: int,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Decimal:
    """``(1 + growth_rate) ** max(0, floor((year - base_year) / frequency))``."""
    steps = max(0, (year - base_year) // frequency)
    with ctx.local():
        return (ONE + growth_rate) ** steps


class RentModel(Model, ABC):
    """Base class for rent models."""

    kind: RentModelKind

    @abstractmethod
    def calculate(
        self,
        year: int,
        total_revenue: Decimal,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        """Annual rent expense for ``year``."""
        pass


class FixedEscalationRent(RentModel):
    """
    Fixed rent with periodic escalation.

    Example:
        >>> rent = FixedEscalationRent(
        ...     base_rent=Decimal("1000000"), growth_rate=Decimal("0.03"), frequency=2
        ... )
        >>> rent.calculate(2031, Decimal("0"))  # one step after 2028
        Decimal('1030000.00')
    """

    kind: Literal[RentModelKind.FIXED_ESCALATION] = RentModelKind.FIXED_ESCALATION
    base_rent: NonNegativeDecimal
    growth_rate: Decimal = ZERO
    frequency: int = Field(default=1, gt=0)
    base_year: int = DYNAMIC_START_YEAR

    def calculate(
        self,
        year: int,
        total_revenue: Decimal,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        factor = escalation_factor(year, self.base_year, self.growth_rate, self.frequency, ctx)
        with ctx.local():
            return self.base_rent * factor


class RevenueShareRent(RentModel):
    """Rent as a share of total revenue."""

    kind: Literal[RentModelKind.REVENUE_SHARE] = RentModelKind.REVENUE_SHARE
    revenue_share_percent: Decimal = Field(..., ge=0, le=1)

    def calculate(
        self,
        year: int,
        total_revenue: Decimal,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        with ctx.local():
            return total_revenue * self.revenue_share_percent


class PartnerInvestmentRent(RentModel):
    """
    Yield on the partner's investment.

    ``investment = land_size x land_price_per_sqm + bua_size x
    construction_cost_per_sqm`` and the first-year rent is
    ``investment x yield_rate``.
    """

    kind: Literal[RentModelKind.PARTNER_INVESTMENT] = RentModelKind.PARTNER_INVESTMENT
    land_size: NonNegativeDecimal
    land_price_per_sqm: NonNegativeDecimal
    bua_size: NonNegativeDecimal
    construction_cost_per_sqm: NonNegativeDecimal
    yield_rate: Decimal = Field(..., ge=0, le=1)
    growth_rate: Decimal = ZERO
    frequency: int = Field(default=1, gt=0)
    base_year: int = DYNAMIC_START_YEAR

    @property
    def total_investment(self) -> Decimal:
        return self.land_size * self.land_price_per_sqm + self.bua_size * self.construction_cost_per_sqm

    def calculate(
        self,
        year: int,
        total_revenue: Decimal,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        factor = escalation_factor(year, self.base_year, self.growth_rate, self.frequency, ctx)
        with ctx.local():
            return self.total_investment * self.yield_rate * factor


AnyRentModel = Annotated[
    Union[FixedEscalationRent, RevenueShareRent, PartnerInvestmentRent],
    Field(discriminator="kind"),
]
