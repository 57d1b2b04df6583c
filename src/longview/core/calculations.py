# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial calculation functions.

Contains static methods for core financial metrics. These functions are pure
(math-only) and independent of the statement models; other modules should
delegate to these to ensure a single source of truth for financial
calculations. All inputs and outputs are ``Decimal`` and every operation
runs under the supplied :class:`DecimalContext`.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from .arithmetic import divide_safe, straight_line_depreciation
from .constants import (
    DEFAULT_IRR_GUESS,
    DEFAULT_IRR_MAX_ITERATIONS,
    DEFAULT_IRR_TOLERANCE,
    ONE,
    ZERO,
)
from .primitives.decimal_context import DEFAULT_DECIMAL_CONTEXT, DecimalContext


class FinancialCalculations:
    """
    Pure mathematical functions for financial calculations.

    Cash-flow sequences are indexed by period: index 0 is undiscounted
    (the initial investment), index ``i`` is discounted ``i`` periods.
    """

    @staticmethod
    def calculate_npv(
        cash_flows: Sequence[Decimal],
        discount_rate: Decimal,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        """
        Net Present Value ``sum(cf_i / (1 + r) ** i)``.

        Args:
            cash_flows: Periodic cash flows, index 0 undiscounted
            discount_rate: Per-period discount rate (e.g. 0.08 for 8%)

        Returns:
            NPV; zero for an empty sequence

        Example:
            ```python
            FinancialCalculations.calculate_npv(
                [Decimal("-1000"), Decimal("1100")], Decimal("0.1")
            )
            # Decimal("0")
            ```
        """
        with ctx.local():
            factor = ONE + discount_rate
            npv = ZERO
            for index, cash_flow in enumerate(cash_flows):
                npv += cash_flow / factor**index
            return npv

    @staticmethod
    def calculate_irr(
        cash_flows: Sequence[Decimal],
        guess: Decimal = DEFAULT_IRR_GUESS,
        max_iterations: int = DEFAULT_IRR_MAX_ITERATIONS,
        tolerance: Decimal = DEFAULT_IRR_TOLERANCE,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Optional[Decimal]:
        """
        Internal Rate of Return by Newton-Raphson.

        Iterates ``r' = r - NPV(r) / NPV'(r)`` where
        ``NPV'(r) = -sum(i x cf_i / (1 + r) ** (i + 1))``.

        Args:
            cash_flows: Periodic cash flows, index 0 usually negative
            guess: Starting rate
            max_iterations: Iteration cap
            tolerance: Convergence threshold on the rate step, also the
                smallest derivative magnitude accepted

        Returns:
            IRR as a decimal rate, or None if cannot calculate

        Edge Cases Handled:
            - Empty or single flow → None
            - Flat NPV curve (derivative below tolerance) → None
            - Rate stepping to -100% or below → None
            - No convergence within ``max_iterations`` → None
        """
        if len(cash_flows) < 2:
            return None

        rate = guess
        with ctx.local():
            for _ in range(max_iterations):
                base = ONE + rate
                if base <= 0:
                    return None

                npv = ZERO
                derivative = ZERO
                for index, cash_flow in enumerate(cash_flows):
                    npv += cash_flow / base**index
                    if index > 0:
                        derivative -= cash_flow * index / base ** (index + 1)

                if abs(derivative) < tolerance:
                    return None

                new_rate = rate - npv / derivative
                if abs(new_rate - rate) < tolerance:
                    return new_rate if new_rate > -ONE else None
                rate = new_rate

        return None

    @staticmethod
    def calculate_annualization_factor(
        rate: Decimal,
        periods: int,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        """
        Capital recovery factor ``r / (1 - (1 + r) ** -n)``.

        Converts a present value into the level annual amount with the same
        value over ``periods`` years; ``1 / n`` when the rate is zero.

        Raises:
            ValueError: If ``periods`` is not positive
        """
        if periods <= 0:
            raise ValueError("Annualization requires a positive number of periods")
        with ctx.local():
            if rate == 0:
                return ONE / Decimal(periods)
            return rate / (ONE - (ONE + rate) ** -periods)

    @staticmethod
    def calculate_equivalent_annual_value(
        npv: Decimal,
        rate: Decimal,
        periods: int,
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Decimal:
        """Level annual amount equivalent to ``npv`` over ``periods`` years."""
        factor = FinancialCalculations.calculate_annualization_factor(rate, periods, ctx)
        with ctx.local():
            return npv * factor

    @staticmethod
    def calculate_payback_period(
        cash_flows: Sequence[Decimal],
        ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
    ) -> Optional[Decimal]:
        """
        Years until cumulative cash flow turns non-negative.

        The crossing year is interpolated linearly: with the cumulative
        total still negative after ``i - 1`` periods, payback is
        ``(i - 1) + |cumulative_{i-1}| / cf_i``.

        Returns:
            Payback in years; zero if the first flow is already
            non-negative; None if the cumulative total never recovers
        """
        with ctx.local():
            cumulative = ZERO
            for index, cash_flow in enumerate(cash_flows):
                previous = cumulative
                cumulative += cash_flow
                if cumulative >= 0:
                    if index == 0:
                        return ZERO
                    return Decimal(index - 1) + abs(previous) / cash_flow
        return None

    @staticmethod
    def calculate_roe(net_income: Decimal, equity: Decimal) -> Decimal:
        """Return on equity; zero when equity is zero."""
        return divide_safe(net_income, equity)

    @staticmethod
    def calculate_debt_to_equity(debt: Decimal, equity: Decimal) -> Decimal:
        """Debt-to-equity ratio; zero when equity is zero."""
        return divide_safe(debt, equity)

    @staticmethod
    def calculate_straight_line_depreciation(cost: Decimal, useful_life: int) -> Decimal:
        return straight_line_depreciation(cost, useful_life)
