# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Decimal arithmetic helpers.

Every helper takes an optional :class:`DecimalContext` and performs its
operation through that context, so results never depend on whatever the
interpreter-wide ``decimal`` context happens to be. Calculators that use
plain operators inside ``with ctx.local():`` and calculators that call
these helpers therefore agree to the last digit.

Arithmetic failures are raised immediately: a division by zero or the
square root of a negative number points to a logic defect, not bad input.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from .constants import HUNDRED, ONE, ZERO
from .primitives.decimal_context import DEFAULT_DECIMAL_CONTEXT, DecimalContext

DecimalInput = Union[Decimal, int, float, str]


def to_decimal(value: DecimalInput) -> Decimal:
    """
    Convert a number to ``Decimal``.

    Floats go through their shortest ``repr`` so ``0.1`` becomes
    ``Decimal("0.1")`` rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Booleans are not monetary values")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


# Basic operations


def add(a: Decimal, b: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
    return ctx.to_context().add(a, b)


def subtract(a: Decimal, b: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
    return ctx.to_context().subtract(a, b)


def multiply(a: Decimal, b: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
    return ctx.to_context().multiply(a, b)


def divide(a: Decimal, b: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
    """
    Divide ``a`` by ``b``.

    Raises:
        ZeroDivisionError: If ``b`` is zero (including ``0 / 0``)
    """
    if b == 0:
        raise ZeroDivisionError(f"Division by zero: {a} / {b}")
    return ctx.to_context().divide(a, b)


def divide_safe(
    a: Decimal,
    b: Decimal,
    default: Decimal = ZERO,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Decimal:
    """Divide, returning ``default`` when ``b`` is zero."""
    if b == 0:
        return default
    return ctx.to_context().divide(a, b)


def absolute(a: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
    return ctx.to_context().abs(a)


def power(
    a: Decimal,
    exponent: Union[int, Decimal],
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Decimal:
    return ctx.to_context().power(a, Decimal(exponent))


def sqrt(a: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
    """
    Square root.

    Raises:
        ValueError: If ``a`` is negative
    """
    if a < 0:
        raise ValueError(f"Cannot take square root of negative number: {a}")
    return ctx.to_context().sqrt(a)


# Comparisons


def is_in_range(value: Decimal, minimum: Decimal, maximum: Decimal) -> bool:
    """Inclusive range check."""
    return minimum <= value <= maximum


def is_within_tolerance(
    value: Decimal,
    target: Decimal,
    tolerance: Optional[Decimal] = None,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> bool:
    """``|value - target| <= tolerance`` (context tolerance when omitted)."""
    tolerance = ctx.tolerance if tolerance is None else tolerance
    return absolute(subtract(value, target, ctx), ctx) <= tolerance


# Aggregates


def total(values: Iterable[Decimal], ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
    """Sum of ``values``; zero for an empty iterable."""
    context = ctx.to_context()
    result = ZERO
    for value in values:
        result = context.add(result, value)
    return result


def average(values: Iterable[Decimal], ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT) -> Decimal:
    """Arithmetic mean; zero for an empty iterable."""
    values = list(values)
    if not values:
        return ZERO
    return divide(total(values, ctx), Decimal(len(values)), ctx)


def maximum(*values: Decimal) -> Decimal:
    """
    Largest of ``values``.

    Raises:
        ValueError: If called without values
    """
    if not values:
        raise ValueError("maximum() requires at least one value")
    return max(values)


def minimum(*values: Decimal) -> Decimal:
    """
    Smallest of ``values``.

    Raises:
        ValueError: If called without values
    """
    if not values:
        raise ValueError("minimum() requires at least one value")
    return min(values)


# Financial operations


def percentage_of(
    value: Decimal, percent: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT
) -> Decimal:
    """``value x percent / 100``, e.g. ``percentage_of(1000, 5) == 50``."""
    return multiply(value, divide(percent, HUNDRED, ctx), ctx)


def apply_growth(
    value: Decimal, rate: Decimal, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT
) -> Decimal:
    """``value x (1 + rate)``."""
    return multiply(value, add(ONE, rate, ctx), ctx)


def compound_growth(
    value: Decimal,
    rate: Decimal,
    periods: int,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Decimal:
    """``value x (1 + rate) ** periods``."""
    return multiply(value, power(add(ONE, rate, ctx), periods, ctx), ctx)


def straight_line_depreciation(
    cost: Decimal, useful_life: int, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT
) -> Decimal:
    """
    Annual straight-line charge ``cost / useful_life``.

    Raises:
        ValueError: If ``useful_life`` is not positive
    """
    if useful_life <= 0:
        raise ValueError("Useful life must be positive")
    return divide(cost, Decimal(useful_life), ctx)


def calculate_zakat(
    equity: Decimal,
    non_current_assets: Decimal,
    zakat_rate: Decimal,
    ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT,
) -> Decimal:
    """
    Zakat on the net-working-capital base.

    ``base = equity - non_current_assets``; zakat is ``base x rate`` and
    zero whenever the base is not positive.

    Example:
        ```python
        calculate_zakat(Decimal("1000000"), Decimal("500000"), Decimal("0.025"))
        # Decimal("12500.000")
        ```
    """
    base = subtract(equity, non_current_assets, ctx)
    if base <= 0:
        return ZERO
    return multiply(base, zakat_rate, ctx)


# Rounding and bounds


def round_to_nearest(
    value: Decimal, places: int = 2, ctx: DecimalContext = DEFAULT_DECIMAL_CONTEXT
) -> Decimal:
    """Round to ``places`` decimals with the context rounding mode."""
    return ctx.quantize(value, places)


def round_half_up_int(value: Decimal) -> int:
    """
    Round a head count to a whole number, halves away from zero.

    Always half-up regardless of the context rounding mode, e.g.
    ``round_half_up_int(Decimal("202.5")) == 203``.
    """
    return int(value.quantize(ONE, rounding=ROUND_HALF_UP))


def clamp(value: Decimal, floor: Decimal, ceiling: Decimal) -> Decimal:
    """
    Bound ``value`` to ``[floor, ceiling]``.

    Raises:
        ValueError: If ``floor`` exceeds ``ceiling``
    """
    if floor > ceiling:
        raise ValueError(f"clamp() floor {floor} exceeds ceiling {ceiling}")
    return min(max(value, floor), ceiling)
