# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Decimal context value used by every monetary calculation.

Precision and rounding are carried as an explicit, immutable value rather
than by mutating the interpreter-wide ``decimal`` context. Calculators
enter :meth:`DecimalContext.local` for the duration of a calculation so
that plain ``Decimal`` operators pick up the engine policy, and the
arithmetic helpers accept the context as an argument.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_HALF_UP, Decimal
from typing import ContextManager, Literal, Optional

from pydantic import Field

from .model import Model

RoundingMode = Literal[
    "ROUND_UP",
    "ROUND_DOWN",
    "ROUND_CEILING",
    "ROUND_FLOOR",
    "ROUND_HALF_UP",
    "ROUND_HALF_DOWN",
    "ROUND_HALF_EVEN",
    "ROUND_05UP",
]


class DecimalContext(Model):
    """
    Precision, rounding and comparison tolerance for currency arithmetic.

    Attributes:
        precision: Significant digits kept by every operation
        rounding: Rounding mode name from the ``decimal`` module
        tolerance: Absolute tolerance for currency comparisons
        currency_places: Decimal places used when rounding for display
    """

    precision: int = Field(default=20, ge=1, description="Significant digits.")
    rounding: RoundingMode = Field(default=ROUND_HALF_UP)
    tolerance: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        description="Absolute tolerance for balance and reconciliation checks.",
    )
    currency_places: int = Field(default=2, ge=0)

    def to_context(self) -> decimal.Context:
        """Build a fresh ``decimal.Context`` for this policy."""
        return decimal.Context(prec=self.precision, rounding=self.rounding)

    def local(self) -> ContextManager[decimal.Context]:
        """
        Scope the policy to a ``with`` block.

        Example:
            ```python
            with DEFAULT_DECIMAL_CONTEXT.local():
                ebitda = revenue - opex
            ```
        """
        return decimal.localcontext(self.to_context())

    def quantize(self, value: Decimal, places: Optional[int] = None) -> Decimal:
        """Round ``value`` to ``places`` decimals using this rounding mode."""
        places = self.currency_places if places is None else places
        exponent = Decimal(1).scaleb(-places)
        return value.quantize(exponent, rounding=self.rounding, context=self.to_context())


DEFAULT_DECIMAL_CONTEXT = DecimalContext()
