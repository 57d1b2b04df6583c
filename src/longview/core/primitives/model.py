# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

ModelT = TypeVar("ModelT", bound="Model")


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Every engine record (inputs, statements, periods, results) is an
    immutable value. A year is never edited in place; it is recomputed
    from corrected inputs and threaded forward as a new object.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Periods are read-only once produced
        extra="forbid",  # Catches typos in input records immediately
    )

    def clone(self: ModelT, **updates: Any) -> ModelT:
        """
        Structural deep copy, optionally with field overrides.

        Overrides are re-validated against the model schema so a forked
        scenario can never carry values the original model would reject.

        Args:
            **updates: Field values to replace in the copy

        Returns:
            A new instance of the same model type

        Example:
            ```python
            stressed = base_config.clone(debt_interest_rate=Decimal("0.08"))
            ```
        """
        if not updates:
            return self.model_copy(deep=True)
        data = self.model_dump()
        data.update(updates)
        return type(self).model_validate(data)
