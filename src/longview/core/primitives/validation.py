# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reusable validation utilities for common patterns across the codebase.

This module provides:
- ``ConfigValidation``, the error-list result returned by configuration
  validators that must never raise mid-calculation
- ``ValidationMixin`` with year-ordering, either/or and conditional
  requirement checks for Pydantic ``model_validator(mode="after")`` hooks
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple, Union

from pydantic import Field

from .model import Model


class ConfigValidation(Model):
    """
    Outcome of a configuration validator.

    Configuration problems are collected rather than raised so that callers
    can show every problem at once and decide whether to proceed.

    Example:
        ```python
        result = validate_capex_config(config)
        if not result.valid:
            for error in result.errors:
                print(error)
        ```
    """

    errors: Tuple[str, ...] = Field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.errors

    @classmethod
    def from_errors(cls, errors: Iterable[str]) -> "ConfigValidation":
        return cls(errors=tuple(errors))

    def merge(self, other: "ConfigValidation") -> "ConfigValidation":
        return ConfigValidation(errors=self.errors + other.errors)

    def raise_if_invalid(self, context: str) -> None:
        """Raise ``ValueError`` listing every error, prefixed by ``context``."""
        if self.errors:
            raise ValueError(f"{context}: " + "; ".join(self.errors))


class ValidationMixin:
    """
    Mixin class providing reusable validation methods for Pydantic models.

    Methods operate on model instances so they can be called from
    ``model_validator(mode="after")`` hooks.
    """

    def validate_either_or_required(
        self,
        field_a: str,
        field_b: str,
        error_message: Optional[str] = None,
    ) -> None:
        """
        Validate that exactly one of two fields is provided.

        Raises:
            ValueError: If neither or both fields are provided
        """
        value_a = getattr(self, field_a, None)
        value_b = getattr(self, field_b, None)

        if value_a is None and value_b is None:
            raise ValueError(error_message or f"Either {field_a} or {field_b} must be provided")
        if value_a is not None and value_b is not None:
            raise ValueError(error_message or f"Cannot provide both {field_a} and {field_b}")

    def validate_all_or_none(
        self,
        fields: List[str],
        error_message: Optional[str] = None,
    ) -> None:
        """
        Validate that a group of fields is either fully provided or fully omitted.

        Raises:
            ValueError: If only some of the fields are provided
        """
        provided = [getattr(self, field, None) is not None for field in fields]
        if any(provided) and not all(provided):
            raise ValueError(error_message or f"{', '.join(fields)} must be provided together")

    def validate_year_ordering(
        self,
        start_field: str,
        end_field: str,
        error_message: Optional[str] = None,
    ) -> None:
        """
        Validate that ``end_field`` does not precede ``start_field``.

        Raises:
            ValueError: If the end year is before the start year
        """
        start_year = getattr(self, start_field, None)
        end_year = getattr(self, end_field, None)

        if start_year is not None and end_year is not None and end_year < start_year:
            raise ValueError(error_message or f"{end_field} must not precede {start_field}")

    def validate_conditional_requirement(
        self,
        condition_field: str,
        condition_values: Union[Any, List[Any]],
        required_fields: Union[str, List[str]],
        error_message: Optional[str] = None,
    ) -> None:
        """
        Validate that fields are provided when a condition is met.

        Args:
            condition_field: Field name to check condition on
            condition_values: Value(s) that trigger the requirement
            required_fields: Field(s) that become required
            error_message: Custom error message

        Raises:
            ValueError: If a required field is missing when condition is met
        """
        condition_value = getattr(self, condition_field, None)

        # Normalize to lists
        if not isinstance(condition_values, list):
            condition_values = [condition_values]
        if isinstance(required_fields, str):
            required_fields = [required_fields]

        if condition_value not in condition_values:
            return
        for required_field in required_fields:
            if getattr(self, required_field, None) is None:
                raise ValueError(
                    error_message
                    or f"{required_field} is required when {condition_field} is {condition_value}"
                )
