# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Longview Core Primitives

Essential building blocks shared by every calculator: the immutable model
base, the decimal policy, enumerations, constrained types, settings and
configuration-validation results.
"""

from .decimal_context import DEFAULT_DECIMAL_CONTEXT, DecimalContext
from .enums import (
    CapExCategoryType,
    DepreciationMethod,
    DiagnosticCode,
    DiagnosticSeverity,
    NetInterestConvention,
    PeriodType,
    RentModelKind,
    StaffCostModelKind,
)
from .model import Model
from .settings import CircularSolverSettings, ProjectionSettings, SystemConfiguration
from .types import (
    DecimalBetween0And1,
    NonNegativeDecimal,
    PositiveInt,
    PositiveIntGt1,
    Year,
)
from .validation import ConfigValidation, ValidationMixin

__all__ = [
    # Core models
    "Model",
    "DecimalContext",
    "DEFAULT_DECIMAL_CONTEXT",
    # Settings
    "SystemConfiguration",
    "CircularSolverSettings",
    "ProjectionSettings",
    # Enums
    "CapExCategoryType",
    "DepreciationMethod",
    "DiagnosticCode",
    "DiagnosticSeverity",
    "NetInterestConvention",
    "PeriodType",
    "RentModelKind",
    "StaffCostModelKind",
    # Types
    "DecimalBetween0And1",
    "NonNegativeDecimal",
    "PositiveInt",
    "PositiveIntGt1",
    "Year",
    # Validation
    "ConfigValidation",
    "ValidationMixin",
]
