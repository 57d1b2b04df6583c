# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Longview Core Framework

Foundational building blocks for the projection engine: primitives, the
decimal arithmetic layer, shared financial calculations and constants.
"""

from . import arithmetic, constants, primitives
from .calculations import FinancialCalculations
from .primitives import (
    DEFAULT_DECIMAL_CONTEXT,
    CircularSolverSettings,
    ConfigValidation,
    DecimalContext,
    Model,
    PeriodType,
    ProjectionSettings,
    SystemConfiguration,
)

__all__ = [
    "arithmetic",
    "constants",
    "primitives",
    "FinancialCalculations",
    "DEFAULT_DECIMAL_CONTEXT",
    "CircularSolverSettings",
    "ConfigValidation",
    "DecimalContext",
    "Model",
    "PeriodType",
    "ProjectionSettings",
    "SystemConfiguration",
]
