# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Solvers

Fixed-point resolution of the debt / interest / zakat / cash loop.
"""

from .circular import (
    CircularSolverInput,
    CircularSolverResult,
    calculate_interest_expense,
    calculate_interest_income,
    meets_minimum_cash,
    solve_circular_dependencies,
)

__all__ = [
    "CircularSolverInput",
    "CircularSolverResult",
    "calculate_interest_expense",
    "calculate_interest_income",
    "meets_minimum_cash",
    "solve_circular_dependencies",
]
