# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Projection Analysis

Entry point for running the full period chain, its input and result
models, and the summary metrics computed over the chain.
"""

from .inputs import ProjectionInput
from .metrics import ProjectionMetrics, calculate_projection_metrics
from .orchestrator import calculate_financial_projections
from .results import PerformanceStats, ProjectionResult, ValidationSummary

__all__ = [
    "PerformanceStats",
    "ProjectionInput",
    "ProjectionMetrics",
    "ProjectionResult",
    "ValidationSummary",
    "calculate_financial_projections",
    "calculate_projection_metrics",
]
