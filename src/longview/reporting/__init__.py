# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reporting

pandas DataFrame views of a finished projection.
"""

from .base import BaseReport
from .financial_reports import (
    BalanceSheetReport,
    CashFlowReport,
    ProfitLossReport,
    ReturnsSummaryReport,
    ValidationReport,
)

__all__ = [
    "BaseReport",
    "BalanceSheetReport",
    "CashFlowReport",
    "ProfitLossReport",
    "ReturnsSummaryReport",
    "ValidationReport",
]
