# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Longview - Long-Horizon School Financial Projection Engine

Projects a school operator's P&L, balance sheet and cash flow over a
30-year horizon: two years of actuals, a three-year transition band and a
fully modeled contract band, balanced every year by a debt plug and
reconciled through the cash flow statement.

Key Entry Points:
- longview.analysis.calculate_financial_projections() - Full period chain with metrics
- longview.periods.* - Historical, transition and dynamic period calculators
- longview.capex.* - CapEx, depreciation and reinvestment
- longview.reporting.* - pandas statement reports

Example Usage:
    ```python
    from longview.analysis import ProjectionInput, calculate_financial_projections

    result = calculate_financial_projections(projection_input)
    print(f"NAV: {result.metrics.net_annualized_value:,.0f}")
    ```
"""

import importlib
import logging

# Libraries leave handler configuration to the application.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "assumptions",
    "capex",
    "core",
    "periods",
    "reporting",
    "solvers",
    "statements",
]


_LAZY_MODULES = {
    "analysis": "longview.analysis",
    "assumptions": "longview.assumptions",
    "capex": "longview.capex",
    "core": "longview.core",
    "periods": "longview.periods",
    "reporting": "longview.reporting",
    "solvers": "longview.solvers",
    "statements": "longview.statements",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'longview' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
