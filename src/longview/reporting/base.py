# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Base reporting classes.

Reports translate a finished projection into presentation-ready pandas
frames. They format and present; every figure comes from the periods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import pandas as pd

if TYPE_CHECKING:
    from ..analysis.results import ProjectionResult
    from ..statements.models import FinancialPeriod

LineGetter = Callable[["FinancialPeriod"], Any]


class BaseReport(ABC):
    """
    Abstract base class for all report formatters.

    Reports operate on a final ProjectionResult and never perform
    calculations of their own.
    """

    def __init__(self, results: "ProjectionResult"):
        """
        Initialize report with projection results.

        Args:
            results: Result of ``calculate_financial_projections``
        """
        # Import at runtime to avoid circular dependencies
        from ..analysis.results import ProjectionResult  # noqa: PLC0415

        if not isinstance(results, ProjectionResult):
            raise TypeError("BaseReport requires a ProjectionResult object")
        self._results = results

    @property
    def periods(self) -> List["FinancialPeriod"]:
        return self._results.periods

    @abstractmethod
    def generate(self, **kwargs) -> Any:
        """
        Generate the formatted report output.

        This method should transform the projection results into the
        appropriate output format (DataFrame, dict, etc.) without
        performing any financial calculations.
        """
        pass

    def _line_items_frame(
        self,
        lines: Dict[str, LineGetter],
        years: Optional[List[int]] = None,
        as_float: bool = False,
    ) -> pd.DataFrame:
        """
        Frame with one row per line item and one column per year.

        Args:
            lines: Row label -> accessor on a period
            years: Restrict to these years; all periods when omitted
            as_float: Convert Decimal cells to float for plotting or export
        """
        periods = [p for p in self.periods if years is None or p.year in years]
        data = {
            period.year: [_cell(getter(period), as_float) for getter in lines.values()]
            for period in periods
        }
        frame = pd.DataFrame(data, index=list(lines.keys()))
        frame.columns.name = "Year"
        return frame


def _cell(value: Any, as_float: bool) -> Any:
    if as_float and isinstance(value, Decimal):
        return float(value)
    return value
