# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial Statement Reports

Year-by-year statement frames, a validation/flags frame and a returns
summary. Statement frames keep ``Decimal`` cells unless ``as_float`` is
requested.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pandas as pd
from pyxirr import irr, npv

from .base import BaseReport, LineGetter

logger = logging.getLogger(__name__)


class ProfitLossReport(BaseReport):
    """Income statement, rows are line items and columns are years."""

    LINES: Dict[str, LineGetter] = {
        "Tuition Revenue": lambda p: p.profit_loss.tuition_revenue,
        "Other Revenue": lambda p: p.profit_loss.other_revenue,
        "Total Revenue": lambda p: p.profit_loss.total_revenue,
        "Rent Expense": lambda p: p.profit_loss.rent_expense,
        "Staff Costs": lambda p: p.profit_loss.staff_costs,
        "Other OpEx": lambda p: p.profit_loss.other_opex,
        "Total OpEx": lambda p: p.profit_loss.total_opex,
        "EBITDA": lambda p: p.profit_loss.ebitda,
        "Depreciation": lambda p: p.profit_loss.depreciation,
        "EBIT": lambda p: p.profit_loss.ebit,
        "Interest Expense": lambda p: p.profit_loss.interest_expense,
        "Interest Income": lambda p: p.profit_loss.interest_income,
        "EBT": lambda p: p.profit_loss.ebt,
        "Zakat": lambda p: p.profit_loss.zakat_expense,
        "Net Income": lambda p: p.profit_loss.net_income,
    }

    def generate(self, years: Optional[List[int]] = None, as_float: bool = False) -> pd.DataFrame:
        return self._line_items_frame(self.LINES, years, as_float)


class BalanceSheetReport(BaseReport):
    """Balance sheet, rows are line items and columns are years."""

    LINES: Dict[str, LineGetter] = {
        "Cash": lambda p: p.balance_sheet.cash,
        "Accounts Receivable": lambda p: p.balance_sheet.accounts_receivable,
        "Prepaid Expenses": lambda p: p.balance_sheet.prepaid_expenses,
        "Total Current Assets": lambda p: p.balance_sheet.total_current_assets,
        "Gross PP&E": lambda p: p.balance_sheet.gross_ppe,
        "Accumulated Depreciation": lambda p: p.balance_sheet.accumulated_depreciation,
        "Net PP&E": lambda p: p.balance_sheet.property_plant_equipment,
        "Total Assets": lambda p: p.balance_sheet.total_assets,
        "Accounts Payable": lambda p: p.balance_sheet.accounts_payable,
        "Accrued Expenses": lambda p: p.balance_sheet.accrued_expenses,
        "Deferred Revenue": lambda p: p.balance_sheet.deferred_revenue,
        "Total Current Liabilities": lambda p: p.balance_sheet.total_current_liabilities,
        "Debt": lambda p: p.balance_sheet.debt_balance,
        "Total Liabilities": lambda p: p.balance_sheet.total_liabilities,
        "Retained Earnings": lambda p: p.balance_sheet.retained_earnings,
        "Net Income (Current Year)": lambda p: p.balance_sheet.net_income_current_year,
        "Total Equity": lambda p: p.balance_sheet.total_equity,
        "Balance Difference": lambda p: p.balance_sheet.balance_difference,
    }

    def generate(self, years: Optional[List[int]] = None, as_float: bool = False) -> pd.DataFrame:
        return self._line_items_frame(self.LINES, years, as_float)


class CashFlowReport(BaseReport):
    """Indirect-method cash flow, rows are line items and columns are years."""

    LINES: Dict[str, LineGetter] = {
        "Net Income": lambda p: p.cash_flow.net_income,
        "Depreciation": lambda p: p.cash_flow.depreciation,
        "Change in AR": lambda p: p.cash_flow.change_in_ar,
        "Change in Prepaid": lambda p: p.cash_flow.change_in_prepaid,
        "Change in AP": lambda p: p.cash_flow.change_in_ap,
        "Change in Accrued": lambda p: p.cash_flow.change_in_accrued,
        "Change in Deferred Revenue": lambda p: p.cash_flow.change_in_deferred_revenue,
        "Cash Flow from Operations": lambda p: p.cash_flow.cash_flow_from_operations,
        "CapEx": lambda p: p.cash_flow.capex,
        "Cash Flow from Investing": lambda p: p.cash_flow.cash_flow_from_investing,
        "Debt Issuance": lambda p: p.cash_flow.debt_issuance,
        "Debt Repayment": lambda p: p.cash_flow.debt_repayment,
        "Untracked Financing": lambda p: p.cash_flow.untracked_financing_adjustment,
        "Cash Flow from Financing": lambda p: p.cash_flow.cash_flow_from_financing,
        "Net Change in Cash": lambda p: p.cash_flow.net_change_in_cash,
        "Beginning Cash": lambda p: p.cash_flow.beginning_cash,
        "Ending Cash": lambda p: p.cash_flow.ending_cash,
        "Reconciliation Difference": lambda p: p.cash_flow.cash_reconciliation_diff,
    }

    def generate(self, years: Optional[List[int]] = None, as_float: bool = False) -> pd.DataFrame:
        return self._line_items_frame(self.LINES, years, as_float)


class ValidationReport(BaseReport):
    """Per-year flags and differences, one row per year."""

    def generate(self) -> pd.DataFrame:
        rows = [
            {
                "Year": p.year,
                "Period Type": p.period_type.value,
                "Balanced": p.balance_sheet_balanced,
                "Reconciled": p.cash_flow_reconciled,
                "Converged": p.converged,
                "Iterations": p.iterations_required,
                "Balance Difference": float(p.balance_sheet.balance_difference),
                "Reconciliation Difference": float(p.cash_flow.cash_reconciliation_diff),
                "Debt Plug Clamped": p.balance_sheet.debt_plug_clamped,
                "Diagnostics": ", ".join(event.code.value for event in p.diagnostics),
            }
            for p in self.periods
        ]
        return pd.DataFrame(rows).set_index("Year")


class ReturnsSummaryReport(BaseReport):
    """
    Headline metrics as floats, with the NPV and IRR of the net cash
    change recomputed independently by ``pyxirr``.
    """

    def generate(self) -> pd.Series:
        metrics = self._results.metrics
        flows = [float(p.cash_flow.net_change_in_cash) for p in self.periods]
        rate = float(metrics.discount_rate)

        check_npv = npv(rate, flows)
        check_irr = irr(flows, silent=True)
        if check_irr is not None and metrics.irr is not None:
            gap = abs(check_irr - float(metrics.irr))
            if gap > 1e-4:
                logger.warning(f"IRR cross-check differs by {gap:.6f}")

        summary = {
            "Discount Rate": rate,
            "Total Net Income": float(metrics.total_net_income),
            "Total Rent": float(metrics.total_rent),
            "Total EBITDA": float(metrics.total_ebitda),
            "Average EBITDA": float(metrics.average_ebitda),
            "Average ROE": float(metrics.average_roe),
            "Peak Debt": float(metrics.peak_debt),
            "Final Cash": float(metrics.final_cash),
            "NPV": float(metrics.npv),
            "NPV (pyxirr)": check_npv,
            "IRR": float(metrics.irr) if metrics.irr is not None else None,
            "IRR (pyxirr)": check_irr,
            "Payback Period": (
                float(metrics.payback_period) if metrics.payback_period is not None else None
            ),
            "Contract Rent NPV": float(metrics.contract_rent_npv),
            "Contract EBITDA NPV": float(metrics.contract_ebitda_npv),
            "Net Tenant Surplus": float(metrics.net_tenant_surplus),
            "Annualized EBITDA": float(metrics.annualized_ebitda),
            "Annualized Rent": float(metrics.annualized_rent),
            "Net Annualized Value": float(metrics.net_annualized_value),
        }
        return pd.Series(summary, name="Returns Summary")
