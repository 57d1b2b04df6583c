# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial Statements

Statement records, the P&L / balance sheet / cash flow generators and the
statement, cross-statement and linkage validators.
"""

from .balance_sheet import (
    BalanceSheetInput,
    calculate_debt_plug,
    generate_balance_sheet,
    update_retained_earnings,
)
from .cash_flow import (
    CashFlowInput,
    WorkingCapitalChanges,
    calculate_debt_change,
    calculate_working_capital_changes,
    create_cash_flow_from_statements,
    generate_cash_flow_statement,
    reconcile_cash_flow_with_balance_sheet,
)
from .models import (
    BalanceSheet,
    CashFlowStatement,
    DiagnosticEvent,
    FinancialPeriod,
    ProfitLossStatement,
    ValidationIssue,
    ValidationResult,
)
from .profit_loss import (
    ProfitLossInput,
    create_simple_profit_loss,
    generate_profit_loss_statement,
)
from .validators import (
    PeriodLinkageValidation,
    is_balance_sheet_balanced,
    is_cash_flow_reconciled,
    validate_balance_sheet,
    validate_cash_flow_statement,
    validate_financial_period,
    validate_historical_period,
    validate_period_linkage,
    validate_period_sequence,
    validate_profit_loss_statement,
)

__all__ = [
    # Records
    "BalanceSheet",
    "CashFlowStatement",
    "DiagnosticEvent",
    "FinancialPeriod",
    "ProfitLossStatement",
    "ValidationIssue",
    "ValidationResult",
    # Generators
    "BalanceSheetInput",
    "CashFlowInput",
    "ProfitLossInput",
    "WorkingCapitalChanges",
    "calculate_debt_change",
    "calculate_debt_plug",
    "calculate_working_capital_changes",
    "create_cash_flow_from_statements",
    "create_simple_profit_loss",
    "generate_balance_sheet",
    "generate_cash_flow_statement",
    "generate_profit_loss_statement",
    "reconcile_cash_flow_with_balance_sheet",
    "update_retained_earnings",
    # Validators
    "PeriodLinkageValidation",
    "is_balance_sheet_balanced",
    "is_cash_flow_reconciled",
    "validate_balance_sheet",
    "validate_cash_flow_statement",
    "validate_financial_period",
    "validate_historical_period",
    "validate_period_linkage",
    "validate_period_sequence",
    "validate_profit_loss_statement",
]
