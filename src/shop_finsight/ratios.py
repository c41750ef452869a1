# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
Computation of financial ratios for Shop FinSight.

This module provides:

1. Balance figures
   ----------------
   ``derive_balance_figures(snapshot, inventory_value)`` turns a
   CapitalSnapshot into the figures the ratios are built on. Two of them are
   named approximations, because the snapshot carries no current-asset
   ledger:

       current_assets_approx  = inventory_value + retained_earnings
       cash_equivalent_approx = retained_earnings

   They are kept in one place so that a proper current-asset figure can
   replace them later without touching the ratio formulas.

2. Financial ratios
   -----------------
   ``compute_financial_ratios(...)`` returns a fully populated
   FinancialRatios record (liquidity, profitability, efficiency, leverage).
   Every ratio whose denominator is zero or negative resolves to 0.0: a
   report must render even with incomplete underlying data.

   Cost of goods sold and interest expense are read from the cash-flow
   history (operating 'cost_of_goods_sold' and financing 'interest_expense'
   outflows).

3. Presentation metadata
   ----------------------
   ``RATIO_DEFINITIONS`` carries a label, unit, group and notes for each
   ratio, and ``ratios_to_results(...)`` flattens a FinancialRatios record
   into RatioResult objects consumed by views.ratios_to_dataframe().

Summary
-------
This module never raises on numeric edge cases; malformed inputs degrade to
zeros rather than exceptions.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, fields
from datetime import date
from typing import Optional

from .config import DEFAULT_SETTINGS
from .models import CapitalSnapshot, CashFlowCategory, CashFlowEntry, FinancialRatios

logger = logging.getLogger(__name__)

COGS_SUBCATEGORY = "cost_of_goods_sold"
INTEREST_SUBCATEGORY = "interest_expense"

# Logical ordering of ratio groups for display.
GROUP_ORDER: tuple[str, ...] = ("liquidity", "profitability", "efficiency", "leverage")


@dataclass(frozen=True)
class RatioResult:
    """
    Computed ratio as exposed to the presentation layer.

    Attributes:
        key: Internal identifier (e.g. 'current_ratio').
        label: Human-readable label for display (e.g. 'Current ratio').
        value: Numeric value (always defined).
        unit: Unit hint ('ratio', 'percent', 'times').
        notes: Optional human-readable notes or description.
        group: Ratio family ('liquidity', 'profitability', ...).
    """

    key: str
    label: str
    value: float
    unit: str
    notes: str
    group: str


@dataclass(frozen=True)
class RatioDefinition:
    key: str
    label: str
    unit: str
    group: str
    notes: str = ""


RATIO_DEFINITIONS: tuple[RatioDefinition, ...] = (
    RatioDefinition(
        "current_ratio",
        "Current ratio",
        "ratio",
        "liquidity",
        "Current assets (approximation) / current liabilities.",
    ),
    RatioDefinition(
        "quick_ratio",
        "Quick ratio",
        "ratio",
        "liquidity",
        "Current assets (approximation) less inventory / current liabilities.",
    ),
    RatioDefinition(
        "cash_ratio",
        "Cash ratio",
        "ratio",
        "liquidity",
        "Retained earnings used as cash equivalent.",
    ),
    RatioDefinition(
        "working_capital_ratio", "Working capital ratio", "ratio", "liquidity"
    ),
    RatioDefinition("gross_profit_margin", "Gross profit margin", "percent", "profitability"),
    RatioDefinition("net_profit_margin", "Net profit margin", "percent", "profitability"),
    RatioDefinition("return_on_assets", "Return on assets", "percent", "profitability"),
    RatioDefinition("return_on_equity", "Return on equity", "percent", "profitability"),
    RatioDefinition("inventory_turnover", "Inventory turnover", "times", "efficiency"),
    RatioDefinition(
        "receivables_turnover",
        "Receivables turnover",
        "times",
        "efficiency",
        "Placeholder: no accounts-receivable ledger is modeled.",
    ),
    RatioDefinition("asset_turnover", "Asset turnover", "times", "efficiency"),
    RatioDefinition("debt_to_assets", "Debt to assets", "ratio", "leverage"),
    RatioDefinition("debt_to_equity", "Debt to equity", "ratio", "leverage"),
    RatioDefinition("equity_ratio", "Equity ratio", "ratio", "leverage"),
    RatioDefinition("interest_coverage", "Interest coverage", "times", "leverage"),
)


@dataclass(frozen=True)
class BalanceFigures:
    """Balance-sheet figures feeding the ratios."""

    # Approximation: inventory + retained earnings (no current-asset ledger).
    current_assets_approx: float
    # Approximation: retained earnings stand in for cash and equivalents.
    cash_equivalent_approx: float
    current_liabilities: float
    inventory_value: float
    total_assets: float
    total_liabilities: float
    total_equity: float
    working_capital: float


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator > 0:
        return numerator / denominator
    return 0.0


def derive_balance_figures(
    snapshot: CapitalSnapshot, inventory_value: float
) -> BalanceFigures:
    """Extract the ratio inputs from a capital snapshot."""
    return BalanceFigures(
        current_assets_approx=inventory_value + snapshot.retained_earnings,
        cash_equivalent_approx=snapshot.retained_earnings,
        current_liabilities=snapshot.current_liabilities,
        inventory_value=inventory_value,
        total_assets=snapshot.total_assets,
        total_liabilities=snapshot.total_liabilities,
        total_equity=snapshot.total_equity,
        working_capital=snapshot.working_capital,
    )


def _outflow_total(
    cash_flows: Iterable[CashFlowEntry],
    category: CashFlowCategory,
    subcategory: str,
) -> float:
    return sum(
        (
            abs(cf.amount)
            for cf in cash_flows
            if cf.category == category
            and cf.subcategory == subcategory
            and cf.amount < 0
        ),
        0.0,
    )


def cost_of_goods_sold(cash_flows: Iterable[CashFlowEntry]) -> float:
    """Total operating 'cost_of_goods_sold' outflows, as a positive amount."""
    return _outflow_total(cash_flows, CashFlowCategory.OPERATING, COGS_SUBCATEGORY)


def interest_expense(cash_flows: Iterable[CashFlowEntry]) -> float:
    """Total financing 'interest_expense' outflows, as a positive amount."""
    return _outflow_total(
        cash_flows, CashFlowCategory.FINANCING, INTEREST_SUBCATEGORY
    )


def working_capital(current_assets: float, current_liabilities: float) -> float:
    """Current assets minus current liabilities."""
    return current_assets - current_liabilities


def debt_service_coverage(
    net_operating_income: float, total_debt_service: float
) -> float:
    """Net operating income / total debt service, 0 without debt service."""
    return safe_divide(net_operating_income, total_debt_service)


def compute_financial_ratios(
    snapshot: CapitalSnapshot,
    inventory_value: float,
    sales_revenue: float,
    net_income: float,
    cash_flows: Iterable[CashFlowEntry] = (),
    as_of: Optional[date] = None,
    receivables_turnover: float = DEFAULT_SETTINGS.receivables_turnover,
) -> FinancialRatios:
    """
    Compute the full set of financial ratios.

    Args:
        snapshot: Balance-sheet summary (equity, debt, totals).
        inventory_value: Inventory valuation at the snapshot date.
        sales_revenue: Sales revenue of the analysed period.
        net_income: Net income of the analysed period.
        cash_flows: Cash-flow history used for COGS and interest expense.
        as_of: Optional date stamped on the result (never read from a clock).
        receivables_turnover: Placeholder value (no receivables ledger).

    Returns:
        A FinancialRatios record where every ratio with a zero (or negative)
        denominator is 0.0.
    """
    flows = list(cash_flows)
    figures = derive_balance_figures(snapshot, inventory_value)
    cogs = cost_of_goods_sold(flows)
    interest = interest_expense(flows)

    logger.debug(
        "Ratios input: %d cash flows, COGS=%.2f, interest=%.2f",
        len(flows),
        cogs,
        interest,
    )

    current_liabilities = figures.current_liabilities
    total_assets = figures.total_assets
    total_equity = figures.total_equity

    return FinancialRatios(
        as_of=as_of,
        # Liquidity
        current_ratio=safe_divide(figures.current_assets_approx, current_liabilities),
        quick_ratio=safe_divide(
            figures.current_assets_approx - inventory_value, current_liabilities
        ),
        cash_ratio=safe_divide(figures.cash_equivalent_approx, current_liabilities),
        working_capital_ratio=safe_divide(figures.working_capital, total_assets),
        # Profitability
        gross_profit_margin=safe_divide(sales_revenue - cogs, sales_revenue),
        net_profit_margin=safe_divide(net_income, sales_revenue),
        return_on_assets=safe_divide(net_income, total_assets),
        return_on_equity=safe_divide(net_income, total_equity),
        # Efficiency
        inventory_turnover=safe_divide(cogs, inventory_value),
        receivables_turnover=float(receivables_turnover),
        asset_turnover=safe_divide(sales_revenue, total_assets),
        # Leverage
        debt_to_assets=safe_divide(figures.total_liabilities, total_assets),
        debt_to_equity=safe_divide(figures.total_liabilities, total_equity),
        equity_ratio=safe_divide(total_equity, total_assets),
        interest_coverage=safe_divide(net_income, interest),
    )


def ratios_to_results(ratios: FinancialRatios) -> list[RatioResult]:
    """
    Flatten a FinancialRatios record into RatioResult objects.

    The output follows RATIO_DEFINITIONS order (grouped by family).
    """
    values = {f.name: getattr(ratios, f.name) for f in fields(ratios)}
    return [
        RatioResult(
            key=d.key,
            label=d.label,
            value=float(values[d.key]),
            unit=d.unit,
            notes=d.notes,
            group=d.group,
        )
        for d in RATIO_DEFINITIONS
    ]
