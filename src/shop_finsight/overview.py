# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Dashboard overview orchestration.

``build_financial_overview()`` computes, for a single as-of date, every
headline figure shown on the finance dashboard in one pass:

1. Balance figures taken from the CapitalSnapshot (total assets,
   liabilities, equity, working capital).
2. Asset register totals (book value, accumulated depreciation, number of
   active assets).
3. Month-to-date cash movements (operating revenue, operating expenses and
   net cash flow over all sections).
4. Financial ratios, using the month-to-date operating revenue as sales
   revenue and revenue minus expenses as net income.

The month window is month to date: it stops at the as-of date, so a report
built for a past date ignores entries recorded after that date.

Without a snapshot the balance figures are 0 and no ratios are computed.
Like every engine module it is pure: the as-of date is an argument.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .assets import count_active_assets, total_book_value, total_depreciation
from .config import DEFAULT_SETTINGS, EngineSettings
from .models import CapitalSnapshot, CashFlowEntry, FinancialRatios, FixedAsset
from .periods import (
    operating_expenses,
    operating_revenue,
    period_mtd,
    summarize_cash_flows,
)
from .ratios import compute_financial_ratios

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinancialOverview:
    """Headline figures of the finance dashboard at one as-of date."""

    as_of: date
    total_assets: float
    total_liabilities: float
    total_equity: float
    working_capital: float
    asset_value: float
    accumulated_depreciation: float
    active_asset_count: int
    monthly_revenue: float
    monthly_expenses: float
    net_cash_flow: float
    ratios: Optional[FinancialRatios]


def build_financial_overview(
    assets: Iterable[FixedAsset],
    cash_flows: Iterable[CashFlowEntry],
    snapshot: Optional[CapitalSnapshot],
    as_of: date,
    inventory_value: float = 0.0,
    settings: Optional[EngineSettings] = None,
) -> FinancialOverview:
    """
    Build the dashboard overview for ``as_of``.

    Args:
        assets: Fixed-asset register.
        cash_flows: Cash-flow history.
        snapshot: Latest balance-sheet snapshot, or None if unavailable.
        as_of: Reporting date; the month-to-date window ends here.
        inventory_value: Inventory valuation fed to the ratios.
        settings: Engine settings; defaults to DEFAULT_SETTINGS.

    Returns:
        A FinancialOverview; ``ratios`` is None when no snapshot is given.
    """
    settings = settings or DEFAULT_SETTINGS
    register = list(assets)
    flows = list(cash_flows)
    month = period_mtd(as_of)

    monthly_revenue = operating_revenue(flows, month.start, month.end)
    monthly_expenses = operating_expenses(flows, month.start, month.end)
    month_summary = summarize_cash_flows(flows, month.start, month.end)

    ratios: Optional[FinancialRatios] = None
    if snapshot is None:
        logger.info("No capital snapshot supplied: ratios are not computed.")
    else:
        ratios = compute_financial_ratios(
            snapshot,
            inventory_value=inventory_value,
            sales_revenue=monthly_revenue,
            net_income=monthly_revenue - monthly_expenses,
            cash_flows=flows,
            as_of=as_of,
            receivables_turnover=settings.receivables_turnover,
        )

    return FinancialOverview(
        as_of=as_of,
        total_assets=snapshot.total_assets if snapshot else 0.0,
        total_liabilities=snapshot.total_liabilities if snapshot else 0.0,
        total_equity=snapshot.total_equity if snapshot else 0.0,
        working_capital=snapshot.working_capital if snapshot else 0.0,
        asset_value=total_book_value(register, as_of, settings),
        accumulated_depreciation=total_depreciation(register, as_of, settings),
        active_asset_count=count_active_assets(register),
        monthly_revenue=monthly_revenue,
        monthly_expenses=monthly_expenses,
        net_cash_flow=month_summary.net_cash_flow,
        ratios=ratios,
    )
