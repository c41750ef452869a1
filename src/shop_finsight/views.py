# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for Shop FinSight.

This module transforms engine outputs into pandas DataFrames ready for
display (console tables) or CSV export. It contains no financial logic:
every figure comes from the engine modules, and the helpers here only
select, order, label and round.

The main views are:

- asset register:       one row per asset with depreciation and book value,
- depreciation schedule: one row per year of an asset's useful life,
- category breakdown:   book value per asset category,
- ratios:               one row per ratio, ordered by ratio family,
- forecast:             one row per projected line item,
- cash-flow trend:      one row per month,
- overview:             one row per headline figure.
"""

from collections.abc import Iterable
from dataclasses import fields
from datetime import date
from typing import Optional

import pandas as pd

from .config import EngineSettings
from .depreciation import ScheduleLine, book_value, depreciation
from .models import CashFlowForecast, CashFlowSummary, CategoryBreakdown, FixedAsset
from .overview import FinancialOverview
from .periods import Period
from .ratios import GROUP_ORDER, RatioResult


def _enum_value(value: object) -> str:
    return str(getattr(value, "value", value))


def assets_to_dataframe(
    assets: Iterable[FixedAsset],
    as_of: date,
    decimals: int = 2,
    settings: Optional[EngineSettings] = None,
) -> pd.DataFrame:
    """
    Asset register at ``as_of``.

    Columns: asset_id, name, category, method, status, purchase_date,
    purchase_price, salvage_value, useful_life, depreciation, book_value.
    Retired assets are listed (their book value stays computable); totals
    must be taken from assets.total_book_value(), which excludes them.
    """
    columns = [
        "asset_id",
        "name",
        "category",
        "method",
        "status",
        "purchase_date",
        "purchase_price",
        "salvage_value",
        "useful_life",
        "depreciation",
        "book_value",
    ]
    rows: list[dict[str, object]] = []
    for a in assets:
        rows.append(
            {
                "asset_id": a.asset_id,
                "name": a.name,
                "category": _enum_value(a.category),
                "method": _enum_value(a.depreciation_method),
                "status": _enum_value(a.status),
                "purchase_date": a.purchase_date.isoformat(),
                "purchase_price": round(a.purchase_price, decimals),
                "salvage_value": round(a.salvage_value, decimals),
                "useful_life": a.useful_life,
                "depreciation": round(depreciation(a, as_of, settings), decimals),
                "book_value": round(book_value(a, as_of, settings), decimals),
            }
        )
    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows)[columns]


def depreciation_schedule_to_dataframe(
    schedule: list[ScheduleLine], decimals: int = 2
) -> pd.DataFrame:
    """Columns: year, period_end, depreciation, accumulated, book_value."""
    columns = ["year", "period_end", "depreciation", "accumulated", "book_value"]
    if not schedule:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(
        [
            {
                "year": line.year,
                "period_end": line.period_end.isoformat(),
                "depreciation": round(line.depreciation, decimals),
                "accumulated": round(line.accumulated, decimals),
                "book_value": round(line.book_value, decimals),
            }
            for line in schedule
        ]
    )[columns]


def category_breakdown_to_dataframe(
    breakdown: list[CategoryBreakdown], decimals: int = 2
) -> pd.DataFrame:
    """Columns: category, book_value, percentage (sorted by book value)."""
    columns = ["category", "book_value", "percentage"]
    if not breakdown:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(
        [
            {
                "category": _enum_value(b.category),
                "book_value": round(b.book_value, decimals),
                "percentage": round(b.percentage, decimals),
            }
            for b in breakdown
        ]
    )
    df = df.sort_values("book_value", ascending=False, kind="stable")
    return df.reset_index(drop=True)[columns]


def ratios_to_dataframe(ratios: list[RatioResult], decimals: int) -> pd.DataFrame:
    """
    Convert a list of RatioResult objects into a pandas DataFrame.

    The resulting DataFrame has the following columns:
        - key:   Internal ratio identifier (e.g. "current_ratio").
        - label: Human-readable label to display.
        - value: Numeric value, rounded to the requested number of decimals.
        - unit:  Unit hint ("ratio", "percent", "times").
        - group: Ratio family ("liquidity", "profitability", ...).
        - notes: Optional description or comment.

    Args:
        ratios:
            List of RatioResult instances as returned by
            ratios.ratios_to_results().
        decimals:
            Number of decimal places to use when rounding numeric values.

    Returns:
        A pandas DataFrame containing one row per ratio, sorted by group
        (liquidity, profitability, efficiency, leverage, then others). The
        order inside a group is preserved.
    """
    columns = ["key", "label", "value", "unit", "group", "notes"]
    if not ratios:
        return pd.DataFrame(columns=columns)

    group_order = {g: i for i, g in enumerate(GROUP_ORDER)}

    df = pd.DataFrame(
        [
            {
                "key": r.key,
                "label": r.label,
                "value": round(r.value, decimals),
                "unit": r.unit,
                "group": r.group,
                "notes": r.notes,
            }
            for r in ratios
        ]
    )

    df["__group_order__"] = df["group"].map(lambda g: group_order.get(g, 99))
    df = df.sort_values("__group_order__", kind="stable").drop(
        columns=["__group_order__"]
    )
    return df.reset_index(drop=True)[columns]


def forecast_to_dataframe(forecast: CashFlowForecast, decimals: int = 2) -> pd.DataFrame:
    """
    Projected line items of a forecast, inflows and outflows together.

    Columns: date, direction ('inflow' / 'outflow'), category, description,
    amount, probability, weighted_amount (amount * probability, negative
    for outflows). Rows are sorted by date, inflows before outflows.
    """
    columns = [
        "date",
        "direction",
        "category",
        "description",
        "amount",
        "probability",
        "weighted_amount",
    ]
    rows: list[dict[str, object]] = []
    for direction, items, sign in (
        ("inflow", forecast.projected_inflows, 1.0),
        ("outflow", forecast.projected_outflows, -1.0),
    ):
        for p in items:
            rows.append(
                {
                    "date": p.date.isoformat(),
                    "direction": direction,
                    "category": p.category,
                    "description": p.description,
                    "amount": round(p.amount, decimals),
                    "probability": round(p.probability, 4),
                    "weighted_amount": round(sign * p.amount * p.probability, decimals),
                }
            )
    if not rows:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(rows).sort_values("date", kind="stable")
    return df.reset_index(drop=True)[columns]


def cash_flow_trend_to_dataframe(
    trend: list[tuple[Period, CashFlowSummary]], decimals: int = 2
) -> pd.DataFrame:
    """Columns: month, operating, investing, financing, net."""
    columns = ["month", "operating", "investing", "financing", "net"]
    if not trend:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(
        [
            {
                "month": period.label,
                "operating": round(s.operating, decimals),
                "investing": round(s.investing, decimals),
                "financing": round(s.financing, decimals),
                "net": round(s.net_cash_flow, decimals),
            }
            for period, s in trend
        ]
    )[columns]


def overview_to_dataframe(overview: FinancialOverview, decimals: int = 2) -> pd.DataFrame:
    """Two-column (measure, value) rendering of the dashboard headline figures."""
    rows: list[dict[str, object]] = []
    for f in fields(overview):
        if f.name in ("as_of", "ratios"):
            continue
        value = getattr(overview, f.name)
        if isinstance(value, float):
            value = round(value, decimals)
        rows.append({"measure": f.name, "value": value})
    return pd.DataFrame(rows, columns=["measure", "value"], dtype=object)
