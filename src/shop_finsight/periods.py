# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers and cash-flow summaries for Shop FinSight.

This module defines a Period value object, helpers to derive reporting
periods (month to date, trailing months, custom bounds) from an as-of date
supplied by the caller, and the cash-flow analyses built on them:

- summarize_cash_flows:     operating / investing / financing / net totals,
- monthly_cash_flow_trend:  the same summary for each of the trailing months,
- operating_revenue / operating_expenses: month-level dashboard figures.

Bounds are always inclusive. Nothing here reads the system clock.
"""

from calendar import monthrange
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .models import CashFlowCategory, CashFlowEntry, CashFlowSummary


@dataclass
class Period:
    """Represents a reporting period with a human-readable label."""

    start: date
    end: date
    label: str


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def month_period(d: date) -> Period:
    """Full calendar month containing ``d``."""
    last_day = monthrange(d.year, d.month)[1]
    return Period(
        start=date(d.year, d.month, 1),
        end=date(d.year, d.month, last_day),
        label=f"{d.year}-{d.month:02d}",
    )


def period_mtd(as_of: date) -> Period:
    """Month-to-date: first day of the month of ``as_of`` to ``as_of``."""
    return Period(start=as_of.replace(day=1), end=as_of, label="Month to date")


def period_from_bounds(start: date, end: date) -> Period:
    """Custom period; raises ValueError when ``end`` is before ``start``."""
    if end < start:
        raise ValueError("Custom period end date cannot be before start date.")
    return Period(start=start, end=end, label=f"Custom period ({start} → {end})")


def trailing_month_periods(as_of: date, months: int = 12) -> list[Period]:
    """
    The ``months`` calendar months ending with the month of ``as_of``,
    oldest first. Each period covers its full calendar month.
    """
    periods: list[Period] = []
    for offset in range(-(months - 1), 1):
        year, month = _shift_month(as_of.year, as_of.month, offset)
        periods.append(month_period(date(year, month, 1)))
    return periods


def determine_period_from_args(args, as_of: date) -> Period:
    """
    Determine the cash-flow summary period from CLI args.

    Priority (highest to lowest):

        1. args.from_date / args.to_date (custom period; a missing bound
           defaults to the month start / ``as_of``)
        2. month to date of ``as_of``
    """
    from_raw: Optional[str] = getattr(args, "from_date", None)
    to_raw: Optional[str] = getattr(args, "to_date", None)

    if from_raw or to_raw:
        start = date.fromisoformat(from_raw) if from_raw else as_of.replace(day=1)
        end = date.fromisoformat(to_raw) if to_raw else as_of
        return period_from_bounds(start, end)

    return period_mtd(as_of)


def _in_period(entries: Iterable[CashFlowEntry], start: date, end: date):
    return (e for e in entries if start <= e.date <= end)


def summarize_cash_flows(
    entries: Iterable[CashFlowEntry], start: date, end: date
) -> CashFlowSummary:
    """Cash-flow totals per section for entries dated within [start, end]."""
    totals = {category: 0.0 for category in CashFlowCategory}
    for entry in _in_period(entries, start, end):
        totals[CashFlowCategory(entry.category)] += entry.amount

    operating = totals[CashFlowCategory.OPERATING]
    investing = totals[CashFlowCategory.INVESTING]
    financing = totals[CashFlowCategory.FINANCING]
    return CashFlowSummary(
        operating=operating,
        investing=investing,
        financing=financing,
        net_cash_flow=operating + investing + financing,
    )


def monthly_cash_flow_trend(
    entries: Iterable[CashFlowEntry], as_of: date, months: int = 12
) -> list[tuple[Period, CashFlowSummary]]:
    """Cash-flow summary of each trailing calendar month, oldest first."""
    flows = list(entries)
    return [
        (p, summarize_cash_flows(flows, p.start, p.end))
        for p in trailing_month_periods(as_of, months)
    ]


def operating_revenue(
    entries: Iterable[CashFlowEntry], start: date, end: date
) -> float:
    """Sum of positive operating amounts within [start, end]."""
    return sum(
        (
            e.amount
            for e in _in_period(entries, start, end)
            if e.category == CashFlowCategory.OPERATING and e.amount > 0
        ),
        0.0,
    )


def operating_expenses(
    entries: Iterable[CashFlowEntry], start: date, end: date
) -> float:
    """Absolute sum of negative operating amounts within [start, end]."""
    return abs(
        sum(
            (
                e.amount
                for e in _in_period(entries, start, end)
                if e.category == CashFlowCategory.OPERATING and e.amount < 0
            ),
            0.0,
        )
    )
