# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Historical-pattern cash-flow forecaster.

The forecast is built in four steps:

1. Pattern extraction
   -------------------
   The history is grouped by subcategory (entries sorted by date inside a
   group). For each group:

   - avg_amount  = mean of the amounts,
   - growth_rate = (mean(most recent N) - mean(earliest N)) / |mean(earliest N)|
                   with N = 6 (all entries when fewer exist), 0 when the
                   earliest mean is 0, clamped to [-0.5, 0.5],
   - confidence  = 1 - pstdev / |avg_amount| clamped to [0.3, 0.95]
                   (the floor applies when avg_amount is 0).

2. Projection
   -----------
   For each projected month and each pattern, the amount is
   ``avg_amount * (1 + growth_rate)``. Positive averages become inflows;
   anything else becomes an outflow carrying the absolute amount. Each line
   carries the pattern confidence as its probability.

3. Aggregation
   ------------
   net_cash_flow = sum(inflow * p) - sum(outflow * p). cumulative_cash_flow
   is set to net_cash_flow: it is NOT a month-by-month running total.

4. Confidence tier
   ----------------
   Mean of the pattern confidences: > 0.8 high, > 0.6 medium, else low. No
   pattern at all gives 'low'.

The start date of the horizon is an explicit argument; nothing here reads
the system clock. Projected months are spaced ``step_days`` (30) apart.
"""

import logging
import statistics
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import Optional

from .config import DEFAULT_SETTINGS, EngineSettings, ForecastSettings
from .models import (
    CashFlowEntry,
    CashFlowForecast,
    CashFlowProjection,
    ConfidenceTier,
    SubcategoryPattern,
)

logger = logging.getLogger(__name__)

FORECAST_ASSUMPTIONS = "Based on historical patterns with linear trend projection"


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _growth_rate(amounts: Sequence[float], settings: ForecastSettings) -> float:
    window = settings.growth_window
    old_avg = statistics.fmean(amounts[:window])
    recent_avg = statistics.fmean(amounts[-window:])
    if old_avg == 0:
        return 0.0
    growth = (recent_avg - old_avg) / abs(old_avg)
    return _clamp(growth, -settings.growth_cap, settings.growth_cap)


def _confidence(
    amounts: Sequence[float], avg_amount: float, settings: ForecastSettings
) -> float:
    if avg_amount == 0:
        return settings.confidence_floor
    std_dev = statistics.pstdev(amounts)
    return _clamp(
        1.0 - std_dev / abs(avg_amount),
        settings.confidence_floor,
        settings.confidence_ceiling,
    )


def analyze_patterns(
    history: Iterable[CashFlowEntry],
    settings: Optional[ForecastSettings] = None,
) -> list[SubcategoryPattern]:
    """
    Extract one SubcategoryPattern per subcategory present in ``history``.

    Args:
        history: Historical cash-flow entries (any order).
        settings: Forecast settings; defaults to DEFAULT_SETTINGS.forecast.

    Returns:
        Patterns in order of first appearance of each subcategory. An empty
        history yields an empty list.
    """
    settings = settings or DEFAULT_SETTINGS.forecast

    groups: dict[str, list[CashFlowEntry]] = {}
    for entry in history:
        groups.setdefault(entry.subcategory, []).append(entry)

    patterns: list[SubcategoryPattern] = []
    for subcategory, entries in groups.items():
        # Stable sort: same-day entries keep their supplied order.
        amounts = [e.amount for e in sorted(entries, key=lambda e: e.date)]
        avg_amount = statistics.fmean(amounts)

        patterns.append(
            SubcategoryPattern(
                subcategory=subcategory,
                avg_amount=avg_amount,
                growth_rate=_growth_rate(amounts, settings),
                confidence=_confidence(amounts, avg_amount, settings),
                sample_size=len(amounts),
            )
        )

    logger.debug("Extracted %d cash-flow patterns", len(patterns))
    return patterns


def confidence_tier(
    patterns: Sequence[SubcategoryPattern],
    settings: Optional[ForecastSettings] = None,
) -> ConfidenceTier:
    """Overall confidence tier from the mean pattern confidence."""
    settings = settings or DEFAULT_SETTINGS.forecast
    if not patterns:
        return ConfidenceTier.LOW

    avg_confidence = statistics.fmean(p.confidence for p in patterns)
    if avg_confidence > settings.high_threshold:
        return ConfidenceTier.HIGH
    if avg_confidence > settings.medium_threshold:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def forecast_cash_flow(
    history: Iterable[CashFlowEntry],
    start_date: date,
    horizon_months: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> CashFlowForecast:
    """
    Project monthly inflows/outflows from historical patterns.

    Args:
        history: Historical cash-flow entries.
        start_date: First day of the horizon (supplied by the caller).
        horizon_months: Number of projected months; defaults to the
            configured horizon (12). Non-positive values give no line items.
        settings: Engine settings; defaults to DEFAULT_SETTINGS.

    Returns:
        A CashFlowForecast. An empty history gives no line items, a net
        cash flow of 0 and a 'low' tier.
    """
    fc = (settings or DEFAULT_SETTINGS).forecast
    months = fc.horizon_months if horizon_months is None else horizon_months
    step = timedelta(days=fc.step_days)

    patterns = analyze_patterns(history, fc)

    inflows: list[CashFlowProjection] = []
    outflows: list[CashFlowProjection] = []

    for month in range(max(months, 0)):
        projection_date = start_date + step * month
        for pattern in patterns:
            projected = pattern.avg_amount * (1.0 + pattern.growth_rate)
            line = CashFlowProjection(
                date=projection_date,
                category=pattern.subcategory,
                description=f"Projected {pattern.subcategory}",
                amount=abs(projected),
                probability=pattern.confidence,
            )
            if pattern.avg_amount > 0:
                inflows.append(line)
            else:
                outflows.append(line)

    total_inflows = sum((p.amount * p.probability for p in inflows), 0.0)
    total_outflows = sum((p.amount * p.probability for p in outflows), 0.0)
    net_cash_flow = total_inflows - total_outflows

    tier = confidence_tier(patterns, fc)
    logger.debug(
        "Forecast over %d months: %d inflows, %d outflows, net %.2f, tier %s",
        months,
        len(inflows),
        len(outflows),
        net_cash_flow,
        tier.value,
    )

    return CashFlowForecast(
        name=f"{months}-Month Cash Flow Forecast",
        start_date=start_date,
        end_date=start_date + step * max(months, 0),
        projected_inflows=inflows,
        projected_outflows=outflows,
        net_cash_flow=net_cash_flow,
        # Flat on purpose: no month-by-month carry.
        cumulative_cash_flow=net_cash_flow,
        confidence=tier,
        assumptions=FORECAST_ASSUMPTIONS,
        patterns=patterns,
    )
