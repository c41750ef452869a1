# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Fixed-asset depreciation calculator.

Pure functions computing accumulated depreciation and book value of a
single FixedAsset at an "as-of" date supplied by the caller. No clock is
read here: reports are reproducible for any as-of date.

Age
---
Age is the elapsed time between ``purchase_date`` and ``as_of`` in
fractional years on a 365.25-day year, clamped to >= 0. Dates are taken at
midnight; datetimes are accepted for sub-day precision.

Methods
-------
- straight_line:      depreciable / useful_life per year, capped at the
                      depreciable amount.
- declining_balance:  double-declining balance (rate = 2 / useful_life),
                      whole years first, then one fractional step; never
                      below salvage value.
- sum_of_years:       sum-of-years' digits, last partial year pro rata,
                      capped at the depreciable amount.
- units_of_production: no production-volume data is available, so this
                      method is an explicit fallback to straight_line.
                      Callers needing unit-based depreciation must supply
                      production counts, which this engine does not model.

Failure modes
-------------
- useful_life <= 0          -> 0.0 depreciation.
- salvage > purchase price  -> 0.0 depreciation.
- as_of before purchase     -> 0.0 depreciation.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from .config import DEFAULT_SETTINGS, EngineSettings
from .models import DepreciationMethod, FixedAsset

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]

_SECONDS_PER_DAY = 86400.0


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


def age_in_years(
    purchase_date: DateLike,
    as_of: DateLike,
    year_length_days: float = DEFAULT_SETTINGS.year_length_days,
) -> float:
    """Elapsed fractional years between two dates, clamped to >= 0."""
    elapsed = _as_datetime(as_of) - _as_datetime(purchase_date)
    years = elapsed.total_seconds() / (year_length_days * _SECONDS_PER_DAY)
    return max(years, 0.0)


# ---------------------------------------------------------------------------
# Method handlers: (asset, age) -> accumulated depreciation
# ---------------------------------------------------------------------------


def _straight_line(asset: FixedAsset, age: float) -> float:
    depreciable = asset.depreciable_amount
    annual = depreciable / asset.useful_life
    return min(annual * age, depreciable)


def _declining_balance(asset: FixedAsset, age: float) -> float:
    rate = 2.0 / asset.useful_life
    salvage = asset.salvage_value
    book = asset.purchase_price
    total = 0.0

    whole_years = math.floor(age)
    for _ in range(whole_years):
        year_dep = min(book * rate, book - salvage)
        total += year_dep
        book -= year_dep
        if book <= salvage:
            break

    fraction = age - whole_years
    if fraction > 0 and book > salvage:
        total += min(book * rate * fraction, book - salvage)

    return total


def _sum_of_years(asset: FixedAsset, age: float) -> float:
    life = asset.useful_life
    depreciable = asset.depreciable_amount
    sum_of_years = life * (life + 1) / 2.0
    total = 0.0

    for year in range(1, math.ceil(age) + 1):
        # Past the useful life nothing is left to depreciate.
        remaining_life = max(life - (year - 1), 0)
        yearly_dep = depreciable * remaining_life / sum_of_years
        if year <= age:
            total += yearly_dep
        else:
            total += yearly_dep * (age - (year - 1))

    return min(total, depreciable)


def _units_of_production(asset: FixedAsset, age: float) -> float:
    # Known limitation: no production volumes, straight-line is used instead.
    return _straight_line(asset, age)


_METHOD_HANDLERS: dict[DepreciationMethod, Callable[[FixedAsset, float], float]] = {
    DepreciationMethod.STRAIGHT_LINE: _straight_line,
    DepreciationMethod.DECLINING_BALANCE: _declining_balance,
    DepreciationMethod.SUM_OF_YEARS: _sum_of_years,
    DepreciationMethod.UNITS_OF_PRODUCTION: _units_of_production,
}


def _resolve_method(raw: object) -> DepreciationMethod:
    # Unknown methods fall back to straight-line.
    try:
        return DepreciationMethod(raw)
    except ValueError:
        return DepreciationMethod.STRAIGHT_LINE


def depreciation(
    asset: FixedAsset,
    as_of: DateLike,
    settings: Optional[EngineSettings] = None,
) -> float:
    """
    Accumulated depreciation of ``asset`` at ``as_of``.

    Args:
        asset: The fixed asset (assumed validated upstream).
        as_of: Valuation date (date or datetime).
        settings: Engine settings (year length); defaults to DEFAULT_SETTINGS.

    Returns:
        A float in [0, purchase_price - salvage_value]. Invalid
        configurations (non-positive useful life, salvage above price)
        yield 0.0 instead of raising.
    """
    settings = settings or DEFAULT_SETTINGS

    if asset.useful_life <= 0 or asset.depreciable_amount <= 0:
        return 0.0

    age = age_in_years(asset.purchase_date, as_of, settings.year_length_days)
    if age == 0.0:
        return 0.0

    handler = _METHOD_HANDLERS[_resolve_method(asset.depreciation_method)]
    total = handler(asset, age)
    return min(max(total, 0.0), asset.depreciable_amount)


def book_value(
    asset: FixedAsset,
    as_of: DateLike,
    settings: Optional[EngineSettings] = None,
) -> float:
    """Purchase price minus accumulated depreciation, floored at salvage."""
    return max(
        asset.purchase_price - depreciation(asset, as_of, settings),
        asset.salvage_value,
    )


@dataclass(frozen=True)
class ScheduleLine:
    """One year of a depreciation schedule."""

    year: int
    period_end: date
    depreciation: float
    accumulated: float
    book_value: float


def depreciation_schedule(
    asset: FixedAsset,
    years: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> list[ScheduleLine]:
    """
    Year-by-year depreciation schedule of an asset.

    Each line is evaluated at the n-th anniversary of the purchase date on
    the engine year length (365.25 days by default), so the schedule agrees
    exactly with ``depreciation()`` at those dates.

    Args:
        asset: The fixed asset.
        years: Number of lines; defaults to the asset useful life.
        settings: Engine settings; defaults to DEFAULT_SETTINGS.

    Returns:
        A list of ScheduleLine, empty when the number of years is <= 0.
    """
    settings = settings or DEFAULT_SETTINGS
    n_years = asset.useful_life if years is None else years

    start = _as_datetime(asset.purchase_date)
    lines: list[ScheduleLine] = []
    previous = 0.0

    for year in range(1, max(n_years, 0) + 1):
        anniversary = start + timedelta(days=settings.year_length_days * year)
        accumulated = depreciation(asset, anniversary, settings)
        lines.append(
            ScheduleLine(
                year=year,
                period_end=anniversary.date(),
                depreciation=accumulated - previous,
                accumulated=accumulated,
                book_value=max(
                    asset.purchase_price - accumulated, asset.salvage_value
                ),
            )
        )
        previous = accumulated

    logger.debug(
        "Built %d-year %s schedule for asset %r",
        len(lines),
        _resolve_method(asset.depreciation_method).value,
        asset.asset_id or asset.name,
    )
    return lines
