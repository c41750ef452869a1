# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Asset register aggregation.

Sums book values and accumulated depreciation across a collection of
fixed assets. Retired assets (status ``disposed`` or ``sold``) are excluded
from every aggregate, although their individual book value stays
computable through depreciation.book_value().

All functions are O(n) in the number of assets, order-independent and
side-effect free. An empty register aggregates to 0.
"""

import logging
from collections.abc import Iterable
from typing import Optional

from .config import EngineSettings
from .depreciation import DateLike, book_value, depreciation
from .models import AssetCategory, AssetStatus, CategoryBreakdown, FixedAsset

logger = logging.getLogger(__name__)


def is_retired(asset: FixedAsset) -> bool:
    """True when the asset has been disposed of or sold."""
    return asset.is_retired


def in_service(assets: Iterable[FixedAsset]) -> list[FixedAsset]:
    """Assets that still count in register totals."""
    return [a for a in assets if not is_retired(a)]


def total_book_value(
    assets: Iterable[FixedAsset],
    as_of: DateLike,
    settings: Optional[EngineSettings] = None,
) -> float:
    """Sum of book values of non-retired assets at ``as_of``."""
    return sum(
        (book_value(a, as_of, settings) for a in in_service(assets)), 0.0
    )


def total_depreciation(
    assets: Iterable[FixedAsset],
    as_of: DateLike,
    settings: Optional[EngineSettings] = None,
) -> float:
    """Sum of accumulated depreciation of non-retired assets at ``as_of``."""
    return sum(
        (depreciation(a, as_of, settings) for a in in_service(assets)), 0.0
    )


def count_active_assets(assets: Iterable[FixedAsset]) -> int:
    """Number of assets whose status is exactly 'active'."""
    return sum(1 for a in assets if a.status == AssetStatus.ACTIVE)


def book_value_by_category(
    assets: Iterable[FixedAsset],
    as_of: DateLike,
    settings: Optional[EngineSettings] = None,
) -> list[CategoryBreakdown]:
    """
    Book value of non-retired assets grouped by register category.

    Returns:
        One CategoryBreakdown per category present, in order of first
        appearance. ``percentage`` is the category share of the total book
        value (0-100), or 0 when the total is 0.
    """
    values: dict[AssetCategory, float] = {}
    for asset in in_service(assets):
        category = AssetCategory(asset.category)
        values[category] = values.get(category, 0.0) + book_value(
            asset, as_of, settings
        )

    total = sum(values.values(), 0.0)
    logger.debug(
        "Category breakdown: %d categories, total book value %.2f",
        len(values),
        total,
    )

    return [
        CategoryBreakdown(
            category=category,
            book_value=value,
            percentage=(value / total * 100.0) if total > 0 else 0.0,
        )
        for category, value in values.items()
    ]
