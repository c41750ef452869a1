# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Shop FinSight
-------------

A Python financial analytics engine for the back office of retail and
repair shops. The engine is a library of pure functions computed over data
snapshots supplied by the caller (fixed-asset register, cash-flow history,
balance-sheet summary).

Main capabilities:
- fixed-asset depreciation (straight-line, double-declining balance,
  sum-of-years' digits, units-of-production fallback),
- asset register aggregation (book value, accumulated depreciation,
  breakdown by category),
- liquidity / profitability / efficiency / leverage ratios,
- cash-flow summaries per period and trailing monthly trends,
- historical-pattern cash-flow forecasting with a confidence tier,
- a dashboard overview combining all of the above.

Shop FinSight separates computation (engine modules), configuration (TOML),
data loading (CSV readers) and presentation (pandas views / CLI), so the
engine can be embedded in any reporting front-end.


Version: 0.2.0

Usage:
    python -m shop_finsight.cli --help
"""

__all__ = [
    "assets",
    "depreciation",
    "forecast",
    "models",
    "overview",
    "periods",
    "ratios",
    "views",
]

__version__ = "0.2.0"
