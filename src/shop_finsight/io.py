# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for Shop FinSight.

This module reads the data snapshots consumed by the engine from CSV files
and normalizes them into domain objects. It is the boundary where asset
records are validated: invalid configurations are rejected here, never
inside the calculators.

Expected input formats
----------------------
Column names are case-insensitive and surrounding whitespace is ignored.

1) Fixed assets
   ------------
       purchase_date, purchase_price, salvage_value, useful_life,
       depreciation_method, status [, asset_id, name, category]

   - ``purchase_date``:       YYYY-MM-DD
   - ``purchase_price``:      acquisition cost (>= 0)
   - ``salvage_value``:       residual value (0 <= salvage <= price)
   - ``useful_life``:         whole years (> 0)
   - ``depreciation_method``: straight_line, declining_balance,
                              sum_of_years, units_of_production
   - ``status``:              active, under_maintenance, disposed, sold

2) Cash flows
   ----------
       date, category, subcategory, amount [, description]

   - ``category``: operating, investing, financing
   - ``amount``:   signed (positive = inflow, negative = outflow)

The column ``label`` is accepted as an alias for ``description``.

Any other columns present in the input file are ignored. Structural or
value errors raise a ValueError naming the offending row.
"""

import logging
import os
from typing import Union

import pandas as pd

from .models import CashFlowEntry, FixedAsset

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

ASSET_REQUIRED_COLUMNS = {
    "purchase_date",
    "purchase_price",
    "salvage_value",
    "useful_life",
    "depreciation_method",
    "status",
}

CASH_FLOW_REQUIRED_COLUMNS = {"date", "category", "subcategory", "amount"}


def _read_normalized_csv(path: PathLike) -> pd.DataFrame:
    # Read everything as text: parsing is done by the domain constructors.
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.lower().strip() for c in df.columns]
    if "label" in df.columns and "description" not in df.columns:
        df = df.rename(columns={"label": "description"})
    return df


def _require_columns(df: pd.DataFrame, required: set[str], what: str) -> None:
    missing = required - set(df.columns)
    if missing:
        raise ValueError(
            f"Invalid {what} structure: missing column(s) "
            f"{', '.join(sorted(missing))}. Expected at least: "
            f"{', '.join(sorted(required))} (column names are case-insensitive)."
        )


def read_fixed_assets(path: PathLike) -> list[FixedAsset]:
    """
    Read and validate a fixed-asset register from a CSV file.

    Returns
    -------
    list[FixedAsset]
        One asset per CSV row, in file order.

    Raises
    ------
    ValueError
        If required columns are missing, a value cannot be parsed, or an
        asset fails validation (InvalidAssetError is a ValueError).
    """
    df = _read_normalized_csv(path)
    _require_columns(df, ASSET_REQUIRED_COLUMNS, "fixed assets")

    assets: list[FixedAsset] = []
    for line_no, record in enumerate(df.to_dict(orient="records"), start=2):
        try:
            assets.append(FixedAsset.from_record(record))
        except ValueError as exc:
            raise ValueError(f"{path}: line {line_no}: {exc}") from exc

    logger.info("Read %d fixed assets from %s", len(assets), path)
    return assets


def read_cash_flows(path: PathLike) -> list[CashFlowEntry]:
    """
    Read cash-flow entries from a CSV file.

    Returns
    -------
    list[CashFlowEntry]
        One entry per CSV row, in file order.

    Raises
    ------
    ValueError
        If required columns are missing or a value cannot be parsed.
    """
    df = _read_normalized_csv(path)
    _require_columns(df, CASH_FLOW_REQUIRED_COLUMNS, "cash flows")

    entries: list[CashFlowEntry] = []
    for line_no, record in enumerate(df.to_dict(orient="records"), start=2):
        try:
            entries.append(CashFlowEntry.from_record(record))
        except ValueError as exc:
            raise ValueError(f"{path}: line {line_no}: {exc}") from exc

    logger.info("Read %d cash-flow entries from %s", len(entries), path)
    return entries
