# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Domain model for Shop FinSight.

This module defines the value objects exchanged between the data-loading
layer (io.py), the computation modules (depreciation.py, assets.py,
ratios.py, forecast.py, periods.py) and the presentation layer (views.py).

Inputs
------
- FixedAsset       : a capital asset under depreciation.
- CashFlowEntry    : one historical cash movement (signed amount).
- CapitalSnapshot  : a point-in-time balance-sheet summary.

Outputs
-------
- FinancialRatios, CashFlowForecast, CashFlowProjection,
  SubcategoryPattern, CashFlowSummary, CategoryBreakdown.

All dataclasses are frozen: the engine never mutates what the caller
supplies, and every computation returns a fresh result.

Validation
----------
Asset records are validated where they are built from raw data
(``FixedAsset.from_record`` / ``validate_fixed_asset``). The calculators
themselves assume validated input and only guard divisions.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class DepreciationMethod(str, Enum):
    """Supported depreciation schedules."""

    STRAIGHT_LINE = "straight_line"
    DECLINING_BALANCE = "declining_balance"
    SUM_OF_YEARS = "sum_of_years"
    # No production-volume data is modeled: handled as straight-line.
    UNITS_OF_PRODUCTION = "units_of_production"


class AssetStatus(str, Enum):
    """Lifecycle status of a fixed asset."""

    ACTIVE = "active"
    UNDER_MAINTENANCE = "under_maintenance"
    DISPOSED = "disposed"
    SOLD = "sold"


RETIRED_STATUSES: frozenset[AssetStatus] = frozenset(
    {AssetStatus.DISPOSED, AssetStatus.SOLD}
)


class AssetCategory(str, Enum):
    """Asset register categories used for breakdown reports."""

    MACHINERY = "machinery"
    EQUIPMENT = "equipment"
    VEHICLE = "vehicle"
    BUILDING = "building"
    LAND = "land"
    SOFTWARE = "software"
    FURNITURE = "furniture"
    OTHER = "other"


class CashFlowCategory(str, Enum):
    """Cash-flow statement sections."""

    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"


class ConfidenceTier(str, Enum):
    """Coarse summary of the historical variance behind a forecast."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InvalidAssetError(ValueError):
    """Raised when an asset record carries an impossible configuration."""


# ---------------------------------------------------------------------------
# Parsing helpers (boundary only)
# ---------------------------------------------------------------------------


def _parse_enum(enum_cls: type[Enum], raw: Any, field_name: str) -> Any:
    if isinstance(raw, enum_cls):
        return raw
    value = str(raw).strip().lower()
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)  # type: ignore[attr-defined]
        raise ValueError(
            f"Invalid value {raw!r} for '{field_name}'. Expected one of: {allowed}."
        ) from exc


def parse_date(raw: Any, field_name: str = "date") -> date:
    """Convert a date, datetime or ISO string into a ``date``."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip()[:10])
    except ValueError as exc:
        raise ValueError(
            f"Invalid value {raw!r} for '{field_name}', expected YYYY-MM-DD."
        ) from exc


def _parse_float(raw: Any, field_name: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid numeric value {raw!r} for '{field_name}'.") from exc
    # nan and inf are rejected.
    if not math.isfinite(value):
        raise ValueError(f"Invalid numeric value {raw!r} for '{field_name}'.")
    return value


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FixedAsset:
    """
    A capital asset under depreciation.

    Attributes:
        purchase_date: Date the asset entered service.
        purchase_price: Acquisition cost (>= 0).
        salvage_value: Residual value at end of life (0 <= salvage <= price).
        useful_life: Useful life in whole years (> 0).
        depreciation_method: Schedule used to spread the depreciable amount.
        status: Lifecycle status; disposed/sold assets are excluded from
            register totals.
        asset_id: Optional identifier from the inventory module.
        name: Optional display name.
        category: Register category (defaults to 'other').
    """

    purchase_date: date
    purchase_price: float
    salvage_value: float
    useful_life: int
    depreciation_method: DepreciationMethod = DepreciationMethod.STRAIGHT_LINE
    status: AssetStatus = AssetStatus.ACTIVE
    asset_id: str = ""
    name: str = ""
    category: AssetCategory = AssetCategory.OTHER

    @property
    def depreciable_amount(self) -> float:
        """Purchase price minus salvage value."""
        return self.purchase_price - self.salvage_value

    @property
    def is_retired(self) -> bool:
        return self.status in RETIRED_STATUSES

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "FixedAsset":
        """
        Build and validate a FixedAsset from a raw record (CSV row, dict).

        Expected keys: purchase_date, purchase_price, salvage_value,
        useful_life, depreciation_method, status. Optional keys: asset_id,
        name, category.

        Raises:
            ValueError: if a value cannot be parsed.
            InvalidAssetError: if the parsed asset fails validation.
        """
        try:
            raw_life = record["useful_life"]
            life_float = _parse_float(raw_life, "useful_life")
            if life_float != int(life_float):
                raise ValueError(
                    f"Invalid value {raw_life!r} for 'useful_life', "
                    "expected a whole number of years."
                )

            asset = cls(
                purchase_date=parse_date(record["purchase_date"], "purchase_date"),
                purchase_price=_parse_float(
                    record["purchase_price"], "purchase_price"
                ),
                salvage_value=_parse_float(
                    record.get("salvage_value", 0.0) or 0.0, "salvage_value"
                ),
                useful_life=int(life_float),
                depreciation_method=_parse_enum(
                    DepreciationMethod,
                    record.get("depreciation_method") or "straight_line",
                    "depreciation_method",
                ),
                status=_parse_enum(
                    AssetStatus, record.get("status") or "active", "status"
                ),
                asset_id=str(record.get("asset_id") or ""),
                name=str(record.get("name") or ""),
                category=_parse_enum(
                    AssetCategory, record.get("category") or "other", "category"
                ),
            )
        except KeyError as exc:
            raise ValueError(f"Missing required asset field: {exc.args[0]!r}") from exc

        validate_fixed_asset(asset)
        return asset


def validate_fixed_asset(asset: FixedAsset) -> None:
    """
    Reject asset records whose configuration makes depreciation meaningless.

    Raises:
        InvalidAssetError: if useful_life <= 0, a monetary value is negative,
            or salvage_value exceeds purchase_price.
    """
    label = asset.asset_id or asset.name or "<unnamed>"
    if asset.useful_life <= 0:
        raise InvalidAssetError(
            f"Asset {label}: useful_life must be a positive number of years "
            f"(got {asset.useful_life})."
        )
    if asset.purchase_price < 0:
        raise InvalidAssetError(f"Asset {label}: purchase_price cannot be negative.")
    if asset.salvage_value < 0:
        raise InvalidAssetError(f"Asset {label}: salvage_value cannot be negative.")
    if asset.purchase_price < asset.salvage_value:
        raise InvalidAssetError(
            f"Asset {label}: salvage_value ({asset.salvage_value}) exceeds "
            f"purchase_price ({asset.purchase_price})."
        )


@dataclass(frozen=True)
class CashFlowEntry:
    """One historical cash movement: positive = inflow, negative = outflow."""

    date: date
    category: CashFlowCategory
    subcategory: str
    amount: float
    description: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CashFlowEntry":
        """Build a CashFlowEntry from a raw record (CSV row, dict)."""
        try:
            return cls(
                date=parse_date(record["date"], "date"),
                category=_parse_enum(
                    CashFlowCategory, record["category"], "category"
                ),
                subcategory=str(record.get("subcategory") or "").strip(),
                amount=_parse_float(record["amount"], "amount"),
                description=str(record.get("description") or ""),
            )
        except KeyError as exc:
            raise ValueError(
                f"Missing required cash-flow field: {exc.args[0]!r}"
            ) from exc


@dataclass(frozen=True)
class CapitalSnapshot:
    """
    Point-in-time balance-sheet summary supplied by the caller.

    The engine never assembles this from ledgers; it is an input.
    """

    total_assets: float = 0.0
    total_liabilities: float = 0.0
    working_capital: float = 0.0
    # Equity components
    owners_equity: float = 0.0
    retained_earnings: float = 0.0
    additional_paid_in_capital: float = 0.0
    treasury_stock: float = 0.0
    # Debt components
    short_term_debt: float = 0.0
    long_term_debt: float = 0.0
    accounts_payable: float = 0.0
    accrued_expenses: float = 0.0
    snapshot_date: Optional[date] = None

    @property
    def current_liabilities(self) -> float:
        return self.short_term_debt + self.accounts_payable

    @property
    def total_equity(self) -> float:
        return self.total_assets - self.total_liabilities

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CapitalSnapshot":
        """
        Build a snapshot from a flat mapping (e.g. the [inputs.balance_sheet]
        TOML table). Unknown keys are ignored; missing keys default to 0.
        """
        kwargs: dict[str, Any] = {}
        for name in cls.__dataclass_fields__:
            if name not in values:
                continue
            if name == "snapshot_date":
                kwargs[name] = parse_date(values[name], name)
            else:
                kwargs[name] = _parse_float(values[name], name)
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FinancialRatios:
    """Fully populated set of financial ratios; zero denominators yield 0."""

    as_of: Optional[date]
    # Liquidity
    current_ratio: float
    quick_ratio: float
    cash_ratio: float
    working_capital_ratio: float
    # Profitability
    gross_profit_margin: float
    net_profit_margin: float
    return_on_assets: float
    return_on_equity: float
    # Efficiency
    inventory_turnover: float
    receivables_turnover: float
    asset_turnover: float
    # Leverage
    debt_to_assets: float
    debt_to_equity: float
    equity_ratio: float
    interest_coverage: float


@dataclass(frozen=True)
class SubcategoryPattern:
    """Historical behaviour of one cash-flow subcategory."""

    subcategory: str
    avg_amount: float
    growth_rate: float
    confidence: float
    sample_size: int


@dataclass(frozen=True)
class CashFlowProjection:
    """One projected line item of a forecast."""

    date: date
    category: str
    description: str
    amount: float
    probability: float


@dataclass(frozen=True)
class CashFlowForecast:
    """Result of a pattern-based cash-flow projection."""

    name: str
    start_date: date
    end_date: date
    projected_inflows: list[CashFlowProjection]
    projected_outflows: list[CashFlowProjection]
    net_cash_flow: float
    cumulative_cash_flow: float
    confidence: ConfidenceTier
    assumptions: str
    patterns: list[SubcategoryPattern] = field(default_factory=list)


@dataclass(frozen=True)
class CashFlowSummary:
    """Cash-flow totals per statement section over a period."""

    operating: float
    investing: float
    financing: float
    net_cash_flow: float


@dataclass(frozen=True)
class CategoryBreakdown:
    """Aggregated book value of one asset category."""

    category: AssetCategory
    book_value: float
    percentage: float
