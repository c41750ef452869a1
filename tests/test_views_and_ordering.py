from datetime import date

import pytest

from shop_finsight.depreciation import depreciation_schedule
from shop_finsight.forecast import forecast_cash_flow
from shop_finsight.models import (
    AssetCategory,
    CapitalSnapshot,
    CashFlowCategory,
    CashFlowEntry,
    CategoryBreakdown,
    FixedAsset,
)
from shop_finsight.overview import build_financial_overview
from shop_finsight.periods import monthly_cash_flow_trend
from shop_finsight.ratios import RatioResult, compute_financial_ratios, ratios_to_results
from shop_finsight.views import (
    assets_to_dataframe,
    cash_flow_trend_to_dataframe,
    category_breakdown_to_dataframe,
    depreciation_schedule_to_dataframe,
    forecast_to_dataframe,
    overview_to_dataframe,
    ratios_to_dataframe,
)

OP = CashFlowCategory.OPERATING


def test_ratios_to_dataframe_orders_by_group() -> None:
    """Rows follow the group order; order inside a group is preserved."""
    ratios = [
        RatioResult("debt_to_assets", "Debt to assets", 0.4, "ratio", "", "leverage"),
        RatioResult("custom", "Custom", 1.0, "ratio", "", "other"),
        RatioResult("net_profit_margin", "NPM", 0.123456, "percent", "", "profitability"),
        RatioResult("quick_ratio", "Quick", 1.2, "ratio", "", "liquidity"),
        RatioResult("current_ratio", "Current", 2.0, "ratio", "", "liquidity"),
    ]

    df = ratios_to_dataframe(ratios, decimals=2)

    assert list(df.columns) == ["key", "label", "value", "unit", "group", "notes"]
    assert list(df["key"]) == [
        "quick_ratio",
        "current_ratio",
        "net_profit_margin",
        "debt_to_assets",
        "custom",
    ]
    assert df.loc[2, "value"] == pytest.approx(0.12)


def test_ratios_to_dataframe_full_set() -> None:
    ratios = compute_financial_ratios(
        CapitalSnapshot(total_assets=100.0), 0.0, sales_revenue=50.0, net_income=5.0
    )

    df = ratios_to_dataframe(ratios_to_results(ratios), decimals=4)

    assert len(df) == 15
    assert list(df["group"].unique()) == [
        "liquidity",
        "profitability",
        "efficiency",
        "leverage",
    ]


def test_empty_views_keep_their_columns() -> None:
    assert list(ratios_to_dataframe([], 2).columns) == [
        "key",
        "label",
        "value",
        "unit",
        "group",
        "notes",
    ]
    assert assets_to_dataframe([], date(2025, 1, 1)).empty
    assert "book_value" in assets_to_dataframe([], date(2025, 1, 1)).columns
    assert list(category_breakdown_to_dataframe([]).columns) == [
        "category",
        "book_value",
        "percentage",
    ]
    assert forecast_to_dataframe(forecast_cash_flow([], date(2025, 1, 1))).empty
    assert depreciation_schedule_to_dataframe([]).empty
    assert cash_flow_trend_to_dataframe([]).empty


def test_assets_to_dataframe() -> None:
    asset = FixedAsset(
        date(2023, 1, 1),
        1_000.0,
        100.0,
        3,
        asset_id="DRILL-01",
        name="Drill",
        category=AssetCategory.EQUIPMENT,
    )

    df = assets_to_dataframe([asset], date(2023, 1, 1))

    assert df.loc[0, "asset_id"] == "DRILL-01"
    assert df.loc[0, "category"] == "equipment"
    assert df.loc[0, "method"] == "straight_line"
    assert df.loc[0, "status"] == "active"
    assert df.loc[0, "depreciation"] == 0.0
    assert df.loc[0, "book_value"] == pytest.approx(1_000.0)


def test_category_breakdown_sorted_by_book_value() -> None:
    breakdown = [
        CategoryBreakdown(AssetCategory.VEHICLE, 100.0, 10.0),
        CategoryBreakdown(AssetCategory.BUILDING, 900.0, 90.0),
    ]

    df = category_breakdown_to_dataframe(breakdown)

    assert list(df["category"]) == ["building", "vehicle"]


def test_depreciation_schedule_to_dataframe() -> None:
    asset = FixedAsset(date(2023, 1, 1), 1_000.0, 100.0, 3)

    df = depreciation_schedule_to_dataframe(depreciation_schedule(asset))

    assert list(df["year"]) == [1, 2, 3]
    assert df["depreciation"].sum() == pytest.approx(900.0)
    assert df.iloc[-1]["book_value"] == pytest.approx(100.0)


def test_forecast_to_dataframe_signs_outflows() -> None:
    history = [
        CashFlowEntry(date(2024, 1, 15), OP, "sales", 100.0),
        CashFlowEntry(date(2024, 1, 20), OP, "rent", -40.0),
    ]

    df = forecast_to_dataframe(forecast_cash_flow(history, date(2025, 1, 1), 2))

    assert len(df) == 4
    assert list(df["direction"]) == ["inflow", "outflow", "inflow", "outflow"]
    outflows = df[df["direction"] == "outflow"]
    assert (outflows["amount"] > 0).all()
    assert (outflows["weighted_amount"] < 0).all()
    assert df.loc[0, "weighted_amount"] == pytest.approx(95.0)


def test_cash_flow_trend_to_dataframe() -> None:
    flows = [
        CashFlowEntry(date(2025, 1, 5), OP, "sales", 100.0),
        CashFlowEntry(date(2025, 2, 5), CashFlowCategory.FINANCING, "loan", 50.0),
    ]

    df = cash_flow_trend_to_dataframe(monthly_cash_flow_trend(flows, date(2025, 2, 10), 2))

    assert list(df.columns) == ["month", "operating", "investing", "financing", "net"]
    assert list(df["month"]) == ["2025-01", "2025-02"]
    assert list(df["net"]) == pytest.approx([100.0, 50.0])


def test_overview_to_dataframe() -> None:
    overview = build_financial_overview([], [], None, date(2025, 6, 15))

    df = overview_to_dataframe(overview)

    assert list(df.columns) == ["measure", "value"]
    assert "ratios" not in set(df["measure"])
    assert "active_asset_count" in set(df["measure"])


def test_overview_to_dataframe_keeps_integer_counts() -> None:
    asset = FixedAsset(date(2023, 1, 1), 1_000.0, 100.0, 3, asset_id="DRILL-01")
    overview = build_financial_overview([asset], [], None, date(2025, 6, 15))

    df = overview_to_dataframe(overview)
    values = dict(zip(df["measure"], df["value"]))

    assert values["active_asset_count"] == 1
    assert isinstance(values["active_asset_count"], int)
    assert isinstance(values["asset_value"], float)
    count_line = next(
        line for line in df.to_string(index=False).splitlines() if "active_asset_count" in line
    )
    assert count_line.split()[-1] == "1"
