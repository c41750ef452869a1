from datetime import date

import pytest

from shop_finsight.assets import total_book_value
from shop_finsight.models import (
    AssetStatus,
    CapitalSnapshot,
    CashFlowCategory,
    CashFlowEntry,
    FixedAsset,
)
from shop_finsight.overview import build_financial_overview

AS_OF = date(2025, 6, 15)
OP = CashFlowCategory.OPERATING


def _assets() -> list[FixedAsset]:
    return [
        FixedAsset(date(2023, 1, 1), 120_000.0, 20_000.0, 5, asset_id="PRESS-01"),
        FixedAsset(
            date(2024, 3, 1),
            8_000.0,
            0.0,
            4,
            asset_id="LAPTOP-02",
            status=AssetStatus.UNDER_MAINTENANCE,
        ),
        FixedAsset(
            date(2020, 1, 1), 5_000.0, 0.0, 3, asset_id="TILL-01", status=AssetStatus.SOLD
        ),
    ]


def _flows() -> list[CashFlowEntry]:
    return [
        CashFlowEntry(date(2025, 5, 30), OP, "sales", 5_000.0),
        CashFlowEntry(date(2025, 6, 5), OP, "sales", 1_000.0),
        CashFlowEntry(date(2025, 6, 10), OP, "rent", -400.0),
        CashFlowEntry(date(2025, 6, 12), CashFlowCategory.INVESTING, "tools", -200.0),
        # After the as-of date
        CashFlowEntry(date(2025, 6, 20), OP, "sales", 9_000.0),
    ]


def test_overview_with_snapshot() -> None:
    snapshot = CapitalSnapshot(
        total_assets=500_000.0,
        total_liabilities=200_000.0,
        working_capital=40_000.0,
        retained_earnings=60_000.0,
        short_term_debt=30_000.0,
        accounts_payable=20_000.0,
    )

    overview = build_financial_overview(
        _assets(), _flows(), snapshot, AS_OF, inventory_value=40_000.0
    )

    assert overview.as_of == AS_OF
    assert overview.total_assets == pytest.approx(500_000.0)
    assert overview.total_liabilities == pytest.approx(200_000.0)
    assert overview.total_equity == pytest.approx(300_000.0)
    assert overview.working_capital == pytest.approx(40_000.0)
    assert overview.asset_value == pytest.approx(total_book_value(_assets(), AS_OF))
    assert overview.active_asset_count == 1
    assert overview.monthly_revenue == pytest.approx(1_000.0)
    assert overview.monthly_expenses == pytest.approx(400.0)
    assert overview.net_cash_flow == pytest.approx(400.0)

    assert overview.ratios is not None
    assert overview.ratios.current_ratio == pytest.approx(2.0)
    assert overview.ratios.net_profit_margin == pytest.approx(0.6)


def test_overview_without_snapshot() -> None:
    overview = build_financial_overview(_assets(), _flows(), None, AS_OF)

    assert overview.ratios is None
    assert overview.total_assets == 0.0
    assert overview.total_equity == 0.0
    assert overview.monthly_revenue == pytest.approx(1_000.0)


def test_overview_of_empty_inputs() -> None:
    overview = build_financial_overview([], [], None, AS_OF)

    assert overview.asset_value == 0.0
    assert overview.accumulated_depreciation == 0.0
    assert overview.active_asset_count == 0
    assert overview.net_cash_flow == 0.0


def test_monthly_figures_ignore_entries_after_as_of() -> None:
    """Same-month entries dated after the as-of date are not counted yet."""
    early = build_financial_overview([], _flows(), None, date(2025, 6, 11))
    full_month = build_financial_overview([], _flows(), None, date(2025, 6, 30))

    assert early.monthly_revenue == pytest.approx(1_000.0)
    assert early.monthly_expenses == pytest.approx(400.0)
    assert early.net_cash_flow == pytest.approx(600.0)
    assert full_month.monthly_revenue == pytest.approx(10_000.0)
    assert full_month.net_cash_flow == pytest.approx(9_400.0)
