# Shop FinSight - Financial analytics engine for retail & repair shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for Shop FinSight.

This module wires together the main building blocks of Shop FinSight:

- configuration (data paths, balance-sheet inputs, engine settings,
  display and logging options),
- CSV readers for the fixed-asset register and the cash-flow history,
- the computation modules (depreciation, assets, ratios, forecast,
  periods, overview),
- view helpers (tabular rendering and CSV export).

The CLI is intentionally thin: it does not implement any financial logic
itself. It is also the only place where "today" is resolved: every engine
call receives the as-of date explicitly.


High-level pipeline
-------------------

1) Load the TOML configuration (``shop_finsight_config.toml`` by default,
   or ``--config PATH``). When the default file does not exist, built-in
   defaults are used and data paths must be given on the command line.

2) Resolve data paths with optional CLI overrides (``--assets``,
   ``--cash-flows``) and read the snapshots.

3) Resolve the as-of date (``--as-of YYYY-MM-DD``, default: today).

4) Compute the requested scope and render it as console tables and/or
   CSV files depending on the display mode.


Scopes: what to render
----------------------

- ``overview`` (default): dashboard headline figures.
- ``assets``:   asset register, category breakdown and, with
                ``--schedule ASSET_ID``, that asset's depreciation schedule.
- ``ratios``:   financial ratios (requires [inputs.balance_sheet]).
- ``cashflow``: cash-flow summary of the selected period
                (``--from-date`` / ``--to-date``, default month to date).
- ``trend``:    trailing monthly cash-flow summaries (``--months``).
- ``forecast``: pattern-based cash-flow forecast (``--horizon``).
- ``all``:      every scope above.

Examples:

    python -m shop_finsight.cli --as-of 2025-06-30 --scope all
    python -m shop_finsight.cli --assets data/assets.csv --scope assets \
        --schedule PRESS-01
    python -m shop_finsight.cli --scope forecast --horizon 6 --display-mode csv
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .assets import book_value_by_category
from .config import (
    DEFAULT_CONFIG_FILE,
    DISPLAY_MODES,
    AppConfig,
    default_app_config,
    load_app_config,
)
from .depreciation import depreciation_schedule
from .forecast import forecast_cash_flow
from .io import read_cash_flows, read_fixed_assets
from .models import CashFlowEntry, FixedAsset
from .overview import build_financial_overview
from .periods import (
    determine_period_from_args,
    monthly_cash_flow_trend,
    operating_expenses,
    operating_revenue,
    summarize_cash_flows,
)
from .ratios import compute_financial_ratios, ratios_to_results
from .views import (
    assets_to_dataframe,
    cash_flow_trend_to_dataframe,
    category_breakdown_to_dataframe,
    depreciation_schedule_to_dataframe,
    forecast_to_dataframe,
    overview_to_dataframe,
    ratios_to_dataframe,
)

logger = logging.getLogger(__name__)

SCOPES = ("overview", "assets", "ratios", "cashflow", "trend", "forecast", "all")


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m shop_finsight.cli",
        description=(
            "Shop FinSight - Financial analytics engine for retail & repair "
            "shops. Reads the fixed-asset register and cash-flow history, "
            "computes depreciation, ratios and forecasts, and renders them "
            "as tables or CSV files."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of shop_finsight and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the main TOML configuration file. If omitted, "
            f"'{DEFAULT_CONFIG_FILE}' in the current directory is used when present."
        ),
    )

    # Data overrides
    ap.add_argument(
        "--assets",
        dest="assets_path",
        metavar="CSV_PATH",
        help="Override the fixed-asset register CSV path from the configuration.",
    )
    ap.add_argument(
        "--cash-flows",
        dest="cash_flows_path",
        metavar="CSV_PATH",
        help="Override the cash-flow history CSV path from the configuration.",
    )
    ap.add_argument(
        "--inventory-value",
        dest="inventory_value",
        type=float,
        help="Override the inventory valuation used by the ratios.",
    )

    # Dates
    ap.add_argument(
        "--as-of",
        dest="as_of",
        help="Valuation / reporting date (YYYY-MM-DD). Defaults to today.",
    )
    ap.add_argument(
        "--from-date",
        dest="from_date",
        help="Start of the cash-flow summary period (YYYY-MM-DD).",
    )
    ap.add_argument(
        "--to-date",
        dest="to_date",
        help="End of the cash-flow summary period (YYYY-MM-DD).",
    )

    # Scope and scope options
    ap.add_argument(
        "--scope",
        choices=SCOPES,
        default="overview",
        help="Select what to render (default: overview).",
    )
    ap.add_argument(
        "--schedule",
        dest="schedule_asset",
        metavar="ASSET_ID",
        help="With scope 'assets': also render this asset's depreciation schedule.",
    )
    ap.add_argument(
        "--horizon",
        type=int,
        help="Forecast horizon in months (default from configuration).",
    )
    ap.add_argument(
        "--months",
        type=int,
        default=12,
        help="Number of trailing months for scope 'trend' (default: 12).",
    )

    # Display options
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=DISPLAY_MODES,
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints results to stdout, "
            "'csv' writes CSV files only, "
            "'both' does both."
        ),
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help=(
            "Output directory where CSV files will be written when display "
            "mode includes 'csv'. If omitted, 'data/output' is used."
        ),
    )
    ap.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the logging level from the configuration file.",
    )

    return ap


def _load_config(args: argparse.Namespace) -> AppConfig:
    if args.config_path:
        return load_app_config(args.config_path)
    if Path(DEFAULT_CONFIG_FILE).is_file():
        return load_app_config()
    return default_app_config()


def _resolve_as_of(raw: Optional[str]) -> date:
    if raw:
        return date.fromisoformat(raw)
    return date.today()


def _load_snapshots(
    args: argparse.Namespace, config: AppConfig
) -> tuple[list[FixedAsset], list[CashFlowEntry]]:
    assets_path = Path(args.assets_path) if args.assets_path else config.data.fixed_assets
    flows_path = (
        Path(args.cash_flows_path) if args.cash_flows_path else config.data.cash_flows
    )

    assets: list[FixedAsset] = []
    if assets_path is None:
        logger.warning("No fixed-asset register configured; asset figures will be 0.")
    else:
        assets = read_fixed_assets(assets_path)

    flows: list[CashFlowEntry] = []
    if flows_path is None:
        logger.warning("No cash-flow history configured; cash-flow figures will be 0.")
    else:
        flows = read_cash_flows(flows_path)

    return assets, flows


def _build_tables(
    args: argparse.Namespace,
    config: AppConfig,
    assets: list[FixedAsset],
    flows: list[CashFlowEntry],
    as_of: date,
) -> list[tuple[str, str, pd.DataFrame]]:
    """Compute the requested scope as (title, file stem, DataFrame) triples."""
    scope = args.scope
    settings = config.engine
    decimals = config.decimals
    inventory_value = (
        args.inventory_value
        if args.inventory_value is not None
        else config.inventory_value
    )
    snapshot = config.capital_snapshot
    tables: list[tuple[str, str, pd.DataFrame]] = []

    def wanted(name: str) -> bool:
        return scope in {name, "all"}

    if wanted("overview"):
        overview = build_financial_overview(
            assets, flows, snapshot, as_of, inventory_value, settings
        )
        tables.append(
            (
                f"Financial overview ({as_of.isoformat()})",
                "overview",
                overview_to_dataframe(overview, decimals),
            )
        )

    if wanted("assets"):
        tables.append(
            (
                "Asset register",
                "assets",
                assets_to_dataframe(assets, as_of, decimals, settings),
            )
        )
        tables.append(
            (
                "Book value by category",
                "asset_categories",
                category_breakdown_to_dataframe(
                    book_value_by_category(assets, as_of, settings), decimals
                ),
            )
        )
        if args.schedule_asset:
            matches = [a for a in assets if a.asset_id == args.schedule_asset]
            if not matches:
                raise ValueError(f"Unknown asset id for --schedule: {args.schedule_asset!r}")
            schedule = depreciation_schedule(matches[0], settings=settings)
            tables.append(
                (
                    f"Depreciation schedule: {args.schedule_asset}",
                    f"schedule_{args.schedule_asset}",
                    depreciation_schedule_to_dataframe(schedule, decimals),
                )
            )

    if wanted("ratios"):
        if snapshot is None:
            print(
                "Ratios have been requested in scope, but no [inputs.balance_sheet] "
                "table is configured. Skipping ratio computation."
            )
        else:
            period = determine_period_from_args(args, as_of)
            revenue = operating_revenue(flows, period.start, period.end)
            expenses = operating_expenses(flows, period.start, period.end)
            ratios = compute_financial_ratios(
                snapshot,
                inventory_value=inventory_value,
                sales_revenue=revenue,
                net_income=revenue - expenses,
                cash_flows=flows,
                as_of=as_of,
                receivables_turnover=settings.receivables_turnover,
            )
            tables.append(
                (
                    "Financial ratios",
                    "ratios",
                    ratios_to_dataframe(ratios_to_results(ratios), decimals),
                )
            )

    if wanted("cashflow"):
        period = determine_period_from_args(args, as_of)
        summary = summarize_cash_flows(flows, period.start, period.end)
        tables.append(
            (
                f"Cash flows: {period.label} "
                f"({period.start.isoformat()} → {period.end.isoformat()})",
                "cash_flow_summary",
                cash_flow_trend_to_dataframe([(period, summary)], decimals),
            )
        )

    if wanted("trend"):
        trend = monthly_cash_flow_trend(flows, as_of, args.months)
        tables.append(
            (
                f"Monthly cash-flow trend ({args.months} months)",
                "cash_flow_trend",
                cash_flow_trend_to_dataframe(trend, decimals),
            )
        )

    if wanted("forecast"):
        forecast = forecast_cash_flow(flows, as_of, args.horizon, settings)
        title = (
            f"{forecast.name} ({forecast.start_date.isoformat()} → "
            f"{forecast.end_date.isoformat()}) | net {forecast.net_cash_flow:.2f} "
            f"| confidence {forecast.confidence.value}"
        )
        tables.append((title, "forecast", forecast_to_dataframe(forecast, decimals)))

    return tables


def _render(
    tables: list[tuple[str, str, pd.DataFrame]],
    display_mode: str,
    output_dir: Optional[str],
) -> None:
    if display_mode in {"table", "both"}:
        for title, _, df in tables:
            print()
            print(f"=== {title} ===")
            if df.empty:
                print("(no data)")
            else:
                print(df.to_string(index=False))

    if display_mode in {"csv", "both"}:
        out = Path(output_dir) if output_dir else Path("data/output")
        out.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        for _, stem, df in tables:
            path = out / f"{stem}_{timestamp}.csv"
            df.to_csv(path, index=False)
            print(f"Wrote {path} ({len(df)} rows)")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the Shop FinSight CLI.

    This function parses command-line arguments, loads the configuration,
    reads the asset register and cash-flow history, computes the selected
    scope for the as-of date and renders it as console tables and/or CSV
    files. Input errors are reported on stderr with exit status 2.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # --version: short-circuit and exit early.
    if args.version:
        print(f"shop_finsight version {__version__}")
        return

    try:
        config = _load_config(args)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=args.log_level or config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        as_of = _resolve_as_of(args.as_of)
    except ValueError:
        parser.error(f"Invalid --as-of date {args.as_of!r}, expected YYYY-MM-DD.")

    if args.horizon is not None and args.horizon < 0:
        parser.error("--horizon cannot be negative.")

    try:
        assets, flows = _load_snapshots(args, config)
        tables = _build_tables(args, config, assets, flows, as_of)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    display_mode = args.display_mode or config.display_mode
    _render(tables, display_mode, args.output_dir)


if __name__ == "__main__":
    main()
