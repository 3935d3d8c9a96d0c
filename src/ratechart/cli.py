#!/usr/bin/env python3
"""Command-line interface for comparing rate series and tracking investments."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any


def _print_chart(spec: Any) -> None:
    """Print the aligned chart data as a table."""
    names = [dataset.name for dataset in spec.datasets]
    print(f"{'Date':<12}" + "".join(f"{name:>18}" for name in names))
    print("-" * (12 + 18 * len(names)))
    for index, label in enumerate(spec.labels):
        cells = []
        for dataset in spec.datasets:
            value = dataset.values[index] if index < len(dataset.values) else None
            cells.append(f"{'-':>18}" if value is None else f"{value:>18.6g}")
        print(f"{label:<12}" + "".join(cells))


def _compare_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Collect the compare flags that were given into a raw config mapping."""
    raw: dict[str, Any] = {}
    if args.base:
        raw["base"] = args.base
    if args.targets:
        raw["targets"] = [t.strip() for t in args.targets.split(",") if t.strip()]
    if args.colors:
        raw["colors"] = [c.strip() for c in args.colors.split(",") if c.strip()]
    elif "targets" in raw:
        raw["colors"] = [f"C{i}" for i in range(len(raw["targets"]))]

    date_range = {"start": args.start, "end": args.end}
    date_range = {k: v for k, v in date_range.items() if v}
    if date_range:
        raw["date_range"] = date_range

    if args.max_points is not None:
        raw["max_points"] = args.max_points
    if args.axis:
        raw["axis_policy"] = args.axis
    if args.output:
        raw["output"] = args.output
    return raw


def cmd_compare(args: argparse.Namespace) -> int:
    """Fetch, align and draw a multi-series comparison chart."""
    from ratechart.charting import (ChartBuilder, MatplotlibRenderer,
                                    SeriesAligner)
    from ratechart.commands.compare import (build_compare_config,
                                            load_compare_config)
    from ratechart.data import CryptoSeriesSource, FiatSeriesSource
    from ratechart.exceptions import ConfigError, RateChartError
    from ratechart.selection import TargetSelection

    overrides = _compare_overrides(args)
    try:
        if args.config:
            config = load_compare_config(args.config, overrides)
        else:
            config = build_compare_config(overrides)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    if args.count is not None and args.count < 1:
        print(f"Configuration error: --count must be at least 1, got {args.count}")
        return 1

    request = config.request
    output = config.output

    # Feed targets one by one, as they would be dropped on the chart box
    selection = TargetSelection(request.base, args.count or len(request.targets))
    for target, color in zip(request.targets, request.colors):
        status = selection.add_target(target, color)
        if status.message:
            print(status.message)

    if not selection.is_complete:
        print(
            f"Error: {selection.remaining} more distinct target(s) needed "
            f"for base {request.base}"
        )
        return 1

    request = selection.to_request(
        request.date_range,
        container=request.container,
        max_points=request.max_points,
        axis_policy=request.axis_policy,
    )

    print("=" * 60)
    print("COMPARE")
    print("=" * 60)
    print(f"Base:      {request.base}")
    print(f"Targets:   {', '.join(request.targets)}")
    print(f"Period:    {request.date_range.start} to {request.date_range.end}")
    print(f"Axis:      {request.axis_policy.value} (max {request.max_points} points)")

    async def run() -> None:
        async with CryptoSeriesSource(config.sources) as crypto, FiatSeriesSource(
            config.sources
        ) as fiat:
            builder = ChartBuilder(SeriesAligner(crypto, fiat), MatplotlibRenderer())
            handle = await builder.draw(request)

            print()
            _print_chart(handle.spec)

            if output:
                written = builder.registry.export(request.container, output)
                print(f"\nChart exported to {written}")
            builder.registry.remove(request.container)

    print("\nFetching series...")
    try:
        asyncio.run(run())
    except RateChartError as e:
        print(f"Failed to build chart: {e}")
        return 1

    return 0


def cmd_track(args: argparse.Namespace) -> int:
    """Record a crypto purchase and print the ledger row."""
    from ratechart.commands.track import parse_purchase
    from ratechart.data import CryptoSeriesSource
    from ratechart.exceptions import RateChartError
    from ratechart.investments import (LEDGER_COLUMNS, InvestmentTracker,
                                       format_record)

    try:
        asset, purchase_date, quantity = parse_purchase(args.asset, args.date, args.quantity)
    except RateChartError as e:
        print(f"Input error: {e}")
        return 1

    async def run() -> list[list[str]]:
        async with CryptoSeriesSource() as source:
            tracker = InvestmentTracker(source)
            await tracker.record_purchase(asset, purchase_date, quantity)
            return [format_record(record) for record in tracker.ledger]

    try:
        rows = asyncio.run(run())
    except RateChartError as e:
        print(f"Failed to record purchase: {e}")
        return 1

    widths = [
        max(len(column), *(len(row[i]) for row in rows))
        for i, column in enumerate(LEDGER_COLUMNS)
    ]
    print("  ".join(column.ljust(w) for column, w in zip(LEDGER_COLUMNS, widths)))
    print("  ".join("-" * w for w in widths))
    for row in rows:
        print("  ".join(cell.ljust(w) for cell, w in zip(row, widths)))

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    from ratechart.log import setup_logging

    parser = argparse.ArgumentParser(
        description="Compare currency and crypto rate series",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compare command
    compare_parser = subparsers.add_parser(
        "compare", help="Draw several series against one base"
    )
    compare_parser.add_argument(
        "config", nargs="?", default=None, help="Path to YAML configuration file"
    )
    compare_parser.add_argument("--base", help="Base currency or asset (e.g., USD)")
    compare_parser.add_argument(
        "--targets", help="Comma-separated targets (e.g., EUR,bitcoin)"
    )
    compare_parser.add_argument(
        "--colors", help="Comma-separated colors, one per target"
    )
    compare_parser.add_argument("--start", help="Start date (YYYY-MM-DD)")
    compare_parser.add_argument("--end", help="End date (YYYY-MM-DD)")
    compare_parser.add_argument(
        "--max-points", type=int, help="Maximum points per series (default: 20)"
    )
    compare_parser.add_argument(
        "--axis",
        choices=["union", "first-series"],
        help="Label axis policy (default: union)",
    )
    compare_parser.add_argument(
        "--count", type=int, help="Number of distinct targets required"
    )
    compare_parser.add_argument("-o", "--output", help="Export chart to this PNG file")

    # Track command
    track_parser = subparsers.add_parser(
        "track", help="Record a crypto purchase and show its performance"
    )
    track_parser.add_argument("asset", help="Crypto asset (bitcoin, ethereum, dogecoin)")
    track_parser.add_argument("date", help="Purchase date (YYYY-MM-DD)")
    track_parser.add_argument("quantity", help="Quantity purchased")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "compare":
        return cmd_compare(args)
    elif args.command == "track":
        return cmd_track(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
