"""
qf_round/cli.py — Command-line interface for the QF round engine.

Usage:
    python -m qf_round allocate contributions.csv --pool 10000
    python -m qf_round allocate contributions.csv --pool 10000 --output alloc.csv
    python -m qf_round concentration contributions.csv

The contributions CSV needs 'from', 'to' and 'amount' columns (one row per
contribution). Caller errors (bad pool, malformed rows, a missing or empty
CSV) exit with status 2.
"""

from __future__ import annotations

import argparse
import logging
import sys

import pandas as pd

from qf_round.config import DEFAULT_CONFIG
from qf_round.errors import QFRoundError


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "INFO") -> None:
    """Configure root logger with timestamps and level names."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s — %(message)s"
    datefmt = "%H:%M:%S"
    logging.basicConfig(level=numeric, format=fmt, datefmt=datefmt, stream=sys.stderr)


logger = logging.getLogger("qf_round.cli")


# ── Subcommand: allocate ──────────────────────────────────────────────────────

def cmd_allocate(args: argparse.Namespace) -> int:
    """Load contributions, compute the CQF allocation, print and export it."""
    _setup_logging(args.log_level)

    from qf_round.ingestion.csv_loader import build_round_from_csv
    from qf_round.metrics.allocation import allocation_summary, allocation_table

    try:
        funding_round = build_round_from_csv(
            args.contributions,
            matching_pool=args.pool,
            config=DEFAULT_CONFIG,
            round_id=args.round_id,
        )
        allocation = funding_round.finalize()
    except QFRoundError as exc:
        logger.error("[%s] %s", exc.code, exc)
        return 2
    except (FileNotFoundError, pd.errors.EmptyDataError) as exc:
        logger.error("Cannot read contributions from %s: %s", args.contributions, exc)
        return 2

    df = allocation_table(funding_round, allocation)
    summary = allocation_summary(funding_round, allocation)

    print()
    print("=" * 60)
    print(f"  QF ROUND — {funding_round.round_id}")
    print("=" * 60)
    with pd.option_context("display.max_rows", None, "display.width", 120):
        print(df.to_string(index=False))
    print()
    print(f"  Projects         : {summary['project_count']}")
    print(f"  Matching pool    : {summary['matching_pool']:.2f}")
    print(f"  Ideal QF total   : {summary['total_ideal']:.2f}")
    print(f"  Allocated        : {summary['total_allocated']:.2f}")
    print(f"  Unallocated      : {summary['unallocated']:.2f}")
    print(f"  Pool binding     : {'yes' if summary['binding'] else 'no'}")
    print(f"  Scaling factor   : {summary['scaling_factor']:.6f}")
    print("=" * 60)

    if args.output:
        df.to_csv(args.output, index=False)
        logger.info("Allocation table saved to: %s", args.output)

    return 0


# ── Subcommand: concentration ─────────────────────────────────────────────────

def cmd_concentration(args: argparse.Namespace) -> int:
    """Print contributor concentration (HHI / entropy) for every project."""
    _setup_logging(args.log_level)

    from qf_round.graph.contribution_graph import build_contribution_graph
    from qf_round.ingestion.csv_loader import build_round_from_csv
    from qf_round.metrics.concentration import compute_contribution_concentration

    try:
        funding_round = build_round_from_csv(args.contributions, round_id=args.round_id)
    except QFRoundError as exc:
        logger.error("[%s] %s", exc.code, exc)
        return 2
    except (FileNotFoundError, pd.errors.EmptyDataError) as exc:
        logger.error("Cannot read contributions from %s: %s", args.contributions, exc)
        return 2

    G = build_contribution_graph(funding_round)
    results = compute_contribution_concentration(G, DEFAULT_CONFIG)

    print()
    print("=" * 60)
    print(f"  CONTRIBUTOR CONCENTRATION — {funding_round.round_id}")
    print("=" * 60)
    for pid in sorted(results):
        r = results[pid]
        print(
            f"  project {pid:<6d} contributors={r.total_contributors:<5d} "
            f"HHI={r.hhi:>8.1f}  H={r.shannon_entropy:.3f}  "
            f"top={r.top_contributor} ({r.top_contributor_share:.0%})  [{r.risk_tier}]"
        )
    print("=" * 60)
    return 0


# ── Argument parser ───────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qf-round",
        description="Capital-Constrained Quadratic Funding allocation engine.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Allocate a 10,000 pool across the projects in contributions.csv
  python -m qf_round allocate contributions.csv --pool 10000

  # Same, exporting the allocation table
  python -m qf_round allocate contributions.csv --pool 10000 --output alloc.csv

  # Contributor concentration per project
  python -m qf_round concentration contributions.csv
        """,
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--round-id",
        default=None,
        metavar="NAME",
        help="Round label used in logs and output (default: 'round')",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # allocate
    p_allocate = subparsers.add_parser(
        "allocate",
        help="Compute the CQF allocation for a contributions CSV",
    )
    p_allocate.add_argument(
        "contributions", metavar="CONTRIBUTIONS_CSV",
        help="CSV with from,to,amount columns",
    )
    p_allocate.add_argument(
        "--pool", type=float, required=True, metavar="AMOUNT",
        help="Matching pool for the round (must be > 0)",
    )
    p_allocate.add_argument(
        "--output", default=None, metavar="PATH",
        help="Write the allocation table to this CSV path",
    )
    p_allocate.set_defaults(func=cmd_allocate)

    # concentration
    p_conc = subparsers.add_parser(
        "concentration",
        help="Contributor concentration (HHI, entropy) per project",
    )
    p_conc.add_argument(
        "contributions", metavar="CONTRIBUTIONS_CSV",
        help="CSV with from,to,amount columns",
    )
    p_conc.set_defaults(func=cmd_concentration)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
