"""
qf_round/metrics/allocation.py — Allocation table and round summary.

Turns a CQF allocation into a per-project pandas DataFrame for reporting,
plus a summary dict describing whether the capital constraint was binding.

Columns:
    project_id, contributors, total_contribution, sum_rootsquared_contribution,
    matching_amount (ideal), allocated_amount (after CQF),
    pool_share (allocated / matching_pool),
    match_ratio (allocated / total_contribution; NaN if nothing was contributed).
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from qf_round.core.funding_round import FundingRound

logger = logging.getLogger(__name__)

ALLOCATION_COLUMNS = [
    "project_id",
    "contributors",
    "total_contribution",
    "sum_rootsquared_contribution",
    "matching_amount",
    "allocated_amount",
    "pool_share",
    "match_ratio",
]


def allocation_table(
    funding_round: FundingRound,
    allocation: Optional[dict[int, float]] = None,
) -> pd.DataFrame:
    """
    Build a per-project allocation table.

    Args:
        funding_round: Round whose projects have been recomputed.
        allocation:    Output of compute_cqf_allocation(). Computed on demand
                       if omitted (requires the matching pool to be set).

    Returns:
        DataFrame with ALLOCATION_COLUMNS, one row per project, sorted by
        allocated_amount descending then project_id ascending. Monetary
        columns are rounded to config.report_decimals.
    """
    if allocation is None:
        allocation = funding_round.compute_cqf_allocation()

    records = []
    for pid, project in funding_round.projects.items():
        records.append(
            {
                "project_id": pid,
                "contributors": len(project.contribution_list),
                "total_contribution": project.total_contribution,
                "sum_rootsquared_contribution": project.sum_rootsquared_contribution,
                "matching_amount": project.matching_amount,
                "allocated_amount": allocation.get(pid, 0.0),
            }
        )

    if not records:
        logger.warning(
            "allocation_table: %s has no registered projects.", funding_round.round_id
        )
        return pd.DataFrame(columns=ALLOCATION_COLUMNS)

    df = pd.DataFrame(records)
    pool = funding_round.matching_pool
    df["pool_share"] = df["allocated_amount"] / pool if pool > 0 else 0.0
    # Projects with no money get NaN rather than a division error.
    df["match_ratio"] = df["allocated_amount"] / df["total_contribution"].replace(0, np.nan)

    decimals = funding_round.config.report_decimals
    money_cols = [
        "total_contribution",
        "sum_rootsquared_contribution",
        "matching_amount",
        "allocated_amount",
    ]
    df[money_cols] = df[money_cols].round(decimals)

    df = df.sort_values(
        ["allocated_amount", "project_id"], ascending=[False, True]
    ).reset_index(drop=True)
    return df[ALLOCATION_COLUMNS]


def allocation_summary(
    funding_round: FundingRound,
    allocation: Optional[dict[int, float]] = None,
) -> dict:
    """
    Summarize a CQF allocation.

    Returns:
        {
            'project_count':   number of registered projects,
            'matching_pool':   the round's pool,
            'total_ideal':     sum of unconstrained QF amounts,
            'total_allocated': sum of allocated amounts,
            'unallocated':     pool left over (0 when binding),
            'binding':         True if the pool could not cover the ideals,
            'scaling_factor':  pool / total_ideal when binding, else 1.0,
        }
    """
    if allocation is None:
        allocation = funding_round.compute_cqf_allocation()

    pool = funding_round.matching_pool
    total_ideal = sum(p.matching_amount for p in funding_round.projects.values())
    total_allocated = sum(allocation.values())
    binding = total_ideal > pool

    summary = {
        "project_count": len(funding_round.projects),
        "matching_pool": pool,
        "total_ideal": total_ideal,
        "total_allocated": total_allocated,
        "unallocated": max(pool - total_allocated, 0.0),
        "binding": binding,
        "scaling_factor": pool / total_ideal if binding else 1.0,
    }

    logger.info(
        "Allocation summary for %s: %d projects, ideal %.2f, allocated %.2f of %.2f (%s).",
        funding_round.round_id,
        summary["project_count"],
        total_ideal,
        total_allocated,
        pool,
        "binding" if binding else "not binding",
    )
    return summary
