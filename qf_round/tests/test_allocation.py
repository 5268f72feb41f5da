"""
qf_round/tests/test_allocation.py — Tests for the allocation table and summary.

Tests verify:
- Table has one row per project, sorted by allocated amount descending.
- pool_share and match_ratio are computed from the allocation.
- Projects with no contributions get NaN match_ratio, not an error.
- Summary reports binding / non-binding pools and the scaling factor.
"""

import math

import pandas as pd
import pytest

from qf_round.core.funding_round import FundingRound
from qf_round.core.project import Project
from qf_round.metrics.allocation import (
    ALLOCATION_COLUMNS,
    allocation_summary,
    allocation_table,
)


def test_table_columns_and_order(unit_contribution_round):
    r = unit_contribution_round(pool=100)
    df = allocation_table(r)
    assert list(df.columns) == ALLOCATION_COLUMNS
    assert df["project_id"].tolist() == [1, 0]
    assert df["contributors"].tolist() == [6, 5]
    assert df["allocated_amount"].tolist() == [36.0, 25.0]


def test_table_pool_share_and_match_ratio(unit_contribution_round):
    r = unit_contribution_round(pool=100)
    df = allocation_table(r).set_index("project_id")
    assert df.loc[0, "pool_share"] == pytest.approx(0.25)
    assert df.loc[1, "pool_share"] == pytest.approx(0.36)
    # 25 matched on 5 contributed.
    assert df.loc[0, "match_ratio"] == pytest.approx(5.0)


def test_table_uses_supplied_allocation(unit_contribution_round):
    r = unit_contribution_round(pool=10)
    allocation = r.compute_cqf_allocation()
    df = allocation_table(r, allocation).set_index("project_id")
    assert df.loc[0, "allocated_amount"] == pytest.approx(25 * 10 / 61, abs=1e-6)
    assert df["pool_share"].sum() == pytest.approx(1.0, abs=1e-6)


def test_table_project_without_contributions_has_nan_ratio():
    r = FundingRound()
    r.add_project(Project(5))
    r.recompute_all()
    r.set_matching_pool(10)
    df = allocation_table(r)
    assert df.loc[0, "allocated_amount"] == 0.0
    assert math.isnan(df.loc[0, "match_ratio"])


def test_table_empty_round_returns_empty_frame():
    r = FundingRound()
    r.set_matching_pool(10)
    df = allocation_table(r)
    assert isinstance(df, pd.DataFrame)
    assert df.empty
    assert list(df.columns) == ALLOCATION_COLUMNS


def test_summary_not_binding(unit_contribution_round):
    r = unit_contribution_round(pool=100)
    s = allocation_summary(r)
    assert s["project_count"] == 2
    assert s["total_ideal"] == 61.0
    assert s["total_allocated"] == 61.0
    assert s["unallocated"] == pytest.approx(39.0)
    assert s["binding"] is False
    assert s["scaling_factor"] == 1.0


def test_summary_binding(unit_contribution_round):
    r = unit_contribution_round(pool=10)
    s = allocation_summary(r)
    assert s["binding"] is True
    assert s["scaling_factor"] == pytest.approx(10 / 61)
    assert s["total_allocated"] == pytest.approx(10.0)
    assert s["unallocated"] == pytest.approx(0.0, abs=1e-9)
