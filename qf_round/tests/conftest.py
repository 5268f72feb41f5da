"""
qf_round/tests/conftest.py — Shared pytest fixtures for the QF round test suite.

Fixtures:
    unit_contribution_round   — Factory: project 0 backed by five unit
                                contributors (ideal 25), project 1 by six
                                (ideal 36), recomputed, pool as requested.
    contributions_csv         — Small contributions CSV written to tmp_path.
"""

import pandas as pd
import pytest

from qf_round.core.contribution import Contribution
from qf_round.core.funding_round import FundingRound
from qf_round.core.project import Project


def make_unit_contribution_round(pool=None) -> FundingRound:
    """
    Round with two projects whose ideal QF amounts are 25 and 36.

    Project 0: contributors 0–4 give 1 each  → (5 × sqrt(1))² = 25.
    Project 1: contributors 10–15 give 1 each → (6 × sqrt(1))² = 36.
    """
    funding_round = FundingRound(round_id="test-round")
    funding_round.add_project(Project(0))
    funding_round.add_project(Project(1))
    for contributor in range(5):
        funding_round.add_contribution(Contribution(contributor, 0, 1.0))
    for contributor in range(10, 16):
        funding_round.add_contribution(Contribution(contributor, 1, 1.0))
    funding_round.recompute_all()
    if pool is not None:
        funding_round.set_matching_pool(pool)
    return funding_round


@pytest.fixture
def unit_contribution_round():
    return make_unit_contribution_round


@pytest.fixture
def contributions_csv(tmp_path):
    """
    CSV with three projects:
        project 7: contributors 1, 2 give 100 each → ideal 400
        project 8: contributor 3 gives 25 twice    → ideal 50
        project 9: contributor 1 gives 4           → ideal 4
    """
    df = pd.DataFrame(
        {
            "from": [1, 2, 3, 3, 1],
            "to": [7, 7, 8, 8, 9],
            "amount": [100.0, 100.0, 25.0, 25.0, 4.0],
        }
    )
    path = tmp_path / "contributions.csv"
    df.to_csv(path, index=False)
    return path
