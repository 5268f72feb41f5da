"""
qf_round — Capital-Constrained Quadratic Funding allocation engine.

Computes matching-fund allocations for a quadratic-funding round. A project's
ideal subsidy is the square of the sum of square roots of its individual
contributions; when the sum of ideals exceeds the matching pool, every
allocation is scaled down by the same factor so the pool is exactly spent.

Modules:
    core.contribution   — Contribution value record.
    core.project        — Per-project accumulation + QF formula.
    core.funding_round  — Round aggregate + CQF normalization.
    metrics             — Allocation table / summary, contributor concentration.
    graph               — Contributor → Project bipartite graph.
    ingestion           — CSV loading of contribution records.
"""

from qf_round.core.contribution import Contribution
from qf_round.core.funding_round import FundingRound
from qf_round.core.project import Project
from qf_round.errors import (
    DuplicateKeyError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
    QFRoundError,
)

__version__ = "0.1.0"

__all__ = [
    "Contribution",
    "DuplicateKeyError",
    "FundingRound",
    "InvalidArgumentError",
    "NotFoundError",
    "PreconditionFailedError",
    "Project",
    "QFRoundError",
]
