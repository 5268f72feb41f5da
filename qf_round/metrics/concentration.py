"""
qf_round/metrics/concentration.py — Contributor concentration per project.

Quadratic funding rewards breadth of support: many small contributions earn
far more matching than one large one. These metrics show how concentrated a
project's support is in its largest contributors.

Three complementary metrics:
    1. Dominant flag: 1 if a single contributor supplied >= the configured share.
    2. HHI (Herfindahl-Hirschman Index): sum(share_i^2) × 10,000, 0–10,000.
    3. Shannon entropy: -sum(p_i × ln(p_i)), maximal for equal contributions.

Risk tiers (configurable via QFRoundConfig):
    HHI < 1,500            → 'broad'
    1,500 <= HHI < 2,500   → 'moderate'
    2,500 <= HHI < 5,000   → 'concentrated'
    HHI >= 5,000           → 'critical'

Contributor identity is taken as given; no attempt is made to detect several
identifiers belonging to one actor.
"""

import logging
from dataclasses import dataclass

import networkx as nx
import numpy as np

from qf_round.config import DEFAULT_CONFIG, QFRoundConfig

logger = logging.getLogger(__name__)


@dataclass
class ContributionConcentrationResult:
    """
    Concentration analysis result for a single project.

    Fields:
        project_id:            Project identifier.
        dominant_flag:         1 = top contributor share >= threshold.
        hhi:                   Herfindahl-Hirschman Index (0–10,000).
        shannon_entropy:       Shannon entropy of contribution shares.
        top_contributor:       contributor_id with the largest cumulative amount.
        top_contributor_share: Fraction of the project total from top_contributor.
        total_contributors:    Number of distinct contributors.
        total_amount:          Sum of all contributions to the project.
        risk_tier:             'broad' | 'moderate' | 'concentrated' | 'critical'
    """
    project_id: int
    dominant_flag: int
    hhi: float
    shannon_entropy: float
    top_contributor: int
    top_contributor_share: float
    total_contributors: int
    total_amount: float
    risk_tier: str


def classify_hhi(hhi: float, config: QFRoundConfig = DEFAULT_CONFIG) -> str:
    """Map an HHI value to its risk tier using config thresholds."""
    if hhi < config.hhi_moderate:
        return "broad"
    elif hhi < config.hhi_concentrated:
        return "moderate"
    elif hhi < config.hhi_critical:
        return "concentrated"
    return "critical"


def compute_contribution_concentration(
    G: nx.DiGraph,
    config: QFRoundConfig = DEFAULT_CONFIG,
) -> dict[int, ContributionConcentrationResult]:
    """
    Compute dominant flag, HHI and Shannon entropy for every Project node.

    Algorithm:
        For each Project node in the contribution graph:
        1. Collect in-edges with edge_type='contributed_to' and an 'amount'.
        2. Compute each contributor's share of the project total.
        3. dominant_flag = 1 if max(share) >= config.dominant_contributor_share.
        4. HHI = sum(share_i^2) × 10,000.
        5. Shannon entropy = -sum(share_i × ln(share_i)) over share_i > 0.
        6. Assign risk tier from config HHI thresholds.

    Args:
        G:      Output of build_contribution_graph().
        config: QFRoundConfig. Uses dominant_contributor_share and hhi_* tiers.

    Returns:
        Dict mapping project_id → ContributionConcentrationResult.
        Projects with no contributions, or a zero total, are omitted.
    """
    results: dict[int, ContributionConcentrationResult] = {}

    project_nodes = [
        (n, d) for n, d in G.nodes(data=True) if d.get("node_type") == "Project"
    ]

    for node, data in project_nodes:
        contributors = [
            (G.nodes[u]["contributor_id"], d["amount"])
            for u, _, d in G.in_edges(node, data=True)
            if d.get("edge_type") == "contributed_to" and "amount" in d
        ]
        if not contributors:
            continue

        amounts = np.array([amount for _, amount in contributors], dtype=float)
        total = float(amounts.sum())
        if total == 0:
            continue

        shares = amounts / total
        top_idx = int(np.argmax(shares))
        top_contributor = contributors[top_idx][0]
        top_share = float(shares[top_idx])

        hhi = float(np.sum(shares ** 2) * 10_000)
        nonzero = shares[shares > 0]
        shannon_entropy = float(-np.sum(nonzero * np.log(nonzero)))

        project_id = data["project_id"]
        results[project_id] = ContributionConcentrationResult(
            project_id=project_id,
            dominant_flag=1 if top_share >= config.dominant_contributor_share else 0,
            hhi=round(hhi, 1),
            shannon_entropy=round(shannon_entropy, 3),
            top_contributor=top_contributor,
            top_contributor_share=round(top_share, 3),
            total_contributors=len(contributors),
            total_amount=total,
            risk_tier=classify_hhi(hhi, config),
        )

    logger.debug(
        "Concentration computed for %d projects. Dominated: %d.",
        len(results),
        sum(1 for r in results.values() if r.dominant_flag == 1),
    )
    return results
