"""
qf_round/graph/contribution_graph.py — Contributor → Project bipartite graph.

Node schema:
    Contributor: node_id 'contributor-{id}', node_type='Contributor', contributor_id
    Project:     node_id 'project-{id}', node_type='Project', project_id,
                 total_contribution, sum_rootsquared_contribution,
                 matching_amount, final_amount, stale

Edge schema:
    Contributor → Project, edge_type='contributed_to', amount=<cumulative amount>

Contributors and projects share the integer id space, so node ids carry a
type prefix.
"""

import logging

import networkx as nx

from qf_round.core.funding_round import FundingRound

logger = logging.getLogger(__name__)


def contributor_node(contributor_id: int) -> str:
    return f"contributor-{contributor_id}"


def project_node(project_id: int) -> str:
    return f"project-{project_id}"


def build_contribution_graph(funding_round: FundingRound) -> nx.DiGraph:
    """
    Build the bipartite contribution graph of a round.

    Every registered project becomes a Project node (including projects with
    no contributions). Every contributor appearing in any ledger becomes a
    single Contributor node, with one contributed_to edge per project it funded.

    Args:
        funding_round: The round to project. Derived fields are copied as-is;
                       call recompute_all() first for fresh values.

    Returns:
        G: nx.DiGraph with Contributor and Project nodes.
    """
    G = nx.DiGraph()
    G.graph["round_id"] = funding_round.round_id
    G.graph["matching_pool"] = funding_round.matching_pool

    for pid, project in funding_round.projects.items():
        G.add_node(
            project_node(pid),
            node_type="Project",
            project_id=pid,
            total_contribution=project.total_contribution,
            sum_rootsquared_contribution=project.sum_rootsquared_contribution,
            matching_amount=project.matching_amount,
            final_amount=project.final_amount,
            stale=project.stale,
        )

    for pid, project in funding_round.projects.items():
        for contributor_id, amount in project.contribution_list.items():
            c_node = contributor_node(contributor_id)
            if c_node not in G:
                G.add_node(c_node, node_type="Contributor", contributor_id=contributor_id)
            G.add_edge(c_node, project_node(pid), edge_type="contributed_to", amount=amount)

    logger.debug(
        "Contribution graph for %s: %d nodes, %d edges.",
        funding_round.round_id,
        G.number_of_nodes(),
        G.number_of_edges(),
    )
    return G
