"""
qf_round/tests/test_contribution_graph.py — Tests for the contributor → project graph.

Tests verify:
- Every registered project becomes a Project node, even without contributions.
- A contributor funding several projects is a single node with one edge each.
- Edge amounts are cumulative per contributor.
- Contributor and project ids never collide.
"""

from qf_round.core.contribution import Contribution
from qf_round.core.funding_round import FundingRound
from qf_round.core.project import Project
from qf_round.graph.contribution_graph import (
    build_contribution_graph,
    contributor_node,
    project_node,
)


def make_round() -> FundingRound:
    r = FundingRound(round_id="graph-round")
    for pid in (0, 1, 2):
        r.add_project(Project(pid))
    r.add_contribution(Contribution(0, 0, 4.0))
    r.add_contribution(Contribution(0, 0, 5.0))
    r.add_contribution(Contribution(0, 1, 16.0))
    r.add_contribution(Contribution(1, 1, 9.0))
    r.recompute_all()
    r.set_matching_pool(100)
    return r


def test_nodes_and_edges():
    G = build_contribution_graph(make_round())
    project_nodes = [n for n, d in G.nodes(data=True) if d["node_type"] == "Project"]
    contributor_nodes = [n for n, d in G.nodes(data=True) if d["node_type"] == "Contributor"]
    assert len(project_nodes) == 3
    assert len(contributor_nodes) == 2
    assert G.number_of_edges() == 3


def test_project_without_contributions_is_isolated():
    G = build_contribution_graph(make_round())
    assert G.in_degree(project_node(2)) == 0


def test_edge_amount_is_cumulative():
    G = build_contribution_graph(make_round())
    edge = G.edges[contributor_node(0), project_node(0)]
    assert edge["edge_type"] == "contributed_to"
    assert edge["amount"] == 9.0


def test_contributor_and_project_with_same_id_are_distinct_nodes():
    G = build_contribution_graph(make_round())
    assert G.nodes[contributor_node(0)]["node_type"] == "Contributor"
    assert G.nodes[project_node(0)]["node_type"] == "Project"
    assert contributor_node(0) != project_node(0)


def test_project_nodes_carry_derived_fields():
    G = build_contribution_graph(make_round())
    data = G.nodes[project_node(1)]
    assert data["project_id"] == 1
    assert data["total_contribution"] == 25.0
    assert data["sum_rootsquared_contribution"] == 7.0
    assert data["matching_amount"] == 49.0
    assert data["stale"] is False
    assert G.graph["round_id"] == "graph-round"
    assert G.graph["matching_pool"] == 100.0
