"""
qf_round.graph — Graph views of a funding round.

Modules:
    contribution_graph — Contributor → Project bipartite DiGraph.
"""
