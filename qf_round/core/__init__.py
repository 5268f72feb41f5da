"""
qf_round.core — Round and project state plus the allocation formulas.

Modules:
    contribution   — Immutable contribution record (contributor → project).
    project        — Per-project accumulation and the QF formula.
    funding_round  — Project registry, matching pool and CQF normalization.
"""
