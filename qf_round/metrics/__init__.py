"""
qf_round.metrics — Reporting metrics over a funding round.

Modules:
    allocation    — Per-project allocation table and round summary (pandas).
    concentration — Contributor concentration per project: HHI + Shannon entropy.

All thresholds live in qf_round.config.QFRoundConfig.
"""
