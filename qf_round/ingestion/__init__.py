"""
qf_round.ingestion — Loading contribution records into a round.

Modules:
    csv_loader — Contributions CSV → Contribution list → FundingRound.
"""
