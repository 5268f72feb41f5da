"""
qf_round/config.py — All tunable parameters for the QF round engine.

No threshold should be hardcoded in a metric module. Staleness policy,
concentration tier boundaries and CSV column names live here so that
calibration changes are a single-file diff.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class QFRoundConfig:
    """
    Immutable configuration for a funding round and its metrics.

    Override by constructing a new QFRoundConfig with the desired values.
    """

    # ── Derived-state policy ─────────────────────────────────────────────────
    eager_recompute: bool = False
    # When True, FundingRound.add_contribution recomputes the target project
    # immediately so derived fields are never stale.
    # Default False: callers run recompute_all() before reading.

    warn_on_stale_read: bool = True
    # Log a WARNING when a derived field is read from a stale project.
    # The cached (possibly zero) value is still returned.

    # ── Contributor Concentration ─────────────────────────────────────────────
    dominant_contributor_share: float = 0.50
    # Single contributor share that sets dominant_flag on a project.
    # Default 50%: one contributor supplied half or more of the money.

    hhi_moderate: float = 1500.0
    # HHI tier boundary: below this = 'broad' (widely distributed support).

    hhi_concentrated: float = 2500.0
    # HHI tier boundary: 1500–2500 = 'moderate', above this = 'concentrated'.

    hhi_critical: float = 5000.0
    # HHI tier boundary: 2500–5000 = 'concentrated', above this = 'critical'.
    # HHI = 10,000 means a single contributor supplied every unit.

    # ── CSV Ingestion ─────────────────────────────────────────────────────────
    contributor_column: str = "from"
    project_column: str = "to"
    amount_column: str = "amount"

    # ── Reporting ─────────────────────────────────────────────────────────────
    report_decimals: int = 6
    # Rounding applied to monetary columns in allocation tables.


# Shared default; construct a new QFRoundConfig only to override values.
DEFAULT_CONFIG = QFRoundConfig()
