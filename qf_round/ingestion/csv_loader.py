"""
qf_round/ingestion/csv_loader.py — Build a funding round from a contributions CSV.

Expected CSV columns (names configurable in QFRoundConfig):
    from    — contributor id (non-negative integer)
    to      — project id (non-negative integer)
    amount  — contributed amount (non-negative number)

One project is registered per distinct 'to' value, in order of first
appearance. Rows with a blank field are skipped; rows with malformed or
negative values raise InvalidArgumentError.
"""

import logging
import math
from typing import Iterable, Optional

import pandas as pd

from qf_round.config import DEFAULT_CONFIG, QFRoundConfig
from qf_round.core.contribution import Contribution
from qf_round.core.funding_round import FundingRound
from qf_round.core.project import Project
from qf_round.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def _as_identifier(value, column: str, row_number: int) -> int:
    numeric = pd.to_numeric(value, errors="coerce")
    if pd.isna(numeric) or not math.isfinite(numeric) or float(numeric) != int(numeric):
        raise InvalidArgumentError(
            f"Row {row_number}: column '{column}' must be an integer id, got {value!r}."
        )
    return int(numeric)


def load_contributions_csv(
    path: str,
    config: QFRoundConfig = DEFAULT_CONFIG,
) -> list[Contribution]:
    """
    Read contribution records from a CSV file.

    Args:
        path:   Path to the CSV file.
        config: QFRoundConfig. Uses contributor_column, project_column and
                amount_column.

    Returns:
        List of Contribution in file order.

    Raises:
        InvalidArgumentError: If a required column is missing or a row holds
                              an invalid id or amount.
    """
    logger.info("Loading contributions from: %s", path)
    df = pd.read_csv(path)

    columns = [config.contributor_column, config.project_column, config.amount_column]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise InvalidArgumentError(
            f"{path}: missing required column(s): {', '.join(missing)}."
        )

    contributions: list[Contribution] = []
    skipped = 0
    for idx, row in df.iterrows():
        row_number = int(idx) + 2  # header is line 1
        if any(pd.isna(row[c]) for c in columns):
            logger.debug("Skipping row %d with a blank field: %s", row_number, row.to_dict())
            skipped += 1
            continue

        amount = pd.to_numeric(row[config.amount_column], errors="coerce")
        if pd.isna(amount):
            raise InvalidArgumentError(
                f"Row {row_number}: column '{config.amount_column}' must be numeric, "
                f"got {row[config.amount_column]!r}."
            )

        contributions.append(
            Contribution(
                contributor_id=_as_identifier(row[config.contributor_column], config.contributor_column, row_number),
                project_id=_as_identifier(row[config.project_column], config.project_column, row_number),
                amount=float(amount),
            )
        )

    logger.info(
        "Loaded %d contributions (%d blank rows skipped).", len(contributions), skipped
    )
    return contributions


def build_round_from_contributions(
    contributions: Iterable[Contribution],
    matching_pool: Optional[float] = None,
    config: QFRoundConfig = DEFAULT_CONFIG,
    round_id: Optional[str] = None,
) -> FundingRound:
    """
    Build a recomputed FundingRound from contribution records.

    Args:
        contributions: Contribution records. Every distinct project_id becomes
                       a registered Project.
        matching_pool: Pool to set on the round. Left unset if None.
        config:        QFRoundConfig for the round; registered projects adopt it.
        round_id:      Optional round label.

    Returns:
        FundingRound with all contributions routed and recompute_all() applied.
    """
    funding_round = FundingRound(config=config, round_id=round_id)
    if matching_pool is not None:
        funding_round.set_matching_pool(matching_pool)

    for contribution in contributions:
        if contribution.project_id not in funding_round.projects:
            funding_round.add_project(Project(contribution.project_id))
        funding_round.add_contribution(contribution)

    funding_round.recompute_all()
    logger.info(
        "Built %s with %d projects.", funding_round.round_id, len(funding_round.projects)
    )
    return funding_round


def build_round_from_csv(
    path: str,
    matching_pool: Optional[float] = None,
    config: QFRoundConfig = DEFAULT_CONFIG,
    round_id: Optional[str] = None,
) -> FundingRound:
    """Load a contributions CSV and build a recomputed FundingRound from it."""
    contributions = load_contributions_csv(path, config=config)
    return build_round_from_contributions(
        contributions, matching_pool=matching_pool, config=config, round_id=round_id
    )
