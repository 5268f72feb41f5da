"""
qf_round/core/project.py — Per-project accumulation and the QF formula.

The ideal quadratic-funding amount for a project is

    matching_amount = (sum_i sqrt(c_i)) ** 2

where c_i is the cumulative amount given by contributor i. The formula depends
on this project's contributions only, so every project can be recomputed
independently and in any order.

Derived fields are cached. They are consistent with contribution_list only
immediately after recompute(); add_contribution() marks the project stale and
the derived-field accessors log a warning until the next recompute.

add_contribution() rejects a contribution that would push total_contribution
or matching_amount past the largest finite float, so recompute() cannot fail.
"""

import logging
import math
from typing import Optional

import numpy as np

from qf_round.config import DEFAULT_CONFIG, QFRoundConfig
from qf_round.core.contribution import Contribution, check_identifier
from qf_round.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class Project:
    """
    Contribution ledger and derived QF amounts for one recipient.

    Attributes:
        id:                           Caller-assigned project identifier (read-only).
        contribution_list:            contributor_id → cumulative amount.
        total_contribution:           Sum of contribution_list values.
        sum_rootsquared_contribution: Sum of sqrt of contribution_list values.
        matching_amount:              Ideal (unconstrained) QF amount,
                                      sum_rootsquared_contribution ** 2.
        final_amount:                 Allocated amount after the capital
                                      constraint, written by FundingRound.finalize().
        stale:                        True between add_contribution() and the
                                      next recompute().
        config:                       QFRoundConfig. Replaced by the owning
                                      round's config on FundingRound.add_project().

    Raises:
        InvalidArgumentError: If project_id is not a non-negative integer.
    """

    def __init__(
        self,
        project_id: int,
        config: Optional[QFRoundConfig] = None,
    ) -> None:
        check_identifier("project_id", project_id)
        self._id = project_id
        self.config = config or DEFAULT_CONFIG
        self.contribution_list: dict[int, float] = {}
        self._ledger_total = 0.0
        self.total_contribution = 0.0
        self.sum_rootsquared_contribution = 0.0
        self.matching_amount = 0.0
        self.final_amount = 0.0
        self.stale = False

    @property
    def id(self) -> int:
        return self._id

    def __repr__(self) -> str:
        return (
            f"Project(id={self._id}, contributors={len(self.contribution_list)}, "
            f"matching_amount={self.matching_amount!r}, stale={self.stale})"
        )

    def _check_capacity(self, contributor: int, cumulative: float) -> float:
        """
        Raise if the ledger with this entry would overflow a derived field.

        Returns the ledger total including the entry.
        """
        previous = self.contribution_list.get(contributor, 0.0)
        total = self._ledger_total - previous + cumulative
        entries = len(self.contribution_list) + (contributor not in self.contribution_list)
        # (Σ sqrt(c))² <= n · Σ c, so the exact check runs only near the float limit.
        if math.isfinite(entries * total):
            return total
        ledger = dict(self.contribution_list)
        ledger[contributor] = cumulative
        total = sum(ledger.values())
        root_sum = sum(math.sqrt(amount) for amount in ledger.values())
        if not math.isfinite(total) or not math.isfinite(root_sum * root_sum):
            raise InvalidArgumentError(
                f"Project {self._id}: contribution from {contributor} would overflow "
                f"the project's QF amount."
            )
        return total

    def add_contribution(self, contribution: Contribution) -> None:
        """
        Accumulate a contribution into this project's ledger.

        Repeated contributions from the same contributor add to one entry.
        Routing (contribution.project_id == self.id) is the caller's
        responsibility; derived fields are left untouched.

        Raises:
            InvalidArgumentError: If the contribution would make
                                  total_contribution or matching_amount
                                  non-finite. The ledger is unchanged.
        """
        contributor = contribution.contributor_id
        cumulative = self.contribution_list.get(contributor, 0.0) + contribution.amount
        self._ledger_total = self._check_capacity(contributor, cumulative)
        self.contribution_list[contributor] = cumulative
        self.stale = True
        logger.debug(
            "Project %d: +%.6f from contributor %d (cumulative %.6f).",
            self._id,
            contribution.amount,
            contributor,
            self.contribution_list[contributor],
        )

    def recompute(self) -> None:
        """
        Rebuild total_contribution, sum_rootsquared_contribution and
        matching_amount from contribution_list.

        Always resets before accumulating, so repeated calls with an unchanged
        ledger give identical results.
        """
        self.total_contribution = 0.0
        self.sum_rootsquared_contribution = 0.0
        self.matching_amount = 0.0

        if self.contribution_list:
            amounts = np.fromiter(
                self.contribution_list.values(),
                dtype=float,
                count=len(self.contribution_list),
            )
            self.total_contribution = float(amounts.sum())
            self.sum_rootsquared_contribution = float(np.sqrt(amounts).sum())

        self.matching_amount = self.sum_rootsquared_contribution ** 2
        self.stale = False

    # ── Accessors ─────────────────────────────────────────────────────────────

    def _check_fresh(self, field_name: str) -> None:
        if self.stale and self.config.warn_on_stale_read:
            logger.warning(
                "Project %d: reading %s before recompute(); value reflects a "
                "previous ledger state.",
                self._id,
                field_name,
            )

    def get_id(self) -> int:
        return self._id

    def get_contribution_list(self) -> dict[int, float]:
        """Return a copy of the contributor → cumulative amount mapping."""
        return dict(self.contribution_list)

    def get_total_contribution(self) -> float:
        self._check_fresh("total_contribution")
        return self.total_contribution

    def get_sum_rootsquared_contribution(self) -> float:
        self._check_fresh("sum_rootsquared_contribution")
        return self.sum_rootsquared_contribution

    def get_matching_amount(self) -> float:
        self._check_fresh("matching_amount")
        return self.matching_amount

    def get_final_amount(self) -> float:
        self._check_fresh("final_amount")
        return self.final_amount
