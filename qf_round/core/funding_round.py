"""
qf_round/core/funding_round.py — Round aggregate and CQF normalization.

Capital-Constrained Quadratic Funding (CQF):
    Each project's ideal QF amount is computed independently. If the sum of
    ideals S fits within the matching pool, every project receives its ideal.
    Otherwise every ideal is multiplied by the common factor pool / S, so the
    allocations sum exactly to the pool while each project keeps its relative
    share of the ideal distribution.

Expected call sequence:
    add_project* → add_contribution* → recompute_all → compute_cqf_allocation

compute_cqf_allocation() does not recompute. Projects that were not
recomputed after their last contribution contribute their cached (possibly
zero) matching_amount, and a warning is logged.
"""

import logging
import math
from typing import Optional

from qf_round.config import DEFAULT_CONFIG, QFRoundConfig
from qf_round.core.contribution import Contribution
from qf_round.core.project import Project
from qf_round.errors import (
    DuplicateKeyError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
)

logger = logging.getLogger(__name__)


class FundingRound:
    """
    A funding round: a project registry plus a matching-pool budget.

    The round exclusively owns its projects. matching_pool is 0.0 until
    set_matching_pool() is called; an allocation cannot be computed before then.

    Args:
        config:   QFRoundConfig. Uses config.eager_recompute.
        round_id: Optional label used in log messages and reports.
    """

    def __init__(
        self,
        config: QFRoundConfig = DEFAULT_CONFIG,
        round_id: Optional[str] = None,
    ) -> None:
        self.config = config
        self.round_id = round_id or "round"
        self.projects: dict[int, Project] = {}
        self.matching_pool: float = 0.0

    def __repr__(self) -> str:
        return (
            f"FundingRound(round_id={self.round_id!r}, projects={len(self.projects)}, "
            f"matching_pool={self.matching_pool!r})"
        )

    # ── Configuration ─────────────────────────────────────────────────────────

    def set_matching_pool(self, amount: float) -> None:
        """
        Set the round's matching pool.

        Raises:
            InvalidArgumentError: If amount is not a finite number > 0.
        """
        try:
            value = float(amount)
        except (TypeError, ValueError):
            raise InvalidArgumentError(
                f"Matching pool must be a number, got {amount!r}."
            ) from None
        if not math.isfinite(value) or value <= 0:
            raise InvalidArgumentError(
                f"Matching pool must be a finite amount greater than 0, got {value!r}."
            )

        if self.matching_pool > 0:
            logger.info(
                "%s: matching pool changed from %.2f to %.2f.",
                self.round_id,
                self.matching_pool,
                value,
            )
        self.matching_pool = value

    def get_matching_pool(self) -> float:
        return self.matching_pool

    # ── Registry ──────────────────────────────────────────────────────────────

    def add_project(self, project: Project) -> None:
        """
        Register a project under its id.

        The project adopts this round's config, so staleness warnings follow
        the round's settings.

        Raises:
            DuplicateKeyError: If a project with the same id is already
                               registered. The existing project is untouched.
        """
        if project.id in self.projects:
            raise DuplicateKeyError(
                f"Project {project.id} is already registered in {self.round_id}."
            )
        project.config = self.config
        self.projects[project.id] = project
        logger.debug("%s: registered project %d.", self.round_id, project.id)

    def get_project(self, project_id: int) -> Project:
        """
        Return the registered project with this id.

        Raises:
            NotFoundError: If no such project is registered.
        """
        try:
            return self.projects[project_id]
        except KeyError:
            raise NotFoundError(
                f"Project {project_id} is not registered in {self.round_id}."
            ) from None

    def add_contribution(self, contribution: Contribution) -> None:
        """
        Route a contribution to the project it targets.

        Raises:
            NotFoundError: If contribution.project_id is not registered.
                           No project is modified.
        """
        project = self.projects.get(contribution.project_id)
        if project is None:
            raise NotFoundError(
                f"Contribution from {contribution.contributor_id} targets "
                f"unregistered project {contribution.project_id}."
            )
        project.add_contribution(contribution)
        if self.config.eager_recompute:
            project.recompute()

    @property
    def is_stale(self) -> bool:
        """True if any project has contributions not yet folded into its derived fields."""
        return any(p.stale for p in self.projects.values())

    # ── Computation ───────────────────────────────────────────────────────────

    def recompute_all(self) -> None:
        """Recompute derived fields on every project (order-independent)."""
        for project in self.projects.values():
            project.recompute()
        logger.debug(
            "%s: recomputed %d projects.", self.round_id, len(self.projects)
        )

    def compute_cqf_allocation(self) -> dict[int, float]:
        """
        Compute the capital-constrained QF allocation for every project.

        Algorithm:
            1. allocation[id] = project.matching_amount (the unconstrained ideal).
            2. S = sum of all ideals.
            3. If S <= matching_pool: return the ideals unchanged (covers S == 0).
            4. Otherwise scale every value by matching_pool / S. The largest
               project takes the remainder of the pool, so the allocations sum
               to matching_pool and never exceed it.

        Returns:
            Fresh dict mapping project id → allocated amount. Round and
            project state are not modified.

        Raises:
            PreconditionFailedError: If the matching pool has not been set.
        """
        if self.matching_pool <= 0:
            raise PreconditionFailedError(
                f"{self.round_id}: matching pool must be set before computing "
                f"an allocation."
            )

        stale_ids = [pid for pid, p in self.projects.items() if p.stale]
        if stale_ids and self.config.warn_on_stale_read:
            logger.warning(
                "%s: %d project(s) not recomputed since their last contribution "
                "(%s); cached matching amounts are used.",
                self.round_id,
                len(stale_ids),
                ", ".join(str(pid) for pid in sorted(stale_ids)),
            )

        allocation: dict[int, float] = {
            pid: project.matching_amount for pid, project in self.projects.items()
        }
        total_ideal = sum(allocation.values())

        if total_ideal <= self.matching_pool:
            logger.info(
                "%s: pool %.2f covers ideal QF total %.2f; no scaling applied.",
                self.round_id,
                self.matching_pool,
                total_ideal,
            )
            return allocation

        scaling_factor = self._scale_to_pool(allocation)

        logger.info(
            "%s: ideal QF total %.2f exceeds pool %.2f; scaled %d projects by %.6f.",
            self.round_id,
            total_ideal,
            self.matching_pool,
            len(allocation),
            scaling_factor,
        )
        return allocation

    def _scale_to_pool(self, allocation: dict[int, float]) -> float:
        """
        Scale allocation in place so it sums to the pool without exceeding it.

        Values are scaled relative to the largest ideal, so a sum of ideals
        beyond the float range still yields finite shares. Every project except
        the largest is scaled; the largest receives what is left of the pool,
        then is nudged down until the float sum no longer exceeds the pool.

        Returns:
            The effective scaling factor, pool / total ideal.
        """
        pool = self.matching_pool
        largest_pid = max(allocation, key=allocation.__getitem__)
        largest = allocation[largest_pid]
        relative_total = sum(value / largest for value in allocation.values())
        per_largest = pool / relative_total

        for pid in allocation:
            if pid != largest_pid:
                allocation[pid] = allocation[pid] / largest * per_largest
        others = sum(v for pid, v in allocation.items() if pid != largest_pid)
        allocation[largest_pid] = max(pool - others, 0.0)

        excess = sum(allocation.values()) - pool
        if excess > 0:
            allocation[largest_pid] = max(allocation[largest_pid] - excess, 0.0)
        while sum(allocation.values()) > pool and allocation[largest_pid] > 0:
            allocation[largest_pid] = math.nextafter(allocation[largest_pid], 0.0)

        return per_largest / largest


    def finalize(self) -> dict[int, float]:
        """
        Compute the CQF allocation and record it as each project's final_amount.

        Returns:
            The allocation mapping from compute_cqf_allocation().

        Raises:
            PreconditionFailedError: If the matching pool has not been set.
        """
        allocation = self.compute_cqf_allocation()
        for pid, amount in allocation.items():
            self.projects[pid].final_amount = amount
        logger.info(
            "%s: finalized allocation for %d projects (total %.2f).",
            self.round_id,
            len(allocation),
            sum(allocation.values()),
        )
        return allocation
