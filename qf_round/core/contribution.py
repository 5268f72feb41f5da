"""
qf_round/core/contribution.py — Contribution value record.

A contribution is a directed, amount-bearing message from a contributor to a
project. It is only an input to Project.add_contribution(); the project keeps
the cumulative amount per contributor, not the individual records.
"""

import math
from dataclasses import dataclass

from qf_round.errors import InvalidArgumentError


def check_identifier(name: str, value) -> None:
    """Raise InvalidArgumentError unless value is a non-negative integer id."""
    # bool is an int subclass but never a meaningful identifier.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(
            f"{name} must be a non-negative integer, got {value!r}."
        )


@dataclass(frozen=True)
class Contribution:
    """
    A single contribution to a project.

    Fields:
        contributor_id: Caller-assigned identifier of the contributor.
        project_id:     Identifier of the receiving project.
        amount:         Contributed amount. Finite and >= 0.

    Raises:
        InvalidArgumentError: On a negative or non-integer identifier, or a
                              negative, NaN or infinite amount.
    """

    contributor_id: int
    project_id: int
    amount: float

    def __post_init__(self) -> None:
        check_identifier("contributor_id", self.contributor_id)
        check_identifier("project_id", self.project_id)

        try:
            amount = float(self.amount)
        except (TypeError, ValueError):
            raise InvalidArgumentError(
                f"Contribution amount must be a number, got {self.amount!r}."
            ) from None

        if not math.isfinite(amount) or amount < 0:
            raise InvalidArgumentError(
                f"Contribution amount must be finite and non-negative, got {amount!r}."
            )
        object.__setattr__(self, "amount", amount)
