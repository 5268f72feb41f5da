"""
qf_round/tests/test_contribution.py — Tests for the Contribution record.

Tests verify:
- Valid records keep their fields and coerce the amount to float.
- Negative, NaN and infinite amounts are rejected with InvalidArgumentError.
- Negative, boolean and non-integer identifiers are rejected.
- Records are immutable.
"""

import dataclasses

import pytest

from qf_round.core.contribution import Contribution
from qf_round.errors import InvalidArgumentError


def test_valid_contribution_fields():
    c = Contribution(contributor_id=3, project_id=7, amount=12)
    assert c.contributor_id == 3
    assert c.project_id == 7
    assert c.amount == 12.0
    assert isinstance(c.amount, float)


def test_zero_amount_is_allowed():
    assert Contribution(0, 0, 0.0).amount == 0.0


@pytest.mark.parametrize("amount", [-1.0, -0.0001, float("nan"), float("inf"), "abc", None])
def test_invalid_amount_rejected(amount):
    with pytest.raises(InvalidArgumentError) as excinfo:
        Contribution(1, 1, amount)
    assert excinfo.value.code == "INVALID_ARGUMENT"


@pytest.mark.parametrize(
    "contributor_id, project_id",
    [(-1, 0), (0, -1), (1.5, 0), (0, "2"), (True, 0)],
)
def test_invalid_identifiers_rejected(contributor_id, project_id):
    with pytest.raises(InvalidArgumentError):
        Contribution(contributor_id, project_id, 1.0)


def test_invalid_argument_is_a_value_error():
    """Callers catching ValueError also catch engine argument errors."""
    with pytest.raises(ValueError):
        Contribution(1, 1, -5.0)


def test_contribution_is_immutable():
    c = Contribution(1, 2, 3.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.amount = 10.0
