"""
qf_round/tests/test_cli.py — Tests for the qf-round command-line interface.

Tests verify:
- 'allocate' prints the table and summary and exports a CSV.
- A non-positive pool, or a missing or empty CSV, exits with status 2.
- 'concentration' prints one line per funded project.
"""

import pandas as pd
import pytest

from qf_round.cli import build_parser, main


def test_allocate_binding_pool(contributions_csv, tmp_path, capsys):
    output = tmp_path / "alloc.csv"
    status = main(
        ["--round-id", "cli-round", "allocate", str(contributions_csv),
         "--pool", "100", "--output", str(output)]
    )
    assert status == 0

    out = capsys.readouterr().out
    assert "QF ROUND — cli-round" in out
    assert "Pool binding     : yes" in out

    df = pd.read_csv(output)
    assert df["project_id"].tolist() == [7, 8, 9]
    assert df["allocated_amount"].sum() == pytest.approx(100.0, abs=1e-4)


def test_allocate_non_binding_pool(contributions_csv, capsys):
    status = main(["allocate", str(contributions_csv), "--pool", "10000"])
    assert status == 0
    out = capsys.readouterr().out
    assert "Pool binding     : no" in out
    assert "Scaling factor   : 1.000000" in out


def test_allocate_invalid_pool_exits_2(contributions_csv):
    assert main(["allocate", str(contributions_csv), "--pool", "0"]) == 2


def test_allocate_requires_pool(contributions_csv):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["allocate", str(contributions_csv)])


def test_concentration(contributions_csv, capsys):
    status = main(["concentration", str(contributions_csv)])
    assert status == 0
    out = capsys.readouterr().out
    assert "project 7" in out
    assert "project 8" in out
    assert "[critical]" in out


def test_allocate_missing_csv_exits_2(tmp_path):
    missing = tmp_path / "nope.csv"
    assert main(["allocate", str(missing), "--pool", "10"]) == 2


def test_allocate_empty_csv_exits_2(tmp_path):
    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")
    assert main(["allocate", str(empty), "--pool", "10"]) == 2


def test_concentration_missing_csv_exits_2(tmp_path):
    assert main(["concentration", str(tmp_path / "nope.csv")]) == 2
