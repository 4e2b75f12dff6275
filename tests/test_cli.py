"""End-to-end tests for the simpleswap command line."""

import pytest

from simpleswap.cli import main
from simpleswap.core.state import PoolState
from simpleswap.storage.database import PoolDatabase


@pytest.fixture
def run(tmp_path, capsys):
    """Run the CLI against a temporary database; returns (exit code, stdout)."""
    db_path = str(tmp_path / "pool.db")

    def _run(*argv):
        code = main(["--db", db_path, *argv])
        return code, capsys.readouterr().out

    return _run


@pytest.fixture
def seeded(run):
    run("init", "TKA", "TKB")
    for holder in ("alice", "bob"):
        run("mint", "TKA", holder, "1000")
        run("mint", "TKB", holder, "1000")
    code, out = run("add-liquidity", "alice", "100", "200")
    assert code == 0, out
    return run


def test_no_command_prints_help(run):
    code, out = run()
    assert code == 1
    assert "usage" in out.lower()


def test_init(run):
    code, out = run("init", "TKA", "TKB")
    assert code == 0
    assert "Created pool TKA/TKB" in out

    code, out = run("init", "TKA", "TKB")
    assert code == 1
    assert "already exists" in out


def test_init_rejects_identical_assets(run):
    code, out = run("init", "TKA", "TKA")
    assert code == 1
    assert "pair assets must differ" in out

    code, out = run("price")
    assert "Run 'simpleswap init' first" in out


def test_corrupted_database_reports_error(run, tmp_path):
    PoolDatabase(str(tmp_path / "pool.db")).save(PoolState("TKA", "TKB", reserve_a=1, reserve_b=0, total_shares=0))

    code, out = run("price")
    assert code == 1
    assert "Cannot load pool" in out
    assert "Inconsistent pool state" in out


def test_command_without_pool(run):
    code, out = run("price")
    assert code == 1
    assert "Run 'simpleswap init' first" in out


def test_mint_unknown_asset(run):
    run("init", "TKA", "TKB")
    code, out = run("mint", "XYZ", "alice", "5")
    assert code == 1
    assert "XYZ is not traded" in out


def test_add_liquidity_output(run):
    run("init", "TKA", "TKB")
    run("mint", "TKA", "alice", "1000")
    run("mint", "TKB", "alice", "1000")
    code, out = run("add-liquidity", "alice", "100", "200")
    assert code == 0
    assert "Deposited 100 TKA + 200 TKB, minted 141.42135623730950488 shares" in out


def test_price(seeded):
    assert "1 TKA = 2 TKB" in seeded("price")[1]
    assert "1 TKB = 0.5 TKA" in seeded("price", "--base", "TKB")[1]


def test_swap_persists_between_runs(seeded):
    code, out = seeded("swap", "bob", "10", "--from", "TKA", "--min-out", "18")
    assert code == 0
    assert "Swapped 10 TKA for 18.181818181818181818 TKB" in out

    _, out = seeded("show")
    assert "reserve TKA: 110" in out
    assert "bob TKB: 1018.181818181818181818" in out


def test_swap_below_minimum_output(seeded):
    code, out = seeded("swap", "bob", "10", "--from", "TKA", "--min-out", "19")
    assert code == 1
    assert "insufficient_output_amount" in out

    _, out = seeded("show")
    assert "reserve TKA: 100" in out
    assert "bob TKA: 1000" in out


def test_swap_expired_deadline(seeded):
    code, out = seeded("swap", "bob", "1", "--from", "TKA", "--min-out", "0", "--deadline", "1")
    assert code == 1
    assert "expired" in out


def test_swap_unknown_asset(seeded):
    code, out = seeded("swap", "bob", "1", "--from", "XYZ", "--min-out", "0")
    assert code == 1
    assert "XYZ is not traded" in out


def test_remove_liquidity(seeded):
    code, out = seeded("remove-liquidity", "alice", "70.71067811865475244")
    assert code == 0
    assert "for 50 TKA + 100 TKB" in out

    code, out = seeded("remove-liquidity", "bob", "1")
    assert code == 1
    assert "insufficient_shares" in out


def test_invalid_amount_rejected_by_parser(run):
    with pytest.raises(SystemExit):
        run("mint", "TKA", "alice", "-5")


def test_simulate(run):
    code, out = run("simulate", "--steps", "50", "--seed", "3")
    assert code == 0
    assert "Running 50 steps (seed=3)" in out
    assert "All invariants held." in out
