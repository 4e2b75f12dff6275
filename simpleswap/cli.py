"""Command-line interface for a SQLite-backed SimpleSwap pool."""

import argparse
import sys
from decimal import Decimal
from typing import Optional

from simpleswap.assets.ledger import POOL_CUSTODY, InMemoryAssetLedger
from simpleswap.config import build_simulation_settings, resolve_settings
from simpleswap.core.fixed_point import format_wad, to_wad
from simpleswap.core.guard import system_clock
from simpleswap.core.pool import Pool
from simpleswap.core.results import PoolResult
from simpleswap.logger import configure_logging
from simpleswap.market.simulation import run_simulation
from simpleswap.storage.database import PoolDatabase


class _CommandError(Exception):
    """User-facing failure that ends the command with exit code 1."""


def _amount(text: str) -> int:
    """argparse type: token amount in whole units -> WAD int."""
    try:
        return to_wad(Decimal(text))
    except (ValueError, ArithmeticError):
        raise argparse.ArgumentTypeError(f"invalid token amount: {text!r}") from None


def _open(args: argparse.Namespace) -> tuple[PoolDatabase, Pool, InMemoryAssetLedger]:
    db = PoolDatabase(args.db)
    state = db.load_state()
    if state is None:
        raise _CommandError(f"No pool in {args.db}. Run 'simpleswap init' first.")
    ledger = db.load_ledger(POOL_CUSTODY)
    try:
        pool = Pool.from_state(state, transfers=ledger)
    except ValueError as exc:
        raise _CommandError(f"Cannot load pool from {args.db}: {exc}") from exc
    return db, pool, ledger


def _deadline(args: argparse.Namespace) -> int:
    if args.deadline is not None:
        return args.deadline
    return system_clock() + args.deadline_window


def _check(result: PoolResult):
    if not result.ok:
        raise _CommandError(str(result.error))
    return result.value


def init_command(args: argparse.Namespace) -> int:
    """Create an empty pool for an asset pair."""
    db = PoolDatabase(args.db)
    if db.has_pool():
        raise _CommandError(f"A pool already exists in {args.db}")
    ledger = InMemoryAssetLedger(custody=POOL_CUSTODY)
    try:
        pool = Pool(args.asset_a, args.asset_b, transfers=ledger)
    except ValueError as exc:
        raise _CommandError(str(exc)) from exc
    db.save(pool.state(), ledger)
    print(f"Created pool {pool.asset_a}/{pool.asset_b} in {args.db}")
    return 0


def mint_command(args: argparse.Namespace) -> int:
    """Credit test balances of a pool asset to an account."""
    db, pool, ledger = _open(args)
    if args.asset not in pool.pair:
        raise _CommandError(f"{args.asset} is not traded by this pool")
    ledger.mint(args.asset, args.holder, args.amount)
    db.save(pool.state(), ledger)
    print(f"Minted {format_wad(args.amount)} {args.asset} to {args.holder}")
    return 0


def add_liquidity_command(args: argparse.Namespace) -> int:
    db, pool, ledger = _open(args)
    receipt = _check(pool.add_liquidity(
        args.sender,
        pool.asset_a,
        pool.asset_b,
        args.amount_a,
        args.amount_b,
        args.min_a,
        args.min_b,
        args.recipient or args.sender,
        _deadline(args),
    ))
    db.save(pool.state(), ledger)
    print(
        f"Deposited {format_wad(receipt.amount_a)} {pool.asset_a} + "
        f"{format_wad(receipt.amount_b)} {pool.asset_b}, "
        f"minted {format_wad(receipt.shares)} shares"
    )
    return 0


def remove_liquidity_command(args: argparse.Namespace) -> int:
    db, pool, ledger = _open(args)
    receipt = _check(pool.remove_liquidity(
        args.sender,
        pool.asset_a,
        pool.asset_b,
        args.shares,
        args.min_a,
        args.min_b,
        args.recipient or args.sender,
        _deadline(args),
    ))
    db.save(pool.state(), ledger)
    print(
        f"Burned {format_wad(receipt.shares_burned)} shares for "
        f"{format_wad(receipt.amount_a)} {pool.asset_a} + {format_wad(receipt.amount_b)} {pool.asset_b}"
    )
    return 0


def swap_command(args: argparse.Namespace) -> int:
    db, pool, ledger = _open(args)
    asset_out = args.asset_out
    if asset_out is None:
        if args.asset_in not in pool.pair:
            raise _CommandError(f"{args.asset_in} is not traded by this pool")
        asset_out = pool.pair.other(args.asset_in)
    path = [args.asset_in, asset_out]
    receipt = _check(pool.trade(
        args.sender,
        args.amount_in,
        args.min_out,
        path,
        args.recipient or args.sender,
        _deadline(args),
    ))
    db.save(pool.state(), ledger)
    print(
        f"Swapped {format_wad(receipt.amount_in)} {receipt.asset_in} for "
        f"{format_wad(receipt.amount_out)} {receipt.asset_out}"
    )
    return 0


def price_command(args: argparse.Namespace) -> int:
    _, pool, _ = _open(args)
    base = args.base or pool.asset_a
    if base not in pool.pair:
        raise _CommandError(f"{base} is not traded by this pool")
    other = pool.pair.other(base)
    price = _check(pool.quote(base, other))
    print(f"1 {base} = {format_wad(price)} {other}")
    return 0


def show_command(args: argparse.Namespace) -> int:
    """Print reserves, share holders and ledger balances."""
    _, pool, ledger = _open(args)
    print(f"Pool {pool.asset_a}/{pool.asset_b}")
    print(f"  reserve {pool.asset_a}: {format_wad(pool.reserve_a)}")
    print(f"  reserve {pool.asset_b}: {format_wad(pool.reserve_b)}")
    print(f"  total shares: {format_wad(pool.total_shares)}")
    for holder, balance in sorted(pool.state().share_balances.items()):
        print(f"    {holder}: {format_wad(balance)}")
    print("Balances:")
    for asset, holder, amount in ledger.balances():
        print(f"  {holder} {asset}: {format_wad(amount)}")
    return 0


def simulate_command(args: argparse.Namespace) -> int:
    """Run a seeded market simulation against a fresh in-memory pool."""
    settings = build_simulation_settings(
        n_steps=args.steps,
        seed=args.seed,
        gbm_sigma=args.volatility,
        retail_mean_size=args.retail_size,
    )
    print(f"Running {settings.n_steps} steps (seed={settings.seed})...")
    result = run_simulation(settings)
    state = result.final_state
    print(f"Trades: {result.trades} ({result.arb_trades} arbitrage, {result.rejected_trades} rejected)")
    print(f"Deposits: {result.deposits}, withdrawals: {result.withdrawals}")
    print(f"Final reserves: {format_wad(state.reserve_a)} / {format_wad(state.reserve_b)}")
    print(f"Reserve product grew: {result.final_product >= result.initial_product}")
    if not result.valid:
        print("Invariant violations:")
        for violation in result.violations:
            print(f"  - {violation}")
        return 1
    print("All invariants held.")
    return 0


def _add_request_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--recipient", default=None, help="Receiving account (defaults to sender)")
    parser.add_argument(
        "--deadline",
        type=int,
        default=None,
        help="UNIX deadline (defaults to now + configured window)",
    )


def build_parser() -> argparse.ArgumentParser:
    settings = resolve_settings()
    parser = argparse.ArgumentParser(
        description="SimpleSwap - constant-product liquidity pool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  simpleswap init TKA TKB
  simpleswap mint TKA alice 1000
  simpleswap add-liquidity alice 100 200
  simpleswap swap bob 10 --from TKA --min-out 18
  simpleswap price --base TKA
        """,
    )
    parser.add_argument("--db", default=settings.db_path, help="SQLite database path")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.set_defaults(deadline_window=settings.deadline_window)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="Create a pool for an asset pair")
    init_parser.add_argument("asset_a")
    init_parser.add_argument("asset_b")
    init_parser.set_defaults(func=init_command)

    mint_parser = subparsers.add_parser("mint", help="Credit test balances to an account")
    mint_parser.add_argument("asset")
    mint_parser.add_argument("holder")
    mint_parser.add_argument("amount", type=_amount)
    mint_parser.set_defaults(func=mint_command)

    add_parser = subparsers.add_parser("add-liquidity", help="Deposit both assets for shares")
    add_parser.add_argument("sender")
    add_parser.add_argument("amount_a", type=_amount, help="Desired amount of asset A")
    add_parser.add_argument("amount_b", type=_amount, help="Desired amount of asset B")
    add_parser.add_argument("--min-a", type=_amount, default=0)
    add_parser.add_argument("--min-b", type=_amount, default=0)
    _add_request_options(add_parser)
    add_parser.set_defaults(func=add_liquidity_command)

    remove_parser = subparsers.add_parser("remove-liquidity", help="Burn shares for reserves")
    remove_parser.add_argument("sender")
    remove_parser.add_argument("shares", type=_amount)
    remove_parser.add_argument("--min-a", type=_amount, default=0)
    remove_parser.add_argument("--min-b", type=_amount, default=0)
    _add_request_options(remove_parser)
    remove_parser.set_defaults(func=remove_liquidity_command)

    swap_parser = subparsers.add_parser("swap", help="Trade an exact input amount")
    swap_parser.add_argument("sender")
    swap_parser.add_argument("amount_in", type=_amount)
    swap_parser.add_argument("--from", dest="asset_in", required=True, help="Asset paid")
    swap_parser.add_argument("--to", dest="asset_out", default=None, help="Asset received")
    swap_parser.add_argument(
        "--min-out",
        type=_amount,
        required=True,
        help="Minimum acceptable output",
    )
    _add_request_options(swap_parser)
    swap_parser.set_defaults(func=swap_command)

    price_parser = subparsers.add_parser("price", help="Show the spot price")
    price_parser.add_argument("--base", default=None, help="Asset to price (defaults to asset A)")
    price_parser.set_defaults(func=price_command)

    show_parser = subparsers.add_parser("show", help="Show reserves, shares and balances")
    show_parser.set_defaults(func=show_command)

    sim_parser = subparsers.add_parser("simulate", help="Run a market simulation and audit invariants")
    sim_parser.add_argument("--steps", type=int, default=None)
    sim_parser.add_argument("--seed", type=int, default=None)
    sim_parser.add_argument("--volatility", type=float, default=None, help="Per-step GBM sigma")
    sim_parser.add_argument("--retail-size", type=float, default=None, help="Mean retail order size")
    sim_parser.set_defaults(func=simulate_command)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging(args.log_level)
    try:
        return args.func(args)
    except _CommandError as exc:
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
