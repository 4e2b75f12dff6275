"""Seeded market simulation that exercises a pool and audits its invariants."""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from simpleswap.assets.ledger import InMemoryAssetLedger
from simpleswap.config import BASELINE_SIMULATION, SimulationSettings
from simpleswap.core.fixed_point import WAD, mul_div, to_wad
from simpleswap.core.invariants import check_pool_invariants, check_trade_product
from simpleswap.core.pool import Pool
from simpleswap.core.results import PoolResult
from simpleswap.core.state import PoolState
from simpleswap.market.arbitrageur import Arbitrageur
from simpleswap.market.price_process import GBMPriceProcess
from simpleswap.market.retail import RetailTrader

logger = logging.getLogger(__name__)

ASSET_A = "TKA"
ASSET_B = "TKB"
SEED_PROVIDER = "lp-0"
PROVIDERS = ("lp-1", "lp-2", "lp-3")
RETAIL = "retail"
ARBITRAGEUR = "arb"

# Starting balance of every simulated account, per asset
_FUNDING = 10**12 * WAD
_DEADLINE_WINDOW = 5


class _StepClock:
    """Clock that reads the simulation step."""

    def __init__(self) -> None:
        self.step = 0

    def __call__(self) -> int:
        return self.step


@dataclass
class SimulationResult:
    """Outcome of one simulated run."""
    seed: Optional[int]
    n_steps: int
    trades: int = 0
    rejected_trades: int = 0
    arb_trades: int = 0
    deposits: int = 0
    withdrawals: int = 0
    volume_a: int = 0
    volume_b: int = 0
    initial_product: int = 0
    final_state: Optional[PoolState] = None
    violations: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    @property
    def final_product(self) -> int:
        return 0 if self.final_state is None else self.final_state.product


class Simulation:
    """Drives retail flow, arbitrage and liquidity providers against one pool.

    After every operation the pool state is checked against the share and
    reserve invariants, the pool's custody balances are reconciled with
    its reserves, and every trade is checked not to decrease the product.
    """

    def __init__(self, settings: SimulationSettings = BASELINE_SIMULATION):
        self.settings = settings
        self.clock = _StepClock()
        self.ledger = InMemoryAssetLedger()
        self.pool = Pool(ASSET_A, ASSET_B, transfers=self.ledger, clock=self.clock)
        self.result = SimulationResult(seed=settings.seed, n_steps=settings.n_steps)

        self._rng = np.random.default_rng(settings.seed)
        self._retail = RetailTrader(
            arrival_rate=settings.retail_arrival_rate,
            mean_size=settings.retail_mean_size,
            size_sigma=settings.retail_size_sigma,
            buy_prob=settings.retail_buy_prob,
            seed=settings.seed,
        )
        self._arbitrageur = Arbitrageur()

        for account in (SEED_PROVIDER, RETAIL, ARBITRAGEUR, *PROVIDERS):
            self.ledger.mint(ASSET_A, account, _FUNDING)
            self.ledger.mint(ASSET_B, account, _FUNDING)

    @property
    def deadline(self) -> int:
        return self.clock.step + _DEADLINE_WINDOW

    def run(self) -> SimulationResult:
        """Seed the pool, run all steps and return the audited result."""
        reserve_a = to_wad(self.settings.initial_reserve_a)
        reserve_b = to_wad(self.settings.initial_reserve_b)
        self.pool.add_liquidity(
            SEED_PROVIDER, ASSET_A, ASSET_B, reserve_a, reserve_b, 0, 0, SEED_PROVIDER, self.deadline
        ).unwrap()
        self.result.deposits += 1
        self.result.initial_product = self.pool.k
        self._audit("seed deposit")

        prices = GBMPriceProcess(
            initial_price=reserve_b / reserve_a,
            mu=self.settings.gbm_mu,
            sigma=self.settings.gbm_sigma,
            dt=self.settings.gbm_dt,
            seed=self.settings.seed,
        )

        for step in range(1, self.settings.n_steps + 1):
            self.clock.step = step
            fair_price = prices.step()
            self._arbitrage(fair_price)
            for order in self._retail.generate_orders():
                path = [ASSET_A, ASSET_B] if order.side == "a_to_b" else [ASSET_B, ASSET_A]
                self._trade(RETAIL, order.amount_in, path, arb=False)
            if self._rng.random() < self.settings.lp_event_prob:
                self._provider_event()

        self.result.final_state = self.pool.state()
        logger.info(
            "Simulation finished: %s trades, %s deposits, %s withdrawals, %s violations",
            self.result.trades, self.result.deposits, self.result.withdrawals,
            len(self.result.violations),
        )
        return self.result

    def _arbitrage(self, fair_price: int) -> None:
        opportunity = self._arbitrageur.find_arb_opportunity(self.pool, fair_price)
        if opportunity is not None:
            self._trade(ARBITRAGEUR, opportunity.amount_in, [opportunity.asset_in, opportunity.asset_out], arb=True)

    def _trade(self, trader: str, amount_in: int, path: list[str], arb: bool) -> None:
        quoted = self.pool.amount_out_for_path(amount_in, path)
        if not quoted.ok:
            self.result.rejected_trades += 1
            return
        # 1% slippage tolerance on the quoted output
        min_amount_out = quoted.value * 99 // 100

        product_before = self.pool.k
        result = self.pool.trade(trader, amount_in, min_amount_out, path, trader, self.deadline)
        if not result.ok:
            self.result.rejected_trades += 1
            self._audit(f"rejected trade ({result.kind.value})")
            return

        receipt = result.value
        self.result.trades += 1
        self.result.arb_trades += int(arb)
        if receipt.asset_in == ASSET_A:
            self.result.volume_a += receipt.amount_in
        else:
            self.result.volume_b += receipt.amount_in

        report = check_trade_product(product_before, self.pool.k)
        self.result.violations.extend(f"step {self.clock.step}: {e}" for e in report.errors)
        self._audit("trade")

    def _provider_event(self) -> None:
        provider = PROVIDERS[int(self._rng.integers(len(PROVIDERS)))]
        held = self.pool.share_balance_of(provider)
        if held and self._rng.random() < 0.5:
            result: PoolResult = self.pool.remove_liquidity(
                provider, ASSET_A, ASSET_B, held // 2 or held, 0, 0, provider, self.deadline
            )
            self.result.withdrawals += int(result.ok)
            self._audit("withdrawal")
            return

        # Deposit a random fraction of the current reserves
        fraction = float(self._rng.uniform(0.01, 0.2))
        amount_a = mul_div(self.pool.reserve_a, int(fraction * 10**6), 10**6)
        amount_b = mul_div(self.pool.reserve_b, int(fraction * 10**6), 10**6) + 1
        result = self.pool.add_liquidity(
            provider, ASSET_A, ASSET_B, amount_a, amount_b, 0, 0, provider, self.deadline
        )
        self.result.deposits += int(result.ok)
        self._audit("deposit")

    def _audit(self, context: str) -> None:
        state = self.pool.state()
        report = check_pool_invariants(state)
        errors = list(report.errors)
        custody = self.ledger.custody
        if self.ledger.balance_of(ASSET_A, custody) != state.reserve_a:
            errors.append(f"custody {ASSET_A} differs from reserve_a")
        if self.ledger.balance_of(ASSET_B, custody) != state.reserve_b:
            errors.append(f"custody {ASSET_B} differs from reserve_b")
        self.result.violations.extend(f"step {self.clock.step} after {context}: {e}" for e in errors)


def run_simulation(settings: SimulationSettings = BASELINE_SIMULATION) -> SimulationResult:
    """Run one seeded simulation and return its audited result."""
    return Simulation(settings).run()
