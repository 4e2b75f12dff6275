"""Market simulation components."""

from simpleswap.market.arbitrageur import Arbitrageur
from simpleswap.market.price_process import GBMPriceProcess
from simpleswap.market.retail import RetailTrader
from simpleswap.market.simulation import Simulation, SimulationResult, run_simulation

__all__ = [
    "Arbitrageur",
    "GBMPriceProcess",
    "RetailTrader",
    "Simulation",
    "SimulationResult",
    "run_simulation",
]
