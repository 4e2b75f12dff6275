"""Shared configuration for the CLI, storage and simulations."""

from dataclasses import dataclass, replace
import os


@dataclass(frozen=True)
class PoolSettings:
    db_path: str
    deadline_window: int
    log_level: str


@dataclass(frozen=True)
class SimulationSettings:
    n_steps: int
    initial_reserve_a: str
    initial_reserve_b: str
    gbm_mu: float
    gbm_sigma: float
    gbm_dt: float
    retail_arrival_rate: float
    retail_mean_size: float
    retail_size_sigma: float
    retail_buy_prob: float
    lp_event_prob: float
    seed: int | None


DEFAULT_SETTINGS = PoolSettings(
    db_path="data/simpleswap.db",
    deadline_window=300,
    log_level="WARNING",
)


# Reserves are in whole token units, matching the (100, 200) reference pool
BASELINE_SIMULATION = SimulationSettings(
    n_steps=1000,
    initial_reserve_a="100",
    initial_reserve_b="200",
    gbm_mu=0.0,
    gbm_sigma=0.001,
    gbm_dt=1.0,
    retail_arrival_rate=0.8,
    retail_mean_size=2.0,
    retail_size_sigma=1.2,
    retail_buy_prob=0.5,
    lp_event_prob=0.05,
    seed=None,
)


def resolve_settings() -> PoolSettings:
    """Resolve settings from SIMPLESWAP_* environment variables over the defaults."""
    return PoolSettings(
        db_path=os.environ.get("SIMPLESWAP_DB", DEFAULT_SETTINGS.db_path),
        deadline_window=int(
            os.environ.get("SIMPLESWAP_DEADLINE_WINDOW", str(DEFAULT_SETTINGS.deadline_window))
        ),
        log_level=os.environ.get("SIMPLESWAP_LOG_LEVEL", DEFAULT_SETTINGS.log_level).upper(),
    )


def build_simulation_settings(
    *,
    n_steps: int | None = None,
    seed: int | None = None,
    gbm_sigma: float | None = None,
    retail_mean_size: float | None = None,
) -> SimulationSettings:
    """Baseline simulation settings with explicit overrides."""
    overrides = {
        "n_steps": n_steps,
        "seed": seed,
        "gbm_sigma": gbm_sigma,
        "retail_mean_size": retail_mean_size,
    }
    return replace(
        BASELINE_SIMULATION,
        **{name: value for name, value in overrides.items() if value is not None},
    )
