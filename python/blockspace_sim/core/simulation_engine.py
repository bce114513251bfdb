"""
Simulation Engine Implementation

Closed-loop fee market simulation, one block at a time:

fee → demand response → noisy utilization → block record → next fee

State is an immutable value. Every transition returns a new SimulationState
and leaves its input untouched, so callers can branch, replay or discard runs
freely. Randomness is injected either as an explicit sample sequence
(random_seeds) or as a numpy Generator; identical inputs give identical
histories.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .fee_controller import (
    DEFAULT_CONFIG,
    DEFAULT_NOISE_LEVEL,
    FeeMarketConfig,
    calculate_demand_response,
    calculate_new_base_fee,
    generate_utilization,
)
from .scenarios import DemandScenario, get_scenario
from .units import Gwei, Utilization, to_utilization
from .validation import (
    BlockspaceSimError,
    SeedSequenceError,
    finite_inputs,
    validate_count,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockRecord:
    """One produced block: its number, the fee it was built at and its utilization"""
    number: int
    base_fee: Gwei
    utilization: Utilization


@dataclass(frozen=True)
class SimulationState:
    """
    Fee market state after block_number blocks.

    Invariant: len(blocks) == block_number.
    """
    block_number: int
    current_base_fee: Gwei
    blocks: Tuple[BlockRecord, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "blocks", tuple(self.blocks))
        if len(self.blocks) != self.block_number:
            raise BlockspaceSimError(
                f"block_number ({self.block_number}) does not match "
                f"history length ({len(self.blocks)})"
            )


def create_initial_state(config: FeeMarketConfig = DEFAULT_CONFIG) -> SimulationState:
    """State before the first block: no history, fee at config.initial_base_fee"""
    return SimulationState(block_number=0, current_base_fee=Gwei(config.initial_base_fee))


@finite_inputs("utilization")
def _produce_block(
    state_number: int,
    base_fee: Gwei,
    utilization: float,
    config: FeeMarketConfig
) -> Tuple[BlockRecord, Gwei]:
    clamped = to_utilization(utilization)
    record = BlockRecord(number=state_number + 1, base_fee=base_fee, utilization=clamped)
    return record, calculate_new_base_fee(base_fee, clamped, config)


def process_block(
    state: SimulationState,
    utilization: float,
    config: FeeMarketConfig = DEFAULT_CONFIG
) -> SimulationState:
    """
    Record a block at the current fee and advance the fee.

    Args:
        state: State before the block (not modified)
        utilization: Observed utilization; clamped to [0, 1] before storage
        config: Fee market parameters

    Returns:
        New state with one more block

    Each call copies the history, so stepping n blocks one call at a time
    costs O(n^2). Use run_demand_path for long runs.

    Raises:
        NonFiniteValueError: If utilization is NaN
    """
    record, next_fee = _produce_block(
        state.block_number, state.current_base_fee, utilization, config
    )

    return SimulationState(
        block_number=record.number,
        current_base_fee=next_fee,
        blocks=state.blocks + (record,),
    )


def _sample_source(
    block_count: int,
    random_seeds: Optional[Sequence[float]],
    rng: Optional[np.random.Generator]
) -> Iterator[float]:
    if random_seeds is not None:
        if len(random_seeds) < block_count:
            raise SeedSequenceError(
                f"Need {block_count} random samples, got {len(random_seeds)}"
            )
        return iter(random_seeds[:block_count])

    if rng is None:
        rng = np.random.default_rng()
    return iter(rng.random(block_count))


def run_demand_path(
    demand_levels: Sequence[float],
    config: FeeMarketConfig = DEFAULT_CONFIG,
    noise_level: float = DEFAULT_NOISE_LEVEL,
    random_seeds: Optional[Sequence[float]] = None,
    rng: Optional[np.random.Generator] = None,
    initial_state: Optional[SimulationState] = None,
    baseline_fee: Optional[float] = None
) -> SimulationState:
    """
    Run one block per entry of demand_levels.

    Args:
        demand_levels: Nominal demand per block (before price response)
        config: Fee market parameters
        noise_level: Half-width of the uniform utilization noise
        random_seeds: Explicit samples in [0, 1], consumed in order; must
            have at least len(demand_levels) entries
        rng: Generator used when random_seeds is None (fresh if None)
        initial_state: State to continue from (initial state if None)
        baseline_fee: Fee at which demand is unaffected by price
            (config.initial_base_fee if None)

    Returns:
        Final state

    Raises:
        SeedSequenceError: If random_seeds is too short
    """
    demand_levels = list(demand_levels)
    state = initial_state if initial_state is not None else create_initial_state(config)
    if baseline_fee is None:
        baseline_fee = config.initial_base_fee

    samples = _sample_source(len(demand_levels), random_seeds, rng)

    # Same transitions as process_block, with the history built once
    number, base_fee = state.block_number, state.current_base_fee
    records = []
    for demand_level, sample in zip(demand_levels, samples):
        realized_demand = calculate_demand_response(demand_level, base_fee, baseline_fee)
        utilization = generate_utilization(realized_demand, noise_level, sample)
        record, base_fee = _produce_block(number, base_fee, utilization, config)
        records.append(record)
        number = record.number

    state = SimulationState(
        block_number=number,
        current_base_fee=base_fee,
        blocks=state.blocks + tuple(records),
    )

    logger.debug(
        f"Ran {len(demand_levels)} blocks: block {state.block_number}, "
        f"base fee {state.current_base_fee:.4f} gwei"
    )
    return state


def run_simulation(
    block_count: int,
    demand_level: float,
    config: FeeMarketConfig = DEFAULT_CONFIG,
    noise_level: float = DEFAULT_NOISE_LEVEL,
    random_seeds: Optional[Sequence[float]] = None,
    rng: Optional[np.random.Generator] = None
) -> SimulationState:
    """
    Run block_count blocks at a constant nominal demand level from the initial state.

    Raises:
        InvalidCountError: If block_count is negative or not an integer
        SeedSequenceError: If random_seeds has fewer than block_count entries
    """
    block_count = validate_count(block_count, "block_count")
    return run_demand_path(
        [demand_level] * block_count,
        config=config,
        noise_level=noise_level,
        random_seeds=random_seeds,
        rng=rng,
    )


def scenario_demand_levels(
    scenario: Union[DemandScenario, str],
    block_count: int,
    base_demand: float
) -> np.ndarray:
    """
    Per-block demand levels of a scenario.

    Block i (0-based) runs at clamp(base_demand * multiplier(i / block_count), 0, 1).
    """
    block_count = validate_count(block_count, "block_count")
    if isinstance(scenario, str):
        scenario = get_scenario(scenario)

    multipliers = np.array(
        [scenario.demand_multiplier(i / block_count) for i in range(block_count)],
        dtype=float,
    )
    return np.clip(base_demand * multipliers, 0.0, 1.0)


def run_scenario(
    scenario: Union[DemandScenario, str],
    block_count: int,
    base_demand: float,
    config: FeeMarketConfig = DEFAULT_CONFIG,
    noise_level: float = DEFAULT_NOISE_LEVEL,
    random_seeds: Optional[Sequence[float]] = None,
    rng: Optional[np.random.Generator] = None
) -> SimulationState:
    """
    Run a demand scenario (object or registry id) from the initial state.

    Raises:
        UnknownScenarioError: If a scenario id is not registered
        InvalidCountError: If block_count is negative or not an integer
    """
    levels = scenario_demand_levels(scenario, block_count, base_demand)
    return run_demand_path(
        levels,
        config=config,
        noise_level=noise_level,
        random_seeds=random_seeds,
        rng=rng,
    )


def history_to_dataframe(state: SimulationState) -> pd.DataFrame:
    """
    Block history as a DataFrame with columns number, base_fee, utilization.

    Built in one pass over the history, linear in the number of blocks.
    """
    return pd.DataFrame(
        {
            'number': [block.number for block in state.blocks],
            'base_fee': [block.base_fee for block in state.blocks],
            'utilization': [block.utilization for block in state.blocks],
        },
        columns=['number', 'base_fee', 'utilization'],
    ).astype({'number': 'int64', 'base_fee': 'float64', 'utilization': 'float64'})
