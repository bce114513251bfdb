"""
Throughput Simulation

Time-stepped simulation of a transaction mix against a gas capacity:

scenario multiplier → demand per type at the current fee → TPS capped by
capacity → fee update → pending queue

Capacity is C = gas_per_second * tech_multiplier (Mgas/sec). Demand the chain
cannot serve joins a pending queue, which drains by at most 10% of the served
TPS per second:

Q(t+dt) = max(0, Q(t) + max(0, D - TPS) * dt - min(Q(t), 0.1 * TPS) * dt)

The fee follows the EIP-1559 update at twice the mainnet change rate so that
price effects are visible within one scenario. States are immutable; a run is
the tuple of every state from time 0 to the scenario's duration.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

import pandas as pd

from .fee_controller import (
    DEFAULT_BASELINE_FEE,
    DEFAULT_CONFIG,
    FeeMarketConfig,
    calculate_new_base_fee,
)
from .scenarios import DEFAULT_SCENARIO, DemandScenario, get_scenario
from .throughput import (
    TransactionMixEntry,
    calculate_average_gas,
    calculate_demand,
    calculate_throughput,
)
from .units import Gwei, TransactionTypeId, Utilization
from .validation import validate_positive

logger = logging.getLogger(__name__)

DEFAULT_GAS_PER_SECOND = 2.5  # mainnet, ~30M gas / 12 seconds
DEFAULT_TIMESTEP = 0.1
QUEUE_DRAIN_SHARE = 0.1

THROUGHPUT_FEE_CONFIG = DEFAULT_CONFIG.with_overrides(
    max_change_rate=2 * DEFAULT_CONFIG.max_change_rate
)


@dataclass(frozen=True)
class ThroughputConfig:
    """
    Inputs of a throughput simulation.

    Attributes:
        transaction_mix: Weighted transaction types submitted by users
        scenario: Demand pattern (object or registry id) and run duration
        gas_per_second: Base gas capacity in Mgas/sec
        tech_multiplier: Capacity multiplier (e.g. 4 for 4-lane parallel execution)
        fee_config: Fee market parameters; initial_base_fee is the fee at time 0
        baseline_fee: Fee at which demand is unaffected by price
    """
    transaction_mix: Tuple[TransactionMixEntry, ...]
    scenario: DemandScenario = DEFAULT_SCENARIO
    gas_per_second: float = DEFAULT_GAS_PER_SECOND
    tech_multiplier: float = 1.0
    fee_config: FeeMarketConfig = THROUGHPUT_FEE_CONFIG
    baseline_fee: float = DEFAULT_BASELINE_FEE

    def __post_init__(self):
        object.__setattr__(self, "transaction_mix", tuple(self.transaction_mix))
        if isinstance(self.scenario, str):
            object.__setattr__(self, "scenario", get_scenario(self.scenario))
        validate_positive(self.gas_per_second, "gas_per_second")
        validate_positive(self.tech_multiplier, "tech_multiplier")
        validate_positive(self.baseline_fee, "baseline_fee")

    @property
    def gas_capacity(self) -> float:
        """Effective capacity in Mgas/sec"""
        return self.gas_per_second * self.tech_multiplier


@dataclass(frozen=True)
class ThroughputState:
    """
    Chain activity at one instant of a throughput simulation.

    Rates (demand, TPS, gas) are per second. pending_txs is a count.
    """
    timestamp: float
    is_complete: bool
    gas_capacity: float
    base_fee: Gwei
    total_demand: float = 0.0
    demand_by_type: Mapping[TransactionTypeId, float] = field(default_factory=dict, hash=False)
    gas_used: float = 0.0
    utilization: Utilization = Utilization(0.0)
    tps: float = 0.0
    tps_by_type: Mapping[TransactionTypeId, float] = field(default_factory=dict, hash=False)
    pending_txs: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "demand_by_type", MappingProxyType(dict(self.demand_by_type)))
        object.__setattr__(self, "tps_by_type", MappingProxyType(dict(self.tps_by_type)))


def create_throughput_state(config: ThroughputConfig) -> ThroughputState:
    """State at time 0: nothing submitted, fee at config.fee_config.initial_base_fee"""
    return ThroughputState(
        timestamp=0.0,
        is_complete=False,
        gas_capacity=config.gas_capacity,
        base_fee=Gwei(config.fee_config.initial_base_fee),
    )


def simulate_step(
    prev: ThroughputState,
    config: ThroughputConfig,
    dt: float
) -> ThroughputState:
    """
    Advance the simulation by dt seconds.

    Demand is priced at the previous state's fee. Reaching the scenario's
    duration returns the previous state marked complete, with its timestamp
    set to the duration.

    Raises:
        ConfigurationError: If dt is not positive
    """
    dt = validate_positive(dt, "dt")
    duration = config.scenario.duration
    timestamp = prev.timestamp + dt

    if timestamp >= duration:
        return replace(prev, timestamp=float(duration), is_complete=True)

    multiplier = config.scenario.demand_multiplier(timestamp / duration)
    demand = calculate_demand(
        config.transaction_mix, prev.base_fee, multiplier, config.baseline_fee
    )

    gas_capacity = config.gas_capacity
    throughput = calculate_throughput(
        demand.total, gas_capacity, calculate_average_gas(config.transaction_mix)
    )

    tps_by_type = {
        type_id: (type_demand / demand.total) * throughput.tps if demand.total > 0 else 0.0
        for type_id, type_demand in demand.by_type.items()
    }

    new_base_fee = calculate_new_base_fee(prev.base_fee, throughput.utilization, config.fee_config)

    excess_demand = max(0.0, demand.total - throughput.tps)
    processed_from_queue = min(prev.pending_txs, throughput.tps * QUEUE_DRAIN_SHARE)
    pending_txs = max(0.0, prev.pending_txs + excess_demand * dt - processed_from_queue * dt)

    return ThroughputState(
        timestamp=timestamp,
        is_complete=False,
        gas_capacity=gas_capacity,
        base_fee=new_base_fee,
        total_demand=demand.total,
        demand_by_type=demand.by_type,
        gas_used=throughput.gas_used,
        utilization=throughput.utilization,
        tps=throughput.tps,
        tps_by_type=tps_by_type,
        pending_txs=pending_txs,
    )


def run_throughput_simulation(
    config: ThroughputConfig,
    timestep: float = DEFAULT_TIMESTEP
) -> Tuple[ThroughputState, ...]:
    """
    Run from time 0 until the scenario's duration.

    Returns:
        Every state in order: the initial state, one per step, and a final
        complete state

    Raises:
        ConfigurationError: If timestep is not positive
    """
    timestep = validate_positive(timestep, "timestep")

    state = create_throughput_state(config)
    states = [state]
    while not state.is_complete:
        state = simulate_step(state, config, timestep)
        states.append(state)

    logger.debug(
        f"Throughput run over {config.scenario.id}: {len(states)} states, "
        f"final fee {state.base_fee:.4f} gwei, pending {state.pending_txs:.1f}"
    )
    return tuple(states)


def throughput_history_to_dataframe(
    states: Sequence[ThroughputState],
    mix: Optional[Sequence[TransactionMixEntry]] = None
) -> pd.DataFrame:
    """
    Throughput history as a DataFrame, one row per state.

    Columns: timestamp, tps, utilization, base_fee, pending_txs,
    total_demand, gas_used, gas_capacity. When a mix is given, one
    tps_<type id> column per mix entry is added.
    """
    columns = [
        'timestamp', 'tps', 'utilization', 'base_fee', 'pending_txs',
        'total_demand', 'gas_used', 'gas_capacity',
    ]
    df = pd.DataFrame(
        {column: [getattr(s, column) for s in states] for column in columns},
        columns=columns,
        dtype=float,
    )
    for entry in mix or ():
        type_id = entry.transaction_type.id
        df[f'tps_{type_id}'] = [s.tps_by_type.get(type_id, 0.0) for s in states]
    return df
