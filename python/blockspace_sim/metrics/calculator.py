"""
Simulation Statistics

Reduces a completed run to summary metrics, for block histories and for
throughput runs.

Fee volatility is the coefficient of variation of the per-block fee series:
CV = σ(F) / mean(F), with σ the population standard deviation.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Sequence

import numpy as np

from ..core.fee_controller import DEFAULT_CONFIG, FeeMarketConfig
from ..core.simulation_engine import SimulationState
from ..core.throughput_simulation import ThroughputState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationStats:
    """Summary of a run's block history"""
    average_base_fee: float
    average_utilization: float
    blocks_above_target: int
    blocks_below_target: int
    fee_volatility: float
    min_base_fee: float
    max_base_fee: float
    block_count: int = 0
    peak_utilization: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def calculate_stats(
    state: SimulationState,
    config: FeeMarketConfig = DEFAULT_CONFIG
) -> SimulationStats:
    """
    Calculate summary statistics over the block history.

    Blocks exactly at the target utilization count as neither above nor below.
    With an empty history the fee statistics report the current base fee and
    everything else is zero.
    """
    if not state.blocks:
        fee = float(state.current_base_fee)
        return SimulationStats(
            average_base_fee=fee,
            average_utilization=0.0,
            blocks_above_target=0,
            blocks_below_target=0,
            fee_volatility=0.0,
            min_base_fee=fee,
            max_base_fee=fee,
        )

    fees = np.array([block.base_fee for block in state.blocks], dtype=float)
    utilizations = np.array([block.utilization for block in state.blocks], dtype=float)

    average_fee = float(np.mean(fees))
    volatility = float(np.std(fees) / average_fee) if average_fee > 0 else 0.0

    stats = SimulationStats(
        average_base_fee=average_fee,
        average_utilization=float(np.mean(utilizations)),
        blocks_above_target=int(np.sum(utilizations > config.target_utilization)),
        blocks_below_target=int(np.sum(utilizations < config.target_utilization)),
        fee_volatility=volatility,
        min_base_fee=float(np.min(fees)),
        max_base_fee=float(np.max(fees)),
        block_count=len(state.blocks),
        peak_utilization=float(np.max(utilizations)),
    )

    logger.debug(
        f"Stats over {stats.block_count} blocks: avg fee {stats.average_base_fee:.4f}, "
        f"avg utilization {stats.average_utilization:.3f}"
    )
    return stats


WARMUP_FRACTION = 0.1


@dataclass(frozen=True)
class ThroughputStats:
    """Summary of a throughput run; minimums skip the warm-up period"""
    average_tps: float
    peak_tps: float
    min_tps: float
    average_utilization: float
    peak_utilization: float
    average_base_fee: float
    peak_base_fee: float
    min_base_fee: float
    peak_pending_txs: float
    total_tx_processed: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def calculate_throughput_stats(
    states: Sequence[ThroughputState],
    config: FeeMarketConfig = DEFAULT_CONFIG
) -> ThroughputStats:
    """
    Calculate summary statistics over a throughput run.

    The first 10% of states (rounded down) are excluded from min_tps and
    min_base_fee. total_tx_processed is the sum of TPS over all states.
    With no states every statistic is zero and the fee statistics report
    config.initial_base_fee.
    """
    if len(states) == 0:
        fee = float(config.initial_base_fee)
        return ThroughputStats(
            average_tps=0.0,
            peak_tps=0.0,
            min_tps=0.0,
            average_utilization=0.0,
            peak_utilization=0.0,
            average_base_fee=fee,
            peak_base_fee=fee,
            min_base_fee=fee,
            peak_pending_txs=0.0,
            total_tx_processed=0.0,
        )

    tps = np.array([s.tps for s in states], dtype=float)
    utilizations = np.array([s.utilization for s in states], dtype=float)
    fees = np.array([s.base_fee for s in states], dtype=float)
    pending = np.array([s.pending_txs for s in states], dtype=float)

    warmup_cutoff = int(np.floor(len(states) * WARMUP_FRACTION))

    stats = ThroughputStats(
        average_tps=float(np.mean(tps)),
        peak_tps=float(np.max(tps)),
        min_tps=float(np.min(tps[warmup_cutoff:])),
        average_utilization=float(np.mean(utilizations)),
        peak_utilization=float(np.max(utilizations)),
        average_base_fee=float(np.mean(fees)),
        peak_base_fee=float(np.max(fees)),
        min_base_fee=float(np.min(fees[warmup_cutoff:])),
        peak_pending_txs=float(np.max(pending)),
        total_tx_processed=float(np.sum(tps)),
    )

    logger.debug(
        f"Throughput stats over {len(states)} states: avg TPS {stats.average_tps:.2f}, "
        f"peak pending {stats.peak_pending_txs:.1f}"
    )
    return stats
