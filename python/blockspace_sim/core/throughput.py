"""
Throughput Model

Gas-based throughput of a weighted transaction mix:

ḡ = Σ_j g_j * w_j / Σ_j w_j                (average gas per transaction)
TPS_max = C * 10^6 / ḡ                     (C: gas capacity in Mgas/sec)
TPS = min(D, TPS_max),  u = TPS / TPS_max  (D: demand in TPS)

Demand per type at base fee F under scenario multiplier m:

D_j = base_demand_j * (w_j / Σw) * n * m * clamp(F_base / F, 0, 1)

where n is the number of entries in the mix, so an evenly weighted mix
reproduces each type's base demand.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Sequence

from ..data.catalog import TransactionType
from .fee_controller import DEFAULT_BASELINE_FEE, calculate_demand_response
from .units import Utilization, gas_to_mgas, mgas_to_gas, to_utilization
from .validation import ConfigurationError, validate_finite, validate_positive

logger = logging.getLogger(__name__)

DEFAULT_AVERAGE_GAS = 21_000  # simple transfer


@dataclass(frozen=True)
class TransactionMixEntry:
    """A transaction type and its relative weight in a mix"""
    transaction_type: TransactionType
    weight: float

    def __post_init__(self):
        if validate_finite(self.weight, f"{self.transaction_type.id}: weight") < 0:
            raise ConfigurationError(
                f"{self.transaction_type.id}: weight must be non-negative, got {self.weight}"
            )


@dataclass(frozen=True)
class Throughput:
    tps: float
    utilization: Utilization
    gas_used: float  # Mgas/sec


@dataclass(frozen=True)
class DemandBreakdown:
    total: float
    by_type: Dict[str, float]


def _total_weight(mix: Sequence[TransactionMixEntry]) -> float:
    return sum(entry.weight for entry in mix)


def calculate_average_gas(mix: Sequence[TransactionMixEntry]) -> float:
    """Weight-normalized average gas per transaction (21000 for an empty mix)"""
    total_weight = _total_weight(mix)
    if total_weight == 0:
        return float(DEFAULT_AVERAGE_GAS)

    return sum(
        entry.transaction_type.average_gas * (entry.weight / total_weight)
        for entry in mix
    )


def calculate_max_tps(gas_capacity_mgas: float, avg_gas_per_tx: float) -> float:
    """
    Maximum transactions per second a gas capacity sustains.

    Raises:
        ConfigurationError: If avg_gas_per_tx is not positive
    """
    avg_gas_per_tx = validate_positive(avg_gas_per_tx, "avg_gas_per_tx")
    return mgas_to_gas(gas_capacity_mgas) / avg_gas_per_tx


def calculate_throughput(
    demand_tps: float,
    gas_capacity_mgas: float,
    avg_gas_per_tx: float
) -> Throughput:
    """
    Realized throughput: demand capped at capacity.

    Args:
        demand_tps: Transactions per second users submit
        gas_capacity_mgas: Capacity in Mgas/sec
        avg_gas_per_tx: Average gas per transaction

    Returns:
        Throughput with tps, utilization in [0, 1] and gas used in Mgas/sec
    """
    max_tps = calculate_max_tps(gas_capacity_mgas, avg_gas_per_tx)
    tps = max(0.0, min(demand_tps, max_tps))
    utilization = to_utilization(tps / max_tps) if max_tps > 0 else Utilization(0.0)

    return Throughput(
        tps=tps,
        utilization=utilization,
        gas_used=gas_to_mgas(tps * avg_gas_per_tx),
    )


def calculate_demand(
    mix: Sequence[TransactionMixEntry],
    base_fee: float,
    demand_multiplier: float,
    baseline_fee: float = DEFAULT_BASELINE_FEE
) -> DemandBreakdown:
    """
    Demand in TPS per transaction type at the current base fee.

    Returns:
        DemandBreakdown with the total and a per-type-id mapping (mix order)
    """
    total_weight = _total_weight(mix)
    price_effect = calculate_demand_response(1, base_fee, baseline_fee)

    by_type: Dict[str, float] = {}
    for entry in mix:
        normalized_weight = entry.weight / total_weight if total_weight > 0 else 0.0
        base_demand = entry.transaction_type.base_demand * normalized_weight * len(mix)
        demand = max(0.0, base_demand * demand_multiplier * price_effect)
        by_type[entry.transaction_type.id] = by_type.get(entry.transaction_type.id, 0.0) + demand

    total = sum(by_type.values())
    logger.debug(f"Demand at {base_fee} gwei x{demand_multiplier}: {total:.2f} TPS")
    return DemandBreakdown(total=total, by_type=by_type)
