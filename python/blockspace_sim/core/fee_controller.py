"""
Fee Market Controller

EIP-1559-style congestion pricing, as pure stateless functions.

Mathematical Formulas:

Base fee update:
u' = clamp(u, 0, 1)
r = κ * (u' - u*) / u*
F(t+1) = max(F_min, F(t) * (1 + r))

Demand response (price elasticity):
d = clamp(D * F_base / F(t), 0, 1)

Noisy utilization:
u = clamp(d + (s - 0.5) * 2 * σ, 0, 1)

where:
- u*: target utilization ∈ (0,1)
- κ: maximum change rate per block ∈ (0,1)
- F_min: minimum base fee (gwei)
- F_base: baseline fee against which demand is measured (gwei)
- D: nominal demand level ∈ [0,1]
- s: injected random sample ∈ [0,1]
- σ: noise level ∈ [0,1]

Note: the change ratio divides by u* on both the increasing and the
decreasing side. With u* != 0.5 the largest possible increase and decrease
per block differ (e.g. u* = 0.8, κ = 0.25 gives +6.25% for a full block and
-25% for an empty one).
"""

import logging
from dataclasses import dataclass, replace

from .units import Gwei, Utilization, clamp_unit_interval, to_utilization
from .validation import (
    ConfigurationError,
    finite_inputs,
    validate_open_unit_interval,
    validate_positive,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeMarketConfig:
    """
    Fee market parameters, immutable for the lifetime of a simulation run.

    Attributes:
        target_utilization: Utilization at which the fee is unchanged, in (0,1)
        max_change_rate: Fee change for a full (or empty, at u*=0.5) block, in (0,1)
        min_base_fee: Fee floor in gwei (> 0)
        initial_base_fee: Fee of the first block in gwei (>= min_base_fee)
    """
    target_utilization: float = 0.5
    max_change_rate: float = 0.125
    min_base_fee: float = 1.0
    initial_base_fee: float = 20.0

    def __post_init__(self):
        validate_open_unit_interval(self.target_utilization, "target_utilization")
        validate_open_unit_interval(self.max_change_rate, "max_change_rate")
        validate_positive(self.min_base_fee, "min_base_fee")
        validate_positive(self.initial_base_fee, "initial_base_fee")

        if self.initial_base_fee < self.min_base_fee:
            raise ConfigurationError(
                f"initial_base_fee ({self.initial_base_fee}) must be >= "
                f"min_base_fee ({self.min_base_fee})"
            )

    def with_overrides(self, **changes) -> 'FeeMarketConfig':
        """Return a validated copy with the given fields replaced"""
        return replace(self, **changes)


DEFAULT_CONFIG = FeeMarketConfig()

# Demand is measured against the default initial fee unless told otherwise
DEFAULT_BASELINE_FEE = DEFAULT_CONFIG.initial_base_fee

DEFAULT_NOISE_LEVEL = 0.1


@finite_inputs("current_fee", "utilization")
def calculate_new_base_fee(
    current_fee: float,
    utilization: float,
    config: FeeMarketConfig = DEFAULT_CONFIG
) -> Gwei:
    """
    Calculate the base fee for the next block.

    Implements: F(t+1) = max(F_min, F(t) * (1 + κ * (clamp(u) - u*) / u*))

    Args:
        current_fee: Base fee in effect for the observed block (gwei, > 0)
        utilization: Observed utilization; clamped to [0, 1]
        config: Fee market parameters

    Returns:
        Next base fee, never below config.min_base_fee

    Raises:
        ConfigurationError: If current_fee is not positive
        NonFiniteValueError: If an input is NaN
    """
    validate_positive(current_fee, "current_fee")

    clamped = clamp_unit_interval(utilization)
    if clamped != utilization:
        logger.debug(f"calculate_new_base_fee: utilization {utilization} clamped to {clamped}")

    delta = clamped - config.target_utilization
    change_ratio = config.max_change_rate * (delta / config.target_utilization)
    new_fee = current_fee * (1 + change_ratio)

    return Gwei(max(config.min_base_fee, new_fee))


@finite_inputs("demand_level", "current_fee", "baseline_fee")
def calculate_demand_response(
    demand_level: float,
    current_fee: float,
    baseline_fee: float = DEFAULT_BASELINE_FEE
) -> Utilization:
    """
    Apply price elasticity to a nominal demand level.

    Implements: d = clamp(D * F_base / F(t), 0, 1)

    At current_fee == baseline_fee demand is returned unchanged; at twice the
    baseline it is halved.

    Args:
        demand_level: Nominal share of block space users want (clamped result)
        current_fee: Current base fee (gwei, > 0)
        baseline_fee: Reference fee (gwei, > 0)

    Returns:
        Realized demand in [0, 1]
    """
    validate_positive(current_fee, "current_fee")
    validate_positive(baseline_fee, "baseline_fee")

    return to_utilization(demand_level * (baseline_fee / current_fee))


@finite_inputs("base_demand", "noise_level", "random_sample")
def generate_utilization(
    base_demand: float,
    noise_level: float,
    random_sample: float
) -> Utilization:
    """
    Perturb expected demand with uniform noise.

    Implements: u = clamp(d + (s - 0.5) * 2 * σ, 0, 1)

    The random sample is supplied by the caller so that runs can be replayed
    exactly; this function never draws randomness itself.

    Args:
        base_demand: Expected utilization before noise
        noise_level: Half-width σ of the noise band; clamped to [0, 1]
        random_sample: Uniform sample s; clamped to [0, 1]

    Returns:
        Utilization in [0, 1]
    """
    noise_level = clamp_unit_interval(noise_level)
    random_sample = clamp_unit_interval(random_sample)

    noise = (random_sample - 0.5) * 2 * noise_level
    return to_utilization(base_demand + noise)
