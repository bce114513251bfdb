"""
Demand Scenarios

Named demand-multiplier curves over normalized time t ∈ [0, 1]. A scenario
scales a base demand level block by block (see
simulation_engine.run_scenario).
"""

from dataclasses import dataclass, field
from typing import Callable, Dict

import numpy as np

from .units import clamp_unit_interval
from .validation import UnknownScenarioError, validate_positive


@dataclass(frozen=True)
class DemandScenario:
    """
    A demand pattern over a run.

    Attributes:
        id: Registry key
        name: Display name
        description: What the pattern represents
        duration: Nominal length in seconds of chain time
        multiplier: Curve mapping normalized time to a demand multiplier
    """
    id: str
    name: str
    description: str
    multiplier: Callable[[float], float] = field(repr=False, compare=False)
    duration: float = 300

    def __post_init__(self):
        validate_positive(self.duration, f"{self.id}: duration")

    def demand_multiplier(self, t: float) -> float:
        """Multiplier at normalized time t (clamped to [0, 1])"""
        return float(self.multiplier(clamp_unit_interval(t)))


def _normal_day(t: float) -> float:
    return 1 + 0.2 * np.sin(t * np.pi * 4)


def _nft_drop(t: float) -> float:
    if t < 0.2:
        return 1 + t * 2
    if t < 0.25:
        return 1.4 + (t - 0.2) / 0.05 * 4  # spike to 5.4x
    if t < 0.4:
        return 5.4
    if t < 0.7:
        return 5.4 - (t - 0.4) / 0.3 * 3
    return 2.4 - (t - 0.7) / 0.3 * 1.2


def _market_crash(t: float) -> float:
    if t < 0.1:
        return 1
    if t < 0.15:
        return 1 + (t - 0.1) / 0.05 * 3
    if t < 0.8:
        return 4 + 0.8 * np.sin(t * np.pi * 8)
    return 4 - (t - 0.8) / 0.2 * 2.5


def _gradual_growth(t: float) -> float:
    return 0.5 + t * 2.5


def _stress_test(t: float) -> float:
    if t < 0.1:
        return 1 + t * 40
    return 5


def _oscillating(t: float) -> float:
    return 1.75 + 1.25 * np.sin(t * np.pi * 6)


NORMAL = DemandScenario(
    id="normal",
    name="Normal Day",
    description="Typical daily usage with gentle fluctuations",
    multiplier=_normal_day,
)

NFT_DROP = DemandScenario(
    id="nft-drop",
    name="NFT Drop",
    description="Sudden demand spike from a popular NFT mint",
    multiplier=_nft_drop,
)

MARKET_CRASH = DemandScenario(
    id="market-crash",
    name="Market Crash",
    description="Panic selling and liquidations drive sustained high demand",
    multiplier=_market_crash,
)

GRADUAL_GROWTH = DemandScenario(
    id="gradual-growth",
    name="Gradual Growth",
    description="Steady adoption increasing demand over time",
    multiplier=_gradual_growth,
)

STRESS_TEST = DemandScenario(
    id="stress-test",
    name="Stress Test",
    description="Rapid ramp to maximum demand that stays there",
    multiplier=_stress_test,
)

OSCILLATING = DemandScenario(
    id="oscillating",
    name="Oscillating",
    description="Demand swinging between low and high",
    multiplier=_oscillating,
)

SCENARIOS: Dict[str, DemandScenario] = {
    scenario.id: scenario
    for scenario in (NORMAL, NFT_DROP, MARKET_CRASH, GRADUAL_GROWTH, STRESS_TEST, OSCILLATING)
}

DEFAULT_SCENARIO = NORMAL


def get_scenario(scenario_id: str) -> DemandScenario:
    """
    Look up a built-in scenario.

    Raises:
        UnknownScenarioError: If scenario_id is not registered
    """
    try:
        return SCENARIOS[scenario_id]
    except KeyError:
        raise UnknownScenarioError(
            f"Unknown scenario: {scenario_id!r}. Available: {list(SCENARIOS)}"
        ) from None
