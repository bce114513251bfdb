"""
blockspace-sim: multi-resource block packing and EIP-1559 fee market simulation

Usage:
    from blockspace_sim import run_simulation, calculate_stats

    state = run_simulation(100, demand_level=0.7, random_seeds=seeds)
    stats = calculate_stats(state)
"""

__version__ = "1.0.0"

from .core import (
    DEFAULT_CONFIG,
    FeeMarketConfig,
    SimulationState,
    create_initial_state,
    find_bottleneck,
    process_block,
    run_scenario,
    run_simulation,
    run_throughput_simulation,
    ThroughputConfig,
    try_add,
)
from .core.validation import BlockspaceSimError, setup_logging
from .data import Catalog, CatalogLoader, default_catalog
from .metrics import SimulationStats, ThroughputStats, calculate_stats, calculate_throughput_stats

__all__ = [
    "DEFAULT_CONFIG",
    "FeeMarketConfig",
    "SimulationState",
    "create_initial_state",
    "find_bottleneck",
    "process_block",
    "run_scenario",
    "run_simulation",
    "run_throughput_simulation",
    "ThroughputConfig",
    "try_add",
    "BlockspaceSimError",
    "setup_logging",
    "Catalog",
    "CatalogLoader",
    "default_catalog",
    "SimulationStats",
    "calculate_stats",
    "ThroughputStats",
    "calculate_throughput_stats",
]
