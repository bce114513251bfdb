"""
Core simulation components: fee market controller, block packing and the
closed-loop simulation driver, and the
time-stepped throughput simulation.
"""

from .fee_controller import (
    DEFAULT_CONFIG,
    FeeMarketConfig,
    calculate_demand_response,
    calculate_new_base_fee,
    generate_utilization,
)
from .block_packing import (
    AddedTransaction,
    AdmissionCheck,
    BlockPackingSummary,
    Bottleneck,
    compute_usage,
    find_bottleneck,
    max_admissible_count,
    remove_count,
    summarize_batch,
    try_add,
    utilization_percentages,
    would_exceed,
)
from .simulation_engine import (
    BlockRecord,
    SimulationState,
    create_initial_state,
    history_to_dataframe,
    process_block,
    run_demand_path,
    run_scenario,
    run_simulation,
)
from .scenarios import DEFAULT_SCENARIO, SCENARIOS, DemandScenario, get_scenario
from .throughput_simulation import (
    ThroughputConfig,
    ThroughputState,
    create_throughput_state,
    run_throughput_simulation,
    simulate_step,
    throughput_history_to_dataframe,
)

__all__ = [
    "DEFAULT_CONFIG",
    "FeeMarketConfig",
    "calculate_demand_response",
    "calculate_new_base_fee",
    "generate_utilization",
    "AddedTransaction",
    "AdmissionCheck",
    "BlockPackingSummary",
    "Bottleneck",
    "compute_usage",
    "find_bottleneck",
    "max_admissible_count",
    "remove_count",
    "summarize_batch",
    "try_add",
    "utilization_percentages",
    "would_exceed",
    "BlockRecord",
    "SimulationState",
    "create_initial_state",
    "history_to_dataframe",
    "process_block",
    "run_demand_path",
    "run_scenario",
    "run_simulation",
    "DEFAULT_SCENARIO",
    "SCENARIOS",
    "DemandScenario",
    "get_scenario",
    "ThroughputConfig",
    "ThroughputState",
    "create_throughput_state",
    "run_throughput_simulation",
    "simulate_step",
    "throughput_history_to_dataframe",
]
