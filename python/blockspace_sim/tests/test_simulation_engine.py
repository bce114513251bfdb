"""
Unit tests for the simulation engine

Tests state transitions, seeded runs, demand paths and history export.
"""

import pytest
import numpy as np
import pandas as pd
from numpy.testing import assert_allclose

from ..core.fee_controller import DEFAULT_CONFIG, FeeMarketConfig
from ..core.scenarios import get_scenario
from ..core.simulation_engine import (
    BlockRecord,
    SimulationState,
    create_initial_state,
    history_to_dataframe,
    process_block,
    run_demand_path,
    run_scenario,
    run_simulation,
    scenario_demand_levels,
)
from ..core.validation import (
    BlockspaceSimError,
    InvalidCountError,
    NonFiniteValueError,
    SeedSequenceError,
    UnknownScenarioError,
)


class TestSimulationState:
    """Test suite for state construction."""

    def test_initial_state(self):
        """Test the initial state has no history and the initial fee."""
        state = create_initial_state()
        assert state.block_number == 0
        assert state.current_base_fee == 20.0
        assert state.blocks == ()

    def test_initial_state_custom_config(self):
        """Test the initial fee follows the configuration."""
        config = FeeMarketConfig(initial_base_fee=50.0)
        assert create_initial_state(config).current_base_fee == 50.0

    def test_history_length_invariant(self):
        """Test block_number must equal the history length."""
        with pytest.raises(BlockspaceSimError):
            SimulationState(block_number=2, current_base_fee=20.0, blocks=())
        with pytest.raises(BlockspaceSimError):
            SimulationState(
                block_number=0, current_base_fee=20.0,
                blocks=(BlockRecord(1, 20.0, 0.5),),
            )


class TestProcessBlock:
    """Test suite for single block transitions."""

    def test_single_block(self):
        """Test block is recorded at the current fee and the fee advances."""
        state = process_block(create_initial_state(), 0.6)

        assert state.block_number == 1
        assert state.blocks[0] == BlockRecord(number=1, base_fee=20.0, utilization=0.6)
        assert_allclose(state.current_base_fee, 20 * (1 + 0.125 * (0.1 / 0.5)))
        assert state.current_base_fee == pytest.approx(20.5)

    def test_input_not_mutated(self):
        """Test processing a block leaves the input state untouched."""
        initial = create_initial_state()
        first = process_block(initial, 0.9)
        second = process_block(first, 0.1)

        assert len(initial.blocks) == 0
        assert len(first.blocks) == 1
        assert len(second.blocks) == 2
        assert second.blocks[0] == first.blocks[0]

    def test_utilization_clamped_before_storage(self):
        """Test out-of-range utilization is stored clamped."""
        state = process_block(create_initial_state(), 1.7)
        state = process_block(state, -0.3)

        assert state.blocks[0].utilization == 1.0
        assert state.blocks[1].utilization == 0.0

    def test_block_numbers_sequential(self):
        """Test block numbers run 1..n."""
        state = create_initial_state()
        for utilization in [0.1, 0.5, 0.9, 0.4]:
            state = process_block(state, utilization)
        assert [block.number for block in state.blocks] == [1, 2, 3, 4]

    def test_fee_floor_maintained(self):
        """Test repeated empty blocks never push the fee below the floor."""
        config = FeeMarketConfig(min_base_fee=5.0, initial_base_fee=6.0)
        state = create_initial_state(config)
        for _ in range(30):
            state = process_block(state, 0.0, config)
            assert state.current_base_fee >= config.min_base_fee
        assert state.current_base_fee == 5.0

    def test_nan_rejected(self):
        """Test NaN utilization is rejected."""
        with pytest.raises(NonFiniteValueError):
            process_block(create_initial_state(), float('nan'))


class TestRunSimulation:
    """Test suite for multi-block runs."""

    def test_block_count(self):
        """Test the run produces exactly block_count blocks."""
        state = run_simulation(25, 0.5, rng=np.random.default_rng(1))
        assert state.block_number == 25
        assert len(state.blocks) == 25

    def test_zero_blocks(self):
        """Test a zero-length run returns the initial state."""
        assert run_simulation(0, 0.5) == create_initial_state()

    def test_deterministic_with_seeds(self):
        """Test identical seeds give identical histories."""
        seeds = list(np.random.default_rng(3).random(40))
        first = run_simulation(40, 0.7, random_seeds=seeds)
        second = run_simulation(40, 0.7, random_seeds=seeds)

        assert first == second
        assert first.current_base_fee == second.current_base_fee

    def test_deterministic_with_generator(self):
        """Test identically seeded generators give identical histories."""
        first = run_simulation(40, 0.6, rng=np.random.default_rng(11))
        second = run_simulation(40, 0.6, rng=np.random.default_rng(11))
        assert first == second

    def test_extra_seeds_ignored(self):
        """Test only the first block_count samples are used."""
        seeds = [0.2, 0.8, 0.5, 0.1, 0.9]
        assert run_simulation(3, 0.5, random_seeds=seeds) == run_simulation(3, 0.5, random_seeds=seeds[:3])

    def test_short_seed_sequence(self):
        """Test too few samples raise SeedSequenceError."""
        with pytest.raises(SeedSequenceError):
            run_simulation(5, 0.5, random_seeds=[0.5] * 4)

    @pytest.mark.parametrize("block_count", [-1, 2.5, True, "10"])
    def test_invalid_block_count(self, block_count):
        """Test negative or non-integer block counts are rejected."""
        with pytest.raises(InvalidCountError):
            run_simulation(block_count, 0.5)

    def test_high_demand_raises_fee(self):
        """Test sustained full demand lifts the fee above 1.5x the initial fee."""
        state = run_simulation(20, 1.0, noise_level=0.0)
        assert state.current_base_fee > 1.5 * DEFAULT_CONFIG.initial_base_fee

    def test_low_demand_lowers_fee(self):
        """Test sustained low demand pushes the fee below the initial fee."""
        state = run_simulation(20, 0.2, noise_level=0.0)
        assert state.current_base_fee < DEFAULT_CONFIG.initial_base_fee

    def test_utilization_bounds(self):
        """Test every stored utilization lies in [0, 1]."""
        state = run_simulation(100, 0.9, noise_level=0.5, rng=np.random.default_rng(5))
        utilizations = np.array([block.utilization for block in state.blocks])
        assert np.all((utilizations >= 0) & (utilizations <= 1))

    def test_run_matches_block_by_block(self):
        """Test a run equals stepping process_block on the same utilizations."""
        seeds = list(np.random.default_rng(8).random(60))
        state = run_simulation(60, 0.6, random_seeds=seeds)

        stepped = create_initial_state()
        for block in state.blocks:
            stepped = process_block(stepped, block.utilization)
        assert stepped == state

    def test_long_run(self):
        """Test a long run keeps the history invariant and sequential numbering."""
        state = run_simulation(20_000, 0.5, rng=np.random.default_rng(2))

        assert state.block_number == 20_000
        assert len(state.blocks) == 20_000
        assert state.blocks[-1].number == 20_000
        assert len(history_to_dataframe(state)) == 20_000


class TestDemandPaths:
    """Test suite for variable demand and scenarios."""

    def test_continue_from_state(self):
        """Test a demand path continues an existing run."""
        base = run_simulation(10, 0.5, noise_level=0.0)
        continued = run_demand_path([1.0] * 5, noise_level=0.0, initial_state=base)

        assert continued.block_number == 15
        assert continued.blocks[:10] == base.blocks
        assert continued.current_base_fee > base.current_base_fee

    def test_custom_baseline_fee(self):
        """Test demand is measured against the given baseline fee."""
        state = run_demand_path([0.5], noise_level=0.0, baseline_fee=40.0)
        assert_allclose(state.blocks[0].utilization, 1.0)

    def test_scenario_levels(self):
        """Test block i runs at base_demand * multiplier(i / n), clamped."""
        levels = scenario_demand_levels("gradual-growth", 4, 0.4)
        assert_allclose(levels, [0.2, 0.45, 0.7, 0.95])

        levels = scenario_demand_levels("stress-test", 20, 0.5)
        assert np.all(levels <= 1.0)
        assert levels[-1] == 1.0

    def test_run_scenario(self):
        """Test a stress test drives the fee up."""
        state = run_scenario(get_scenario("stress-test"), 50, 0.2, noise_level=0.0)
        assert state.block_number == 50
        assert state.current_base_fee > DEFAULT_CONFIG.initial_base_fee

    def test_run_scenario_by_id_matches_object(self):
        """Test scenario ids resolve through the registry."""
        seeds = [0.5] * 30
        by_id = run_scenario("nft-drop", 30, 0.3, random_seeds=seeds)
        by_object = run_scenario(get_scenario("nft-drop"), 30, 0.3, random_seeds=seeds)
        assert by_id == by_object

    def test_unknown_scenario(self):
        """Test unknown scenario ids are rejected."""
        with pytest.raises(UnknownScenarioError):
            run_scenario("black-friday", 10, 0.5)


class TestHistoryExport:
    """Test suite for DataFrame export."""

    def test_dataframe(self):
        """Test one row per block with number, base_fee and utilization."""
        state = run_simulation(5, 0.6, noise_level=0.0)
        df = history_to_dataframe(state)

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['number', 'base_fee', 'utilization']
        assert len(df) == 5
        assert df['number'].tolist() == [1, 2, 3, 4, 5]
        assert_allclose(df['base_fee'].iloc[0], 20.0)
        assert_allclose(df['utilization'].iloc[0], 0.6)

    def test_empty_history(self):
        """Test an empty history exports an empty frame with the same columns."""
        df = history_to_dataframe(create_initial_state())
        assert df.empty
        assert list(df.columns) == ['number', 'base_fee', 'utilization']
