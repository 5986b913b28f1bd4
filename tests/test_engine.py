"""
Unit tests for the closed-loop signal engine.
"""

import copy
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from loop_sim.model.blocks import (
    Block,
    BlockKind,
    Connection,
    ControllerParams,
    ControllerType,
    PlantParams,
    StepParams,
    SumParams,
)
from loop_sim.simulation.chain import resolve_chain
from loop_sim.simulation.topology import classify_chain
from loop_sim.simulation.engine import SignalEngine, run_simulation
from loop_sim.simulation.options import SimulationOptions
from loop_sim.simulation.scenarios import DiagramLibrary
from loop_sim.simulation.errors import NoConnectedChain
from loop_sim.utils.validators import ValidationError


def make_connections(*pairs):
    """Connections in the given creation order."""
    return [Connection(f"{a}->{b}", a, b) for a, b in pairs]


def sum_loop_blocks():
    """Step → Σ(+, −) → plant(K=1, T=1)."""
    return [
        Block("step", BlockKind.STEP, 0, params=StepParams(1.0, 0.0)),
        Block("sum", BlockKind.SUM, 100, params=SumParams(("+", "-"))),
        Block("plant", BlockKind.PLANT, 200, params=PlantParams(1.0, 1.0)),
    ]


class TestSignalEngine:
    """Test suite for run_simulation and SignalEngine."""
    
    def test_canonical_first_order_response(self):
        """Open loop through Σ(+) tracks 1 - exp(-t) within the Euler error."""
        blocks, conns = DiagramLibrary.open_loop().snapshot()
        result = run_simulation(blocks, conns, SimulationOptions(dt=0.01, t_end=5.0))
        
        t = result.timestamps
        expected = 1.0 - np.exp(-t)
        assert len(result.samples) == 501
        # sample k holds y after the step from t_k, so k=0 is already dt off
        assert np.max(np.abs(result.outputs - expected)) < 0.015
    
    def test_unity_feedback_without_sum(self):
        """Without a sum block the loop is closed with unity negative feedback."""
        blocks = [
            Block("s", BlockKind.STEP, 0, params=StepParams(1.0, 0.0)),
            Block("p", BlockKind.PLANT, 100, params=PlantParams(1.0, 1.0)),
        ]
        result = run_simulation(blocks, make_connections(("s", "p")), {'dt': 0.01, 'tEnd': 5})
        
        expected = 0.5 * (1.0 - np.exp(-2.0 * result.timestamps))
        assert np.max(np.abs(result.outputs - expected)) < 0.02
        assert result.samples[-1].y == pytest.approx(0.5, abs=1e-3)
    
    def test_proportional_steady_state(self):
        """P control with unity feedback settles at K*kp / (1 + K*kp)."""
        blocks, conns = DiagramLibrary.proportional_loop(kp=2.0, gain=1.0, time_constant=1.5).snapshot()
        result = run_simulation(blocks, conns, SimulationOptions(dt=0.02, t_end=10.0))
        
        assert result.samples[-1].y == pytest.approx(2.0 / 3.0, abs=1e-3)
        assert result.metrics.steady_state_error == pytest.approx(1.0 / 3.0, abs=1e-3)
        assert result.metrics.overshoot_pct == pytest.approx(0.0, abs=1e-9)
    
    def test_pi_removes_steady_state_error(self):
        """Integral action drives the error to zero."""
        blocks, conns = DiagramLibrary.sum_feedback_loop().snapshot()
        result = run_simulation(blocks, conns, SimulationOptions(dt=0.02, t_end=30.0))
        assert abs(result.metrics.steady_state_error) < 0.01
    
    def test_determinism(self):
        """Identical inputs give identical samples and metrics."""
        blocks, conns = DiagramLibrary.default_loop().snapshot()
        first = run_simulation(blocks, conns)
        second = run_simulation(blocks, conns)
        
        assert first.samples == second.samples
        assert first.metrics == second.metrics
    
    def test_inputs_not_mutated(self):
        """The caller's blocks and connections are left untouched."""
        blocks = list(DiagramLibrary.default_loop().blocks)
        conns = list(DiagramLibrary.default_loop().connections)
        blocks_before = copy.deepcopy(blocks)
        conns_before = copy.deepcopy(conns)
        
        run_simulation(blocks, conns)
        
        assert blocks == blocks_before
        assert conns == conns_before
    
    def test_sample_grid(self):
        """Samples start at 0, step by dt and include t_end."""
        blocks, conns = DiagramLibrary.default_loop().snapshot()
        result = run_simulation(blocks, conns)
        
        assert len(result.samples) == 501
        assert result.samples[0].t == 0.0
        assert result.samples[-1].t == pytest.approx(10.0)
        assert np.all(np.diff(result.timestamps) > 0)
    
    def test_zero_end_time(self):
        """t_end = 0 gives exactly one sample."""
        blocks, conns = DiagramLibrary.default_loop().snapshot()
        result = run_simulation(blocks, conns, SimulationOptions(dt=0.02, t_end=0.0))
        assert len(result.samples) == 1
    
    def test_reference_start_time(self):
        """The reference is zero before the step's start time."""
        blocks = [
            Block("s", BlockKind.STEP, 0, params=StepParams(2.0, 1.0)),
            Block("p", BlockKind.PLANT, 100, params=PlantParams(1.0, 1.0)),
        ]
        result = run_simulation(blocks, make_connections(("s", "p")), SimulationOptions(dt=0.1, t_end=2.0))
        
        before = [s for s in result.samples if s.t < 0.95]
        assert all(s.r == 0.0 and s.y == 0.0 for s in before)
        assert result.samples[-1].r == 2.0
    
    def test_two_stage_cascade(self):
        """Stage 2 is driven by stage 1's new output each step."""
        blocks = [
            Block("s", BlockKind.STEP, 0, params=StepParams(1.0, 0.1)),
            Block("x", BlockKind.SUM, 100, params=SumParams(("+",))),
            Block("p1", BlockKind.PLANT, 200, params=PlantParams(2.0, 0.5)),
            Block("p2", BlockKind.PLANT, 300, params=PlantParams(1.0, 1.0)),
        ]
        conns = make_connections(("s", "x"), ("x", "p1"), ("p1", "p2"))
        options = SimulationOptions(dt=0.1, t_end=0.3)
        
        topology = classify_chain(resolve_chain(blocks, conns))
        engine = SignalEngine(topology, blocks, conns, options)
        samples = engine.run()
        
        # hand-computed Euler steps, u = r = [0, 1, 1, 1]
        # y1: 0 -> 0.4 -> 0.72 -> 0.976
        # y2: 0 -> 0.04 -> 0.108 -> 0.1948
        assert [s.u for s in samples] == [0.0, 1.0, 1.0, 1.0]
        assert [s.y for s in samples] == pytest.approx([0.0, 0.04, 0.108, 0.1948])
        assert engine.stages[0].output == pytest.approx(0.976)
    
    def test_sum_signs_follow_connection_order(self):
        """Re-creating sum inputs in another order swaps their signs."""
        blocks = sum_loop_blocks()
        options = SimulationOptions(dt=0.02, t_end=5.0)
        
        reference_first = make_connections(("step", "sum"), ("sum", "plant"), ("plant", "sum"))
        feedback_first = make_connections(("plant", "sum"), ("step", "sum"), ("sum", "plant"))
        
        negative = run_simulation(blocks, reference_first, options)
        positive = run_simulation(blocks, feedback_first, options)
        
        # e = r - y settles at K/(1+K)
        assert negative.samples[-1].y == pytest.approx(0.5, abs=1e-3)
        # e = y - r makes dy/dt = -r, a ramp down
        assert positive.samples[-1].y == pytest.approx(-5.02, abs=1e-6)
    
    def test_dangling_sum_input_does_not_take_a_sign(self):
        """Inputs from missing blocks are skipped before signs are matched."""
        blocks = sum_loop_blocks()
        options = SimulationOptions(dt=0.02, t_end=2.0)
        
        clean = make_connections(("step", "sum"), ("sum", "plant"), ("plant", "sum"))
        dangling = make_connections(("ghost", "sum"), ("step", "sum"), ("sum", "plant"), ("plant", "sum"))
        
        assert run_simulation(blocks, dangling, options).samples == \
            run_simulation(blocks, clean, options).samples
    
    def test_plant_outside_cascade_feeds_back_last_stage(self):
        """A plant not in the forward path contributes the last stage's output."""
        blocks = sum_loop_blocks() + [
            Block("other", BlockKind.PLANT, 900, params=PlantParams(5.0, 3.0)),
        ]
        options = SimulationOptions(dt=0.02, t_end=2.0)
        
        direct = make_connections(("step", "sum"), ("sum", "plant"), ("plant", "sum"))
        indirect = make_connections(("step", "sum"), ("sum", "plant"), ("other", "sum"))
        
        assert run_simulation(blocks, indirect, options).samples == \
            run_simulation(blocks, direct, options).samples
    
    def test_other_sum_sources_contribute_zero(self):
        """Controller or scope inputs to a sum add nothing."""
        blocks = sum_loop_blocks() + [Block("scope", BlockKind.SCOPE, 900)]
        options = SimulationOptions(dt=0.02, t_end=2.0)
        
        # the scope takes the '-' sign, so the loop is open: y -> 1
        conns = make_connections(("step", "sum"), ("scope", "sum"), ("sum", "plant"))
        result = run_simulation(blocks, conns, options)
        expected = 1.0 - np.exp(-result.timestamps)
        assert np.max(np.abs(result.outputs - expected)) < 0.03
    
    def test_unrecognized_controller_type_runs_pid(self):
        """Unknown controller types simulate like PID."""
        def loop(controller_type):
            blocks = [
                Block("s", BlockKind.STEP, 0),
                Block("c", BlockKind.CONTROLLER, 100,
                      params=ControllerParams(controller_type, kp=2.0, ki=1.0, kd=0.2)),
                Block("p", BlockKind.PLANT, 200),
            ]
            return run_simulation(blocks, make_connections(("s", "c"), ("c", "p")))
        
        assert loop("PD").samples == loop(ControllerType.PID).samples
    
    def test_empty_graph(self):
        """An empty diagram cannot be simulated."""
        with pytest.raises(NoConnectedChain):
            run_simulation([], [])
    
    def test_invalid_options(self):
        """dt must be positive and t_end non-negative."""
        blocks, conns = DiagramLibrary.default_loop().snapshot()
        with pytest.raises(ValidationError):
            run_simulation(blocks, conns, {'dt': 0.0})
        with pytest.raises(ValidationError):
            run_simulation(blocks, conns, SimulationOptions.from_dict({'tEnd': -1}))
    
    def test_result_views(self):
        """Result exposes numpy views and a dict form."""
        blocks, conns = DiagramLibrary.default_loop().snapshot()
        result = run_simulation(blocks, conns, SimulationOptions(dt=0.1, t_end=1.0))
        
        assert len(result.references) == len(result.controls) == 11
        data = result.to_dict()
        assert set(data['metrics']) == {'overshootPct', 'riseTime', 'settlingTime', 'steadyStateError'}
        assert set(data['samples'][0]) == {'t', 'r', 'y', 'u'}


class TestSimulationOptions:
    """Test suite for SimulationOptions."""
    
    def test_defaults(self):
        """Defaults are dt=0.02 and t_end=10."""
        options = SimulationOptions()
        assert options.dt == 0.02
        assert options.t_end == 10.0
        assert options.n_samples == 501
    
    def test_json(self):
        """Options convert to and from JSON."""
        options = SimulationOptions(dt=0.05, t_end=3.0)
        assert SimulationOptions.from_json(options.to_json()) == options
    
    def test_copy(self):
        """copy overrides fields."""
        assert SimulationOptions().copy(dt=0.01).dt == 0.01


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
