"""
Block Diagram Loop Simulator
============================

Simulates a closed control loop assembled from typed blocks:
- Step input, P/PI/PID controller, first-order plants, summing junction, scope
- Forward path discovery and role classification
- Fixed-step explicit Euler integration
- Overshoot, rise time, settling time and steady-state error
"""

from loop_sim.model.blocks import Block, BlockKind, Connection, create_default_block
from loop_sim.model.diagram import Diagram
from loop_sim.simulation.options import SimulationOptions
from loop_sim.simulation.engine import Sample, SimulationResult, run_simulation
from loop_sim.simulation.errors import (
    SimulationError,
    NoConnectedChain,
    NoStepInChain,
    NoPlantInForwardPath,
)
from loop_sim.analyzer.metrics import StepMetrics, compute_metrics

__version__ = "1.0.0"
__all__ = [
    "Block",
    "BlockKind",
    "Connection",
    "create_default_block",
    "Diagram",
    "SimulationOptions",
    "Sample",
    "SimulationResult",
    "run_simulation",
    "SimulationError",
    "NoConnectedChain",
    "NoStepInChain",
    "NoPlantInForwardPath",
    "StepMetrics",
    "compute_metrics",
]
