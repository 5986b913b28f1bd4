"""Forward path resolution, classification and closed-loop simulation."""

from loop_sim.simulation.errors import (
    SimulationError,
    NoConnectedChain,
    NoStepInChain,
    NoPlantInForwardPath,
)
from loop_sim.simulation.options import SimulationOptions
from loop_sim.simulation.chain import resolve_chain
from loop_sim.simulation.topology import LoopTopology, classify_chain
from loop_sim.simulation.engine import Sample, SimulationResult, SignalEngine, run_simulation
from loop_sim.simulation.scenarios import DiagramLibrary

__all__ = [
    "SimulationError",
    "NoConnectedChain",
    "NoStepInChain",
    "NoPlantInForwardPath",
    "SimulationOptions",
    "resolve_chain",
    "LoopTopology",
    "classify_chain",
    "Sample",
    "SimulationResult",
    "SignalEngine",
    "run_simulation",
    "DiagramLibrary",
]
