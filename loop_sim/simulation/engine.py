"""
Fixed-step closed-loop signal engine.

Advances the controller and the plant cascade of a classified forward
path with explicit Euler steps and records (t, r, y, u) samples.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
import numpy as np

from loop_sim.model.blocks import Block, BlockKind, Connection
from loop_sim.core.control_law import ControlLaw
from loop_sim.plants.first_order import FirstOrderLag
from loop_sim.simulation.chain import resolve_chain
from loop_sim.simulation.topology import LoopTopology, classify_chain
from loop_sim.simulation.options import SimulationOptions
from loop_sim.analyzer.metrics import StepMetrics, compute_metrics

# Keeps the last sample when t_end is a multiple of dt.
TIME_TOLERANCE = 1e-9

# Sum input sources
_FROM_STEP = "step"
_FROM_PLANT = "plant"
_FROM_OTHER = "other"


@dataclass(frozen=True)
class Sample:
    """One recorded time step."""
    t: float
    r: float
    y: float
    u: float
    
    def to_dict(self) -> Dict[str, float]:
        return {'t': self.t, 'r': self.r, 'y': self.y, 'u': self.u}


@dataclass
class SimulationResult:
    """Samples and metrics of one run."""
    samples: List[Sample]
    metrics: StepMetrics
    topology: Optional[LoopTopology] = None
    options: SimulationOptions = field(default_factory=SimulationOptions)
    
    @property
    def timestamps(self) -> np.ndarray:
        return np.array([s.t for s in self.samples])
    
    @property
    def references(self) -> np.ndarray:
        return np.array([s.r for s in self.samples])
    
    @property
    def outputs(self) -> np.ndarray:
        return np.array([s.y for s in self.samples])
    
    @property
    def controls(self) -> np.ndarray:
        return np.array([s.u for s in self.samples])
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'samples': [s.to_dict() for s in self.samples],
            'metrics': self.metrics.to_dict(camel_case=True),
        }


class SignalEngine:
    """
    Activation record and integrator for a single run.
    
    Holds simulation time, the control law state and one first-order
    stage per cascaded plant. The blocks and connections it is given are
    only read.
    
    Example:
        >>> topology = classify_chain(resolve_chain(blocks, connections))
        >>> engine = SignalEngine(topology, blocks, connections, SimulationOptions(dt=0.01, t_end=5))
        >>> samples = engine.run()
    """
    
    def __init__(
        self,
        topology: LoopTopology,
        blocks: Sequence[Block],
        connections: Sequence[Connection],
        options: Optional[SimulationOptions] = None
    ):
        self._topology = topology
        self._options = options or SimulationOptions()
        dt = self._options.dt
        
        self._step_params = topology.step.params
        
        controller = topology.controller
        self._law = ControlLaw(
            controller.params if controller is not None else None,
            sample_time=dt
        )
        self._stages = [
            FirstOrderLag.from_params(plant.params, sample_time=dt)
            for plant in topology.plants
        ]
        
        self._sum_inputs: Optional[List[Tuple[str, Optional[int]]]] = None
        sum_block = topology.sum_block
        if sum_block is not None:
            self._sum_signs = sum_block.params
            self._sum_inputs = self._resolve_sum_inputs(sum_block, blocks, connections)
        
        self._t = 0.0
    
    def _resolve_sum_inputs(
        self,
        sum_block: Block,
        blocks: Sequence[Block],
        connections: Sequence[Connection]
    ) -> List[Tuple[str, Optional[int]]]:
        """Source role of each incoming sum connection, in creation order."""
        by_id: Dict[str, Block] = {}
        for block in blocks:
            by_id.setdefault(block.id, block)
        
        inputs = []
        for conn in connections:
            if conn.to_id != sum_block.id:
                continue
            source = by_id.get(conn.from_id)
            if source is None:
                continue
            
            if source.kind == BlockKind.STEP:
                inputs.append((_FROM_STEP, None))
            elif source.kind == BlockKind.PLANT:
                inputs.append((_FROM_PLANT, self._topology.plant_position(source.id)))
            elif source.kind in (BlockKind.CONTROLLER, BlockKind.SUM, BlockKind.SCOPE):
                inputs.append((_FROM_OTHER, None))
            else:
                raise ValueError(f"Unhandled block kind: {source.kind}")
        return inputs
    
    @property
    def time(self) -> float:
        return self._t
    
    @property
    def control_law(self) -> ControlLaw:
        return self._law
    
    @property
    def stages(self) -> List[FirstOrderLag]:
        return self._stages
    
    @property
    def output(self) -> float:
        """Current output of the last cascade stage."""
        return self._stages[-1].output
    
    def reference(self, t: float) -> float:
        return self._step_params.value_at(t)
    
    def error(self, r: float) -> float:
        """Error signal from the summing junction, or unity feedback."""
        if self._sum_inputs is None:
            return r - self.output
        
        total = 0.0
        for i, (role, stage) in enumerate(self._sum_inputs):
            if role == _FROM_STEP:
                value = r
            elif role == _FROM_PLANT:
                value = self._stages[stage].output if stage is not None else self.output
            else:
                value = 0.0
            total += self._sum_signs.sign_at(i) * value
        return total
    
    def step(self) -> Sample:
        """Advance one time step and return its sample."""
        t = self._t
        r = self.reference(t)
        u = self._law.update(self.error(r))
        
        signal = u
        for stage in self._stages:
            signal = stage.update(signal)
        
        self._t = t + self._options.dt
        return Sample(t=t, r=r, y=signal, u=u)
    
    def run(self) -> List[Sample]:
        """Integrate from the current time through t_end, inclusive."""
        samples = []
        while self._t <= self._options.t_end + TIME_TOLERANCE:
            samples.append(self.step())
        return samples


def _coerce_options(
    options: Union[SimulationOptions, Mapping[str, Any], None]
) -> SimulationOptions:
    if options is None:
        return SimulationOptions()
    if isinstance(options, SimulationOptions):
        return options
    return SimulationOptions.from_dict(options)


def run_simulation(
    blocks: Sequence[Block],
    connections: Sequence[Connection],
    options: Union[SimulationOptions, Mapping[str, Any], None] = None
) -> SimulationResult:
    """
    Simulate the closed loop described by a diagram snapshot.
    
    Args:
        blocks: Diagram blocks
        connections: Diagram connections, in creation order
        options: Run configuration, or a dict with ``dt`` / ``tEnd``
        
    Returns:
        SimulationResult with samples and step-response metrics
        
    Raises:
        NoConnectedChain: No step block in the diagram
        NoStepInChain: Resolved chain has no step block
        NoPlantInForwardPath: No plant after the step
        ValidationError: Invalid options
    """
    options = _coerce_options(options)
    
    topology = classify_chain(resolve_chain(blocks, connections))
    samples = SignalEngine(topology, blocks, connections, options).run()
    
    return SimulationResult(
        samples=samples,
        metrics=compute_metrics(samples),
        topology=topology,
        options=options,
    )
