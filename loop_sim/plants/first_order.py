"""
First-order lag stage integrated with explicit Euler.
Transfer function: G(s) = K / (T*s + 1)
"""

from typing import Dict, Any
import control as ct

from loop_sim.model.blocks import PlantParams
from loop_sim.plants.base_plant import BasePlant
from loop_sim.utils.validators import validate_real, validate_positive


class FirstOrderLag(BasePlant):
    """
    First-order (PT1) lag, dy/dt = (-y + K*u) / T.
    
    Each ``update`` takes one explicit Euler step of size ``sample_time``.
    """
    
    def __init__(
        self,
        gain: float = 1.0,
        time_constant: float = 1.0,
        sample_time: float = 0.02,
        initial_output: float = 0.0
    ):
        super().__init__(sample_time)
        
        self._K = validate_real(gain, "gain")
        self._tau = validate_positive(time_constant, "time_constant")
        self._initial_output = initial_output
        self._output = initial_output
    
    @classmethod
    def from_params(cls, params: PlantParams, sample_time: float) -> 'FirstOrderLag':
        """Build a stage from a plant block's parameters."""
        return cls(
            gain=params.gain,
            time_constant=params.time_constant,
            sample_time=sample_time,
        )
    
    def derivative(self, control_input: float) -> float:
        """dy/dt at the current output for the given input."""
        return (-self._output + self._K * control_input) / self._tau
    
    def update(self, control_input: float) -> float:
        """Advance one Euler step and return the new output."""
        self._output = self._output + self._dt * self.derivative(control_input)
        self._time += self._dt
        return self._output
    
    def reset(self) -> None:
        self._output = self._initial_output
        self._time = 0.0
    
    def get_info(self) -> Dict[str, Any]:
        return {
            'type': 'FirstOrderLag',
            'gain': self._K,
            'time_constant': self._tau,
            'sample_time': self._dt,
        }
    
    @property
    def transfer_function(self) -> ct.TransferFunction:
        """Continuous transfer function K / (T s + 1)."""
        return ct.TransferFunction([self._K], [self._tau, 1])
    
    @property
    def gain(self) -> float:
        return self._K
    
    @property
    def time_constant(self) -> float:
        return self._tau
