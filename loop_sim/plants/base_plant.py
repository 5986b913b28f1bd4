"""
Base plant stage abstract class.
Defines the interface for cascade stages advanced by the signal engine.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any

from loop_sim.utils.validators import validate_positive


class BasePlant(ABC):
    """
    Abstract base class for plant stages.
    
    A stage holds one continuous state variable and advances it by one
    fixed step per call to ``update``.
    """
    
    def __init__(self, sample_time: float = 0.02):
        """
        Initialize base plant.
        
        Args:
            sample_time: Integration step in seconds
        """
        self._dt = validate_positive(sample_time, "sample_time")
        self._output: float = 0.0
        self._time: float = 0.0
    
    @abstractmethod
    def update(self, control_input: float) -> float:
        """
        Advance the stage by one step.
        
        Args:
            control_input: Stage input signal
            
        Returns:
            New stage output
        """
        pass
    
    @abstractmethod
    def reset(self) -> None:
        """Reset stage to its initial state."""
        pass
    
    @property
    def output(self) -> float:
        """Current stage output."""
        return self._output
    
    @property
    def sample_time(self) -> float:
        return self._dt
    
    @property
    def time(self) -> float:
        """Time advanced so far."""
        return self._time
    
    def get_state(self) -> Dict[str, Any]:
        """Get current stage state as dictionary."""
        return {
            'output': self._output,
            'time': self._time,
        }
    
    @abstractmethod
    def get_info(self) -> Dict[str, Any]:
        """Get stage parameters."""
        pass
