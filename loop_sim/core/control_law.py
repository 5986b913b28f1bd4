"""
Controller activation state for one simulation run.

Implements the P, PI and PID laws on an error signal with a rectangular
integral and an unfiltered backward-difference derivative.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from loop_sim.model.blocks import ControllerParams, ControllerType
from loop_sim.utils.validators import validate_positive


@dataclass
class ControlState:
    """Snapshot of the last control law evaluation."""
    error: float = 0.0
    derivative: float = 0.0
    p_term: float = 0.0
    i_term: float = 0.0
    d_term: float = 0.0
    output: float = 0.0
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'error': self.error,
            'derivative': self.derivative,
            'p_term': self.p_term,
            'i_term': self.i_term,
            'd_term': self.d_term,
            'output': self.output,
        }


class ControlLaw:
    """
    Control law with its integral accumulator and previous error.
    
    With ``params=None`` the law is a pass-through: the error is used
    as the control signal unchanged.
    
    Example:
        >>> law = ControlLaw(ControllerParams(ControllerType.P, kp=2.0), sample_time=0.02)
        >>> law.update(0.5)
        1.0
    """
    
    def __init__(self, params: Optional[ControllerParams], sample_time: float):
        self._params = params
        self._dt = validate_positive(sample_time, "sample_time")
        
        self._integral: float = 0.0
        self._prev_error: float = 0.0
        self._state = ControlState()
    
    @property
    def params(self) -> Optional[ControllerParams]:
        return self._params
    
    @property
    def integral(self) -> float:
        """Integral of the error (not multiplied by ki)."""
        return self._integral
    
    @property
    def prev_error(self) -> float:
        return self._prev_error
    
    @property
    def state(self) -> ControlState:
        return self._state
    
    def update(self, error: float) -> float:
        """
        Evaluate the control law for one step.
        
        Args:
            error: Current error signal
            
        Returns:
            Control signal u
        """
        derivative = (error - self._prev_error) / self._dt
        p_term = i_term = d_term = 0.0
        
        if self._params is None:
            output = error
        else:
            kp, ki, kd = self._params.kp, self._params.ki, self._params.kd
            ctype = self._params.controller_type
            p_term = kp * error
            if ctype == ControllerType.P:
                output = p_term
            elif ctype == ControllerType.PI:
                self._integral += error * self._dt
                i_term = ki * self._integral
                output = p_term + i_term
            else:
                # PID, and any unrecognised type
                self._integral += error * self._dt
                i_term = ki * self._integral
                d_term = kd * derivative
                output = p_term + i_term + d_term
        
        self._state = ControlState(
            error=error,
            derivative=derivative,
            p_term=p_term,
            i_term=i_term,
            d_term=d_term,
            output=output,
        )
        self._prev_error = error
        return output
    
    def reset(self) -> None:
        """Clear integral, previous error and state."""
        self._integral = 0.0
        self._prev_error = 0.0
        self._state = ControlState()
