"""
Run configuration for the signal engine.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict
import json

from loop_sim.utils.validators import validate_positive, validate_non_negative


@dataclass(frozen=True)
class SimulationOptions:
    """
    Fixed-step run configuration.
    
    Attributes:
        dt: Integration step in seconds (> 0)
        t_end: Last simulated time in seconds (>= 0), inclusive
    """
    
    dt: float = 0.02
    t_end: float = 10.0
    
    def __post_init__(self):
        object.__setattr__(self, 'dt', validate_positive(self.dt, "dt"))
        object.__setattr__(self, 't_end', validate_non_negative(self.t_end, "tEnd"))
    
    @property
    def n_samples(self) -> int:
        """Expected number of samples, t_end/dt + 1."""
        return int(self.t_end / self.dt + 1e-9) + 1
    
    def copy(self, **changes) -> 'SimulationOptions':
        params = asdict(self)
        params.update(changes)
        return SimulationOptions(**params)
    
    def to_dict(self) -> Dict[str, Any]:
        return {'dt': self.dt, 'tEnd': self.t_end}
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationOptions':
        """
        Create from dictionary.
        
        Accepts ``tEnd`` or ``t_end``; missing fields take their defaults.
        """
        params = {}
        if data.get('dt') is not None:
            params['dt'] = data['dt']
        t_end = data.get('tEnd', data.get('t_end'))
        if t_end is not None:
            params['t_end'] = t_end
        return cls(**params)
    
    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
    
    @classmethod
    def from_json(cls, json_str: str) -> 'SimulationOptions':
        return cls.from_dict(json.loads(json_str))
