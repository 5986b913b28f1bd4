"""
Step-response metrics for simulated trajectories.
Uses numpy for vectorized calculations.
"""

from typing import Any, Dict, Optional, Sequence
from dataclasses import dataclass, asdict
import numpy as np

# Below this |y_ss| the response is treated as having no steady state.
ZERO_STEADY_STATE = 1e-6
RISE_FRACTION = 0.9
SETTLING_BAND = 0.02

_CAMEL_CASE = {
    'overshoot_pct': 'overshootPct',
    'rise_time': 'riseTime',
    'settling_time': 'settlingTime',
    'steady_state_error': 'steadyStateError',
}


@dataclass(frozen=True)
class StepMetrics:
    """Step-response indicators; each is None when undefined."""
    overshoot_pct: Optional[float] = None
    rise_time: Optional[float] = None
    settling_time: Optional[float] = None
    steady_state_error: Optional[float] = None
    
    def to_dict(self, camel_case: bool = False) -> Dict[str, Optional[float]]:
        data = asdict(self)
        if camel_case:
            return {_CAMEL_CASE[k]: v for k, v in data.items()}
        return data


def compute_metrics(samples: Sequence[Any]) -> StepMetrics:
    """
    Compute overshoot, rise time, settling time and steady-state error.
    
    The last sample is taken as steady state. Rise time is the first time
    the output reaches 90% of it, settling time the last time it is
    outside the 2% band around it.
    
    Args:
        samples: Time-ordered samples with ``t``, ``r`` and ``y`` attributes
        
    Returns:
        StepMetrics (all None for an empty sequence)
    """
    if len(samples) == 0:
        return StepMetrics()
    
    timestamps = np.array([s.t for s in samples], dtype=float)
    outputs = np.array([s.y for s in samples], dtype=float)
    
    y_ss = float(outputs[-1])
    r_final = float(samples[-1].r)
    steady_state_error = r_final - y_ss
    
    if abs(y_ss) <= ZERO_STEADY_STATE:
        return StepMetrics(steady_state_error=steady_state_error)
    
    max_y = float(np.max(outputs))
    overshoot_pct = max(0.0, (max_y - y_ss) / abs(y_ss) * 100)
    
    target = RISE_FRACTION * y_ss
    reached = outputs >= target if y_ss >= 0 else outputs <= target
    rise_time = float(timestamps[np.argmax(reached)]) if np.any(reached) else None
    
    outside = np.abs(outputs - y_ss) > SETTLING_BAND * abs(y_ss)
    outside_indices = np.flatnonzero(outside)
    settling_time = float(timestamps[outside_indices[-1]]) if len(outside_indices) else 0.0
    
    return StepMetrics(
        overshoot_pct=overshoot_pct,
        rise_time=rise_time,
        settling_time=settling_time,
        steady_state_error=steady_state_error,
    )


def _format(value: Optional[float], fmt: str) -> str:
    return "—" if value is None else fmt.format(value)


def format_metrics(metrics: StepMetrics) -> Dict[str, str]:
    """Human-readable read-out of the four indicators."""
    return {
        'Overshoot': _format(metrics.overshoot_pct, "{:.1f} %"),
        'Rise time': _format(metrics.rise_time, "{:.2f} s"),
        'Settling time': _format(metrics.settling_time, "{:.2f} s"),
        'Steady-state error': _format(metrics.steady_state_error, "{:.3f}"),
    }
