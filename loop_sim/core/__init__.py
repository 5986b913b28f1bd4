"""Controller components."""

from loop_sim.core.control_law import ControlLaw, ControlState

__all__ = [
    "ControlLaw",
    "ControlState",
]
