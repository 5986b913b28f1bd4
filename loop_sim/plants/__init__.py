"""Plant stages for the forward-path cascade."""

from loop_sim.plants.base_plant import BasePlant
from loop_sim.plants.first_order import FirstOrderLag

__all__ = [
    "BasePlant",
    "FirstOrderLag",
]
