"""Block diagram data model."""

from loop_sim.model.blocks import (
    Block,
    BlockKind,
    Connection,
    ControllerType,
    StepParams,
    ControllerParams,
    PlantParams,
    SumParams,
    ScopeParams,
    create_default_block,
)
from loop_sim.model.diagram import Diagram

__all__ = [
    "Block",
    "BlockKind",
    "Connection",
    "ControllerType",
    "StepParams",
    "ControllerParams",
    "PlantParams",
    "SumParams",
    "ScopeParams",
    "create_default_block",
    "Diagram",
]
