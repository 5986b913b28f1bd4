"""
Role classification of a resolved forward path.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from loop_sim.model.blocks import Block, BlockKind
from loop_sim.simulation.errors import NoStepInChain, NoPlantInForwardPath


@dataclass(frozen=True)
class LoopTopology:
    """
    Functional roles of the blocks in a forward path.
    
    Indices refer to positions in ``chain``; ``controller_index`` and
    ``sum_index`` are None when the role is absent.
    """
    chain: Tuple[Block, ...]
    step_index: int
    first_plant_index: int
    controller_index: Optional[int]
    sum_index: Optional[int]
    plants: Tuple[Block, ...]
    
    @property
    def step(self) -> Block:
        return self.chain[self.step_index]
    
    @property
    def controller(self) -> Optional[Block]:
        if self.controller_index is None:
            return None
        return self.chain[self.controller_index]
    
    @property
    def sum_block(self) -> Optional[Block]:
        if self.sum_index is None:
            return None
        return self.chain[self.sum_index]
    
    @property
    def has_unity_feedback(self) -> bool:
        """True when no summing block is present."""
        return self.sum_index is None
    
    def plant_position(self, block_id: str) -> Optional[int]:
        """Cascade stage index of a plant block, or None."""
        for i, plant in enumerate(self.plants):
            if plant.id == block_id:
                return i
        return None


def _find_index(
    chain: Sequence[Block],
    kind: BlockKind,
    start: int,
    stop: Optional[int] = None
) -> Optional[int]:
    """First index in [start, stop) holding a block of ``kind``."""
    stop = len(chain) if stop is None else stop
    for i in range(start, stop):
        if chain[i].kind == kind:
            return i
    return None


def classify_chain(chain: Sequence[Block]) -> LoopTopology:
    """
    Partition a chain into step, optional sum, optional controller and
    one or more cascaded plants.
    
    Raises:
        NoStepInChain: If the chain holds no step block
        NoPlantInForwardPath: If no plant follows the step
    """
    step_index = _find_index(chain, BlockKind.STEP, 0)
    if step_index is None:
        raise NoStepInChain()
    
    first_plant_index = _find_index(chain, BlockKind.PLANT, step_index + 1)
    if first_plant_index is None:
        raise NoPlantInForwardPath()
    
    controller_index = _find_index(
        chain, BlockKind.CONTROLLER, step_index + 1, first_plant_index
    )
    sum_stop = first_plant_index if controller_index is None else controller_index
    sum_index = _find_index(chain, BlockKind.SUM, step_index + 1, sum_stop)
    
    plants: List[Block] = [
        b for b in chain[first_plant_index:] if b.kind == BlockKind.PLANT
    ]
    
    return LoopTopology(
        chain=tuple(chain),
        step_index=step_index,
        first_plant_index=first_plant_index,
        controller_index=controller_index,
        sum_index=sum_index,
        plants=tuple(plants),
    )
