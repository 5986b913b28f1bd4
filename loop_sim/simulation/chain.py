"""
Forward path discovery.

Walks the connection graph from a source step block and returns the
ordered list of visited blocks.
"""

from typing import Dict, List, Optional, Sequence

from loop_sim.model.blocks import Block, BlockKind, Connection
from loop_sim.simulation.errors import NoConnectedChain


def find_source_step(
    blocks: Sequence[Block],
    connections: Sequence[Connection]
) -> Optional[Block]:
    """
    Pick the step block the chain starts from.
    
    A step with no incoming connection is preferred; otherwise the first
    step block in input order is used.
    """
    steps = [b for b in blocks if b.kind == BlockKind.STEP]
    if not steps:
        return None
    
    targets = {c.to_id for c in connections}
    for step in steps:
        if step.id not in targets:
            return step
    return steps[0]


def _next_block(
    outgoing: List[Connection],
    by_id: Dict[str, Block]
) -> Optional[Block]:
    """Follow the outgoing edge whose target has the smallest x."""
    chosen = outgoing[0]
    if len(outgoing) > 1:
        best_x = float('inf')
        for conn in outgoing:
            target = by_id.get(conn.to_id)
            if target is not None and target.x < best_x:
                best_x = target.x
                chosen = conn
    return by_id.get(chosen.to_id)


def resolve_chain(
    blocks: Sequence[Block],
    connections: Sequence[Connection]
) -> List[Block]:
    """
    Resolve the single forward path starting at a step block.
    
    Args:
        blocks: Diagram blocks
        connections: Diagram connections, in creation order
        
    Returns:
        Visited blocks in visitation order, each exactly once
        
    Raises:
        NoConnectedChain: If there is no step block
    """
    source = find_source_step(blocks, connections)
    if source is None:
        raise NoConnectedChain()
    
    # first block wins on duplicate ids
    by_id: Dict[str, Block] = {}
    for block in blocks:
        by_id.setdefault(block.id, block)
    
    chain: List[Block] = []
    visited = set()
    current: Optional[Block] = source
    
    while current is not None and current.id not in visited:
        chain.append(current)
        visited.add(current.id)
        
        outgoing = [c for c in connections if c.from_id == current.id]
        if not outgoing:
            break
        current = _next_block(outgoing, by_id)
    
    return chain
