"""
Mutable diagram builder producing immutable snapshots for the engine.
"""

from typing import Dict, List, Optional, Tuple, Union

from loop_sim.model.blocks import Block, BlockKind, Connection, create_default_block


class Diagram:
    """
    Ordered collection of blocks and connections.

    Insertion order is preserved for both; a summing block's signs are
    matched to its incoming connections in that order.

    Example:
        >>> diagram = Diagram()
        >>> step = diagram.add_default_block("step")
        >>> plant = diagram.add_default_block("plant")
        >>> diagram.connect(step.id, plant.id)
        >>> blocks, connections = diagram.snapshot()
    """
    
    def __init__(
        self,
        blocks: Optional[List[Block]] = None,
        connections: Optional[List[Connection]] = None,
        id_counter: int = 1
    ):
        self._blocks: Dict[str, Block] = {}
        self._connections: List[Connection] = []
        self._id_counter = id_counter
        self._connection_counter = 0
        
        for block in blocks or []:
            self.add_block(block)
        for conn in connections or []:
            self._connections.append(conn)
            self._connection_counter += 1
    
    def add_block(self, block: Block) -> Block:
        """Add a block; ids must be unique."""
        if block.id in self._blocks:
            raise ValueError(f"Duplicate block id: {block.id}")
        self._blocks[block.id] = block
        return block
    
    def add_default_block(self, kind: Union[BlockKind, str]) -> Block:
        """Add a block of ``kind`` with default parameters and the next free id."""
        block = create_default_block(kind, self._id_counter)
        while block.id in self._blocks:
            self._id_counter += 1
            block = create_default_block(kind, self._id_counter)
        self._id_counter += 1
        return self.add_block(block)
    
    def update_block(self, block: Block) -> Block:
        """Replace the block with the same id."""
        if block.id not in self._blocks:
            raise KeyError(block.id)
        self._blocks[block.id] = block
        return block
    
    def remove_block(self, block_id: str) -> None:
        """Remove a block together with every connection touching it."""
        self._blocks.pop(block_id, None)
        self._connections = [
            c for c in self._connections
            if c.from_id != block_id and c.to_id != block_id
        ]
    
    def connect(self, from_id: str, to_id: str) -> Optional[Connection]:
        """
        Connect two blocks.
        
        Self-loops and repeated (from, to) pairs are ignored.
        
        Returns:
            The new connection, or None if nothing was added
        """
        if from_id == to_id:
            return None
        if any(c.from_id == from_id and c.to_id == to_id for c in self._connections):
            return None
        
        self._connection_counter += 1
        conn = Connection(
            id=f"{from_id}->{to_id}-{self._connection_counter}",
            from_id=from_id,
            to_id=to_id,
        )
        self._connections.append(conn)
        return conn
    
    def disconnect(self, connection_id: str) -> None:
        """Remove a connection by id."""
        self._connections = [c for c in self._connections if c.id != connection_id]
    
    def get_block(self, block_id: str) -> Block:
        return self._blocks[block_id]
    
    @property
    def blocks(self) -> List[Block]:
        return list(self._blocks.values())
    
    @property
    def connections(self) -> List[Connection]:
        return list(self._connections)
    
    def snapshot(self) -> Tuple[Tuple[Block, ...], Tuple[Connection, ...]]:
        """Immutable (blocks, connections) pair for one simulation run."""
        return tuple(self._blocks.values()), tuple(self._connections)
    
    def to_dict(self) -> Dict[str, list]:
        return {
            'blocks': [b.to_dict() for b in self._blocks.values()],
            'connections': [c.to_dict() for c in self._connections],
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, list]) -> 'Diagram':
        return cls(
            blocks=[Block.from_dict(b) for b in data.get('blocks', [])],
            connections=[Connection.from_dict(c) for c in data.get('connections', [])],
        )
    
    def __len__(self) -> int:
        return len(self._blocks)
