"""
Block diagram data model.

Blocks are immutable records: an identity, a kind discriminant, a canvas
position and a kind-specific parameter payload. Connections are directed
edges between block ids. Nothing in this module holds simulation state.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Tuple, Union

from loop_sim.utils.validators import (
    ValidationError,
    validate_real,
    validate_positive,
    validate_choice,
)


class BlockKind(Enum):
    """Closed set of block kinds."""
    STEP = "step"
    CONTROLLER = "controller"
    PLANT = "plant"
    SUM = "sum"
    SCOPE = "scope"


class ControllerType(Enum):
    """Control law selection."""
    P = "P"
    PI = "PI"
    PID = "PID"


SIGN_PLUS = "+"
SIGN_MINUS = "-"
_SIGN_ALIASES = {"+": SIGN_PLUS, "-": SIGN_MINUS, "−": SIGN_MINUS}


@dataclass(frozen=True)
class StepParams:
    """Reference source: jumps from 0 to ``amplitude`` at ``start_time``."""
    amplitude: float = 1.0
    start_time: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'amplitude', validate_real(self.amplitude, "amplitude"))
        object.__setattr__(self, 'start_time', validate_real(self.start_time, "startTime"))

    def value_at(self, t: float) -> float:
        """Reference value at time t."""
        return self.amplitude if t >= self.start_time else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {'amplitude': self.amplitude, 'startTime': self.start_time}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StepParams':
        return cls(
            amplitude=data.get('amplitude', 1.0),
            start_time=data.get('startTime', data.get('start_time', 0.0)),
        )


@dataclass(frozen=True)
class ControllerParams:
    """
    Controller gains and control law.

    An unknown ``controller_type`` string is kept verbatim; the engine
    treats it as PID.
    """
    controller_type: Union[ControllerType, str] = ControllerType.PID
    kp: float = 2.0
    ki: float = 1.0
    kd: float = 0.2

    def __post_init__(self):
        if isinstance(self.controller_type, str):
            try:
                object.__setattr__(self, 'controller_type', ControllerType(self.controller_type))
            except ValueError:
                pass
        object.__setattr__(self, 'kp', validate_real(self.kp, "kp"))
        object.__setattr__(self, 'ki', validate_real(self.ki, "ki"))
        object.__setattr__(self, 'kd', validate_real(self.kd, "kd"))

    def to_dict(self) -> Dict[str, Any]:
        ctype = self.controller_type
        return {
            'type': ctype.value if isinstance(ctype, ControllerType) else ctype,
            'kp': self.kp,
            'ki': self.ki,
            'kd': self.kd,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ControllerParams':
        return cls(
            controller_type=data.get('type', data.get('controller_type', ControllerType.PID)),
            kp=data.get('kp', 2.0),
            ki=data.get('ki', 1.0),
            kd=data.get('kd', 0.2),
        )


@dataclass(frozen=True)
class PlantParams:
    """First-order lag: dy/dt = (-y + K*u) / T."""
    gain: float = 1.0
    time_constant: float = 1.5

    def __post_init__(self):
        object.__setattr__(self, 'gain', validate_real(self.gain, "K"))
        object.__setattr__(self, 'time_constant', validate_positive(self.time_constant, "T"))

    def to_dict(self) -> Dict[str, Any]:
        return {'K': self.gain, 'T': self.time_constant}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlantParams':
        return cls(
            gain=data.get('K', data.get('gain', 1.0)),
            time_constant=data.get('T', data.get('time_constant', 1.5)),
        )


@dataclass(frozen=True)
class SumParams:
    """
    Summing junction signs.

    ``signs[i]`` applies to the i-th incoming connection of the block, in the
    order the connections were created.
    """
    signs: Tuple[str, ...] = (SIGN_PLUS, SIGN_MINUS)

    def __post_init__(self):
        signs = []
        for i, sign in enumerate(self.signs):
            validate_choice(sign, f"signs[{i}]", _SIGN_ALIASES)
            signs.append(_SIGN_ALIASES[sign])
        object.__setattr__(self, 'signs', tuple(signs))

    def sign_at(self, index: int) -> int:
        """Numeric sign for input ``index``; missing entries count as '+'."""
        if index < len(self.signs) and self.signs[index] == SIGN_MINUS:
            return -1
        return 1

    def to_dict(self) -> Dict[str, Any]:
        return {'signs': list(self.signs)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SumParams':
        return cls(signs=tuple(data.get('signs', (SIGN_PLUS, SIGN_MINUS))))


@dataclass(frozen=True)
class ScopeParams:
    """Scope sinks carry no parameters."""

    def to_dict(self) -> Dict[str, Any]:
        return {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScopeParams':
        return cls()


BlockParams = Union[StepParams, ControllerParams, PlantParams, SumParams, ScopeParams]

PARAMS_BY_KIND = {
    BlockKind.STEP: StepParams,
    BlockKind.CONTROLLER: ControllerParams,
    BlockKind.PLANT: PlantParams,
    BlockKind.SUM: SumParams,
    BlockKind.SCOPE: ScopeParams,
}


@dataclass(frozen=True)
class Block:
    """
    A diagram block.

    ``x`` and ``y`` are canvas coordinates; the simulation only uses ``x``
    to break ties between outgoing connections.
    """
    id: str
    kind: BlockKind
    x: float = 0.0
    y: float = 0.0
    params: BlockParams = None

    def __post_init__(self):
        if not isinstance(self.kind, BlockKind):
            try:
                object.__setattr__(self, 'kind', BlockKind(self.kind))
            except ValueError:
                raise ValidationError(f"Unknown block kind: {self.kind!r}")

        params_cls = PARAMS_BY_KIND[self.kind]
        if self.params is None:
            object.__setattr__(self, 'params', params_cls())
        elif isinstance(self.params, dict):
            object.__setattr__(self, 'params', params_cls.from_dict(self.params))
        elif not isinstance(self.params, params_cls):
            raise ValidationError(
                f"Block {self.id!r} of kind '{self.kind.value}' needs "
                f"{params_cls.__name__}, got {type(self.params).__name__}"
            )

        object.__setattr__(self, 'x', validate_real(self.x, "x"))
        object.__setattr__(self, 'y', validate_real(self.y, "y"))

    def with_params(self, **changes) -> 'Block':
        """
        Copy of this block with some parameter fields replaced.

        Keys are the params dataclass field names (``gain``, ``start_time``...).

        Raises:
            ValidationError: If a key is not a field of the block's params
        """
        known = {f.name for f in fields(self.params)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValidationError(
                f"{type(self.params).__name__} has no field(s) {', '.join(unknown)}"
            )
        return Block(self.id, self.kind, self.x, self.y, replace(self.params, **changes))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'kind': self.kind.value,
            'x': self.x,
            'y': self.y,
            'params': self.params.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Block':
        return cls(
            id=data['id'],
            kind=data['kind'],
            x=data.get('x', 0.0),
            y=data.get('y', 0.0),
            params=dict(data.get('params') or {}),
        )


@dataclass(frozen=True)
class Connection:
    """Directed edge from one block to another."""
    id: str
    from_id: str
    to_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'fromId': self.from_id, 'toId': self.to_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Connection':
        from_id = data.get('fromId', data.get('from_id'))
        to_id = data.get('toId', data.get('to_id'))
        return cls(
            id=data.get('id', f"{from_id}->{to_id}"),
            from_id=from_id,
            to_id=to_id,
        )


def create_default_block(kind: Union[BlockKind, str], id_suffix: int) -> Block:
    """
    Create a block with the editor's default parameters.

    Args:
        kind: Block kind
        id_suffix: Counter used for the id and the initial position

    Returns:
        New block with id ``"<kind>-<id_suffix>"``
    """
    kind = BlockKind(kind)
    return Block(
        id=f"{kind.value}-{id_suffix}",
        kind=kind,
        x=80 + id_suffix * 20,
        y=70 + id_suffix * 10,
        params=PARAMS_BY_KIND[kind](),
    )
