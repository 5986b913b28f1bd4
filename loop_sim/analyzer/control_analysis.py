"""
Continuous-time reference analysis of a classified loop using python-control.
Provides closed-loop transfer functions, stability and the exact step response.
"""

from typing import Dict, Any, Optional, Sequence, Tuple
import numpy as np
import control as ct

from loop_sim.model.blocks import Block, BlockKind, Connection, ControllerParams, ControllerType
from loop_sim.simulation.topology import LoopTopology


class LoopAnalyzer:
    """Build and analyze the continuous transfer functions of a loop."""
    
    def __init__(self, derivative_filter_coeff: float = 100.0):
        """
        Args:
            derivative_filter_coeff: N in kd*s/(1 + s/N), keeps the PID proper
        """
        self._N = derivative_filter_coeff
    
    def controller_transfer_function(
        self, params: Optional[ControllerParams]
    ) -> ct.TransferFunction:
        """C(s) for the controller block; unity when there is none."""
        if params is None:
            return ct.TransferFunction([1], [1])
        
        s = ct.TransferFunction([1, 0], [1])
        C = ct.TransferFunction([params.kp], [1])
        if params.controller_type == ControllerType.P:
            return C
        if params.ki != 0:
            C = C + params.ki / s
        if params.controller_type != ControllerType.PI and params.kd != 0:
            C = C + params.kd * s / (1 + s / self._N)
        return C
    
    @staticmethod
    def plant_transfer_function(topology: LoopTopology) -> ct.TransferFunction:
        """Series product of the cascade, prod K_i / (T_i s + 1)."""
        G = ct.TransferFunction([1], [1])
        for plant in topology.plants:
            G = G * ct.TransferFunction([plant.params.gain], [plant.params.time_constant, 1])
        return G
    
    def open_loop(self, topology: LoopTopology) -> ct.TransferFunction:
        """L(s) = C(s) G(s)."""
        controller = topology.controller
        C = self.controller_transfer_function(
            controller.params if controller is not None else None
        )
        return C * self.plant_transfer_function(topology)
    
    @staticmethod
    def feedback_gains(
        topology: LoopTopology,
        blocks: Sequence[Block],
        connections: Sequence[Connection]
    ) -> Tuple[float, float]:
        """
        Signed weights of the reference and of the loop output at the error node.

        Without a summing block this is unity negative feedback, (1, -1).
        Sum inputs are matched to signs exactly as the signal engine does, so
        ``blocks`` must be the whole diagram: an input from a block outside
        the chain still takes a sign.

        Raises:
            ValueError: If the sum is fed from an intermediate cascade stage
        """
        sum_block = topology.sum_block
        if sum_block is None:
            return 1.0, -1.0

        kinds = {b.id: b.kind for b in blocks}

        last_stage = len(topology.plants) - 1
        ref_gain = fb_gain = 0.0
        index = 0
        for conn in connections:
            if conn.to_id != sum_block.id or conn.from_id not in kinds:
                continue
            sign = sum_block.params.sign_at(index)
            index += 1
            kind = kinds[conn.from_id]
            if kind == BlockKind.STEP:
                ref_gain += sign
            elif kind == BlockKind.PLANT:
                stage = topology.plant_position(conn.from_id)
                if stage is not None and stage != last_stage:
                    raise ValueError("Feedback from an intermediate plant stage is not supported")
                fb_gain += sign
        return ref_gain, fb_gain

    def closed_loop(
        self,
        topology: LoopTopology,
        blocks: Sequence[Block],
        connections: Sequence[Connection]
    ) -> ct.TransferFunction:
        """Y(s)/R(s) = a L / (1 - b L) for reference gain a, feedback gain b."""
        L = self.open_loop(topology)
        ref_gain, fb_gain = self.feedback_gains(topology, blocks, connections)
        if fb_gain == 0:
            return ref_gain * L
        return ref_gain * ct.feedback(L, -fb_gain)

    def reference_response(
        self,
        topology: LoopTopology,
        timestamps: np.ndarray,
        blocks: Sequence[Block],
        connections: Sequence[Connection]
    ) -> np.ndarray:
        """Exact continuous output for the loop's step reference."""
        timestamps = np.asarray(timestamps, dtype=float)
        step = topology.step.params
        r = np.where(timestamps >= step.start_time, step.amplitude, 0.0)
        sys = self.closed_loop(topology, blocks, connections)
        _, y_out = ct.forced_response(sys, T=timestamps, U=r)
        return np.asarray(y_out, dtype=float).flatten()
    
    @staticmethod
    def is_stable(sys: ct.TransferFunction) -> bool:
        """Check if system is stable (all poles in left half-plane)."""
        poles = ct.poles(sys)
        return bool(np.all(np.real(poles) < 0))
    
    @staticmethod
    def dc_gain(sys: ct.TransferFunction) -> float:
        return float(np.real(ct.dcgain(sys)))
    
    def analyze(
        self,
        topology: LoopTopology,
        blocks: Sequence[Block],
        connections: Sequence[Connection]
    ) -> Dict[str, Any]:
        """Closed-loop summary."""
        cl_sys = self.closed_loop(topology, blocks, connections)
        return {
            'closed_loop_tf': cl_sys,
            'is_stable': self.is_stable(cl_sys),
            'dc_gain': self.dc_gain(cl_sys),
            'poles': ct.poles(cl_sys),
        }
