"""
Ready-made diagrams for common loop structures.
"""

from typing import Sequence

from loop_sim.model.blocks import (
    Block,
    BlockKind,
    ControllerParams,
    ControllerType,
    PlantParams,
    ScopeParams,
    StepParams,
    SumParams,
)
from loop_sim.model.diagram import Diagram


class DiagramLibrary:
    """Library of predefined block diagrams."""
    
    @staticmethod
    def default_loop() -> Diagram:
        """Default step, PID, plant and scope blocks wired in series (unity feedback)."""
        diagram = Diagram(id_counter=2)
        diagram.add_block(Block("step-1", BlockKind.STEP, 60, 100, StepParams(1.0, 0.0)))
        diagram.add_block(Block(
            "controller-1", BlockKind.CONTROLLER, 220, 100,
            ControllerParams(ControllerType.PID, kp=2.0, ki=1.0, kd=0.2)
        ))
        diagram.add_block(Block("plant-1", BlockKind.PLANT, 400, 100, PlantParams(1.0, 1.5)))
        diagram.add_block(Block("scope-1", BlockKind.SCOPE, 560, 100, ScopeParams()))
        diagram.connect("step-1", "controller-1")
        diagram.connect("controller-1", "plant-1")
        diagram.connect("plant-1", "scope-1")
        return diagram
    
    @staticmethod
    def open_loop(
        amplitude: float = 1.0,
        gain: float = 1.0,
        time_constant: float = 1.0
    ) -> Diagram:
        """
        Step → Σ(+) → plant → scope.
        
        A summing block with the step as its only input passes the
        reference straight to the plant, so there is no feedback.
        """
        diagram = Diagram()
        diagram.add_block(Block("step", BlockKind.STEP, 0, 0, StepParams(amplitude, 0.0)))
        diagram.add_block(Block("sum", BlockKind.SUM, 100, 0, SumParams(("+",))))
        diagram.add_block(Block("plant", BlockKind.PLANT, 200, 0, PlantParams(gain, time_constant)))
        diagram.add_block(Block("scope", BlockKind.SCOPE, 300, 0, ScopeParams()))
        diagram.connect("step", "sum")
        diagram.connect("sum", "plant")
        diagram.connect("plant", "scope")
        return diagram
    
    @staticmethod
    def proportional_loop(
        kp: float = 2.0,
        gain: float = 1.0,
        time_constant: float = 1.5
    ) -> Diagram:
        """Step → P controller → plant with unity negative feedback."""
        diagram = Diagram()
        diagram.add_block(Block("step", BlockKind.STEP, 0, 0, StepParams(1.0, 0.0)))
        diagram.add_block(Block(
            "ctrl", BlockKind.CONTROLLER, 100, 0,
            ControllerParams(ControllerType.P, kp=kp, ki=0.0, kd=0.0)
        ))
        diagram.add_block(Block("plant", BlockKind.PLANT, 200, 0, PlantParams(gain, time_constant)))
        diagram.connect("step", "ctrl")
        diagram.connect("ctrl", "plant")
        return diagram
    
    @staticmethod
    def sum_feedback_loop(
        controller: ControllerParams = None,
        plants: Sequence[PlantParams] = (PlantParams(1.0, 1.5),)
    ) -> Diagram:
        """
        Step → Σ(+, −) → controller → plant cascade → scope, with the last
        plant wired back into the summing block.
        """
        controller = controller or ControllerParams(ControllerType.PI, kp=1.0, ki=0.5, kd=0.0)
        diagram = Diagram()
        diagram.add_block(Block("step", BlockKind.STEP, 0, 0, StepParams(1.0, 0.0)))
        diagram.add_block(Block("sum", BlockKind.SUM, 100, 0, SumParams(("+", "-"))))
        diagram.add_block(Block("ctrl", BlockKind.CONTROLLER, 200, 0, controller))
        
        previous = "ctrl"
        plant_ids = []
        for i, params in enumerate(plants):
            plant_id = f"plant-{i + 1}"
            diagram.add_block(Block(plant_id, BlockKind.PLANT, 300 + 100 * i, 0, params))
            plant_ids.append(plant_id)
        diagram.add_block(Block("scope", BlockKind.SCOPE, 300 + 100 * len(plants), 0, ScopeParams()))
        
        # reference first so it takes the '+' sign
        diagram.connect("step", "sum")
        diagram.connect("sum", "ctrl")
        for plant_id in plant_ids:
            diagram.connect(previous, plant_id)
            previous = plant_id
        diagram.connect(previous, "scope")
        diagram.connect(previous, "sum")
        return diagram
    
    @staticmethod
    def get_all_diagrams() -> dict:
        """Get all predefined diagrams by name."""
        return {
            'default_loop': DiagramLibrary.default_loop(),
            'open_loop': DiagramLibrary.open_loop(),
            'proportional_loop': DiagramLibrary.proportional_loop(),
            'sum_feedback_loop': DiagramLibrary.sum_feedback_loop(),
        }
