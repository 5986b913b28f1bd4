#!/usr/bin/env python3
"""
Basic Loop Simulation Demo

Demonstrates:
- Building a diagram from default blocks
- Running the closed-loop simulation
- Step-response metrics
- CSV export and plotting
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from loop_sim.model.diagram import Diagram
from loop_sim.simulation.engine import run_simulation
from loop_sim.simulation.errors import SimulationError
from loop_sim.simulation.options import SimulationOptions
from loop_sim.analyzer.metrics import format_metrics
from loop_sim.analyzer.control_analysis import LoopAnalyzer
from loop_sim.analyzer.plots import ResponsePlotter
from loop_sim.logging.csv_logger import export_samples_csv


def main():
    print("=" * 60)
    print("Basic Loop Simulation Demo")
    print("=" * 60)
    
    # Step -> Σ(+, -) -> PID -> plant -> scope, plant fed back into Σ
    diagram = Diagram()
    step = diagram.add_default_block("step")
    sum_block = diagram.add_default_block("sum")
    controller = diagram.add_default_block("controller")
    plant = diagram.add_default_block("plant")
    scope = diagram.add_default_block("scope")
    
    # reference first so it takes the '+' sign
    diagram.connect(step.id, sum_block.id)
    diagram.connect(sum_block.id, controller.id)
    diagram.connect(controller.id, plant.id)
    diagram.connect(plant.id, scope.id)
    diagram.connect(plant.id, sum_block.id)
    
    for block in diagram.blocks:
        print(f"  {block.id:14s} {block.params.to_dict()}")
    
    options = SimulationOptions(dt=0.02, t_end=10.0)
    blocks, connections = diagram.snapshot()
    
    try:
        result = run_simulation(blocks, connections, options)
    except SimulationError as e:
        print(f"\nSimulation failed: {e}")
        return
    
    print(f"\nSamples: {len(result.samples)}")
    print(f"Final output: {result.samples[-1].y:.4f}")
    
    print("\nStep Response Metrics:")
    for name, value in format_metrics(result.metrics).items():
        print(f"  {name}: {value}")
    
    analysis = LoopAnalyzer().analyze(result.topology, blocks, connections)
    print(f"\nContinuous closed loop stable: {analysis['is_stable']}")
    print(f"Continuous closed loop DC gain: {analysis['dc_gain']:.4f}")
    
    path = export_samples_csv(result.samples, "output/basic_demo.csv")
    print(f"\nSamples written to {path}")
    
    print("\nGenerating plots...")
    ResponsePlotter().plot_response(result, title="PID loop with summing junction")
    
    print("\nClose plot window to exit.")
    ResponsePlotter.show()


if __name__ == "__main__":
    Path("output").mkdir(exist_ok=True)
    main()
