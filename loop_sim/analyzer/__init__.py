"""Step-response analysis and visualization components."""

from loop_sim.analyzer.metrics import StepMetrics, compute_metrics, format_metrics
from loop_sim.analyzer.control_analysis import LoopAnalyzer
from loop_sim.analyzer.plots import ResponsePlotter

__all__ = [
    "StepMetrics",
    "compute_metrics",
    "format_metrics",
    "LoopAnalyzer",
    "ResponsePlotter",
]
