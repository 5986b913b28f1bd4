"""
Plotting utilities for simulated step responses.
"""

from typing import Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from loop_sim.analyzer.metrics import StepMetrics, compute_metrics, format_metrics


class ResponsePlotter:
    """
    Draw reference, output and control signal of a run.
    
    Accepts anything exposing ``samples`` (and optionally ``metrics``),
    such as a SimulationResult.
    """
    
    def __init__(self, style: str = 'seaborn-v0_8-whitegrid'):
        try:
            plt.style.use(style)
        except OSError:
            plt.style.use('default')
        
        self._colors = {
            'reference': '#2ecc71',
            'output': '#3498db',
            'control': '#9b59b6',
            'band': '#7f8c8d',
        }
    
    def plot_response(
        self,
        result,
        title: str = "Step Response",
        figsize: Tuple[int, int] = (12, 7),
        metrics: Optional[StepMetrics] = None
    ) -> Figure:
        """
        Plot a run with the metrics read-out in the legend area.
        
        Args:
            result: Object with a ``samples`` sequence of (t, r, y, u)
            title: Plot title
            figsize: Figure size
            metrics: Metrics to annotate; taken from ``result`` or computed
            
        Returns:
            Matplotlib Figure
        """
        samples = result.samples
        if metrics is None:
            metrics = getattr(result, 'metrics', None) or compute_metrics(samples)
        
        t = np.array([s.t for s in samples])
        r = np.array([s.r for s in samples])
        y = np.array([s.y for s in samples])
        u = np.array([s.u for s in samples])
        
        fig, (ax1, ax2) = plt.subplots(
            2, 1, figsize=figsize, sharex=True,
            gridspec_kw={'height_ratios': [2, 1]}
        )
        
        ax1.plot(t, r, '--', color=self._colors['reference'], linewidth=2, label='Reference r')
        ax1.plot(t, y, '-', color=self._colors['output'], linewidth=1.5, label='Output y')
        if len(y) and metrics.settling_time is not None:
            y_ss = y[-1]
            band = 0.02 * abs(y_ss)
            ax1.axhspan(y_ss - band, y_ss + band, color=self._colors['band'], alpha=0.15,
                        label='±2% band')
        ax1.set_ylabel('Value', fontsize=12)
        ax1.set_title(title, fontsize=14, fontweight='bold')
        ax1.legend(loc='lower right')
        ax1.grid(True, alpha=0.3)
        
        readout = "\n".join(f"{k}: {v}" for k, v in format_metrics(metrics).items())
        ax1.text(0.02, 0.97, readout, transform=ax1.transAxes, va='top', fontsize=9,
                 bbox=dict(boxstyle='round', facecolor='white', alpha=0.8))
        
        ax2.plot(t, u, '-', color=self._colors['control'], linewidth=1.2)
        ax2.axhline(y=0, color='gray', linestyle=':', alpha=0.5)
        ax2.set_xlabel('Time (s)', fontsize=12)
        ax2.set_ylabel('Control u', fontsize=12)
        ax2.grid(True, alpha=0.3)
        
        plt.tight_layout()
        return fig
    
    @staticmethod
    def show():
        """Display all plots."""
        plt.show()
