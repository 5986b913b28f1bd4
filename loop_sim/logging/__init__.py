"""CSV logging of simulation samples."""

from loop_sim.logging.csv_logger import CSVLogger, export_samples_csv

__all__ = [
    "CSVLogger",
    "export_samples_csv",
]
