"""Utility functions and helpers."""

from loop_sim.utils.validators import (
    ValidationError,
    validate_real,
    validate_positive,
    validate_non_negative,
    validate_choice,
)

__all__ = [
    "ValidationError",
    "validate_real",
    "validate_positive",
    "validate_non_negative",
    "validate_choice",
]
