"""
Validation utilities for block and run parameters.
Provides input validation with clear error messages.
"""

from typing import Any, Iterable
import math
import numbers


class ValidationError(ValueError):
    """Raised when a block parameter or run option is invalid."""
    pass


def validate_real(value: Any, name: str) -> float:
    """
    Validate that a value is a finite real number.
    
    Args:
        value: The value to validate
        name: Parameter name for error messages
        
    Returns:
        The value as float
        
    Raises:
        ValidationError: If value is not a finite real number
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name} must be a real number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    return value


def validate_positive(value: Any, name: str) -> float:
    """
    Validate that a value is strictly positive.
    
    Args:
        value: The value to validate
        name: Parameter name for error messages
        
    Returns:
        The validated value
        
    Raises:
        ValidationError: If value is not positive
    """
    value = validate_real(value, name)
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: Any, name: str) -> float:
    """
    Validate that a value is non-negative (>= 0).
    
    Args:
        value: The value to validate
        name: Parameter name for error messages
        
    Returns:
        The validated value
        
    Raises:
        ValidationError: If value is negative
    """
    value = validate_real(value, name)
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_choice(value: Any, name: str, choices: Iterable[Any]) -> Any:
    """Validate that a value is one of the allowed choices."""
    choices = tuple(choices)
    if value not in choices:
        allowed = ", ".join(repr(c) for c in choices)
        raise ValidationError(f"{name} must be one of {allowed}, got {value!r}")
    return value
