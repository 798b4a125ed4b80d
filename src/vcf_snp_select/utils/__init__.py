"""Shared utility modules."""

from .validators import (
    ValidationError,
    validate_log_level,
    validate_positive_int,
    validate_threshold,
)

__all__ = [
    "ValidationError",
    "validate_log_level",
    "validate_positive_int",
    "validate_threshold",
]
