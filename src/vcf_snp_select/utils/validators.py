"""Input validation utilities."""

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ValidationError(ValueError):
    """Raised when input validation fails."""

    pass


def validate_positive_int(name: str, value) -> int:
    """Validate a strictly positive integer such as a window size.

    Args:
        name: Option name used in the error message
        value: Value to check

    Returns:
        The value unchanged

    Raises:
        ValidationError: If value is not an int or is not positive
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_threshold(
    name: str,
    value,
    minimum: float | None = None,
    maximum: float | None = None,
) -> float:
    """Validate a numeric filter threshold and return it as float.

    Raises:
        ValidationError: If value is not a number or falls outside [minimum, maximum]
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError(f"{name} must be a number, got {type(value).__name__}")
    value = float(value)
    if value != value:
        raise ValidationError(f"{name} must not be NaN")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{name} must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{name} must be <= {maximum}, got {value}")
    return value


def validate_log_level(value) -> str:
    """Validate and normalize a logging level name."""
    if not isinstance(value, str):
        raise ValidationError(f"log_level must be a string, got {type(value).__name__}")
    if value.upper() not in VALID_LOG_LEVELS:
        raise ValidationError(
            f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got '{value}'"
        )
    return value.upper()
