"""Static typing helpers for dimension-aware scalars.

NewType aliases document which canonical unit a bare float carries
through the simulation core.
"""

from typing import NewType

# Seconds
TimeScalar = NewType("TimeScalar", float)
# Events per second
FrequencyScalar = NewType("FrequencyScalar", float)
# Moment magnitude (dimensionless)
MagnitudeScalar = NewType("MagnitudeScalar", float)
# Value in [0, 1)
FractionScalar = NewType("FractionScalar", float)


def to_time_scalar(value: float) -> TimeScalar:
    """Convert a float to a TimeScalar.

    Args:
        value: Time value in seconds (canonical unit)

    Returns:
        TimeScalar wrapping the value
    """
    return TimeScalar(float(value))


def to_frequency_scalar(value: float) -> FrequencyScalar:
    """Convert a float to a FrequencyScalar.

    Args:
        value: Frequency value in Hz (canonical unit)

    Returns:
        FrequencyScalar wrapping the value

    Raises:
        ValueError: If value is negative
    """
    if value < 0:
        raise ValueError(f"Frequency value must be non-negative, got {value}")
    return FrequencyScalar(float(value))


def to_fraction_scalar(value: float) -> FractionScalar:
    """Convert a float to a FractionScalar.

    Args:
        value: Fraction in [0, 1)

    Returns:
        FractionScalar wrapping the value

    Raises:
        ValueError: If value is outside [0, 1)
    """
    if not 0.0 <= value < 1.0:
        raise ValueError(f"Fraction value must be in [0, 1), got {value}")
    return FractionScalar(float(value))
