"""Exceptions raised when catalog parameters are rejected.

Every check runs before the first random draw, so a raised error means no
event was generated and no output buffer was written.
"""

from __future__ import annotations


class ProcessParameterError(ValueError):
    """Base class for rejected process or driver parameters."""


class InvalidMagnitudeRangeError(ProcessParameterError):
    """Raised when the lower magnitude bound is not below the upper one."""

    def __init__(self, magnitude_min: float, magnitude_max: float):
        self.magnitude_min = magnitude_min
        self.magnitude_max = magnitude_max
        super().__init__(
            f"Invalid magnitude range: Mmin={magnitude_min} must be below "
            f"Mmax={magnitude_max}"
        )


class NonStationaryExponentError(ProcessParameterError):
    """Raised for an Omori exponent p <= 1 (the kernel integral diverges)."""

    def __init__(self, p: float):
        self.p = p
        super().__init__(
            f"Omori exponent must satisfy p > 1 for a stationary process, got p={p}"
        )


class ExplosiveProcessError(ProcessParameterError):
    """Raised for an offspring fraction >= 1 (supercritical branching)."""

    def __init__(self, offspring_fraction: float):
        self.offspring_fraction = offspring_fraction
        super().__init__(
            f"Explosive process: offspring fraction must be < 1, "
            f"got {offspring_fraction}"
        )


class InvalidOffspringFractionError(ProcessParameterError):
    """Raised for a negative offspring fraction."""

    def __init__(self, offspring_fraction: float):
        self.offspring_fraction = offspring_fraction
        super().__init__(
            f"Offspring fraction must be non-negative, got {offspring_fraction}"
        )


class BufferSizeMismatchError(ProcessParameterError):
    """Raised when the magnitude and time output buffers differ in length."""

    def __init__(self, n_magnitudes: int, n_times: int):
        self.n_magnitudes = n_magnitudes
        self.n_times = n_times
        super().__init__(
            f"Output buffers differ in size: {n_magnitudes} magnitudes vs "
            f"{n_times} times"
        )
