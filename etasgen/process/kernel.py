"""ETAS (M, t) process kernel functions.

Closed-form pieces of the marked Hawkes process with a modified Omori-Utsu
triggering kernel and truncated Gutenberg-Richter magnitudes. Every
sampler inverts a survival function exactly; there is no thinning and no
root finding, so each draw is O(1).

Conventions:
    - times and rates are plain floats in canonical units (seconds, Hz)
    - ``fk`` is the triggering-rate constant K / Tref**p of Ogata (1988),
      a frequency, with Tref a fixed reference time
    - excitation factor f(M) = exp(beta * (M - Mr))
"""

from __future__ import annotations

import dataclasses
import warnings
from typing import Optional

import numpy as np

from ..errors import (
    ExplosiveProcessError,
    InvalidMagnitudeRangeError,
    InvalidOffspringFractionError,
    NonStationaryExponentError,
    ProcessParameterError,
)
from ..types import (
    FrequencyScalar,
    MagnitudeScalar,
    TimeScalar,
    to_fraction_scalar,
    to_frequency_scalar,
    to_time_scalar,
)


# One canonical second
REFERENCE_TIME = 1.0

NEAR_CRITICAL_FRACTION = 0.99
LONG_MEMORY_EXPONENT = 1.5


def b_value_to_beta(b_value: float) -> float:
    """Convert a Gutenberg-Richter b-value to beta = ln(10) * b."""
    return float(np.log(10.0) * b_value)


def check_process_parameters(
    mu_0: float,
    magnitude_min: float,
    magnitude_max: float,
    beta: float,
    p: float,
    c: float,
    offspring_fraction: float,
    reference_time: float = REFERENCE_TIME,
    reference_magnitude: Optional[float] = None,
    warn: bool = True,
    stacklevel: int = 2,
) -> None:
    """Reject parameters that do not define a stationary ETAS process.

    Raises:
        InvalidMagnitudeRangeError: If magnitude_min >= magnitude_max
        NonStationaryExponentError: If p <= 1
        ExplosiveProcessError: If offspring_fraction >= 1
        InvalidOffspringFractionError: If offspring_fraction < 0
        ProcessParameterError: For non-finite or non-positive scales
    """
    named = {
        "mu_0": mu_0,
        "magnitude_min": magnitude_min,
        "magnitude_max": magnitude_max,
        "beta": beta,
        "p": p,
        "c": c,
        "offspring_fraction": offspring_fraction,
        "reference_time": reference_time,
    }
    if reference_magnitude is not None:
        named["reference_magnitude"] = reference_magnitude
    for name, value in named.items():
        if not np.isfinite(value):
            raise ProcessParameterError(f"{name} must be finite, got {value}")

    if magnitude_min >= magnitude_max:
        raise InvalidMagnitudeRangeError(magnitude_min, magnitude_max)
    if p <= 1.0:
        raise NonStationaryExponentError(p)
    if offspring_fraction >= 1.0:
        raise ExplosiveProcessError(offspring_fraction)
    if offspring_fraction < 0.0:
        raise InvalidOffspringFractionError(offspring_fraction)

    for name in ("mu_0", "beta", "c", "reference_time"):
        if named[name] <= 0.0:
            raise ProcessParameterError(f"{name} must be positive, got {named[name]}")

    if warn:
        warn_on_caveats(p, offspring_fraction, stacklevel=stacklevel + 1)


def warn_on_caveats(p: float, offspring_fraction: float, stacklevel: int = 2) -> None:
    """Emit UserWarnings for valid but delicate parameter choices.

    ``stacklevel`` follows ``warnings.warn``: the default blames the caller.
    """
    if offspring_fraction > NEAR_CRITICAL_FRACTION:
        warnings.warn(
            f"Offspring fraction {offspring_fraction} is close to critical. "
            "Open descendant streams can grow large before the process "
            "settles; budget memory accordingly.",
            UserWarning,
            stacklevel=stacklevel
        )
    if p < LONG_MEMORY_EXPONENT:
        warnings.warn(
            f"Omori exponent p={p} < {LONG_MEMORY_EXPONENT}: the process may "
            "converge to its stationary regime very slowly. The warm-up "
            "discard only approximates steady state.",
            UserWarning,
            stacklevel=stacklevel
        )


def critical_rate(
    magnitude_min: float,
    magnitude_max: float,
    p: float,
    c: float,
    beta: float,
    reference_time: float = REFERENCE_TIME,
    reference_magnitude: Optional[float] = None,
) -> FrequencyScalar:
    """Triggering-rate constant at which one event has one direct child.

    The expected number of direct descendants, averaged over the truncated
    Gutenberg-Richter density, is one for

        K* = (p-1) c**(p-1) (1 - exp(-beta dM)) / (beta exp(beta (Mmin-Mr)) dM)

    with dM = Mmax - Mmin. The value returned is K* / Tref**p, evaluated as
    (p-1) (c/Tref)**p / c so that the power never leaves log space.

    Args:
        magnitude_min: Lower magnitude bound Mmin
        magnitude_max: Upper magnitude bound Mmax
        p: Omori exponent (> 1)
        c: Omori time lag (seconds)
        beta: Gutenberg-Richter exponent ln(10) * b
        reference_time: Reference time scale Tref (seconds)
        reference_magnitude: Mr, defaults to Mmin

    Returns:
        Critical rate in Hz
    """
    if reference_magnitude is None:
        reference_magnitude = magnitude_min
    dm = magnitude_max - magnitude_min
    magnitude_mass = -np.expm1(-beta * dm) / (
        beta * np.exp(beta * (magnitude_min - reference_magnitude)) * dm
    )
    time_mass = (p - 1.0) * np.exp(p * np.log(c / reference_time)) / c
    return FrequencyScalar(float(time_mass * magnitude_mass))


@dataclasses.dataclass(frozen=True)
class ProcessParameters:
    """Validated, immutable parameters of the ETAS (M, t) process.

    Build instances through ``ProcessParameters.create`` so that the
    stationarity checks run and ``fk`` is derived consistently.

    Attributes:
        mu_0: Background rate (Hz)
        c: Omori time lag (s)
        p: Omori exponent
        beta: Gutenberg-Richter exponent ln(10) * b
        magnitude_min: Lower magnitude bound
        magnitude_max: Upper magnitude bound
        reference_magnitude: Mr of the excitation factor
        offspring_fraction: Ratio of fk to its critical value
        reference_time: Tref (s)
        fk: Effective triggering-rate constant K / Tref**p (Hz)
    """
    mu_0: float
    c: float
    p: float
    beta: float
    magnitude_min: float
    magnitude_max: float
    reference_magnitude: float
    offspring_fraction: float
    reference_time: float
    fk: float

    @classmethod
    def create(
        cls,
        mu_0: float,
        magnitude_min: float,
        magnitude_max: float,
        beta: float,
        p: float,
        c: float,
        offspring_fraction: float,
        reference_time: float = REFERENCE_TIME,
        reference_magnitude: Optional[float] = None,
        warn: bool = True,
        stacklevel: int = 2,
    ) -> ProcessParameters:
        """Validate the inputs and derive the triggering-rate constant.

        Raises:
            ProcessParameterError: Or one of its named subclasses
        """
        check_process_parameters(
            mu_0, magnitude_min, magnitude_max, beta, p, c,
            offspring_fraction, reference_time, reference_magnitude,
            warn=warn, stacklevel=stacklevel + 1
        )
        if reference_magnitude is None:
            reference_magnitude = magnitude_min
        k_crit = critical_rate(
            magnitude_min, magnitude_max, p, c, beta,
            reference_time=reference_time,
            reference_magnitude=reference_magnitude,
        )
        return cls(
            mu_0=to_frequency_scalar(mu_0),
            c=to_time_scalar(c),
            p=float(p),
            beta=float(beta),
            magnitude_min=float(magnitude_min),
            magnitude_max=float(magnitude_max),
            reference_magnitude=float(reference_magnitude),
            offspring_fraction=to_fraction_scalar(offspring_fraction),
            reference_time=to_time_scalar(reference_time),
            fk=to_frequency_scalar(offspring_fraction * k_crit),
        )

    @property
    def critical_fk(self) -> FrequencyScalar:
        """Critical value of ``fk`` for these parameters."""
        return critical_rate(
            self.magnitude_min, self.magnitude_max, self.p, self.c, self.beta,
            reference_time=self.reference_time,
            reference_magnitude=self.reference_magnitude,
        )


def excitation_factor(magnitude, params: ProcessParameters):
    """Magnitude-dependent excitation f(M) = exp(beta (M - Mr))."""
    return np.exp(params.beta * (magnitude - params.reference_magnitude))


def draw_magnitude(q, magnitude_min: float, magnitude_max: float, beta: float):
    """Draw a truncated Gutenberg-Richter magnitude by CDF inversion.

    M = Mmin - ln(1 - q (1 - exp(-beta (Mmax - Mmin)))) / beta

    Args:
        q: Uniform variate(s) in (0, 1)
        magnitude_min: Lower bound Mmin
        magnitude_max: Upper bound Mmax
        beta: ln(10) * b

    Returns:
        Magnitude(s) in [Mmin, Mmax], same shape as ``q``
    """
    return magnitude_min - np.log1p(q * np.expm1(-beta * (magnitude_max - magnitude_min))) / beta


def next_background_occurrence(q, last_time, mu_0: float):
    """Next background time t_last - ln(q) / mu_0 (exponential waiting time)."""
    return last_time - np.log(q) / mu_0


def tail_integral(
    ancestor_time,
    last_time,
    ancestor_magnitude,
    params: ProcessParameters,
):
    """Integrated triggering rate of one ancestor from ``last_time`` to infinity.

    Lambda_inf = f(Mi) Tref fk / (p - 1) * ((tl - ti + c) / Tref)**(1 - p)

    Note:
        Tref fk ((t - ti + c)/Tref)**(1-p) = K (t - ti + c)**(1-p), so the
        result is dimensionless for any choice of Tref.
    """
    one_minus_p = 1.0 - params.p
    scaled_lag = (last_time - ancestor_time + params.c) / params.reference_time
    return (
        excitation_factor(ancestor_magnitude, params)
        * params.reference_time * params.fk / (params.p - 1.0)
        * np.exp(one_minus_p * np.log(scaled_lag))
    )


def descendant_survival_probability(
    ancestor_time,
    last_time,
    ancestor_magnitude,
    params: ProcessParameters,
):
    """Probability exp(-Lambda_inf) that an ancestor has no further child."""
    return np.exp(-tail_integral(ancestor_time, last_time, ancestor_magnitude, params))


def next_descendant_occurrence(
    q: float,
    ancestor_time: TimeScalar,
    ancestor_magnitude: MagnitudeScalar,
    last_time: TimeScalar,
    params: ProcessParameters,
) -> Optional[TimeScalar]:
    """Time of the next child of one ancestor after ``last_time``.

    The waiting time of the non-homogeneous Poisson process with rate
    f(Mi) fk (Tref / (t - ti + c))**p is drawn by inverting its survival
    function in closed form. With x = (tl - ti + c) / Tref and
    r = -ln(q) / Lambda_inf,

        t = ti - c + Tref x (1 - r)**(1 / (1-p))

    which is the same as

        t = ti - c + Tref exp( ln( x**(1-p) - (1-p) ln(q) / (f fk Tref) ) / (1-p) )

    The ancestor is exhausted when q <= exp(-Lambda_inf) or r >= 1; the two
    can disagree by rounding. A returned time is always finite.

    Args:
        q: Uniform variate in (0, 1)
        ancestor_time: Occurrence time ti of the ancestor
        ancestor_magnitude: Magnitude Mi of the ancestor
        last_time: Time tl >= ti from which to search
        params: Process parameters

    Returns:
        Next child time, or None if the ancestor has no further child
    """
    tail = tail_integral(ancestor_time, last_time, ancestor_magnitude, params)
    if q <= np.exp(-tail):
        return None
    r = -np.log(q) / tail
    if not r < 1.0:
        return None

    tref = params.reference_time
    scaled_lag = (last_time - ancestor_time + params.c) / tref
    log_offset = np.log(scaled_lag) + np.log1p(-r) / (1.0 - params.p)
    with np.errstate(over="ignore"):
        next_time = float(ancestor_time - params.c + tref * np.exp(log_offset))
    # Beyond float range: the child never occurs
    if not np.isfinite(next_time):
        return None
    # Rounding can land a few ulps before last_time
    return TimeScalar(max(next_time, float(last_time)))


def get_branching_ratio(params: ProcessParameters) -> float:
    """Expected number of direct descendants of one event.

    Equal to the offspring fraction because fk is scaled against the
    critical rate computed with the same reference magnitude.
    """
    return float(params.fk / params.critical_fk)


def get_stationary_rate(params: ProcessParameters) -> FrequencyScalar:
    """Long-run mean event rate mu_0 / (1 - n) of the stationary process.

    Raises:
        ExplosiveProcessError: If the branching ratio is >= 1
    """
    n = get_branching_ratio(params)
    if n >= 1.0:
        raise ExplosiveProcessError(n)
    return FrequencyScalar(params.mu_0 / (1.0 - n))
