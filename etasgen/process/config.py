"""ETAS (M, t) process configuration with unit-aware Pydantic models.

This module provides configuration for the marked Hawkes process used to
generate synthetic earthquake catalogs: a constant background rate, a
modified Omori-Utsu triggering kernel and truncated Gutenberg-Richter
magnitudes.
"""

from __future__ import annotations
from typing import Tuple, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
import pint

from ..units import UnitManager, UnitSpec
from ..fields import quantity_field
from ..runtime import QuantityNode
from ..rng import validate_seed
from .kernel import (
    REFERENCE_TIME,
    b_value_to_beta,
    check_process_parameters,
    critical_rate,
)
from .runtime import ETASRuntime


DIMENSIONLESS = UnitSpec(dimension="dimensionless", symbol="dimensionless")
SECOND = UnitSpec(dimension="time", symbol="second")
HERTZ = UnitSpec(dimension="1/time", symbol="1 / second")


class ETASConfig(BaseModel):
    """Configuration for the ETAS (M, t) self-exciting point process.

    The conditional intensity is:
        λ(t) = μ₀ + Σ K exp(β (Mᵢ - Mr)) / (t - tᵢ + c)^p

    Where:
        - μ₀ is the background rate
        - c and p are the Omori-Utsu time lag and exponent
        - β = ln(10) b is the Gutenberg-Richter exponent
        - K = offspring_fraction × K* with K* the critical value
        - (tᵢ, Mᵢ) are past events

    Example:
        >>> config = ETASConfig(
        ...     background_rate="2 / day",
        ...     time_lag="5 minutes",
        ...     omori_exponent=1.2,
        ...     b_value=1.0,
        ...     magnitude_min=2.0,
        ...     magnitude_max=8.0,
        ...     offspring_fraction=0.8,
        ... )
    """

    background_rate: Tuple[float, UnitSpec] = Field(
        description="Background (Poisson) event rate (events/time)"
    )

    time_lag: Tuple[float, UnitSpec] = Field(
        description="Omori-Utsu time lag c"
    )

    omori_exponent: float = Field(
        description="Omori-Utsu decay exponent p (> 1 for stationarity)"
    )

    b_value: float = Field(
        default=1.0,
        description="Gutenberg-Richter b-value"
    )

    magnitude_min: float = Field(
        description="Lower magnitude bound of the catalog"
    )

    magnitude_max: float = Field(
        description="Upper magnitude bound of the catalog"
    )

    offspring_fraction: float = Field(
        description="Triggering scale relative to its critical value, in [0, 1)"
    )

    reference_magnitude: Optional[float] = Field(
        default=None,
        description="Reference magnitude Mr of the excitation factor (default: magnitude_min)"
    )

    seed: Optional[int] = Field(
        default=None,
        description="Random seed for catalog generation (optional)"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    _validate_background_rate = field_validator("background_rate", mode="before")(
        quantity_field("1/time", "1/second", min_value=0.0, exclusive_min=True)
    )

    _validate_time_lag = field_validator("time_lag", mode="before")(
        quantity_field("time", "second", min_value=0.0, exclusive_min=True)
    )

    @field_validator("b_value", mode="after")
    def _validate_b_value(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"b_value must be positive, got {value}")
        return value

    @field_validator("seed", mode="after")
    def _validate_seed(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        return validate_seed(value)

    @model_validator(mode="after")
    def _validate_process(self) -> ETASConfig:
        """Ensure the parameters define a stationary process."""
        check_process_parameters(
            mu_0=self.background_rate[0],
            magnitude_min=self.magnitude_min,
            magnitude_max=self.magnitude_max,
            beta=self.beta,
            p=self.omori_exponent,
            c=self.time_lag[0],
            offspring_fraction=self.offspring_fraction,
            reference_magnitude=self.reference_magnitude,
            # Warn at the ETASConfig(...) call above BaseModel.__init__
            stacklevel=4,
        )
        return self

    @property
    def beta(self) -> float:
        """Gutenberg-Richter exponent ln(10) * b."""
        return b_value_to_beta(self.b_value)

    @property
    def critical_triggering_rate(self) -> float:
        """Critical triggering-rate constant in Hz."""
        return critical_rate(
            self.magnitude_min,
            self.magnitude_max,
            self.omori_exponent,
            self.time_lag[0],
            self.beta,
            reference_time=REFERENCE_TIME,
            reference_magnitude=self.reference_magnitude,
        )

    def to_runtime(self, manager: Optional[UnitManager] = None) -> ETASRuntime:
        """Convert to runtime structure.

        Args:
            manager: Optional UnitManager instance

        Returns:
            ETASRuntime structure with QuantityNodes
        """
        reference_magnitude = (
            self.magnitude_min if self.reference_magnitude is None
            else self.reference_magnitude
        )

        def scalar(value: float) -> QuantityNode:
            return QuantityNode.from_float(value, DIMENSIONLESS)

        return ETASRuntime(
            background_rate=QuantityNode.from_float(*self.background_rate),
            time_lag=QuantityNode.from_float(*self.time_lag),
            omori_exponent=scalar(self.omori_exponent),
            beta=scalar(self.beta),
            magnitude_min=scalar(self.magnitude_min),
            magnitude_max=scalar(self.magnitude_max),
            reference_magnitude=scalar(reference_magnitude),
            offspring_fraction=scalar(self.offspring_fraction),
            reference_time=QuantityNode.from_float(REFERENCE_TIME, SECOND),
            triggering_rate=QuantityNode.from_float(
                self.offspring_fraction * self.critical_triggering_rate, HERTZ
            ),
            seed=self.seed,
        )

    @staticmethod
    def from_runtime(runtime: ETASRuntime, manager: Optional[UnitManager] = None) -> ETASConfigOutput:
        """Create output config from runtime structure.

        Args:
            runtime: ETASRuntime to convert
            manager: Optional UnitManager instance

        Returns:
            ETASConfigOutput with pint quantities
        """
        if manager is None:
            manager = UnitManager.instance()

        def to_quantity(node: QuantityNode) -> pint.Quantity:
            return manager.from_canonical(float(node.value), node.units)

        return ETASConfigOutput(
            background_rate=to_quantity(runtime.background_rate),
            time_lag=to_quantity(runtime.time_lag),
            omori_exponent=runtime.omori_exponent.to_float(),
            beta=runtime.beta.to_float(),
            magnitude_min=runtime.magnitude_min.to_float(),
            magnitude_max=runtime.magnitude_max.to_float(),
            reference_magnitude=runtime.reference_magnitude.to_float(),
            offspring_fraction=runtime.offspring_fraction.to_float(),
            triggering_rate=to_quantity(runtime.triggering_rate),
        )

    def summary(self, format: str = "markdown") -> str:
        """Generate summary of ETAS configuration.

        Args:
            format: Output format ('markdown', 'text', or 'dict')

        Returns:
            Formatted summary string
        """
        if format == "dict":
            return str(self.model_dump())

        manager = UnitManager.instance()
        lines = []

        def quantity(value: Tuple[float, UnitSpec]) -> Tuple[float, str]:
            qty = manager.from_canonical(value[0], value[1])
            return qty.magnitude, str(qty.units)

        rows = [
            ("Background rate", *quantity(self.background_rate)),
            ("Time lag c", *quantity(self.time_lag)),
            ("Omori exponent p", self.omori_exponent, "-"),
            ("b-value", self.b_value, "-"),
            ("Magnitude range", f"{self.magnitude_min:.4g} - {self.magnitude_max:.4g}", "-"),
            ("Offspring fraction", self.offspring_fraction, "-"),
        ]

        def fmt(value) -> str:
            return value if isinstance(value, str) else f"{value:.4g}"

        if format == "markdown":
            lines.append("# ETAS Process Configuration\n")
            lines.append("| Parameter | Value | Units |")
            lines.append("|-----------|--------|-------|")
            for name, value, units in rows:
                lines.append(f"| {name} | {fmt(value)} | {units} |")
        else:  # text format
            lines.append("ETAS Process Configuration")
            lines.append("-" * 40)
            for name, value, units in rows:
                suffix = "" if units == "-" else f" {units}"
                lines.append(f"  {name}: {fmt(value)}{suffix}")

        lines.append("")
        lines.append(
            f"Stationary: branching ratio n = {self.offspring_fraction:.3f} < 1"
        )

        return "\n".join(lines)


class ETASConfigOutput(BaseModel):
    """Output format for ETAS configuration with pint quantities."""

    background_rate: pint.Quantity
    time_lag: pint.Quantity
    omori_exponent: float
    beta: float
    magnitude_min: float
    magnitude_max: float
    reference_magnitude: float
    offspring_fraction: float
    triggering_rate: pint.Quantity

    model_config = ConfigDict(arbitrary_types_allowed=True)
