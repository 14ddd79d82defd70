"""Unit validation for catching dimension mismatches early.

This module re-evaluates the triggering formulas on pint quantities before
a simulation starts. The simulation kernel itself works on bare floats, so
this dry run is where a wrong rate or time unit shows up.
"""

from __future__ import annotations
from typing import Dict, Optional, Any
from dataclasses import dataclass
import traceback

import numpy as np
import pint

from .units import UnitManager
from .process.runtime import ETASRuntime


def rate_formula_units(
    runtime: ETASRuntime,
    manager: Optional[UnitManager] = None
) -> Dict[str, pint.Quantity]:
    """Pint-based evaluation of the triggering formulas.

    Mirrors ``tail_integral`` and the waiting-time inversion for an
    ancestor at magnitude Mr with no elapsed time, carrying units through
    every step.

    Args:
        runtime: ETAS runtime with QuantityNodes
        manager: UnitManager instance (uses singleton if None)

    Returns:
        Dict of intermediate quantities

    Raises:
        pint.DimensionalityError: If units don't combine properly
    """
    if manager is None:
        manager = UnitManager.instance()

    mu_0 = runtime.background_rate.to_quantity(manager)
    c = runtime.time_lag.to_quantity(manager)
    tref = runtime.reference_time.to_quantity(manager)
    fk = runtime.triggering_rate.to_quantity(manager)
    p = runtime.omori_exponent.to_float()

    # Exponentiation needs a dimensionless base
    dimensionless = manager.get_canonical_unit("dimensionless")
    scaled_lag = (c / tref).to(dimensionless)
    kernel_mass = fk * tref
    tail = kernel_mass / (p - 1.0) * float(scaled_lag.magnitude) ** (1.0 - p)

    # Background waiting time for q = 1/e
    background_wait = (1.0 / mu_0).to(manager.get_canonical_unit("time"))

    return {
        'scaled_lag': scaled_lag,
        'kernel_mass': kernel_mass.to(dimensionless),
        'tail_integral': tail.to(dimensionless),
        'background_wait': background_wait,
    }


@dataclass
class ValidationReport:
    """Report from unit validation."""
    success: bool
    dimensions: Dict[str, str]
    warnings: list[str]
    errors: list[str]

    def __str__(self) -> str:
        """Format as readable report."""
        lines = ["=== Unit Validation Report ==="]
        lines.append(f"Status: {'PASS' if self.success else 'FAIL'}")

        if self.dimensions:
            lines.append("\nDimensions:")
            for key, dim in self.dimensions.items():
                lines.append(f"  {key}: {dim}")

        if self.warnings:
            lines.append("\nWarnings:")
            for w in self.warnings:
                lines.append(f"  ⚠️  {w}")

        if self.errors:
            lines.append("\nErrors:")
            for e in self.errors:
                lines.append(f"  ❌ {e}")

        return "\n".join(lines)


def validate_config_units(config: Any, verbose: bool = False) -> ValidationReport:
    """Validate units in an ETAS config object.

    Args:
        config: Config object with to_runtime() method
        verbose: If True, print validation details

    Returns:
        ValidationReport with results
    """
    report = ValidationReport(
        success=True,
        dimensions={},
        warnings=[],
        errors=[]
    )

    try:
        runtime = config.to_runtime()
    except (ValueError, TypeError, pint.PintError) as e:
        report.success = False
        error_msg = f"Failed to build runtime: {type(e).__name__}: {e}"
        if verbose:
            error_msg += f"\n{traceback.format_exc()}"
        report.errors.append(error_msg)
        if verbose:
            print(report)
        return report

    try:
        quantities = rate_formula_units(runtime)
        report.dimensions = {
            key: str(value.dimensionality) for key, value in quantities.items()
        }
        if not np.isfinite(quantities['tail_integral'].magnitude):
            report.success = False
            report.errors.append("Tail integral of the triggering kernel is not finite")
    except pint.DimensionalityError as e:
        report.success = False
        report.errors.append(f"Triggering formula has inconsistent units: {e}")

    background_wait = 1.0 / runtime.background_rate.to_float()
    if runtime.time_lag.to_float() > background_wait:
        report.warnings.append(
            "Omori time lag c exceeds the mean background waiting time; "
            "check that rate and time lag use the intended units"
        )

    if verbose:
        print(report)

    return report
