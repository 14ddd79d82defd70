"""High-level adapter for catalog generation workflows.

The adapter wraps the configuration, runtime and kernel layers behind a
small stateful API that validates units once and then hands out complete
catalogs.
"""

from __future__ import annotations
from typing import Optional

import numpy as np
import pint

from .catalog import Catalog, generate_catalog_into, check_count
from .process.config import ETASConfig
from .process.kernel import (
    ProcessParameters,
    get_branching_ratio,
    get_stationary_rate,
)
from .rng import validate_seed


__all__ = [
    'CatalogAdapter',
]


class CatalogAdapter:
    """High-level adapter for ETAS catalog generation.

    Each call to ``generate`` simulates from an empty history, so two
    calls with the same seed return identical catalogs. Power users can
    reach the runtime and the float parameters directly.

    Example:
        >>> config = ETASConfig(
        ...     background_rate="5 / day",
        ...     time_lag="2 minutes",
        ...     omori_exponent=1.1,
        ...     magnitude_min=2.5,
        ...     magnitude_max=8.0,
        ...     offspring_fraction=0.9,
        ...     seed=7,
        ... )
        >>> adapter = CatalogAdapter(config)
        >>> catalog = adapter.generate(10_000, n_skip=10_000)
        >>> catalog.times_as_quantity().units
        <Unit('minute')>

    Args:
        config: ETASConfig instance
        check_units: Whether to run the pint dry run (default: True)

    Attributes:
        config: The ETASConfig used to build the runtime
        runtime: ETASRuntime structure
        params: Plain-float ProcessParameters used by the kernel
        seed: Seed used when ``generate`` is called without one
    """

    def __init__(
        self,
        config: ETASConfig,
        *,
        check_units: bool = True
    ):
        """Initialize the catalog adapter.

        Args:
            config: ETASConfig instance
            check_units: Validate dimensional consistency (default: True)

        Raises:
            ValueError: If unit validation fails
        """
        self.config = config
        self.runtime = config.to_runtime()

        if check_units:
            from .validation import rate_formula_units
            try:
                rate_formula_units(self.runtime)
            except pint.DimensionalityError as e:
                raise ValueError(f"Unit validation failed: {e}")

        self.params: ProcessParameters = self.runtime.to_parameters()
        self.seed = 0 if config.seed is None else config.seed

    def generate(
        self,
        n: int,
        n_skip: int = 0,
        seed: Optional[int] = None
    ) -> Catalog:
        """Simulate a catalog of exactly ``n`` events.

        Args:
            n: Number of events to return
            n_skip: Number of warm-up events to discard first
            seed: Seed override (default: the configured seed)

        Returns:
            Catalog with times in non-decreasing order
        """
        n = check_count("n", n, 1)
        seed = self.seed if seed is None else validate_seed(seed)

        magnitudes = np.empty(n, dtype=np.float64)
        times = np.empty(n, dtype=np.float64)
        generate_catalog_into(self.params, magnitudes, times, n_skip=n_skip, seed=seed)

        return Catalog(
            magnitudes=magnitudes,
            times=times,
            time_units=self.runtime.time_lag.units,
            n_skip=n_skip,
            seed=seed,
        )

    def reset(self, seed: Optional[int] = None):
        """Change the default seed.

        Args:
            seed: New random seed (optional, keeps current if None)
        """
        if seed is not None:
            self.seed = validate_seed(seed)

    def get_branching_ratio(self) -> float:
        """Expected number of direct descendants per event (< 1)."""
        return get_branching_ratio(self.params)

    def get_stationary_rate(self) -> float:
        """Long-run mean event rate mu_0 / (1 - n) in Hz."""
        return get_stationary_rate(self.params)

    def get_critical_rate(self) -> float:
        """Critical triggering-rate constant in Hz."""
        return float(self.params.critical_fk)

    def get_parameters(self) -> dict:
        """Get kernel parameters as dictionary of Python floats.

        Returns:
            Dictionary with the canonical (SI) parameter values, including
            the derived triggering-rate constant ``fk``
        """
        return {
            'mu_0': self.params.mu_0,
            'c': self.params.c,
            'p': self.params.p,
            'beta': self.params.beta,
            'magnitude_min': self.params.magnitude_min,
            'magnitude_max': self.params.magnitude_max,
            'reference_magnitude': self.params.reference_magnitude,
            'offspring_fraction': self.params.offspring_fraction,
            'reference_time': self.params.reference_time,
            'fk': self.params.fk,
        }
