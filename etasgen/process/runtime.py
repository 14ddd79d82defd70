"""Runtime structures for the ETAS (M, t) process with Penzai.

This module provides the pytree carrying unit-tagged process parameters
between the configuration layer and the simulation kernel.
"""

from __future__ import annotations
from typing import Optional
from penzai.core import struct

from ..runtime import QuantityNode
from .kernel import ProcessParameters


@struct.pytree_dataclass
class ETASRuntime(struct.Struct):
    """Runtime ETAS parameters with unit metadata.

    Rate and time fields keep the UnitSpec of the user's input so that
    outputs can be reported back in the same units.
    Penzai's @struct.pytree_dataclass automatically registers this as a JAX pytree.
    """

    background_rate: QuantityNode
    time_lag: QuantityNode
    omori_exponent: QuantityNode
    beta: QuantityNode
    magnitude_min: QuantityNode
    magnitude_max: QuantityNode
    reference_magnitude: QuantityNode
    offspring_fraction: QuantityNode
    reference_time: QuantityNode
    triggering_rate: QuantityNode
    seed: Optional[int] = None

    def to_parameters(self) -> ProcessParameters:
        """Plain-float parameters for the simulation kernel.

        The runtime was built from an already validated config, so the
        checks are repeated silently.
        """
        return ProcessParameters.create(
            mu_0=self.background_rate.to_float(),
            magnitude_min=self.magnitude_min.to_float(),
            magnitude_max=self.magnitude_max.to_float(),
            beta=self.beta.to_float(),
            p=self.omori_exponent.to_float(),
            c=self.time_lag.to_float(),
            offspring_fraction=self.offspring_fraction.to_float(),
            reference_time=self.reference_time.to_float(),
            reference_magnitude=self.reference_magnitude.to_float(),
            warn=False,
        )
