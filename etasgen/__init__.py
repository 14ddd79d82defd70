"""etasgen: Synthetic earthquake catalogs from the ETAS (M, t) process."""

from .units import UnitManager, UnitSpec, QuantityInput
from .fields import quantity_field
from .runtime import QuantityNode
from .errors import (
    ProcessParameterError,
    InvalidMagnitudeRangeError,
    NonStationaryExponentError,
    ExplosiveProcessError,
    InvalidOffspringFractionError,
    BufferSizeMismatchError,
)
from .rng import UniformStream
from .process import (
    ETASConfig,
    ETASConfigOutput,
    ETASRuntime,
    ProcessParameters,
    EventSchedule,
    critical_rate,
    draw_magnitude,
    next_background_occurrence,
    next_descendant_occurrence,
)
from .catalog import Catalog, generate_catalog, generate_catalog_into
from .adapters import CatalogAdapter
from .validation import ValidationReport, validate_config_units

__all__ = [
    # Units
    'UnitManager',
    'UnitSpec',
    'QuantityInput',
    'quantity_field',
    'QuantityNode',
    # Errors
    'ProcessParameterError',
    'InvalidMagnitudeRangeError',
    'NonStationaryExponentError',
    'ExplosiveProcessError',
    'InvalidOffspringFractionError',
    'BufferSizeMismatchError',
    # Randomness
    'UniformStream',
    # Process (core tier)
    'ETASConfig',
    'ETASConfigOutput',
    'ETASRuntime',
    'ProcessParameters',
    'EventSchedule',
    'critical_rate',
    'draw_magnitude',
    'next_background_occurrence',
    'next_descendant_occurrence',
    # Catalog driver
    'Catalog',
    'generate_catalog',
    'generate_catalog_into',
    # Adapters (high-level tier)
    'CatalogAdapter',
    # Validation
    'ValidationReport',
    'validate_config_units',
]
