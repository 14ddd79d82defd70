"""Runtime structures using Penzai for JAX-compatible unit-aware values.

This module provides the Penzai struct that keeps unit metadata attached to
canonical values while remaining a valid JAX pytree.
"""

from __future__ import annotations

from typing import Optional
import dataclasses
import jax
import numpy as np
import pint
from penzai.core import struct

from .units import UnitManager, UnitSpec


# UnitSpec is static metadata, never a pytree leaf
jax.tree_util.register_static(UnitSpec)


@struct.pytree_dataclass
class QuantityNode(struct.Struct):
    """A Penzai struct that holds a value with unit metadata.

    The value field is treated as a pytree node (participates in
    transformations), while the units field is treated as metadata (static).
    Values are float64 NumPy scalars so that JAX's default 32-bit mode
    never rounds canonical parameters.

    Attributes:
        value: 0-d float64 array holding the value in canonical units
        units: UnitSpec metadata describing the units
    """
    value: np.ndarray
    units: UnitSpec = dataclasses.field(metadata={'pytree_node': False})

    @classmethod
    def from_float(
        cls,
        value: float,
        units: UnitSpec,
        dtype: np.dtype = np.float64
    ) -> QuantityNode:
        """Create a QuantityNode from a float value.

        Args:
            value: Numerical value in canonical units
            units: Unit specification
            dtype: NumPy dtype (default float64)

        Returns:
            QuantityNode instance
        """
        return cls(
            value=np.asarray(value, dtype=dtype),
            units=units
        )

    def to_quantity(self, manager: Optional[UnitManager] = None) -> pint.Quantity:
        """Convert back to a pint Quantity in the original units."""
        if manager is None:
            manager = UnitManager.instance()
        return manager.from_canonical(float(self.value), self.units)

    def to_float(self) -> float:
        """Extract the float value from the node.

        Returns:
            Float value (assumes scalar array)
        """
        return float(self.value)

    def __repr__(self) -> str:
        return f"QuantityNode({float(self.value)}, {self.units.symbol})"
