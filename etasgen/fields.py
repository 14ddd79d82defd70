"""Pydantic field validators for unit-aware configurations.

Provides field validators that parse user-friendly unit inputs
and convert them to canonical floats with metadata.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .units import UnitManager, UnitSpec


def quantity_field(
    dimension: str,
    default_unit: Optional[str] = None,
    min_value: Optional[float] = None,
    exclusive_min: bool = False,
) -> Callable:
    """Create a Pydantic field validator for quantity inputs.

    This validator accepts strings, numbers, or pint Quantities and
    converts them to canonical floats with metadata.

    Args:
        dimension: Expected physical dimension (e.g., "time", "1/time")
        default_unit: Unit to apply to bare numbers
        min_value: Optional minimum value in canonical units
        exclusive_min: Whether ``min_value`` itself is rejected

    Returns:
        Field validator function for Pydantic models

    Example:
        class MyConfig(BaseModel):
            time_lag: Tuple[float, UnitSpec]

            _validate_time_lag = field_validator("time_lag", mode="before")(
                quantity_field("time", "second", min_value=0.0, exclusive_min=True)
            )
    """
    def validator(value: Any, info: Optional[Any] = None) -> tuple[float, UnitSpec]:
        """Validate and convert quantity input.

        Args:
            value: Input value to validate
            info: Pydantic validation info (unused but required by signature)

        Returns:
            Tuple of (canonical_float, unit_spec)

        Raises:
            ValueError: If validation fails
        """
        manager = UnitManager.instance()

        try:
            quantity = manager.ensure_quantity(value, default_unit)
        except ValueError as e:
            raise ValueError(f"Cannot parse quantity: {e}")

        try:
            canonical_value, spec = manager.to_canonical(quantity, dimension)
        except ValueError as e:
            raise ValueError(f"Dimension mismatch: {e}")

        if min_value is not None:
            below = (canonical_value <= min_value) if exclusive_min else (canonical_value < min_value)
            if below:
                bound = "above" if exclusive_min else "at least"
                raise ValueError(
                    f"Value {canonical_value} must be {bound} {min_value} "
                    f"(in canonical {dimension} units)"
                )

        return canonical_value, spec

    return validator
