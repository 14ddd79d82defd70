"""Pytest configuration and shared test utilities."""

import pytest
import numpy as np
from typing import Union

from etasgen.process.kernel import ProcessParameters, b_value_to_beta


# Default tolerances for float comparisons
RTOL_DEFAULT = 1e-9  # Relative tolerance
ATOL_DEFAULT = 1e-12  # Absolute tolerance


def assert_close(
    actual: Union[float, np.ndarray],
    expected: Union[float, np.ndarray],
    rtol: float = RTOL_DEFAULT,
    atol: float = ATOL_DEFAULT,
    msg: str = ""
):
    """Assert that two values are close within tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        rtol: Relative tolerance (default: 1e-9)
        atol: Absolute tolerance (default: 1e-12)
        msg: Optional message for assertion failure

    Example:
        >>> params = make_params(offspring_fraction=0.5)
        >>> assert_close(params.fk / params.critical_fk, 0.5)
    """
    actual_val = float(actual)
    expected_val = float(expected)

    assert actual_val == pytest.approx(expected_val, rel=rtol, abs=atol), (
        f"{msg}\nExpected: {expected_val}\nActual: {actual_val}\n"
        f"Diff: {abs(actual_val - expected_val)}"
    )


def assert_array_close(
    actual: np.ndarray,
    expected: np.ndarray,
    rtol: float = RTOL_DEFAULT,
    atol: float = ATOL_DEFAULT,
    msg: str = ""
):
    """Assert that two arrays are close within tolerance.

    Uses numpy.testing.assert_allclose for detailed error messages.
    """
    np.testing.assert_allclose(
        np.asarray(actual), np.asarray(expected),
        rtol=rtol, atol=atol,
        err_msg=msg
    )


def make_params(**overrides) -> ProcessParameters:
    """Build ProcessParameters around a well-behaved default process.

    Defaults: one background event per 100 s, c = 10 s, p = 1.8,
    b = 1, magnitudes 2-5, offspring fraction 0.6.
    """
    kwargs = dict(
        mu_0=0.01,
        magnitude_min=2.0,
        magnitude_max=5.0,
        beta=b_value_to_beta(1.0),
        p=1.8,
        c=10.0,
        offspring_fraction=0.6,
    )
    kwargs.update(overrides)
    return ProcessParameters.create(**kwargs)


@pytest.fixture
def close():
    """Fixture providing assert_close function.

    Usage:
        def test_something(close):
            close(actual, expected)
    """
    return assert_close


@pytest.fixture
def array_close():
    """Fixture providing assert_array_close function."""
    return assert_array_close


@pytest.fixture
def params() -> ProcessParameters:
    """Default process parameters (see make_params)."""
    return make_params()


@pytest.fixture
def config_kwargs() -> dict:
    """Keyword arguments for a valid ETASConfig."""
    return dict(
        background_rate="2 / day",
        time_lag="5 minutes",
        omori_exponent=1.8,
        b_value=1.0,
        magnitude_min=2.0,
        magnitude_max=6.0,
        offspring_fraction=0.7,
        seed=42,
    )


@pytest.fixture
def param_factory():
    """Fixture providing make_params for tests that vary one parameter.

    Usage:
        def test_something(param_factory):
            params = param_factory(offspring_fraction=0.0)
    """
    return make_params
