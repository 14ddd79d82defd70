"""Tests for the catalog driver and the Catalog container."""

import math

import numpy as np
import pytest
from scipy import stats

from etasgen.catalog import Catalog, generate_catalog, generate_catalog_into
from etasgen.errors import (
    BufferSizeMismatchError,
    ExplosiveProcessError,
    InvalidMagnitudeRangeError,
    NonStationaryExponentError,
    ProcessParameterError,
)
from etasgen.units import UnitManager, UnitSpec


# Keyword arguments of a moderately clustered process
BASE = dict(
    mu_0=0.01,
    magnitude_min=2.0,
    magnitude_max=5.0,
    b_value=1.0,
    p=1.8,
    c=10.0,
    offspring_fraction=0.6,
)


def run(n, **overrides):
    kwargs = dict(BASE)
    kwargs.update(overrides)
    return generate_catalog(n, **kwargs)


class TestGenerateCatalog:
    """Tests for generate_catalog."""

    def test_exact_count(self):
        """Test exactly n events are returned as float64 arrays."""
        magnitudes, times = run(250, n_skip=0, seed=1)
        assert magnitudes.shape == times.shape == (250,)
        assert magnitudes.dtype == times.dtype == np.float64

    def test_single_event(self):
        """Test the smallest catalog."""
        magnitudes, times = run(1, seed=3)
        assert len(magnitudes) == len(times) == 1
        assert times[0] > 0.0

    def test_times_non_decreasing(self):
        """Test occurrence times never go backwards."""
        _, times = run(5000, offspring_fraction=0.9, p=1.3, n_skip=100, seed=12)
        assert np.all(np.diff(times) >= 0.0)
        assert np.all(np.isfinite(times))

    def test_magnitudes_in_range(self):
        """Test every magnitude lies in [Mmin, Mmax]."""
        magnitudes, _ = run(3000, seed=5)
        assert magnitudes.min() >= BASE['magnitude_min']
        assert magnitudes.max() <= BASE['magnitude_max']

    def test_deterministic_for_seed(self):
        """Test identical inputs give bitwise identical catalogs."""
        first = run(1000, n_skip=200, seed=42)
        second = run(1000, n_skip=200, seed=42)
        assert first[0].tobytes() == second[0].tobytes()
        assert first[1].tobytes() == second[1].tobytes()

    def test_seeds_differ(self):
        """Test different seeds give different catalogs."""
        _, times_a = run(100, seed=1)
        _, times_b = run(100, seed=2)
        assert not np.array_equal(times_a, times_b)

    def test_warm_up_discards_prefix(self):
        """Test n_skip drops exactly the first n_skip events of the same run."""
        mags_full, times_full = run(150, n_skip=0, seed=7)
        mags_skip, times_skip = run(100, n_skip=50, seed=7)

        np.testing.assert_array_equal(times_skip, times_full[50:])
        np.testing.assert_array_equal(mags_skip, mags_full[50:])

    def test_prefix_stable_in_n(self):
        """Test a longer catalog extends a shorter one with the same seed."""
        _, short = run(100, seed=9)
        _, long = run(400, seed=9)
        np.testing.assert_array_equal(short, long[:100])

    def test_reference_magnitude_changes_nothing_at_fixed_fraction(self):
        """Test Mr rescales K but leaves the process unchanged."""
        mags_a, times_a = run(500, seed=21)
        mags_b, times_b = run(500, seed=21, reference_magnitude=4.0)
        np.testing.assert_allclose(times_a, times_b, rtol=1e-9)
        np.testing.assert_array_equal(mags_a, mags_b)

    def test_poisson_inter_event_times(self):
        """Test zero offspring fraction gives exponential waiting times."""
        mu_0 = 0.5
        _, times = run(5000, mu_0=mu_0, offspring_fraction=0.0, seed=123)
        waits = np.diff(np.concatenate([[0.0], times]))

        _, p_value = stats.kstest(waits, 'expon', args=(0, 1.0 / mu_0))
        assert p_value > 0.001
        assert waits.mean() == pytest.approx(1.0 / mu_0, rel=0.05)

    def test_magnitude_distribution(self):
        """Test magnitudes follow the truncated Gutenberg-Richter law."""
        beta = math.log(10.0)
        mmin, mmax = BASE['magnitude_min'], BASE['magnitude_max']
        magnitudes, _ = run(5000, seed=77)

        def cdf(m):
            return (1.0 - np.exp(-beta * (m - mmin))) / (1.0 - np.exp(-beta * (mmax - mmin)))

        _, p_value = stats.kstest(magnitudes, cdf)
        assert p_value > 0.001

    @pytest.mark.slow
    def test_stationary_rate(self):
        """Test the long-run rate approaches mu_0 / (1 - n)."""
        mu_0, fraction = 0.01, 0.5
        _, times = run(
            100_000, mu_0=mu_0, magnitude_max=4.0, p=2.0,
            offspring_fraction=fraction, n_skip=10_000, seed=2024,
        )
        rate = (len(times) - 1) / (times[-1] - times[0])
        assert rate == pytest.approx(mu_0 / (1.0 - fraction), rel=0.1)


class TestParameterErrors:
    """Tests for rejected inputs."""

    @pytest.mark.parametrize("n", [0, -3])
    def test_non_positive_count(self, n):
        """Test n must be positive."""
        with pytest.raises(ProcessParameterError, match="n must be >= 1"):
            run(n)

    def test_non_integer_count(self):
        """Test n must be an integer."""
        with pytest.raises(ProcessParameterError, match="must be an integer"):
            run(10.0)

    def test_negative_warm_up(self):
        """Test n_skip must be non-negative."""
        with pytest.raises(ProcessParameterError, match="n_skip"):
            run(10, n_skip=-1)

    def test_bad_seed(self):
        """Test seeds outside the accepted range are rejected."""
        with pytest.raises(ProcessParameterError, match="Seed"):
            run(10, seed=2**31)

    def test_named_errors(self):
        """Test each invalid process raises its own error type."""
        with pytest.raises(InvalidMagnitudeRangeError):
            run(10, magnitude_min=5.0, magnitude_max=5.0)
        with pytest.raises(NonStationaryExponentError):
            run(10, p=1.0)
        with pytest.raises(ExplosiveProcessError):
            run(10, offspring_fraction=1.0)

    def test_warning_points_at_caller(self):
        """Test caveat warnings are attributed to the generate_catalog call."""
        with pytest.warns(UserWarning, match="close to critical") as record:
            run(5, offspring_fraction=0.995, seed=1)
        assert record[0].filename == __file__


class TestGenerateCatalogInto:
    """Tests for the buffer-filling driver."""

    def test_fills_buffers(self, params):
        """Test caller buffers receive the same events as generate_catalog."""
        magnitudes = np.empty(300)
        times = np.empty(300)
        generate_catalog_into(params, magnitudes, times, n_skip=20, seed=4)

        expected_mags, expected_times = run(300, n_skip=20, seed=4)
        np.testing.assert_array_equal(times, expected_times)
        np.testing.assert_array_equal(magnitudes, expected_mags)

    def test_size_mismatch_leaves_buffers(self, params):
        """Test mismatched buffers raise before anything is written."""
        magnitudes = np.full(10, -1.0)
        times = np.full(11, -1.0)

        with pytest.raises(BufferSizeMismatchError) as excinfo:
            generate_catalog_into(params, magnitudes, times, seed=1)

        assert excinfo.value.n_magnitudes == 10
        assert excinfo.value.n_times == 11
        assert np.all(magnitudes == -1.0)
        assert np.all(times == -1.0)

    def test_bad_seed_leaves_buffers(self, params):
        """Test a rejected seed leaves the buffers untouched."""
        magnitudes = np.full(5, -1.0)
        times = np.full(5, -1.0)

        with pytest.raises(ProcessParameterError):
            generate_catalog_into(params, magnitudes, times, seed=-1)

        assert np.all(magnitudes == -1.0)
        assert np.all(times == -1.0)

    def test_empty_buffers(self, params):
        """Test zero-length buffers are a no-op."""
        magnitudes = np.empty(0)
        times = np.empty(0)
        generate_catalog_into(params, magnitudes, times, n_skip=5, seed=0)
        assert len(times) == 0


class TestCatalog:
    """Tests for the Catalog container."""

    def make_catalog(self, symbol="minute", factor=60.0):
        times = np.array([60.0, 120.0, 300.0])
        return Catalog(
            magnitudes=np.array([2.1, 3.4, 2.5]),
            times=times,
            time_units=UnitSpec(dimension="time", symbol=symbol, to_canonical=factor),
            n_skip=10,
            seed=3,
        )

    def test_len(self):
        """Test length is the number of events."""
        assert len(self.make_catalog()) == 3

    def test_times_as_quantity(self):
        """Test times are reported back in the configured unit."""
        quantity = self.make_catalog().times_as_quantity()
        assert str(quantity.units) == "minute"
        np.testing.assert_allclose(quantity.magnitude, [1.0, 2.0, 5.0])

    def test_times_as_quantity_seconds(self):
        """Test canonical units round-trip unchanged."""
        catalog = self.make_catalog(symbol="second", factor=1.0)
        quantity = catalog.times_as_quantity(UnitManager.instance())
        np.testing.assert_allclose(quantity.to("second").magnitude, catalog.times)

    def test_inter_event_times(self):
        """Test differences of consecutive times."""
        np.testing.assert_allclose(
            self.make_catalog().inter_event_times(), [60.0, 180.0]
        )

    def test_duration(self):
        """Test the covered time span."""
        assert self.make_catalog().duration() == 240.0

    def test_duration_empty(self):
        """Test an empty catalog has zero duration."""
        catalog = Catalog(
            magnitudes=np.empty(0),
            times=np.empty(0),
            time_units=UnitSpec(dimension="time", symbol="second"),
        )
        assert catalog.duration() == 0.0
