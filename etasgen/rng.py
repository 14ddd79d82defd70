"""Deterministic uniform variates backed by a JAX PRNG key.

The event loop consumes one uniform variate at a time. Drawing each one
through ``jax.random`` would dominate the run time, so the stream pulls
blocks of raw 32-bit words from a split key and turns them into doubles
strictly inside the open interval (0, 1).
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import numpy as np

from .errors import ProcessParameterError


# Largest seed accepted by jax.random.PRNGKey in 32-bit mode
MAX_SEED = 2**31 - 1

DEFAULT_BLOCK_SIZE = 4096

_MANTISSA_SCALE = 2.0 ** -52


def validate_seed(seed: int) -> int:
    """Check that ``seed`` is a usable PRNG seed and return it as int."""
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise ProcessParameterError(f"Seed must be an integer, got {seed!r}")
    seed = int(seed)
    if not 0 <= seed <= MAX_SEED:
        raise ProcessParameterError(
            f"Seed must be in [0, {MAX_SEED}], got {seed}"
        )
    return seed


def bits_to_uniform(high: np.ndarray, low: np.ndarray) -> np.ndarray:
    """Combine two arrays of uint32 words into doubles in (0, 1).

    The top 26 bits of each word form a 52-bit integer ``k``; the result
    ``(k + 0.5) / 2**52`` is exact in float64 and never hits 0 or 1.

    Args:
        high: uint32 words supplying the upper 26 bits
        low: uint32 words supplying the lower 26 bits

    Returns:
        float64 array of the same shape
    """
    high = np.asarray(high, dtype=np.uint64) >> np.uint64(6)
    low = np.asarray(low, dtype=np.uint64) >> np.uint64(6)
    k = (high << np.uint64(26)) | low
    return (k.astype(np.float64) + 0.5) * _MANTISSA_SCALE


class UniformStream:
    """Single-owner stream of uniform variates in (0, 1).

    Example:
        >>> stream = UniformStream(seed=42)
        >>> q = stream.draw()
        >>> 0.0 < q < 1.0
        True

    Args:
        seed: Integer seed in [0, 2**31 - 1]
        block_size: Number of variates generated per refill

    Attributes:
        key: Current JAX PRNG key
        draws: Number of variates handed out so far
    """

    def __init__(self, seed: int, block_size: int = DEFAULT_BLOCK_SIZE):
        if block_size <= 0:
            raise ProcessParameterError(
                f"block_size must be positive, got {block_size}"
            )
        self.seed = validate_seed(seed)
        self.block_size = int(block_size)
        self.key = jax.random.PRNGKey(self.seed)
        self.draws = 0
        self._buffer: list[float] = []
        self._position = 0

    def _refill(self) -> None:
        self.key, subkey = jax.random.split(self.key)
        words = np.asarray(
            jax.random.bits(subkey, (2, self.block_size), dtype=jnp.uint32)
        )
        self._buffer = bits_to_uniform(words[0], words[1]).tolist()
        self._position = 0

    def draw(self) -> float:
        """Return the next uniform variate."""
        if self._position >= len(self._buffer):
            self._refill()
        q = self._buffer[self._position]
        self._position += 1
        self.draws += 1
        return q

    def draw_many(self, n: int) -> np.ndarray:
        """Return the next ``n`` variates as a float64 array.

        Consumes the stream exactly as ``n`` calls to ``draw`` would.
        """
        return np.fromiter((self.draw() for _ in range(n)), dtype=np.float64, count=n)
