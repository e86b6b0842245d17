"""Synthetic test data for exercising lossy floating-point compression.

Includes:
  - A 1-D sinusoid-plus-noise signal (the default round-trip dataset)
  - An N-d generator that is smooth along "correlated" axes and randomized
    along "uncorrelated" axes, built by shuffling the index mapping of the
    uncorrelated axes before sampling a smooth function

Buffers are flat and linearized with axis 0 varying fastest: element ``n``
has coordinates ``c`` with ``n = sum(c[k] * stride[k])`` and
``stride[k] = prod(shape[:k])``. Use :func:`as_grid` for the N-d view.
"""

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy import special

from ..errors import PreconditionError
from .legacy_random import LEGACY_SEED, LegacyRandom

MAX_RANK = 10
RADIAL_AMPLITUDE = 10000.0
SEPARABLE_AMPLITUDE = 1.0
RADIUS_EPS = 1e-15

# Bounded-ish, smooth, mostly non-monotonic unary functions, one per axis
# (axis i uses UNARY_FUNCS[i % len(UNARY_FUNCS)]).
UNARY_FUNCS = (np.cos, special.j0, np.fabs, np.sin, np.cbrt, special.erf)

_DTYPES = {
    np.dtype(np.float64): np.float64,
    np.dtype(np.int32): np.int32,
}
_SAMPLINGS = ("separable", "radial")


def _check_dtype(dtype) -> type:
    try:
        return _DTYPES[np.dtype(dtype)]
    except (KeyError, TypeError):
        raise ValueError(f"Unsupported sample type: {dtype!r}. Use float64 or int32.") from None


def _check_shape(shape: Sequence[int]) -> Tuple[int, ...]:
    shape = tuple(int(s) for s in shape)
    if len(shape) > MAX_RANK:
        raise PreconditionError(f"rank {len(shape)} exceeds the maximum of {MAX_RANK}")
    if any(s < 1 for s in shape):
        raise PreconditionError(f"all extents must be positive, got {shape}")
    return shape


def _check_axes(shape: Tuple[int, ...], axes: Sequence[int]) -> Tuple[int, ...]:
    axes = tuple(int(a) for a in axes)
    for a in axes:
        if not 0 <= a < len(shape):
            raise PreconditionError(f"axis {a} out of range for rank {len(shape)}")
    if len(set(axes)) != len(axes):
        raise PreconditionError(f"uncorrelated axes repeat an index: {axes}")
    return axes


def _cast(values, dtype: type):
    # float -> int32 conversion truncates toward zero
    return np.asarray(values, dtype=np.float64).astype(dtype)


# ---- Scalar sampler ----

def sample_separable(coords: Sequence[int], shape: Sequence[int],
                     amplitude: float = SEPARABLE_AMPLITUDE) -> float:
    """Product over axes of ``UNARY_FUNCS[i](coords[i] - shape[i] // 2)``.

    ``coords`` are the already-permuted coordinates of one sample.
    """
    val = 1.0
    for i in range(len(shape) - 1, -1, -1):
        func = UNARY_FUNCS[i % len(UNARY_FUNCS)]
        val *= float(func(float(coords[i] - shape[i] // 2)))
    return amplitude * val


def sample_radial(coords: Sequence[int], shape: Sequence[int],
                  amplitude: float = RADIAL_AMPLITUDE) -> float:
    """Radially symmetric ``sinc``-like envelope about the array center."""
    radius = 0.0
    for i in range(len(shape) - 1, -1, -1):
        c = coords[i] - shape[i] // 2
        radius += c * c
    radius = math.sqrt(radius)
    if radius < RADIUS_EPS:
        return amplitude
    return amplitude * math.sin(0.4 * radius) / (0.4 * radius)


def _axis_view(values: np.ndarray, axis: int, ndim: int) -> np.ndarray:
    shape = [1] * ndim
    shape[axis] = values.shape[0]
    return values.reshape(shape)


def _grid_separable(centered: List[np.ndarray], amplitude: float) -> np.ndarray:
    ndim = len(centered)
    val = np.ones([1] * ndim, dtype=np.float64)
    for i in range(ndim - 1, -1, -1):
        func = UNARY_FUNCS[i % len(UNARY_FUNCS)]
        val = val * _axis_view(func(centered[i]), i, ndim)
    return amplitude * val


def _grid_radial(centered: List[np.ndarray], amplitude: float) -> np.ndarray:
    ndim = len(centered)
    radius = np.zeros([1] * ndim, dtype=np.float64)
    for i in range(ndim - 1, -1, -1):
        radius = radius + _axis_view(centered[i] * centered[i], i, ndim)
    radius = np.sqrt(radius)
    with np.errstate(divide="ignore", invalid="ignore"):
        val = amplitude * np.sin(0.4 * radius) / (0.4 * radius)
    return np.where(radius < RADIUS_EPS, amplitude, val)


# ---- Axis permutation engine ----

def _shuffle_axis(table: np.ndarray, rng: LegacyRandom) -> None:
    n = len(table)
    for j in range(n - 1):
        k = j + rng.next() % (n - j)
        if k != j:
            table[j], table[k] = table[k], table[j]


def build_permutations(shape: Sequence[int], uncorrelated_axes: Sequence[int] = (),
                       seed: int = LEGACY_SEED) -> List[np.ndarray]:
    """Per-axis index tables: identity for correlated axes, shuffled otherwise.

    A single draw stream is seeded once and consumed by the uncorrelated
    axes in the order they are listed, so axis order affects the result.
    """
    shape = _check_shape(shape)
    axes = _check_axes(shape, uncorrelated_axes)

    tables = [np.arange(extent, dtype=np.int64) for extent in shape]
    rng = LegacyRandom(seed)
    for axis in axes:
        _shuffle_axis(tables[axis], rng)
    return tables


# ---- Correlated array generator ----

def strides(shape: Sequence[int]) -> Tuple[int, ...]:
    """Axis-0-fastest multipliers: ``stride[k] = prod(shape[:k])``."""
    out = []
    m = 1
    for extent in shape:
        out.append(m)
        m *= int(extent)
    return tuple(out)


def unravel(n: int, shape: Sequence[int]) -> Tuple[int, ...]:
    """Natural coordinates of linear index ``n`` (axis 0 fastest)."""
    m = strides(shape)
    coords = [0] * len(shape)
    for i in range(len(shape) - 1, -1, -1):
        coords[i] = n // m[i]
        n = n % m[i]
    return tuple(coords)


def as_grid(buffer: np.ndarray, shape: Sequence[int]) -> np.ndarray:
    """N-d view of a flat generator buffer whose axis k is generator axis k."""
    return np.asarray(buffer).reshape(tuple(shape), order="F")


def generate_correlated_array(
    shape: Sequence[int],
    uncorrelated_axes: Sequence[int] = (),
    dtype=np.float64,
    sampling: str = "separable",
    amplitude: Optional[float] = None,
    seed: int = LEGACY_SEED,
) -> np.ndarray:
    """Sample a smooth function on a grid whose uncorrelated axes are shuffled.

    Args:
        shape: Extents, at most ``MAX_RANK`` axes.
        uncorrelated_axes: Axis indices whose index mapping gets shuffled.
        dtype: ``np.float64`` or ``np.int32``.
        sampling: ``'separable'`` or ``'radial'``.
        amplitude: Overall scale (defaults: 1 separable, 10000 radial).
        seed: Seed of the shuffle stream.

    Returns:
        Flat buffer of ``prod(shape)`` samples, axis 0 fastest.
    """
    target = _check_dtype(dtype)
    if sampling not in _SAMPLINGS:
        raise ValueError(f"Unknown sampling: {sampling!r}. Use 'separable' or 'radial'.")
    shape = _check_shape(shape)
    tables = build_permutations(shape, uncorrelated_axes, seed=seed)

    centered = [(t - extent // 2).astype(np.float64) for t, extent in zip(tables, shape)]
    if sampling == "separable":
        amp = SEPARABLE_AMPLITUDE if amplitude is None else float(amplitude)
        grid = _grid_separable(centered, amp)
    else:
        amp = RADIAL_AMPLITUDE if amplitude is None else float(amplitude)
        grid = _grid_radial(centered, amp)

    grid = np.broadcast_to(grid, shape)
    return _cast(grid.ravel(order="F"), target)


# ---- 1-D noisy signal ----

def generate_noisy_sine(count: int, noise: float = 0.001, amplitude: float = 17.7,
                        dtype=np.float64, seed: int = LEGACY_SEED) -> np.ndarray:
    """One period of ``amplitude * (1 + sin(x))`` plus uniform noise.

    Noise is drawn from its own stream and spans ``[-noise/2, noise/2]``.
    ``count`` must be at least 2 (the phase step is ``2*pi/(count-1)``).
    """
    target = _check_dtype(dtype)
    count = int(count)
    if count < 2:
        raise PreconditionError(f"count must be at least 2, got {count}")

    rng = LegacyRandom(seed)
    i = np.arange(count, dtype=np.float64)
    x = 2 * np.pi * i / float(count - 1)
    n = noise * (rng.uniform(count) - 0.5)
    return _cast(amplitude * (1 + np.sin(x)) + n, target)
