from .legacy_random import LEGACY_SEED, LegacyRandom
from .synthetic import (
    MAX_RANK,
    UNARY_FUNCS,
    as_grid,
    build_permutations,
    generate_correlated_array,
    generate_noisy_sine,
    sample_radial,
    sample_separable,
)

__all__ = [
    "LEGACY_SEED",
    "LegacyRandom",
    "MAX_RANK",
    "UNARY_FUNCS",
    "as_grid",
    "build_permutations",
    "generate_correlated_array",
    "generate_noisy_sine",
    "sample_radial",
    "sample_separable",
]
