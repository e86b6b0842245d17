"""ZFP round-trip harness: synthetic test arrays, ZFP filter parameters, HDF5 output.

Lightweight API (numpy + scipy only):
    from zfpharness import generate_correlated_array, encode_cd_values, RateMode
    buf = generate_correlated_array((64, 64, 8), uncorrelated_axes=(1,))
    words, n = encode_cd_values(RateMode(8.0))

HDF5 API (requires h5py, hdf5plugin):
    from zfpharness import HarnessConfig, run_roundtrip
    run_roundtrip(HarnessConfig(ofile="out.h5", highd=1))
"""

__version__ = "0.1.0"

from .codec.zfp_params import (
    AccuracyMode,
    ExpertMode,
    PrecisionMode,
    RateMode,
    cd_values,
    decode_cd_values,
    encode_cd_values,
)
from .data.synthetic import (
    as_grid,
    build_permutations,
    generate_correlated_array,
    generate_noisy_sine,
)
from .errors import PreconditionError, ResourceError, StorageError, ZfpConfigError


# ---- Lazy imports for h5py-dependent names ----

_LAZY_IMPORTS = {
    "HarnessConfig": "config",
    "RoundTripReport": "harness",
    "run_roundtrip": "harness",
    "summarize_container": "storage.h5_container",
}


def __getattr__(name):
    if name in _LAZY_IMPORTS:
        module_name = _LAZY_IMPORTS[name]
        import importlib
        mod = importlib.import_module(f".{module_name}", __package__)
        return getattr(mod, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AccuracyMode",
    "ExpertMode",
    "PrecisionMode",
    "RateMode",
    "cd_values",
    "decode_cd_values",
    "encode_cd_values",
    "as_grid",
    "build_permutations",
    "generate_correlated_array",
    "generate_noisy_sine",
    "PreconditionError",
    "ResourceError",
    "StorageError",
    "ZfpConfigError",
    "HarnessConfig",
    "RoundTripReport",
    "run_roundtrip",
    "summarize_container",
]
