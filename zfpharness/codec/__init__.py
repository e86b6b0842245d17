"""ZFP codec parameters for the HDF5 filter pipeline."""

from .zfp_params import (
    ZFP_FILTER_ID,
    AccuracyMode,
    ExpertMode,
    PrecisionMode,
    RateMode,
    ZfpMode,
    cd_values,
    decode_cd_values,
    encode_cd_values,
    format_cd_values,
    mode_from_selector,
)

__all__ = [
    "ZFP_FILTER_ID",
    "AccuracyMode",
    "ExpertMode",
    "PrecisionMode",
    "RateMode",
    "ZfpMode",
    "cd_values",
    "decode_cd_values",
    "encode_cd_values",
    "format_cd_values",
    "mode_from_selector",
]
