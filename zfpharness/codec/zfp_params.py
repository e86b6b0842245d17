"""ZFP compression modes and their HDF5 ``cd_values`` encoding.

The H5Z-ZFP filter (HDF5 filter id 32013) reads its parameters from the
generic filter ``cd_values`` array, an array of unsigned 32-bit words:

    rate       [1, 0, lo(rate), hi(rate)]                       4 words
    precision  [2, 0, prec]                                     3 words
    accuracy   [3, 0, lo(acc), hi(acc)]                         4 words
    expert     [4, 0, minbits, maxbits, maxprec, (uint)minexp]  6 words

``lo``/``hi`` are the two halves of the native IEEE-754 double, in memory
order. An empty array tells the filter to use the codec defaults.
"""

import math
import struct
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import ZfpConfigError

ZFP_FILTER_ID = 32013
CD_VALUES_CAPACITY = 10

MODE_RATE = 1
MODE_PRECISION = 2
MODE_ACCURACY = 3
MODE_EXPERT = 4

# Codec limits (zfp 0.5.x)
ZFP_MIN_BITS = 0
ZFP_MAX_BITS = 4171
ZFP_MAX_PREC = 64
ZFP_MIN_EXP = -1074

_INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class RateMode:
    """Fixed rate: ``rate`` compressed bits per value."""
    rate: float


@dataclass(frozen=True)
class PrecisionMode:
    """Fixed precision: number of uncompressed bit planes kept."""
    precision: int


@dataclass(frozen=True)
class AccuracyMode:
    """Fixed accuracy: absolute error tolerance."""
    tolerance: float


@dataclass(frozen=True)
class ExpertMode:
    """Direct control of all four zfp stream parameters."""
    minbits: int = ZFP_MIN_BITS
    maxbits: int = ZFP_MAX_BITS
    maxprec: int = ZFP_MAX_PREC
    minexp: int = ZFP_MIN_EXP


ZfpMode = Union[RateMode, PrecisionMode, AccuracyMode, ExpertMode]

MODE_NAMES = {
    MODE_RATE: "rate",
    MODE_PRECISION: "precision",
    MODE_ACCURACY: "accuracy",
    MODE_EXPERT: "expert",
}


def _double_words(value: float) -> Tuple[int, int]:
    return struct.unpack("=2I", struct.pack("=d", value))


def _words_double(lo: int, hi: int) -> float:
    return struct.unpack("=d", struct.pack("=2I", lo, hi))[0]


def _require_integer(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ZfpConfigError(f"{name} must be an integer, got {value!r}")


def validate_mode(mode: Optional[ZfpMode]) -> None:
    """Raise ``ZfpConfigError`` if ``mode`` carries out-of-range or non-integral parameters."""
    if mode is None:
        return
    if isinstance(mode, RateMode):
        if not math.isfinite(mode.rate) or mode.rate <= 0:
            raise ZfpConfigError(f"rate must be a positive number, got {mode.rate}")
    elif isinstance(mode, PrecisionMode):
        _require_integer("precision", mode.precision)
        if not 1 <= mode.precision <= ZFP_MAX_PREC:
            raise ZfpConfigError(
                f"precision must be in [1, {ZFP_MAX_PREC}], got {mode.precision}"
            )
    elif isinstance(mode, AccuracyMode):
        if not math.isfinite(mode.tolerance) or mode.tolerance < 0:
            raise ZfpConfigError(f"accuracy must be >= 0, got {mode.tolerance}")
    elif isinstance(mode, ExpertMode):
        for name in ("minbits", "maxbits", "maxprec", "minexp"):
            _require_integer(name, getattr(mode, name))
        if mode.minbits > mode.maxbits:
            raise ZfpConfigError(
                f"minbits ({mode.minbits}) must not exceed maxbits ({mode.maxbits})"
            )
        if mode.minbits < ZFP_MIN_BITS or mode.maxbits > ZFP_MAX_BITS:
            raise ZfpConfigError(
                f"minbits/maxbits must lie in [{ZFP_MIN_BITS}, {ZFP_MAX_BITS}], "
                f"got {mode.minbits}/{mode.maxbits}"
            )
        if not 1 <= mode.maxprec <= ZFP_MAX_PREC:
            raise ZfpConfigError(
                f"maxprec must be in [1, {ZFP_MAX_PREC}], got {mode.maxprec}"
            )
        if not ZFP_MIN_EXP <= mode.minexp <= _INT32_MAX:
            raise ZfpConfigError(f"minexp must be >= {ZFP_MIN_EXP}, got {mode.minexp}")
    else:
        raise ZfpConfigError(f"Unknown zfp mode: {mode!r}")


def encode_cd_values(mode: Optional[ZfpMode]) -> Tuple[np.ndarray, int]:
    """Pack ``mode`` into a zero-filled 10-word ``cd_values`` array.

    Returns:
        (uint32 array of length ``CD_VALUES_CAPACITY``, number of words used).
        ``mode=None`` returns zero words used (codec defaults).
    """
    validate_mode(mode)
    words = np.zeros(CD_VALUES_CAPACITY, dtype=np.uint32)

    if mode is None:
        return words, 0
    if isinstance(mode, RateMode):
        words[0] = MODE_RATE
        words[2:4] = _double_words(float(mode.rate))
        return words, 4
    if isinstance(mode, PrecisionMode):
        words[0] = MODE_PRECISION
        words[2] = mode.precision
        return words, 3
    if isinstance(mode, AccuracyMode):
        words[0] = MODE_ACCURACY
        words[2:4] = _double_words(float(mode.tolerance))
        return words, 4
    # ExpertMode
    words[0] = MODE_EXPERT
    words[2] = mode.minbits
    words[3] = mode.maxbits
    words[4] = mode.maxprec
    words[5] = mode.minexp & 0xFFFFFFFF
    return words, 6


def cd_values(mode: Optional[ZfpMode]) -> Tuple[int, ...]:
    """The used part of the ``cd_values`` array, as plain ints for h5py."""
    words, n = encode_cd_values(mode)
    return tuple(int(w) for w in words[:n])


def decode_cd_values(words: Sequence[int]) -> Optional[ZfpMode]:
    """Inverse of :func:`encode_cd_values` (trailing unused words are ignored)."""
    words = [int(w) & 0xFFFFFFFF for w in words]
    if not words:
        return None

    tag = words[0]
    needed = {MODE_RATE: 4, MODE_PRECISION: 3, MODE_ACCURACY: 4, MODE_EXPERT: 6}
    if tag not in needed:
        raise ZfpConfigError(f"Unknown zfp mode tag: {tag}")
    if len(words) < needed[tag]:
        raise ZfpConfigError(
            f"{MODE_NAMES[tag]} mode needs {needed[tag]} cd_values, got {len(words)}"
        )

    if tag == MODE_RATE:
        return RateMode(_words_double(words[2], words[3]))
    if tag == MODE_PRECISION:
        return PrecisionMode(words[2])
    if tag == MODE_ACCURACY:
        return AccuracyMode(_words_double(words[2], words[3]))
    minexp = words[5] - (1 << 32) if words[5] & 0x80000000 else words[5]
    return ExpertMode(words[2], words[3], words[4], minexp)


def mode_from_selector(zfpmode: int, rate: float = 4.0, acc: float = 0.0,
                       prec: int = 11, minbits: int = ZFP_MIN_BITS,
                       maxbits: int = ZFP_MAX_BITS, maxprec: int = ZFP_MAX_PREC,
                       minexp: int = ZFP_MIN_EXP) -> Optional[ZfpMode]:
    """Build a mode from the numeric selector (1=rate, 2=prec, 3=acc, 4=expert).

    Any other selector means codec defaults and returns ``None``.
    """
    if zfpmode == MODE_RATE:
        return RateMode(float(rate))
    if zfpmode == MODE_PRECISION:
        return PrecisionMode(int(prec))
    if zfpmode == MODE_ACCURACY:
        return AccuracyMode(float(acc))
    if zfpmode == MODE_EXPERT:
        return ExpertMode(int(minbits), int(maxbits), int(maxprec), int(minexp))
    return None


def mode_name(mode: Optional[ZfpMode]) -> str:
    if mode is None:
        return "default"
    if isinstance(mode, RateMode):
        return MODE_NAMES[MODE_RATE]
    if isinstance(mode, PrecisionMode):
        return MODE_NAMES[MODE_PRECISION]
    if isinstance(mode, AccuracyMode):
        return MODE_NAMES[MODE_ACCURACY]
    return MODE_NAMES[MODE_EXPERT]


def format_cd_values(words: Sequence[int]) -> str:
    """``'<n> cd_values= w0,w1,...,'`` as printed before writing compressed data."""
    return f"{len(words)} cd_values= " + "".join(f"{int(w)}," for w in words)
