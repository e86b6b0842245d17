"""Central configuration for the round-trip harness."""

from dataclasses import dataclass, field, fields
from typing import Iterable, List, Optional, Tuple

from .codec.zfp_params import (
    MODE_ACCURACY,
    ZFP_MAX_BITS,
    ZFP_MAX_PREC,
    ZFP_MIN_BITS,
    ZFP_MIN_EXP,
    ZfpMode,
    mode_from_selector,
)


def _opt(default, desc: str):
    return field(default=default, metadata={"help": desc})


@dataclass
class HarnessConfig:
    """All harness options, settable on the command line as ``name=value``."""

    # --- Files ---
    ifile: str = _opt("", "set input filename")
    ofile: str = _opt("test_zfp.h5", "set output filename")

    # --- Data generation ---
    npoints: int = _opt(1024, "set number of points for generated dataset")
    noise: float = _opt(0.001, "set amount of random noise in generated dataset")
    amp: float = _opt(17.7, "set amplitude of sinusoid in generated dataset")
    doint: int = _opt(0, "also do integer data")
    highd: int = _opt(0, "run high-dimensional (>3D) case")

    # --- Chunking and ZFP filter ---
    chunk: int = _opt(256, "set chunk size for dataset")
    zfpmode: int = _opt(MODE_ACCURACY, "set zfp mode (1=rate,2=prec,3=acc,4=expert)")
    rate: float = _opt(4.0, "set rate for rate mode of filter")
    acc: float = _opt(0.0, "set accuracy for accuracy mode of filter")
    prec: int = _opt(11, "set precision for precision mode of zfp filter")
    minbits: int = _opt(ZFP_MIN_BITS, "set minbits for expert mode of zfp filter")
    maxbits: int = _opt(ZFP_MAX_BITS, "set maxbits for expert mode of zfp filter")
    maxprec: int = _opt(ZFP_MAX_PREC, "set maxprec for expert mode of zfp filter")
    minexp: int = _opt(ZFP_MIN_EXP, "set minexp for expert mode of zfp filter")

    # --- High-dimensional case (not settable from the command line) ---
    highd_shape: Tuple[int, ...] = (128, 128, 16, 32)
    highd_uncorrelated: Tuple[int, ...] = (1, 3)
    highd_chunk: Tuple[int, ...] = (1, 128, 1, 32)

    @classmethod
    def option_names(cls) -> List[str]:
        return [f.name for f in fields(cls) if "help" in f.metadata]

    @classmethod
    def from_assignments(cls, tokens: Iterable[str],
                         base: Optional["HarnessConfig"] = None) -> "HarnessConfig":
        """Parse ``name=value`` tokens on top of ``base`` (or the defaults).

        Raises ValueError for unknown names and unparsable values.
        """
        config = base or cls()
        types = {f.name: f.type for f in fields(cls) if "help" in f.metadata}
        for token in tokens:
            name, sep, value = token.partition("=")
            if not sep or name not in types:
                raise ValueError(f"Unrecognized option: {token!r}")
            kind = types[name]
            try:
                if kind in (int, "int"):
                    parsed = int(value)
                elif kind in (float, "float"):
                    parsed = float(value)
                else:
                    parsed = value
            except ValueError:
                raise ValueError(f"Invalid value for {name}: {value!r}") from None
            setattr(config, name, parsed)
        return config

    def options(self) -> List[Tuple[str, object, str]]:
        """(name, current value, description) for every command-line option."""
        return [
            (f.name, getattr(self, f.name), f.metadata["help"])
            for f in fields(self) if "help" in f.metadata
        ]

    def compression_mode(self) -> Optional[ZfpMode]:
        return mode_from_selector(
            self.zfpmode, rate=self.rate, acc=self.acc, prec=self.prec,
            minbits=self.minbits, maxbits=self.maxbits,
            maxprec=self.maxprec, minexp=self.minexp,
        )
