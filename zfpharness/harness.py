"""Round-trip harness: generate data, store it plain and ZFP-compressed.

Writes into one HDF5 container:
    original / compressed               1-D float64 sinusoid (or data read from ``ifile``)
    int_original / int_compressed       1-D int32 sinusoid            (``doint``)
    highD_original / highD_compressed   4-D float64 correlated array  (``highd``)

Every failure aborts the run; there are no retries and no partial results.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .codec.zfp_params import cd_values, mode_name
from .config import HarnessConfig
from .data.synthetic import as_grid, generate_correlated_array, generate_noisy_sine
from .storage.h5_container import create_container, read_raw_doubles, write_dataset


@dataclass
class RoundTripReport:
    """What a harness run wrote."""
    output: str
    mode: str
    cd_values: Tuple[int, ...]
    datasets: List[str] = field(default_factory=list)


def build_buffers(config: HarnessConfig):
    """Return (float64 buffer, int32 buffer or None) for the 1-D case."""
    if config.ifile:
        buf = read_raw_doubles(config.ifile, config.npoints)
    else:
        buf = generate_noisy_sine(config.npoints, config.noise, config.amp, dtype=np.float64)

    ibuf = None
    if config.doint:
        ibuf = generate_noisy_sine(
            config.npoints, config.noise * 100, config.amp * 1000000, dtype=np.int32,
        )
    return buf, ibuf


def run_roundtrip(config: HarnessConfig) -> RoundTripReport:
    """Run the full write sequence described by ``config``."""
    mode = config.compression_mode()
    filter_opts = cd_values(mode)
    report = RoundTripReport(output=str(config.ofile), mode=mode_name(mode), cd_values=filter_opts)

    buf, ibuf = build_buffers(config)
    chunks = (int(config.chunk),)

    with create_container(config.ofile) as f:
        write_dataset(f, "original", buf)
        report.datasets.append("original")
        if ibuf is not None:
            write_dataset(f, "int_original", ibuf)
            report.datasets.append("int_original")

        write_dataset(f, "compressed", buf, chunks=chunks, cd_values=filter_opts)
        report.datasets.append("compressed")
        if ibuf is not None:
            write_dataset(f, "int_compressed", ibuf, chunks=chunks, cd_values=filter_opts)
            report.datasets.append("int_compressed")

        if config.highd:
            shape = tuple(config.highd_shape)
            hbuf = generate_correlated_array(
                shape, config.highd_uncorrelated, dtype=np.float64, sampling="separable",
            )
            grid = as_grid(hbuf, shape)
            write_dataset(f, "highD_original", grid)
            write_dataset(f, "highD_compressed", grid,
                          chunks=config.highd_chunk, cd_values=filter_opts)
            report.datasets.extend(["highD_original", "highD_compressed"])

    return report
