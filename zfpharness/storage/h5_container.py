"""HDF5 container I/O for the round-trip harness.

Thin wrappers over h5py that turn any HDF5 failure into a ``StorageError``
naming the operation, and any file-system failure into a ``ResourceError``.
Importing ``hdf5plugin`` registers the ZFP filter with the HDF5 library
loaded by h5py, so compressed datasets can be both written and read back.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

import h5py
import hdf5plugin  # noqa: F401  (registers the ZFP filter)
import numpy as np

from ..codec.zfp_params import ZFP_FILTER_ID
from ..errors import ResourceError, StorageError

# (uncompressed, compressed) dataset name pairs written by the harness
DATASET_PAIRS = (
    ("original", "compressed"),
    ("int_original", "int_compressed"),
    ("highD_original", "highD_compressed"),
)


@contextmanager
def _storage_call(operation: str, target: str = "") -> Iterator[None]:
    try:
        yield
    except (OSError, ValueError, TypeError, KeyError, RuntimeError) as e:
        if isinstance(e, StorageError):
            raise
        detail = f"{target}: {e}" if target else str(e)
        raise StorageError(operation, detail) from e


def zfp_filter_available() -> bool:
    """True if the HDF5 library has the ZFP filter registered."""
    return bool(h5py.h5z.filter_avail(ZFP_FILTER_ID))


@contextmanager
def create_container(path) -> Iterator[h5py.File]:
    """Create (truncate) an HDF5 file; it is closed on every exit path."""
    with _storage_call("create_container", str(path)):
        f = h5py.File(str(path), "w")
    try:
        yield f
    finally:
        with _storage_call("close_container", str(path)):
            f.close()


@contextmanager
def open_container(path) -> Iterator[h5py.File]:
    """Open an existing HDF5 file read-only."""
    with _storage_call("open_container", str(path)):
        f = h5py.File(str(path), "r")
    try:
        yield f
    finally:
        with _storage_call("close_container", str(path)):
            f.close()


def _zfp_dcpl(name: str, chunks: Tuple[int, ...], cd_values: Sequence[int]):
    """Dataset creation properties with ZFP attached as a mandatory filter.

    h5py's ``compression=`` keyword attaches custom filters as optional, and
    HDF5 then stores any chunk the filter rejects uncompressed. A mandatory
    filter makes that chunk fail the write instead.
    """
    if not zfp_filter_available():
        raise StorageError("create_dataset", f"{name}: ZFP filter {ZFP_FILTER_ID} is not registered")
    with _storage_call("create_dataset", name):
        dcpl = h5py.h5p.create(h5py.h5p.DATASET_CREATE)
        dcpl.set_chunk(chunks)
        dcpl.set_filter(ZFP_FILTER_ID, h5py.h5z.FLAG_MANDATORY,
                        tuple(int(v) for v in cd_values) or None)
    return dcpl


def write_dataset(
    container: h5py.File,
    name: str,
    data: np.ndarray,
    chunks: Optional[Sequence[int]] = None,
    cd_values: Optional[Sequence[int]] = None,
) -> h5py.Dataset:
    """Write ``data`` as a new dataset, ZFP-compressed if ``cd_values`` is given.

    Args:
        container: Open, writable file.
        name: Dataset name.
        data: Full array to write (shape and dtype become the dataset's).
        chunks: Chunk shape; required for compressed datasets.
        cd_values: ZFP filter parameters; ``()`` means codec defaults and
            ``None`` means no filter at all.
    """
    kwargs = {}
    if chunks is not None:
        chunks = tuple(int(c) for c in chunks)
    if cd_values is not None:
        if chunks is None:
            raise StorageError("create_dataset", f"{name}: compressed datasets need a chunk shape")
        kwargs["dcpl"] = _zfp_dcpl(name, chunks, cd_values)
    elif chunks is not None:
        kwargs["chunks"] = chunks

    data = np.asarray(data)
    with _storage_call("create_dataset", name):
        dset = container.create_dataset(name, shape=data.shape, dtype=data.dtype, **kwargs)
    with _storage_call("write_dataset", name):
        dset[...] = data
    return dset


def read_dataset(container: h5py.File, name: str) -> np.ndarray:
    with _storage_call("read_dataset", name):
        return container[name][...]


def read_raw_doubles(path, count: int) -> np.ndarray:
    """Read ``count`` native-endian float64 values from a raw binary file."""
    path = Path(path)
    nbytes = int(count) * 8
    try:
        with open(path, "rb") as f:
            raw = f.read(nbytes)
    except OSError as e:
        raise ResourceError.from_oserror("open", e) from e
    if len(raw) != nbytes:
        raise ResourceError("read", 5, f"short read: {len(raw)} of {nbytes} bytes from {path}")
    return np.frombuffer(raw, dtype=np.float64).copy()


@dataclass
class DatasetComparison:
    """Uncompressed vs. compressed copy of one dataset."""
    original: str
    compressed: str
    shape: Tuple[int, ...]
    dtype: str
    max_abs_error: float
    raw_bytes: int
    stored_bytes: int

    @property
    def ratio(self) -> float:
        return self.raw_bytes / max(self.stored_bytes, 1)


def summarize_container(path) -> List[DatasetComparison]:
    """Compare every original/compressed pair present in ``path``."""
    results = []
    with open_container(path) as f:
        for orig_name, comp_name in DATASET_PAIRS:
            if orig_name not in f or comp_name not in f:
                continue
            orig = read_dataset(f, orig_name)
            comp = read_dataset(f, comp_name)
            with _storage_call("get_storage_size", comp_name):
                stored = f[comp_name].id.get_storage_size()
            err = np.abs(orig.astype(np.float64) - comp.astype(np.float64))
            results.append(DatasetComparison(
                original=orig_name,
                compressed=comp_name,
                shape=tuple(orig.shape),
                dtype=str(orig.dtype),
                max_abs_error=float(err.max()) if err.size else 0.0,
                raw_bytes=int(orig.nbytes),
                stored_bytes=int(stored),
            ))
    return results
