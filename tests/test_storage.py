"""Tests for the HDF5 container layer."""

import errno
import os
import tempfile

import h5py
import numpy as np
import pytest

from zfpharness.codec.zfp_params import ZFP_FILTER_ID, AccuracyMode, PrecisionMode, RateMode, cd_values
from zfpharness.data.synthetic import generate_noisy_sine
from zfpharness.errors import ResourceError, StorageError
from zfpharness.storage.h5_container import (
    create_container,
    open_container,
    read_dataset,
    read_raw_doubles,
    summarize_container,
    write_dataset,
    zfp_filter_available,
)

needs_zfp = pytest.mark.skipif(not zfp_filter_available(), reason="ZFP filter not registered")


class TestContainer:
    def test_uncompressed_roundtrip(self):
        data = generate_noisy_sine(100)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "plain.h5")
            with create_container(path) as f:
                write_dataset(f, "original", data)
            with open_container(path) as f:
                np.testing.assert_array_equal(read_dataset(f, "original"), data)

    @needs_zfp
    def test_accuracy_mode_respects_tolerance(self):
        data = generate_noisy_sine(1000)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "zfp.h5")
            with create_container(path) as f:
                dset = write_dataset(f, "compressed", data, chunks=(100,),
                                     cd_values=cd_values(AccuracyMode(1e-6)))
                assert dset.chunks == (100,)
                code, flags = dset.id.get_create_plist().get_filter(0)[:2]
                assert code == ZFP_FILTER_ID
                assert not flags & h5py.h5z.FLAG_OPTIONAL
            with open_container(path) as f:
                out = read_dataset(f, "compressed")
        assert out.dtype == np.float64
        assert np.abs(out - data).max() <= 1e-6

    @needs_zfp
    def test_default_parameters(self):
        """Empty cd_values attaches the filter with codec defaults."""
        data = generate_noisy_sine(256)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "zfp.h5")
            with create_container(path) as f:
                write_dataset(f, "compressed", data, chunks=(64,), cd_values=())
            with open_container(path) as f:
                assert read_dataset(f, "compressed").shape == data.shape

    def test_compressed_requires_chunks(self):
        with tempfile.TemporaryDirectory() as tmp:
            with create_container(os.path.join(tmp, "x.h5")) as f:
                with pytest.raises(StorageError) as exc_info:
                    write_dataset(f, "compressed", np.zeros(8),
                                  cd_values=cd_values(PrecisionMode(16)))
        assert exc_info.value.operation == "create_dataset"

    @needs_zfp
    def test_rejected_chunk_fails_write(self):
        """A chunk the filter cannot compress is an error, not stored raw."""
        data = generate_noisy_sine(64)
        with tempfile.TemporaryDirectory() as tmp:
            with create_container(os.path.join(tmp, "x.h5")) as f:
                with pytest.raises(StorageError) as exc_info:
                    write_dataset(f, "compressed", data, chunks=(1,),
                                  cd_values=cd_values(RateMode(4.0)))
        assert "compressed" in exc_info.value.detail

    def test_duplicate_dataset_is_storage_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            with create_container(os.path.join(tmp, "x.h5")) as f:
                write_dataset(f, "original", np.zeros(8))
                with pytest.raises(StorageError) as exc_info:
                    write_dataset(f, "original", np.zeros(8))
        assert exc_info.value.operation == "create_dataset"
        assert exc_info.value.detail.startswith("original: ")

    def test_missing_dataset_names_it(self):
        with tempfile.TemporaryDirectory() as tmp:
            with create_container(os.path.join(tmp, "x.h5")) as f:
                with pytest.raises(StorageError) as exc_info:
                    read_dataset(f, "highD_compressed")
        assert exc_info.value.operation == "read_dataset"
        assert "highD_compressed" in str(exc_info.value)

    def test_create_in_missing_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            with pytest.raises(StorageError) as exc_info:
                with create_container(os.path.join(tmp, "nope", "x.h5")):
                    pass
        assert exc_info.value.operation == "create_container"

    def test_container_closed_after_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "x.h5")
            with pytest.raises(RuntimeError):
                with create_container(path) as f:
                    handle = f
                    raise RuntimeError("boom")
            assert not handle
            # Reopening works because the file was released.
            with open_container(path) as f:
                assert len(f) == 0


class TestRawInput:
    def test_read_raw_doubles(self):
        data = generate_noisy_sine(64)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "raw.bin")
            data.tofile(path)
            np.testing.assert_array_equal(read_raw_doubles(path, 64), data)
            np.testing.assert_array_equal(read_raw_doubles(path, 10), data[:10])

    def test_short_read(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "raw.bin")
            np.zeros(4).tofile(path)
            with pytest.raises(ResourceError) as exc_info:
                read_raw_doubles(path, 8)
        assert exc_info.value.operation == "read"

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with pytest.raises(ResourceError) as exc_info:
                read_raw_doubles(os.path.join(tmp, "missing.bin"), 8)
        assert exc_info.value.operation == "open"
        assert exc_info.value.errno == errno.ENOENT


class TestSummary:
    @needs_zfp
    def test_summarize_pairs(self):
        data = generate_noisy_sine(512)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "zfp.h5")
            with create_container(path) as f:
                write_dataset(f, "original", data)
                write_dataset(f, "compressed", data, chunks=(128,),
                              cd_values=cd_values(AccuracyMode(1e-3)))
            results = summarize_container(path)
        assert len(results) == 1
        r = results[0]
        assert (r.original, r.compressed) == ("original", "compressed")
        assert r.shape == (512,)
        assert r.dtype == "float64"
        assert r.raw_bytes == data.nbytes
        assert r.max_abs_error <= 1e-3
        assert r.ratio > 1.0

    def test_summarize_skips_unpaired(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "x.h5")
            with create_container(path) as f:
                write_dataset(f, "original", np.zeros(8))
            assert summarize_container(path) == []
