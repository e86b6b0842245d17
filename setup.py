"""setup.py for zfp-harness.

The ZFP filter itself is not built here: ``hdf5plugin`` ships a compiled
H5Z-ZFP filter and registers it with the HDF5 library that h5py loads.
If the filter is missing at run time, creating a compressed dataset fails
with a ``StorageError`` instead of silently writing uncompressed data.
"""

import os

from setuptools import find_packages, setup


def _read_version():
    """Read __version__ from the package without importing it."""
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                        "zfpharness", "__init__.py")
    with open(path) as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=", 1)[1].strip().strip('"').strip("'")
    raise RuntimeError("Unable to find __version__")


setup(
    name="zfp-harness",
    version=_read_version(),
    description="Synthetic test data and ZFP filter parameters for HDF5 round-trip checks",
    packages=find_packages(include=["zfpharness", "zfpharness.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.22",
        "scipy>=1.8",
        "h5py>=3.7",
        "hdf5plugin>=4.0",
        "rich>=12.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
