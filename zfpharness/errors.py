"""Exception types raised by the harness.

Precondition failures are ``ValueError`` subclasses (bad shapes, bad counts,
bad compression parameters). Failures of the outside world (files, HDF5
calls) are ``RuntimeError`` subclasses carrying the name of the operation
that failed.
"""

import os
from typing import Optional


class PreconditionError(ValueError):
    """A caller-supplied argument violates a hard precondition."""


class ZfpConfigError(PreconditionError):
    """ZFP compression parameters are out of range or inconsistent."""


class HarnessError(RuntimeError):
    """A resource or storage operation failed."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")


class ResourceError(HarnessError):
    """File open/read/close or allocation failure."""

    def __init__(self, operation: str, errno: int = 0, strerror: Optional[str] = None):
        self.errno = errno
        self.strerror = strerror or (os.strerror(errno) if errno else "ok")
        super().__init__(operation, f"errno={errno} ({self.strerror})")

    @classmethod
    def from_oserror(cls, operation: str, exc: OSError) -> "ResourceError":
        return cls(operation, exc.errno or 0, exc.strerror)


class StorageError(HarnessError):
    """An HDF5 container, dataset or property call failed."""
