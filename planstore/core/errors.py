"""Error kinds raised by the hybrid plan storage layer.

Every failure is wrapped with the operation and plan identity before it
reaches the caller.  The only failures that are *not* raised are the
best-effort cleanups of stale records, which are logged instead.
"""

from __future__ import annotations


class PlanStorageError(RuntimeError):
    """Base class for all plan storage failures."""


class EncodeError(PlanStorageError):
    """Raised when the chunk codec rejects a plan (e.g. malformed identity)."""


class DecodeError(PlanStorageError):
    """Raised when a plan cannot be reconstructed from its chunk records."""


class StoreWriteError(PlanStorageError):
    """Raised when a create or delete against the record store fails."""


class StoreReadError(PlanStorageError):
    """Raised when a get or list against the record store fails."""


class CompressionError(PlanStorageError):
    """Raised when gzip compression or decompression fails."""


class SpillStoreError(PlanStorageError):
    """Raised on filesystem failures in the spill store (mkdir, write, read)."""


class LocatorMalformedError(PlanStorageError):
    """Raised when a locator record cannot be resolved to a spill file."""


class LocatorReferenceMissingError(LocatorMalformedError):
    """The locator record has no ``reference`` payload."""


class LocatorJSONError(LocatorMalformedError):
    """The ``reference`` payload is not a valid JSON object."""


class LocatorPathMissingError(LocatorMalformedError):
    """The ``reference`` payload has no ``file-path`` key."""


class PlanNotFoundError(PlanStorageError):
    """No record exists for the identity under any known format."""


class PlanDataMissingError(PlanStorageError):
    """A legacy record exists but carries no plan payload."""
