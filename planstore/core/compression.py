"""Gzip helpers shared by the chunk codec, spill store and legacy reader."""

from __future__ import annotations

import gzip
import zlib

from planstore.core.errors import CompressionError


def gzip_encode(data: bytes) -> bytes:
    """Compress raw bytes into a self-describing gzip stream."""
    try:
        return gzip.compress(data)
    except (OSError, TypeError, ValueError) as exc:
        raise CompressionError(f"failed to compress {len(data)} bytes: {exc}") from exc


def gzip_decode(data: bytes) -> bytes:
    """Decompress a gzip stream produced by :func:`gzip_encode`."""
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise CompressionError(f"failed to decompress plan data: {exc}") from exc
