"""Chunk codec — splits a plan across size-bounded records and joins it back.

Encoding: gzip the plan, then cut the compressed stream into pieces no
larger than ``chunk_size``.  Each piece becomes one record named
``tfplan-<workspace>-<name>-<index>`` that carries:

- the identity labels (plan-name, plan-workspace) used for listing,
- ``plan-chunk`` (its index) and ``plan-chunk-count`` annotations,
- ``savedPlan`` (the plan id) and ``encoding=gzip`` annotations,
- an owner reference to the owning object.

Decoding validates that the set is complete and consistent before
joining and decompressing; any problem is a ``DecodeError``.
"""

from __future__ import annotations

import re

from planstore.core.compression import gzip_decode, gzip_encode
from planstore.core.errors import CompressionError, DecodeError, EncodeError
from planstore.models.records import (
    ENCODING_ANNOTATION,
    ENCODING_GZIP,
    MAX_RECORD_SIZE_BYTES,
    PLAN_CHUNK_ANNOTATION,
    PLAN_CHUNK_COUNT_ANNOTATION,
    PLAN_DATA_KEY,
    SAVED_PLAN_ANNOTATION,
    OwnerReference,
    Record,
    identity_labels,
    plan_record_name,
)

_NAME_RE = re.compile(r"^[a-z0-9]([-a-z0-9.]*[a-z0-9])?$")
_MAX_NAME_LENGTH = 253


def _validate_name(kind: str, value: str) -> None:
    if not value:
        raise EncodeError(f"{kind} must not be empty")
    if not _NAME_RE.match(value):
        raise EncodeError(
            f"{kind} {value!r} must consist of lower case alphanumeric "
            "characters, '-' or '.', and start and end with an alphanumeric character"
        )


class ChunkCodec:
    """Encodes plans into chunk records and decodes them back.

    Parameters
    ----------
    chunk_size:
        Maximum payload bytes per chunk record.  Must not exceed the
        record store's ceiling.
    """

    def __init__(self, chunk_size: int = MAX_RECORD_SIZE_BYTES) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    def encode(
        self,
        name: str,
        namespace: str,
        workspace: str,
        owner_uid: str,
        plan_id: str,
        data: bytes,
    ) -> list[Record]:
        """Split *data* into an ordered list of chunk records."""
        _validate_name("name", name)
        _validate_name("namespace", namespace)
        _validate_name("workspace", workspace)
        if not plan_id:
            raise EncodeError("plan id must not be empty")

        base_name = plan_record_name(workspace, name)
        # Reserve room for the "-<index>" suffix
        if len(base_name) + 8 > _MAX_NAME_LENGTH:
            raise EncodeError(
                f"record name {base_name!r} is too long "
                f"(max {_MAX_NAME_LENGTH - 8} characters before the chunk index)"
            )

        try:
            compressed = gzip_encode(data)
        except CompressionError as exc:
            raise EncodeError(f"failed to compress plan {plan_id}: {exc}") from exc

        pieces = [
            compressed[i : i + self._chunk_size]
            for i in range(0, len(compressed), self._chunk_size)
        ] or [b""]

        owner_refs = [OwnerReference(name=name, uid=owner_uid)] if owner_uid else []
        return [
            Record(
                name=f"{base_name}-{index}",
                namespace=namespace,
                labels=identity_labels(name, workspace),
                annotations={
                    PLAN_CHUNK_ANNOTATION: str(index),
                    PLAN_CHUNK_COUNT_ANNOTATION: str(len(pieces)),
                    SAVED_PLAN_ANNOTATION: plan_id,
                    ENCODING_ANNOTATION: ENCODING_GZIP,
                },
                data={PLAN_DATA_KEY: piece},
                owner_references=owner_refs,
            )
            for index, piece in enumerate(pieces)
        ]

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def decode(
        self,
        name: str,
        namespace: str,
        owner_uid: str,
        records: list[Record],
    ) -> bytes:
        """Reassemble the plan held by *records*."""
        if not records:
            raise DecodeError(f"no chunk records for plan {namespace}/{name}")

        indexed: dict[int, Record] = {}
        plan_ids: set[str] = set()
        counts: set[str] = set()
        for record in records:
            if record.namespace != namespace:
                raise DecodeError(
                    f"chunk {record.name} belongs to namespace {record.namespace}, "
                    f"expected {namespace}"
                )
            if owner_uid and record.owner_references and not any(
                ref.uid == owner_uid for ref in record.owner_references
            ):
                raise DecodeError(
                    f"chunk {record.name} is not owned by {name} (uid {owner_uid})"
                )
            raw_index = record.annotations.get(PLAN_CHUNK_ANNOTATION)
            try:
                index = int(raw_index) if raw_index is not None else -1
            except ValueError:
                index = -1
            if index < 0:
                raise DecodeError(f"chunk {record.name} has no valid chunk index")
            if index in indexed:
                raise DecodeError(f"duplicate chunk index {index} for plan {name}")
            indexed[index] = record
            plan_ids.add(record.annotations.get(SAVED_PLAN_ANNOTATION, ""))
            if PLAN_CHUNK_COUNT_ANNOTATION in record.annotations:
                counts.add(record.annotations[PLAN_CHUNK_COUNT_ANNOTATION])

        if len(plan_ids) != 1:
            raise DecodeError(
                f"chunks for plan {name} disagree on plan id: {sorted(plan_ids)}"
            )
        if sorted(indexed) != list(range(len(indexed))):
            raise DecodeError(
                f"chunks for plan {name} are not contiguous: {sorted(indexed)}"
            )
        if counts and counts != {str(len(indexed))}:
            raise DecodeError(
                f"plan {name} expects {sorted(counts)} chunks, found {len(indexed)}"
            )

        parts: list[bytes] = []
        for index in range(len(indexed)):
            chunk = indexed[index]
            if PLAN_DATA_KEY not in chunk.data:
                raise DecodeError(f"chunk {chunk.name} has no plan data")
            parts.append(chunk.data[PLAN_DATA_KEY])
        joined = b"".join(parts)

        if indexed[0].annotations.get(ENCODING_ANNOTATION) != ENCODING_GZIP:
            return joined
        try:
            return gzip_decode(joined)
        except CompressionError as exc:
            raise DecodeError(f"failed to decompress plan {name}: {exc}") from exc
