"""Record models for the size-limited metadata store.

A ``Record`` mirrors a namespaced key/value object with labels and
annotations.  Label, annotation and payload keys are kept here as named
constants so that writers and readers never disagree on a literal.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Hard per-record ceiling of the metadata store (sum of payload bytes).
MAX_RECORD_SIZE_BYTES = 1024 * 1024

# Identity labels used for lookup-by-identity listing
PLAN_NAME_LABEL = "infra.contrib.fluxcd.io/plan-name"
PLAN_WORKSPACE_LABEL = "infra.contrib.fluxcd.io/plan-workspace"

# Annotations
PLAN_CHUNK_ANNOTATION = "infra.contrib.fluxcd.io/plan-chunk"
PLAN_CHUNK_COUNT_ANNOTATION = "infra.contrib.fluxcd.io/plan-chunk-count"
SAVED_PLAN_ANNOTATION = "savedPlan"
STORAGE_TYPE_ANNOTATION = "storage-type"
ENCODING_ANNOTATION = "encoding"
ENCODING_GZIP = "gzip"

# Payload keys
PLAN_DATA_KEY = "tfplan"
REFERENCE_DATA_KEY = "reference"

# Locator marker values.  "persistentVolume" is what older writers used.
LOCATOR_STORAGE_TYPE = "spill"
LEGACY_LOCATOR_STORAGE_TYPE = "persistentVolume"
LOCATOR_STORAGE_TYPES = frozenset({LOCATOR_STORAGE_TYPE, LEGACY_LOCATOR_STORAGE_TYPE})

# Owner reference defaults for the owning Terraform object
OWNER_API_VERSION = "infra.contrib.fluxcd.io/v1alpha2"
OWNER_KIND = "Terraform"


def plan_record_name(workspace: str, owner_name: str, suffix: str = "") -> str:
    """Name of the legacy single-record plan, also used for locator records."""
    return f"tfplan-{workspace}-{owner_name}{suffix}"


def identity_labels(owner_name: str, workspace: str) -> dict[str, str]:
    """Label pair that every chunk record of a plan carries."""
    return {
        PLAN_NAME_LABEL: owner_name,
        PLAN_WORKSPACE_LABEL: workspace,
    }


class OwnerReference(BaseModel):
    """Points a record at the object that owns it.

    Deleting the owner garbage-collects every record referencing it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    uid: str
    api_version: str = OWNER_API_VERSION
    kind: str = OWNER_KIND


class Record(BaseModel):
    """One entry in the size-limited metadata store."""

    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    name: str
    namespace: str
    labels: dict[str, str] = {}
    annotations: dict[str, str] = {}
    data: dict[str, bytes] = {}
    owner_references: list[OwnerReference] = []

    @property
    def size_bytes(self) -> int:
        """Total payload size, the quantity the store's ceiling applies to."""
        return sum(len(v) for v in self.data.values())

    def matches_labels(self, labels: dict[str, str]) -> bool:
        return all(self.labels.get(k) == v for k, v in labels.items())
