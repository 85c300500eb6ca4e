"""The object that owns a stored plan."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from planstore.models.records import OwnerReference
from planstore.models.storage import StorageConfig


class PlanOwner(BaseModel):
    """Identity and storage preferences of the plan's owning object.

    The storage layer reads this but never mutates it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    workspace: str = "default"
    uid: str = ""
    storage_config: StorageConfig | None = None

    def owner_reference(self) -> OwnerReference:
        return OwnerReference(name=self.name, uid=self.uid)
