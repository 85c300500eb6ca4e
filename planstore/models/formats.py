"""Stored plan formats — the tagged union the read dispatcher resolves to.

Three historical formats can hold a plan:

- ``chunked``: one or more size-bounded chunk records found by identity labels.
- ``locator``: a single record redirecting to a spill-store file.
- ``inline``: the original single record holding the (optionally gzipped) plan.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from planstore.models.records import Record


class ChunkedPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["chunked"] = "chunked"
    records: list[Record]


class LocatorPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["locator"] = "locator"
    record: Record


class InlinePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["inline"] = "inline"
    record: Record


StoredPlan = Annotated[
    Union[ChunkedPlan, LocatorPlan, InlinePlan],
    Field(discriminator="kind"),
]
