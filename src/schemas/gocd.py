"""Pydantic models for the GoCD pipeline history API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Modification(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    revision: Optional[str] = None


class MaterialRevision(BaseModel):
    model_config = ConfigDict(extra="ignore")

    changed: bool = False
    modifications: list[Modification] = Field(default_factory=list)


class BuildCause(BaseModel):
    model_config = ConfigDict(extra="ignore")

    trigger_message: str = ""
    material_revisions: list[MaterialRevision] = Field(default_factory=list)


class PipelineInstance(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    counter: Optional[int] = None
    label: str = ""
    build_cause: Optional[BuildCause] = None

    @property
    def revision_id(self) -> Optional[int]:
        """Modification id of the first material, absent for timer/manual triggers."""
        if self.build_cause is None or not self.build_cause.material_revisions:
            return None
        modifications = self.build_cause.material_revisions[0].modifications
        if not modifications:
            return None
        return modifications[0].id


class PipelineHistory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    pipelines: list[PipelineInstance]


class HistoryRecord(BaseModel):
    counter: int = Field(ge=0)
    revision_id: Optional[int] = Field(default=None, ge=0, lt=2**64)
