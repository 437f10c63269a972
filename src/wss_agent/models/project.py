"""
Project and dependency records — the payload serialized into the request diff.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WssModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Coordinates(WssModel):
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None


class ExclusionInfo(WssModel):
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None


class DependencyInfo(WssModel):
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    type: Optional[str] = None
    classifier: Optional[str] = None
    scope: Optional[str] = None
    sha1: Optional[str] = None
    system_path: Optional[str] = None
    optional: Optional[bool] = None
    filename: Optional[str] = None
    checksums: Optional[dict[str, str]] = None
    licenses: Optional[list[str]] = None
    copyrights: Optional[list[dict[str, Any]]] = None
    exclusions: list[ExclusionInfo] = Field(default_factory=list)
    children: list[DependencyInfo] = Field(default_factory=list)


class AgentProjectInfo(WssModel):
    coordinates: Optional[Coordinates] = None
    parent_coordinates: Optional[Coordinates] = None
    dependencies: list[DependencyInfo] = Field(default_factory=list)
    project_token: Optional[str] = None
