"""
Typed results decoded from the envelope ``data`` field, one per RequestType.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from wss_agent.models.project import WssModel

REJECT_ACTION = "Reject"


class UpdateInventoryResult(WssModel):
    organization: str = ""
    updated_projects: list[str] = Field(default_factory=list)
    created_projects: list[str] = Field(default_factory=list)
    request_token: Optional[str] = None


class PolicyInfo(WssModel):
    display_name: Optional[str] = None
    filter_type: Optional[str] = None
    filter_logic: Optional[str] = None
    action_type: Optional[str] = None
    project_level: Optional[bool] = None
    inclusive: Optional[bool] = None


class PolicyCheckResourceNode(WssModel):
    """A resource in the dependency tree and the policy that matched it, if any."""

    resource: Optional[dict[str, Any]] = None
    policy: Optional[PolicyInfo] = None
    children: list[PolicyCheckResourceNode] = Field(default_factory=list)

    def has_rejections(self) -> bool:
        if self.policy is not None and self.policy.action_type == REJECT_ACTION:
            return True
        return any(child.has_rejections() for child in self.children)


class CheckPoliciesResult(WssModel):
    organization: str = ""
    existing_projects: dict[str, PolicyCheckResourceNode] = Field(default_factory=dict)
    new_projects: dict[str, PolicyCheckResourceNode] = Field(default_factory=dict)
    project_new_resources: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)

    def has_rejections(self) -> bool:
        roots = list(self.existing_projects.values()) + list(self.new_projects.values())
        return any(root.has_rejections() for root in roots)


class CheckPolicyComplianceResult(CheckPoliciesResult):
    pass


class GetDependencyDataResult(WssModel):
    organization: str = ""
    projects: list[dict[str, Any]] = Field(default_factory=list)
