"""
Service requests — one class per RequestType, immutable once built.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import ClassVar, Optional

from pydantic import ConfigDict, Field

from wss_agent.models.project import AgentProjectInfo, WssModel


class RequestType(str, Enum):
    UPDATE = "UPDATE"
    CHECK_POLICIES = "CHECK_POLICIES"
    CHECK_POLICY_COMPLIANCE = "CHECK_POLICY_COMPLIANCE"
    GET_DEPENDENCY_DATA = "GET_DEPENDENCY_DATA"


class UpdateType(str, Enum):
    OVERRIDE = "OVERRIDE"
    APPEND = "APPEND"


def _now_millis() -> int:
    return int(time.time() * 1000)


class ServiceRequest(WssModel):
    model_config = ConfigDict(frozen=True)

    request_type: ClassVar[RequestType]

    org_token: str
    requester_email: Optional[str] = None
    product: Optional[str] = None
    product_version: Optional[str] = None
    time_stamp: int = Field(default_factory=_now_millis)
    agent: str = "generic"
    agent_version: str = "1.0"
    plugin_version: Optional[str] = None
    projects: list[AgentProjectInfo] = Field(default_factory=list)

    def __repr__(self) -> str:
        # never print the org token
        return (
            f"{type(self).__name__}(product={self.product!r}, product_version={self.product_version!r}, "
            f"projects={len(self.projects)}, time_stamp={self.time_stamp})"
        )


class UpdateInventoryRequest(ServiceRequest):
    request_type: ClassVar[RequestType] = RequestType.UPDATE

    update_type: UpdateType = UpdateType.OVERRIDE


class CheckPoliciesRequest(ServiceRequest):
    """Deprecated by the service in favour of CheckPolicyComplianceRequest."""

    request_type: ClassVar[RequestType] = RequestType.CHECK_POLICIES


class CheckPolicyComplianceRequest(ServiceRequest):
    request_type: ClassVar[RequestType] = RequestType.CHECK_POLICY_COMPLIANCE

    force_check_all_dependencies: bool = False


class GetDependencyDataRequest(ServiceRequest):
    request_type: ClassVar[RequestType] = RequestType.GET_DEPENDENCY_DATA
