"""
Request factory — stamps agent identity onto every request it builds.
"""

from typing import Iterable, Optional

from wss_agent.models.project import AgentProjectInfo
from wss_agent.models.requests import (
    CheckPoliciesRequest,
    CheckPolicyComplianceRequest,
    GetDependencyDataRequest,
    UpdateInventoryRequest,
    UpdateType,
)


class RequestFactory:
    def __init__(self, agent: str, agent_version: str, plugin_version: Optional[str] = None):
        self.agent = agent
        self.agent_version = agent_version
        self.plugin_version = plugin_version

    def _common(
        self,
        org_token: str,
        requester_email: Optional[str],
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
    ) -> dict:
        return {
            "org_token": org_token,
            "requester_email": requester_email,
            "product": product,
            "product_version": product_version,
            "agent": self.agent,
            "agent_version": self.agent_version,
            "plugin_version": self.plugin_version,
            "projects": list(projects),
        }

    def new_update_inventory_request(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
        requester_email: Optional[str] = None,
        update_type: UpdateType = UpdateType.OVERRIDE,
    ) -> UpdateInventoryRequest:
        return UpdateInventoryRequest(
            **self._common(org_token, requester_email, product, product_version, projects),
            update_type=update_type,
        )

    def new_check_policies_request(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
        requester_email: Optional[str] = None,
    ) -> CheckPoliciesRequest:
        return CheckPoliciesRequest(**self._common(org_token, requester_email, product, product_version, projects))

    def new_check_policy_compliance_request(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
        force_check_all_dependencies: bool = False,
        requester_email: Optional[str] = None,
    ) -> CheckPolicyComplianceRequest:
        return CheckPolicyComplianceRequest(
            **self._common(org_token, requester_email, product, product_version, projects),
            force_check_all_dependencies=force_check_all_dependencies,
        )

    def new_dependency_data_request(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
        requester_email: Optional[str] = None,
    ) -> GetDependencyDataRequest:
        return GetDependencyDataRequest(**self._common(org_token, requester_email, product, product_version, projects))
