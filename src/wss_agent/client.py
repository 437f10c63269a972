"""
WhitesourceService / AsyncWhitesourceService — façade over the service dispatcher.
"""

import asyncio
from typing import Any, Iterable, Optional

import httpx

from wss_agent.config import Settings
from wss_agent.dispatch import ServiceDispatcher
from wss_agent.factory import RequestFactory
from wss_agent.models.project import AgentProjectInfo
from wss_agent.models.requests import UpdateInventoryRequest, UpdateType
from wss_agent.models.results import (
    CheckPoliciesResult,
    CheckPolicyComplianceResult,
    GetDependencyDataResult,
    UpdateInventoryResult,
)
from wss_agent.transport.http import HttpClient


class AsyncWhitesourceService:
    """Async service client (primary)."""

    def __init__(
        self,
        agent: Optional[str] = None,
        agent_version: Optional[str] = None,
        plugin_version: Optional[str] = None,
        service_url: Optional[str] = None,
        connection_timeout_minutes: Optional[int] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or Settings()
        overrides = {}
        if service_url:
            overrides["url"] = service_url
        if connection_timeout_minutes:
            overrides["connection_timeout_minutes"] = connection_timeout_minutes
        if overrides:
            # validate again so blank/non-positive overrides fall back to defaults
            settings = Settings.model_validate({**settings.model_dump(), **overrides})
        self.settings = settings

        self.request_factory = RequestFactory(
            agent or settings.agent,
            agent_version or settings.agent_version,
            plugin_version if plugin_version is not None else settings.plugin_version,
        )
        self.http = HttpClient(service_url=settings.url, timeout=settings.timeout_seconds, transport=transport)
        self.dispatcher = ServiceDispatcher(self.http, success_status=settings.success_status)

    async def update(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
        requester_email: Optional[str] = None,
        update_type: UpdateType = UpdateType.OVERRIDE,
    ) -> UpdateInventoryResult:
        """Update the organization inventory with the given projects."""
        request = self.request_factory.new_update_inventory_request(
            org_token, product, product_version, projects,
            requester_email=requester_email, update_type=update_type,
        )
        return await self.dispatcher.service(request)

    def offline_update(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
        requester_email: Optional[str] = None,
    ) -> UpdateInventoryRequest:
        """Build the update request without sending it, e.g. to save it for later."""
        return self.request_factory.new_update_inventory_request(
            org_token, product, product_version, projects, requester_email=requester_email,
        )

    async def check_policies(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
    ) -> CheckPoliciesResult:
        """Deprecated: use check_policy_compliance()."""
        request = self.request_factory.new_check_policies_request(org_token, product, product_version, projects)
        return await self.dispatcher.service(request)

    async def check_policy_compliance(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
        force_check_all_dependencies: bool = False,
    ) -> CheckPolicyComplianceResult:
        """Check the projects against the organization policies.

        With ``force_check_all_dependencies`` every dependency is checked, not
        only those new to the inventory.
        """
        request = self.request_factory.new_check_policy_compliance_request(
            org_token, product, product_version, projects, force_check_all_dependencies,
        )
        return await self.dispatcher.service(request)

    async def get_dependency_data(
        self,
        org_token: str,
        product: Optional[str],
        product_version: Optional[str],
        projects: Iterable[AgentProjectInfo],
    ) -> GetDependencyDataResult:
        """Fetch license, vulnerability and description data for the dependencies."""
        request = self.request_factory.new_dependency_data_request(org_token, product, product_version, projects)
        return await self.dispatcher.service(request)

    async def close(self) -> None:
        await self.dispatcher.close()

    async def __aenter__(self) -> "AsyncWhitesourceService":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


class WhitesourceService:
    """Sync wrapper around AsyncWhitesourceService. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncWhitesourceService(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def request_factory(self) -> RequestFactory:
        return self._async.request_factory

    def update(self, *args: Any, **kwargs: Any) -> UpdateInventoryResult:
        return self._run(self._async.update(*args, **kwargs))

    def offline_update(self, *args: Any, **kwargs: Any) -> UpdateInventoryRequest:
        return self._async.offline_update(*args, **kwargs)

    def check_policies(self, *args: Any, **kwargs: Any) -> CheckPoliciesResult:
        return self._run(self._async.check_policies(*args, **kwargs))

    def check_policy_compliance(self, *args: Any, **kwargs: Any) -> CheckPolicyComplianceResult:
        return self._run(self._async.check_policy_compliance(*args, **kwargs))

    def get_dependency_data(self, *args: Any, **kwargs: Any) -> GetDependencyDataResult:
        return self._run(self._async.get_dependency_data(*args, **kwargs))

    def shutdown(self) -> None:
        """Close the underlying HTTP client and the private event loop."""
        self._run(self._async.close())
        self._loop.close()
