"""
Service dispatch — builds the form for a request, sends it, and decodes the
typed result out of the response envelope.

BUILD: common fields, request-type fields, compressed JSON diff of the projects.
TRANSMIT: HttpClient.post_form.
PARSE: envelope unwrap, then ``data`` decoded into the result type of the request.
"""

import asyncio
import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional, Type

from pydantic import TypeAdapter, ValidationError

from wss_agent.codec.stream import compress_string
from wss_agent.config import STATUS_SUCCESS
from wss_agent.errors import ProtocolError
from wss_agent.models.project import AgentProjectInfo, WssModel
from wss_agent.models.requests import (
    CheckPolicyComplianceRequest,
    RequestType,
    ServiceRequest,
    UpdateInventoryRequest,
)
from wss_agent.models.results import (
    CheckPoliciesResult,
    CheckPolicyComplianceResult,
    GetDependencyDataResult,
    UpdateInventoryResult,
)
from wss_agent.transport.envelope import extract_result_data
from wss_agent.transport.http import HttpClient

log = logging.getLogger("wss_agent.dispatch")

# Form field names
PARAM_REQUEST_TYPE = "type"
PARAM_AGENT = "agent"
PARAM_AGENT_VERSION = "agentVersion"
PARAM_TOKEN = "token"
PARAM_REQUESTER_EMAIL = "requesterEmail"
PARAM_PRODUCT = "product"
PARAM_PRODUCT_VERSION = "productVersion"
PARAM_TIME_STAMP = "timeStamp"
PARAM_PLUGIN_VERSION = "pluginVersion"
PARAM_UPDATE_TYPE = "updateType"
PARAM_FORCE_CHECK_ALL_DEPENDENCIES = "forceCheckAllDependencies"
PARAM_DIFF = "diff"

RESULT_TYPES: Mapping[RequestType, Type[WssModel]] = MappingProxyType({
    RequestType.UPDATE: UpdateInventoryResult,
    RequestType.CHECK_POLICIES: CheckPoliciesResult,
    RequestType.CHECK_POLICY_COMPLIANCE: CheckPolicyComplianceResult,
    RequestType.GET_DEPENDENCY_DATA: GetDependencyDataResult,
})

_projects_adapter = TypeAdapter(list[AgentProjectInfo])


def serialize_projects(projects: list[AgentProjectInfo]) -> str:
    return _projects_adapter.dump_json(projects, by_alias=True, exclude_none=True).decode("utf-8")


def _field(value: Optional[Any]) -> str:
    return "" if value is None else str(value)


class ServiceDispatcher:
    def __init__(self, http: HttpClient, success_status: int = STATUS_SUCCESS):
        self._http = http
        self._success_status = success_status

    def build_form(self, request: ServiceRequest) -> dict[str, str]:
        """Build the url-encoded form fields for ``request``. Blocks while compressing the diff."""
        request_type = request.request_type
        fields = {
            PARAM_REQUEST_TYPE: request_type.value,
            PARAM_AGENT: _field(request.agent),
            PARAM_AGENT_VERSION: _field(request.agent_version),
            PARAM_TOKEN: _field(request.org_token),
            PARAM_REQUESTER_EMAIL: _field(request.requester_email),
            PARAM_PRODUCT: _field(request.product),
            PARAM_PRODUCT_VERSION: _field(request.product_version),
            PARAM_TIME_STAMP: str(request.time_stamp),
            PARAM_PLUGIN_VERSION: _field(request.plugin_version),
        }

        if isinstance(request, UpdateInventoryRequest):
            fields[PARAM_UPDATE_TYPE] = request.update_type.value
        elif isinstance(request, CheckPolicyComplianceRequest):
            fields[PARAM_FORCE_CHECK_ALL_DEPENDENCIES] = "true" if request.force_check_all_dependencies else "false"

        json_diff = serialize_projects(request.projects)
        fields[PARAM_DIFF] = compress_string(json_diff)
        log.debug(f"Built {request_type.value} request: {len(json_diff)} chars of diff, "
                  f"{len(fields[PARAM_DIFF])} compressed")
        return fields

    def parse_response(self, request_type: RequestType, response: str) -> WssModel:
        """Unwrap the envelope and decode ``data`` into the result type for ``request_type``."""
        data = extract_result_data(response, self._success_status)
        log.debug(f"Result data is: {data}")

        result_type = RESULT_TYPES[request_type]
        try:
            if data is None or data == "":
                return result_type()
            if isinstance(data, str):
                return result_type.model_validate_json(data)
            return result_type.model_validate(data)
        except (ValidationError, ValueError) as e:
            raise ProtocolError(
                f"Could not decode {result_type.__name__} from response data: {e}", response=response,
            ) from e

    async def service(self, request: ServiceRequest) -> Any:
        """Send ``request`` and return its typed result."""
        log.debug(f"Calling service: {request!r}")
        fields = await asyncio.to_thread(self.build_form, request)
        response = await self._http.post_form(fields)
        return self.parse_response(request.request_type, response)

    async def close(self) -> None:
        await self._http.close()
