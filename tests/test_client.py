"""Tests for the service façade over a mocked HTTP transport."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from conftest import SERVICE_URL, envelope
from wss_agent import AsyncWhitesourceService, Settings, WhitesourceService
from wss_agent.codec.stream import decompress_string
from wss_agent.errors import ServiceError, TransportError
from wss_agent.models.requests import UpdateInventoryRequest


class Recorder:
    """MockTransport handler that records requests and replies with a fixed body."""

    def __init__(self, body: str = "", status_code: int = 200):
        self.body = body
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)

    def form(self, index: int = -1) -> dict[str, str]:
        parsed = parse_qs(self.requests[index].content.decode("utf-8"), keep_blank_values=True)
        return {k: v[0] for k, v in parsed.items()}


def make_service(handler, **kwargs) -> AsyncWhitesourceService:
    return AsyncWhitesourceService(
        agent="test-agent", agent_version="9.9",
        settings=Settings(url=SERVICE_URL),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestAsyncService:
    @pytest.mark.asyncio
    async def test_update_posts_form_and_decodes_result(self, projects):
        recorder = Recorder(envelope({"organization": "acme", "updatedProjects": ["app"]}))
        async with make_service(recorder) as service:
            result = await service.update("org-token", "acme", "1.0", projects, requester_email="dev@acme.test")

        assert result.organization == "acme"
        assert result.updated_projects == ["app"]

        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == SERVICE_URL
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert request.headers["accept"] == "application/json"

        form = recorder.form()
        assert form["type"] == "UPDATE"
        assert form["agent"] == "test-agent"
        assert form["agentVersion"] == "9.9"
        assert form["token"] == "org-token"
        assert form["requesterEmail"] == "dev@acme.test"
        assert form["updateType"] == "OVERRIDE"
        assert json.loads(decompress_string(form["diff"]))[0]["coordinates"]["artifactId"] == "app"

    @pytest.mark.asyncio
    async def test_check_policy_compliance(self, projects):
        recorder = Recorder(envelope({"organization": "acme", "existingProjects": {}}))
        async with make_service(recorder) as service:
            result = await service.check_policy_compliance("t", "acme", "1.0", projects, force_check_all_dependencies=True)
        assert not result.has_rejections()
        assert recorder.form()["forceCheckAllDependencies"] == "true"

    @pytest.mark.asyncio
    async def test_get_dependency_data(self, projects):
        recorder = Recorder(envelope({"organization": "acme", "projects": [{"name": "app"}]}))
        async with make_service(recorder) as service:
            result = await service.get_dependency_data("t", "acme", "1.0", projects)
        assert result.projects == [{"name": "app"}]
        assert recorder.form()["type"] == "GET_DEPENDENCY_DATA"

    @pytest.mark.asyncio
    async def test_service_error(self, projects):
        recorder = Recorder(json.dumps({"status": 1, "message": "bad token", "data": "no such org"}))
        async with make_service(recorder) as service:
            with pytest.raises(ServiceError) as exc_info:
                await service.check_policies("t", "acme", "1.0", projects)
        assert exc_info.value.message == "bad token"
        assert exc_info.value.data == "no such org"

    @pytest.mark.asyncio
    async def test_http_error_status(self, projects):
        async with make_service(Recorder("upstream down", status_code=502)) as service:
            with pytest.raises(TransportError) as exc_info:
                await service.update("t", "acme", "1.0", projects)
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_network_failure(self, projects):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_service(handler) as service:
            with pytest.raises(TransportError):
                await service.update("t", "acme", "1.0", projects)

    def test_offline_update_builds_without_sending(self, projects):
        recorder = Recorder()
        service = make_service(recorder)
        request = service.offline_update("t", "acme", "1.0", projects)
        assert isinstance(request, UpdateInventoryRequest)
        assert request.agent == "test-agent"
        assert recorder.requests == []


class TestConfiguration:
    def test_defaults_from_settings(self):
        service = AsyncWhitesourceService()
        assert service.settings.url == "https://saas.whitesourcesoftware.com/agent"
        assert service.settings.connection_timeout_minutes == 60
        assert service.request_factory.agent == "generic"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("WSS_URL", "https://env.test/agent")
        monkeypatch.setenv("WSS_CONNECTION_TIMEOUT_MINUTES", "5")
        service = AsyncWhitesourceService()
        assert service.http.service_url == "https://env.test/agent"
        assert service.settings.timeout_seconds == 300.0

    def test_arguments_override_settings(self, monkeypatch):
        monkeypatch.setenv("WSS_URL", "https://env.test/agent")
        service = AsyncWhitesourceService(service_url="https://arg.test/agent", connection_timeout_minutes=2)
        assert service.http.service_url == "https://arg.test/agent"
        assert service.settings.connection_timeout_minutes == 2

    def test_invalid_values_fall_back(self):
        settings = Settings(url="  ", connection_timeout_minutes=0)
        assert settings.url == "https://saas.whitesourcesoftware.com/agent"
        assert settings.connection_timeout_minutes == 60


def test_sync_wrapper(projects):
    recorder = Recorder(envelope({"organization": "acme", "createdProjects": ["app"]}))
    service = WhitesourceService(
        settings=Settings(url=SERVICE_URL), transport=httpx.MockTransport(recorder),
    )
    try:
        result = service.update("t", "acme", "1.0", projects)
    finally:
        service.shutdown()
    assert result.created_projects == ["app"]
    assert recorder.form()["type"] == "UPDATE"
