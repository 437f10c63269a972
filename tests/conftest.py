import json

import pytest

from wss_agent.models.project import AgentProjectInfo, Coordinates, DependencyInfo

SERVICE_URL = "https://wss.test/agent"


def envelope(data, status=0, message="ok") -> str:
    """Build a response body the way the service wraps results."""
    if not isinstance(data, str):
        data = json.dumps(data)
    return json.dumps({"status": status, "message": message, "data": data})


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for name in ("WSS_URL", "WSS_CONNECTION_TIMEOUT_MINUTES", "WSS_TEMP_DIR", "WSS_SUCCESS_STATUS", "WSS_ORG_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    # keep a stray .env in the working directory out of Settings()
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def projects() -> list[AgentProjectInfo]:
    return [
        AgentProjectInfo(
            coordinates=Coordinates(group_id="com.acme", artifact_id="app", version="1.0"),
            dependencies=[
                DependencyInfo(group_id="org.slf4j", artifact_id="slf4j-api", version="1.7.36", sha1="abc123"),
            ],
        ),
    ]
