"""Tests for the `wss` command line."""

import json

import httpx
import pytest
from click.testing import CliRunner

from conftest import SERVICE_URL, envelope
from wss_agent.cli import service as service_cli
from wss_agent.cli.main import main
from wss_agent.client import AsyncWhitesourceService
from wss_agent.codec.stream import compress_string, decompress_string
from wss_agent.config import Settings


@pytest.fixture
def runner():
    return CliRunner()


class TestCodecCommands:
    def test_compress_file(self, runner, tmp_path):
        text = '{"artifactId": "app"}\n' * 1000
        source = tmp_path / "payload.json"
        source.write_text(text, encoding="utf-8")

        result = runner.invoke(main, ["compress", str(source)])
        assert result.exit_code == 0, result.output
        assert decompress_string(result.stdout) == text

    @pytest.mark.parametrize("chunked", [False, True])
    def test_decompress_stdin(self, runner, monkeypatch, tmp_path, chunked):
        monkeypatch.setenv("WSS_TEMP_DIR", str(tmp_path))
        args = ["decompress"] + (["--chunked"] if chunked else [])
        result = runner.invoke(main, args, input=compress_string("héllo ✓"))
        assert result.exit_code == 0, result.output
        assert result.stdout == "héllo ✓"
        assert list(tmp_path.iterdir()) == []

    def test_compress_chunked_to_output_file(self, runner, tmp_path):
        out = tmp_path / "out.b64"
        result = runner.invoke(main, ["compress", "--chunked", "-o", str(out)], input="chunked payload")
        assert result.exit_code == 0, result.output
        assert decompress_string(out.read_text(encoding="utf-8")) == "chunked payload"

    @pytest.mark.parametrize("chunked", [False, True])
    def test_crlf_line_endings_survive(self, runner, monkeypatch, tmp_path, chunked):
        monkeypatch.setenv("WSS_TEMP_DIR", str(tmp_path / "scratch"))
        (tmp_path / "scratch").mkdir()
        flags = ["--chunked"] if chunked else []
        source = tmp_path / "in.txt"
        source.write_bytes(b"line1\r\nline2\r\n")

        compressed = runner.invoke(main, ["compress", str(source)] + flags)
        assert compressed.exit_code == 0, compressed.output
        assert decompress_string(compressed.stdout) == "line1\r\nline2\r\n"

        out = tmp_path / "out.txt"
        restored = runner.invoke(main, ["decompress", "-o", str(out)] + flags, input=compressed.stdout)
        assert restored.exit_code == 0, restored.output
        assert out.read_bytes() == b"line1\r\nline2\r\n"
        assert list((tmp_path / "scratch").iterdir()) == []

    def test_decompress_corrupt_input(self, runner):
        result = runner.invoke(main, ["decompress"], input="definitely not base64 !!!")
        assert result.exit_code == 1


class TestServiceCommands:
    @pytest.fixture
    def recorder(self, monkeypatch):
        calls = []
        reply = {"body": ""}

        def handler(request):
            calls.append(request)
            return httpx.Response(200, text=reply["body"])

        def make(service_url=None):
            return AsyncWhitesourceService(
                settings=Settings(url=service_url or SERVICE_URL), transport=httpx.MockTransport(handler),
            )

        monkeypatch.setattr(service_cli, "AsyncWhitesourceService", make)
        return calls, reply

    @pytest.fixture
    def projects_file(self, tmp_path, projects):
        path = tmp_path / "projects.json"
        path.write_text(json.dumps([p.to_wire() for p in projects]), encoding="utf-8")
        return path

    def test_update_json_output(self, runner, recorder, projects_file):
        calls, reply = recorder
        reply["body"] = envelope({"organization": "acme", "createdProjects": ["app"]})
        result = runner.invoke(main, ["update", str(projects_file), "--token", "t", "--product", "acme", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["createdProjects"] == ["app"]
        assert len(calls) == 1

    def test_token_from_environment(self, runner, recorder, projects_file, monkeypatch):
        calls, reply = recorder
        reply["body"] = envelope({"organization": "acme"})
        monkeypatch.setenv("WSS_ORG_TOKEN", "env-token")
        result = runner.invoke(main, ["dependency-data", str(projects_file)])
        assert result.exit_code == 0, result.output
        assert b"token=env-token" in calls[0].content

    def test_compliance_rejection_exit_code(self, runner, recorder, projects_file):
        _, reply = recorder
        reply["body"] = envelope({
            "organization": "acme",
            "newProjects": {"app": {"children": [{"policy": {"actionType": "Reject"}}]}},
        })
        result = runner.invoke(main, ["check-compliance", str(projects_file), "--token", "t", "--force-check-all"])
        assert result.exit_code == 2

    def test_service_error_exit_code(self, runner, recorder, projects_file):
        _, reply = recorder
        reply["body"] = json.dumps({"status": 1, "message": "bad token", "data": ""})
        result = runner.invoke(main, ["update", str(projects_file), "--token", "t"])
        assert result.exit_code == 1

    def test_missing_token(self, runner, projects_file):
        result = runner.invoke(main, ["update", str(projects_file)])
        assert result.exit_code == 2
