"""Tests for operation renderers and the formatter."""

import json

from soildeploy.output.formatters import OutputSettings, format_result
from soildeploy.output.renderers import render_quiet, render_result
from soildeploy.services.result import ServiceResult

DEPLOY_DATA = {
    "project_dir": "/srv/soildata",
    "access_url": "https://soildata.example.org",
    "admin_interfaces": {
        "Traefik": "http://localhost:8089",
        "Solr": "https://solr.soildata.example.org",
        "MinIO": "https://minio-console.soildata.example.org",
    },
    "admin_username": "dataverseAdmin",
    "admin_password": "admin1",
    "services": [
        {"name": "dataverse", "service": "dataverse", "state": "running",
         "status": "Up 30 seconds", "running": True},
    ],
    "reminders": ["IMPORTANT: Change default passwords in production!"],
    "next_steps": ["Wait 2-5 minutes for full initialization", "Configure monitoring"],
    "logs_command": "docker-compose logs -f",
}


class TestRenderDeploy:
    def test_summary_sections(self) -> None:
        out = render_result(ServiceResult(ok=True, op="deploy", data=DEPLOY_DATA))
        assert "[SUCCESS] SOILDATA deployment initiated successfully!" in out
        assert "[INFO]    https://soildata.example.org" in out
        assert "Solr: https://solr.soildata.example.org" in out
        assert "Username: dataverseAdmin" in out
        assert "Password: admin1" in out
        assert "[WARNING] IMPORTANT: Change default passwords in production!" in out
        assert "1. Wait 2-5 minutes for full initialization" in out
        assert "2. Configure monitoring" in out
        assert "View logs with: docker-compose logs -f" in out
        assert "dataverse" in out


class TestRenderError:
    def test_services_down(self) -> None:
        result = ServiceResult.failure(
            "deploy",
            "SERVICES_DOWN",
            "Some services failed to start. Check logs with: docker-compose logs",
            logs_command="docker-compose logs",
            services=[{"name": "solr", "state": "exited", "status": "Exited (1)"}],
        )
        out = render_result(result)
        assert out.startswith(
            "[ERROR] Some services failed to start. Check logs with: docker-compose logs"
        )
        assert "solr" in out
        assert out.count("docker-compose logs") == 1

    def test_hint_and_stderr(self) -> None:
        result = ServiceResult.failure(
            "deploy",
            "COMPOSE_FAILED",
            "docker-compose pull exited with status 1",
            stderr="pull access denied",
            hint="Log in to the registry.",
            logs_command="docker-compose logs",
        )
        out = render_result(result)
        assert "[WARNING] Log in to the registry." in out
        assert "pull access denied" in out
        assert "[INFO] Check logs with: docker-compose logs" in out

    def test_verbose_shows_detail(self) -> None:
        result = ServiceResult.failure("check", "CONFIG_INVALID", "x", key="useremail")
        assert "key: useremail" in render_result(result, verbose=True)


class TestOtherRenderers:
    def test_status(self) -> None:
        result = ServiceResult(
            ok=True,
            op="status",
            data={"running": 1, "total": 2, "services": DEPLOY_DATA["services"]},
        )
        assert "[SUCCESS] 1/2 services running" in render_result(result)

    def test_check(self) -> None:
        result = ServiceResult(ok=True, op="check", data={"traefikhost": "localhost"})
        out = render_result(result)
        assert "[SUCCESS] Preflight checks passed" in out
        assert "traefikhost: localhost" in out

    def test_quiet(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="deploy")) == "OK: deploy"
        failed = ServiceResult.failure("deploy", "X", "bad")
        assert render_quiet(failed) == "ERROR: deploy — bad"


class TestFormatResult:
    def test_json(self) -> None:
        result = ServiceResult(ok=True, op="status", data={"running": 2})
        out = format_result(result, settings=OutputSettings(json_output=True))
        assert json.loads(out)["data"]["running"] == 2

    def test_default_is_human(self) -> None:
        out = format_result(ServiceResult(ok=True, op="check", data={}))
        assert out.startswith("[SUCCESS]")
