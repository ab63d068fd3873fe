"""Tests for configuration models."""

import pytest

from soildeploy.config.models import StackEnvironment, StartupConfig


class TestStackEnvironment:
    @pytest.mark.parametrize("host", ["localhost", "localhost:8080"])
    def test_local_hosts_use_plain_http(self, host: str) -> None:
        env = StackEnvironment(traefikhost=host, useremail="a@b.org")
        assert env.is_local
        assert env.access_url == "http://localhost:8080"

    def test_remote_host_uses_https(self) -> None:
        env = StackEnvironment(traefikhost="soildata.example.org", useremail="a@b.org")
        assert not env.is_local
        assert env.access_url == "https://soildata.example.org"

    def test_missing_keys_in_order(self) -> None:
        assert StackEnvironment().missing_keys() == ["traefikhost", "useremail"]

    def test_from_mapping_handles_valueless_keys(self) -> None:
        env = StackEnvironment.from_mapping({"traefikhost": None, "useremail": " x@y.org "})
        assert env.traefikhost == ""
        assert env.useremail == "x@y.org"


class TestStartupConfig:
    def test_negative_wait_rejected(self) -> None:
        with pytest.raises(ValueError):
            StartupConfig(wait_seconds=-1)

    def test_poll_attempts_at_least_one(self) -> None:
        with pytest.raises(ValueError):
            StartupConfig(poll_attempts=0)
