"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, soildeploy.toml only contains
overrides. A stock SOILDATA checkout needs no TOML file at all.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field

LOCAL_HOSTS = frozenset({"localhost", "localhost:8080"})
LOCAL_ACCESS_URL = "http://localhost:8080"

REQUIRED_ENV_KEYS: tuple[str, ...] = ("traefikhost", "useremail")


# --- soildeploy.toml sections ---


class LayoutConfig(BaseModel):
    """[layout] section — project-relative paths prepared before startup."""

    model_config = {"frozen": True}

    data_dirs: tuple[str, ...] = (
        "database-data",
        "minio-data",
        "letsencrypt",
        "data",
        "docroot",
    )
    secret_files: tuple[str, ...] = (
        "secrets/admin/password",
        "secrets/api/key",
        "secrets/db/password",
        "secrets/doi/password",
    )
    admin_password_file: str = "secrets/admin/password"
    init_dir: str = "init.d"


class DockerConfig(BaseModel):
    """[docker] section."""

    model_config = {"frozen": True}

    docker_command: str = "docker"
    compose_command: tuple[str, ...] = ("docker-compose",)
    network: str = "traefik"
    command_timeout: float | None = None


class StartupConfig(BaseModel):
    """[startup] section."""

    model_config = {"frozen": True}

    wait_seconds: float = Field(default=30, ge=0)
    poll_attempts: int = Field(default=1, ge=1)
    poll_interval: float = Field(default=10, ge=0)
    probe_timeout: int = Field(default=2, ge=1)


class SummaryConfig(BaseModel):
    """[summary] section."""

    model_config = {"frozen": True}

    admin_username: str = "dataverseAdmin"
    traefik_dashboard: str = "http://localhost:8089"


# --- .env contents ---


class StackEnvironment(BaseModel):
    """Key/value settings read from the stack's ``.env`` file.

    Only ``traefikhost`` and ``useremail`` are interpreted; every other key
    is carried verbatim in :attr:`values` for display and debugging.
    """

    model_config = {"frozen": True}

    traefikhost: str = ""
    useremail: str = ""
    values: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, str | None]) -> StackEnvironment:
        """Build from a parsed dotenv mapping; ``None`` values become ``""``."""
        values = {key: (value or "").strip() for key, value in raw.items()}
        return cls(
            traefikhost=values.get("traefikhost", ""),
            useremail=values.get("useremail", ""),
            values=values,
        )

    def missing_keys(self) -> list[str]:
        """Required keys that are absent or empty, in declaration order."""
        return [key for key in REQUIRED_ENV_KEYS if not getattr(self, key)]

    @property
    def is_local(self) -> bool:
        return self.traefikhost in LOCAL_HOSTS

    @property
    def access_url(self) -> str:
        if self.is_local:
            return LOCAL_ACCESS_URL
        return f"https://{self.traefikhost}"
