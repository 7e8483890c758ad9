"""Fastly CLI wrapper.

The compute toolchain itself is the vendor binary; this module only points
it at the AEM compute API (`FASTLY_API_ENDPOINT`) with the right token
(`FASTLY_API_TOKEN`) and runs it with the user's terminal attached.
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from pathlib import Path

from core.config import DEFAULT_FASTLY_API_ENDPOINT, AppSettings
from core.errors import ConfigurationError, FastlyCliNotFoundError, InvalidServiceIdError

# Service ids end up in the argument vector; anything else is rejected.
SERVICE_ID_RE = re.compile(r"^[0-9a-zA-Z_-]+$")


def resolve_fastly_cli(settings: AppSettings | None = None) -> Path:
    settings = settings or AppSettings()
    if settings.fastly_cli:
        path = Path(settings.fastly_cli).expanduser()
        if not path.is_file():
            raise FastlyCliNotFoundError(f"Fastly CLI not found at {path} (AEM_COMPUTE_FASTLY_CLI).")
        return path

    found = shutil.which("fastly")
    if not found:
        raise FastlyCliNotFoundError(
            "Fastly CLI not found on PATH. Install it (https://www.fastly.com/documentation/reference/tools/cli/) "
            "or point AEM_COMPUTE_FASTLY_CLI to the binary."
        )
    return Path(found)


class FastlyCli:
    def __init__(
        self,
        token: str | None = None,
        api_endpoint: str | None = None,
        *,
        settings: AppSettings | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.fastly_cli_path: Path | None = None
        self.api_token = token if token is not None else self._settings.token
        self.api_endpoint = api_endpoint or self._settings.api_endpoint or DEFAULT_FASTLY_API_ENDPOINT

    def init(self) -> None:
        self.fastly_cli_path = resolve_fastly_cli(self._settings)

    def ensure_token_is_set(self) -> None:
        if not self.api_token:
            raise ConfigurationError("AEM_COMPUTE_TOKEN is not set")

    def ensure_service_id_is_safe(self, service_id: str | None) -> None:
        if not service_id or not SERVICE_ID_RE.fullmatch(service_id):
            raise InvalidServiceIdError(
                "Service ID must contain only alphanumeric characters, underscores, and hyphens"
            )

    def run(self, args: list[str]) -> None:
        """Run the Fastly CLI; raises `subprocess.CalledProcessError` on a non-zero exit."""

        if self.fastly_cli_path is None:
            self.init()
        env = {
            **os.environ,
            "FASTLY_API_TOKEN": self.api_token or "",
            "FASTLY_API_ENDPOINT": self.api_endpoint,
        }
        subprocess.run([str(self.fastly_cli_path), *args], env=env, check=True)

    def build(self) -> None:
        self.run(["compute", "build", "--include-source"])

    def deploy(self, service_id: str) -> None:
        self.ensure_token_is_set()
        self.ensure_service_id_is_safe(service_id)
        self.run(["compute", "deploy", "--service-id", service_id])

    def serve(self) -> None:
        self.run(["compute", "serve"])

    def log_tail(self, service_id: str) -> None:
        self.ensure_token_is_set()
        self.ensure_service_id_is_safe(service_id)
        self.run(["log-tail", "--service-id", service_id])
