"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP, Fastly CLI) read settings the same way.
- Locates the `aio` config files shared with the Adobe I/O CLI.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_ORG = "cloudmanager_orgid"
CONFIG_PROGRAM = "cloudmanager_programid"
CONFIG_ENVIRONMENT = "cloudmanager_environmentid"
CONFIG_PROGRAM_NAME = "cloudmanager_programname"
CONFIG_ENVIRONMENT_NAME = "cloudmanager_environmentname"
CONFIG_EDGE_DELIVERY = "cloudmanager_edge_delivery"

CONSOLE_ORG_CODE = "console.org.code"

DEFAULT_API_ENDPOINT_URL = "/adobe/experimental/compute-expires-20251231/cdn/compute/fastly"
DEFAULT_FASTLY_API_ENDPOINT = "https://api-fastly.adobeaemcloud.com/"

LINK_ORGID = (
    "https://experienceleague.adobe.com/en/docs/core-services/interface/administration/"
    "organizations#concept_EA8AEE5B02CF46ACBDAD6A8508646255"
)
LINK_DEPRECATED_CONTEXT = (
    "https://experienceleague.adobe.com/en/docs/experience-manager-cloud-service/content/"
    "implementing/developing/rapid-development-environments"
    "#aio-rde-plugin-troubleshooting-deprecatedcontext"
)


def get_user_config_dir() -> Path:
    """Base directory of the `aio` global config file (XDG style on every platform)."""

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def get_global_config_file() -> Path:
    override = (os.environ.get("AIO_CONFIG_FILE") or "").strip()
    if override:
        return Path(override)
    return get_user_config_dir() / "aio"


def get_local_config_file() -> Path:
    return Path.cwd() / ".aio"


class AppSettings(BaseSettings):
    """Application settings.

    Why pydantic-settings:
    - Typed env vars validated at the edge.
    - `None` keeps "unset" apart from "set to an empty string", which the
      endpoint and token overrides rely on.
    """

    model_config = SettingsConfigDict(
        env_prefix="AEM_COMPUTE_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    api_endpoint: str | None = Field(
        default=None,
        description="Full compute API endpoint; replaces the one computed from the selection.",
    )
    api_endpoint_url: str | None = Field(
        default=None,
        description="Path suffix appended to the compute API endpoint.",
    )
    token: str | None = Field(
        default=None,
        description="Bearer token handed to the Fastly CLI instead of the IMS access token.",
    )
    fastly_cli: Path | None = Field(
        default=None,
        description="Path to the Fastly CLI binary (defaults to `fastly` on PATH).",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="aem-edge-functions/0.1",
        min_length=1,
        description="User-Agent sent to Cloud Manager and IMS.",
    )
