"""Where the compute commands send the Fastly CLI, and with which token."""

from __future__ import annotations

from typing import Callable

from core.config import (
    CONFIG_EDGE_DELIVERY,
    CONFIG_ENVIRONMENT,
    CONFIG_ENVIRONMENT_NAME,
    CONFIG_ORG,
    CONFIG_PROGRAM,
    CONFIG_PROGRAM_NAME,
    DEFAULT_API_ENDPOINT_URL,
    AppSettings,
)
from core.config_store import ConfigStore
from core.domain.models import Selection
from core.errors import ConfigurationError


def load_selection(store: ConfigStore) -> Selection:
    return Selection(
        org_id=store.get(CONFIG_ORG),
        program_id=store.get(CONFIG_PROGRAM),
        program_name=store.get(CONFIG_PROGRAM_NAME),
        environment_id=store.get(CONFIG_ENVIRONMENT),
        environment_name=store.get(CONFIG_ENVIRONMENT_NAME),
        edge_delivery=bool(store.get(CONFIG_EDGE_DELIVERY)),
    )


def resolve_api_endpoint(settings: AppSettings, selection: Selection) -> str:
    """Compute API endpoint for the persisted selection.

    `AEM_COMPUTE_API_ENDPOINT` replaces the host part; the path suffix comes
    from `AEM_COMPUTE_API_ENDPOINT_URL` when set, even to an empty string.

    Raises `ConfigurationError` when there is no override and the selection
    lacks the program/environment (or the Edge Delivery domain).
    """

    endpoint = settings.api_endpoint
    if not endpoint:
        if selection.edge_delivery:
            if not selection.environment_name:
                raise ConfigurationError(
                    "No Edge Delivery site is selected. Please run the setup command first."
                )
            endpoint = f"https://{selection.environment_name}"
        else:
            if not selection.program_id or not selection.environment_id:
                raise ConfigurationError(
                    "No program and environment are selected. Please run the setup command first."
                )
            endpoint = (
                f"https://publish-p{selection.program_id}-e{selection.environment_id}.adobeaemcloud.com"
            )

    suffix = settings.api_endpoint_url if settings.api_endpoint_url is not None else DEFAULT_API_ENDPOINT_URL
    return endpoint + suffix


def resolve_token(settings: AppSettings, fetch_access_token: Callable[[], str]) -> str:
    """`AEM_COMPUTE_TOKEN` when set, else the IMS access token."""

    if settings.token is not None:
        return settings.token
    return fetch_access_token()
