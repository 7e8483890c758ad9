"""IMS context resolution.

Picks the context to use (flag, current default, plugin fallback), and turns
its stored data into the bearer token plus API key every Cloud Manager call
needs. Printing stays with the caller through `IdentityHooks`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from adapters.ims import ImsContexts, decode_token, list_organizations
from core.config import LINK_DEPRECATED_CONTEXT
from core.config_store import ConfigStore
from core.domain.models import Organization
from core.errors import ContextNotConfiguredError, IdentityError

PLUGIN_CONTEXT = "aio-cli-plugin-cloudmanager"
CLI_CONTEXT = "cli"


@dataclass
class IdentityHooks:
    warning: Callable[[str], None] | None = None
    error: Callable[[str], None] | None = None


@dataclass
class TokenAndKey:
    access_token: str
    api_key: str
    local: bool
    data: dict[str, Any]


class IdentityClient:
    def __init__(
        self,
        store: ConfigStore,
        *,
        context_name: str | None = None,
        hooks: IdentityHooks | None = None,
        contexts: ImsContexts | None = None,
    ) -> None:
        self._explicit_context = context_name
        self._hooks = hooks or IdentityHooks()
        self._contexts = contexts or ImsContexts(store)

    def resolve_context_name(self) -> str:
        return self._explicit_context or self._contexts.get_current() or PLUGIN_CONTEXT

    def get_token_and_key(self) -> TokenAndKey:
        """Access token and API key of the configured (or default) context."""

        context_name = self.resolve_context_name()
        context = self._contexts.get(context_name)

        if not context.data:
            if context_name != PLUGIN_CONTEXT:
                self._emit_error(f"Configured default context '{context_name}' not found.")
                raise ContextNotConfiguredError(
                    "No valid IMS context found. Please set a valid context using 'aio context set' command."
                )
            context_name = CLI_CONTEXT
            context = self._contexts.get(context_name)

        data = context.data
        if not data:
            raise ContextNotConfiguredError(f"Context has no data: {context_name}")

        if context_name == PLUGIN_CONTEXT:
            self._emit_warning(
                f"Using deprecated context '{context_name}'. "
                f"Refer to the documentation to update your context: {LINK_DEPRECATED_CONTEXT}"
            )

        access_token = self._contexts.get_token(context_name)
        claims = decode_token(access_token)
        api_key = data.get("client_id") or (claims or {}).get("client_id")
        if not api_key:
            if claims is None:
                raise IdentityError(f"Cannot decode access token for context: {context_name}")
            raise IdentityError(f"No client_id found in access token for context: {context_name}")

        return TokenAndKey(access_token=access_token, api_key=str(api_key), local=context.local, data=data)

    def get_organizations(self) -> list[Organization]:
        """IMS organizations as `ident@authSrc` ids. Records without a usable `orgRef` are skipped."""

        token = self.get_token_and_key().access_token
        organizations = []
        skipped = 0
        for org in list_organizations(token):
            ref = org.get("orgRef")
            if not isinstance(ref, dict) or not ref.get("ident") or not ref.get("authSrc"):
                skipped += 1
                continue
            organizations.append(
                Organization(name=org.get("orgName") or "", id=f"{ref['ident']}@{ref['authSrc']}")
            )

        if skipped:
            self._emit_warning(f"Skipped {skipped} organization(s) without an organization reference.")
        return organizations

    def _emit_warning(self, message: str) -> None:
        if self._hooks.warning:
            self._hooks.warning(message)

    def _emit_error(self, message: str) -> None:
        if self._hooks.error:
            self._hooks.error(message)
