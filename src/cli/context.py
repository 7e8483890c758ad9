"""Per-invocation command state.

One `CommandContext` is built by the typer callback and handed to every
command. It owns what the commands share (settings, config store, console,
spinner, identity) and creates the Cloud Manager client and the Fastly CLI
wrapper on first use.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from rich.console import Console
from rich.markup import escape

from adapters.cloudmanager import CloudManager, get_base_url
from adapters.fastly_cli import FastlyCli
from adapters.http_client import build_client
from core.config import CONFIG_ORG, CONSOLE_ORG_CODE, AppSettings
from core.config_store import ConfigStore
from core.errors import ConfigurationError
from core.services.compute_target import load_selection, resolve_api_endpoint, resolve_token
from core.services.identity import IdentityClient, IdentityHooks


@dataclass
class CommandContext:
    settings: AppSettings = field(default_factory=AppSettings)
    store: ConfigStore = field(default_factory=ConfigStore)
    console: Console = field(default_factory=Console)
    context_name: str | None = None

    _identity: IdentityClient | None = field(default=None, init=False, repr=False)
    _cloudmanager: CloudManager | None = field(default=None, init=False, repr=False)
    _fastly: FastlyCli | None = field(default=None, init=False, repr=False)

    @property
    def identity(self) -> IdentityClient:
        if self._identity is None:
            self._identity = IdentityClient(
                self.store,
                context_name=self.context_name,
                hooks=IdentityHooks(warning=self.warn, error=self.error),
            )
        return self._identity

    def info(self, message: str) -> None:
        self.console.print(escape(message), highlight=False)

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]", highlight=False)

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]", highlight=False)

    def success(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]", highlight=False)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        with self.console.status(message):
            yield

    def get_cli_org_id(self) -> str | None:
        return self.store.get(CONFIG_ORG) or self.store.get(CONSOLE_ORG_CODE)

    def cloudmanager(self, org_id: str | None = None) -> CloudManager:
        """Cloud Manager client for `org_id`, else the configured org."""

        if self._cloudmanager is None:
            token = self.identity.get_token_and_key()
            org_id = org_id or self.get_cli_org_id()
            if not org_id:
                raise ConfigurationError("Organization ID is not set. Please run the setup command to set it.")
            base_url = get_base_url(stage=token.data.get("env") == "stage")
            self._cloudmanager = CloudManager(
                f"{base_url}/api",
                token.api_key,
                org_id,
                token.access_token,
                client=build_client(self.settings),
                warning=self.warn,
            )
        return self._cloudmanager

    def fastly_cli(self) -> FastlyCli:
        if self._fastly is None:
            endpoint = resolve_api_endpoint(self.settings, load_selection(self.store))
            token = resolve_token(self.settings, lambda: self.identity.get_token_and_key().access_token)
            self._fastly = FastlyCli(token, endpoint, settings=self.settings)
        return self._fastly

    def close(self) -> None:
        if self._cloudmanager is not None:
            self._cloudmanager.close()
            self._cloudmanager = None
