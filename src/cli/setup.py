"""`setup` command: organization → program → environment or Edge Delivery site.

Nothing is written to the config store until every step has resolved; an
aborted run leaves the previous selection untouched.
"""

from __future__ import annotations

import webbrowser

import httpx

from cli import prompts
from cli.context import CommandContext
from core.config import (
    CONFIG_EDGE_DELIVERY,
    CONFIG_ENVIRONMENT,
    CONFIG_ENVIRONMENT_NAME,
    CONFIG_ORG,
    CONFIG_PROGRAM,
    CONFIG_PROGRAM_NAME,
    LINK_ORGID,
)
from core.domain.models import Environment, Organization, Program, Site
from core.errors import IdentityError


def _as_default(value: object) -> str | None:
    return None if value is None else str(value)


class SetupFlow:
    def __init__(self, ctx: CommandContext) -> None:
        self.ctx = ctx
        self.org_id: str | None = None
        self.programs_cached: list[Program] = []
        self.environments_cached: list[Environment] = []
        self.sites_cached: list[Site] = []

    def run(self) -> bool:
        """Walk the prompts and persist the selection; False when aborted."""

        ctx = self.ctx
        ctx.info("Setup the CLI configuration necessary to use the Edge Functions commands.")

        store_local = prompts.confirm(
            "Do you want to store the information you enter in this setup procedure locally?",
            default=False,
        )

        organizations = self.get_organizations_from_token()
        if organizations is None:
            ctx.error("Setup aborted: your organizations could not be retrieved.")
            return False
        self.org_id = self.choose_org_id(organizations)

        program_id = self.get_program_id()
        if not program_id:
            return False

        edge_delivery = prompts.confirm(
            "Do you want to use an Edge Delivery site?",
            default=bool(ctx.store.get(CONFIG_EDGE_DELIVERY)),
        )

        if edge_delivery:
            environment_id = self.get_site_id(program_id)
            if environment_id is None:
                ctx.error("No Edge Delivery site found for the selected program.")
                return False
            environment_name = next((s.name for s in self.sites_cached if s.id == environment_id), None)
        else:
            environment_id = self.get_environment_id(program_id)
            if environment_id is None:
                ctx.error("No program or environment found for the selected organization.")
                return False
            environment_name = next((e.name for e in self.environments_cached if e.id == environment_id), None)

        program_name = next((p.name for p in self.programs_cached if p.id == program_id), None)

        ctx.success(
            f"Selected program {program_id} and {'site' if edge_delivery else 'environment'} "
            f"{environment_id}: {program_name} - {environment_name}"
        )

        store = ctx.store
        if self.org_id is not None:
            store.set(CONFIG_ORG, self.org_id, local=store_local)
        store.set(CONFIG_PROGRAM, program_id, local=store_local)
        store.set(CONFIG_EDGE_DELIVERY, edge_delivery, local=store_local)
        store.set(CONFIG_ENVIRONMENT, environment_id, local=store_local)
        store.set(CONFIG_PROGRAM_NAME, program_name, local=store_local)
        store.set(CONFIG_ENVIRONMENT_NAME, environment_name, local=store_local)

        ctx.info("Setup complete. Use 'aem-edge-functions --help' to see the available commands.")
        return True

    # ------------------------------------------------------------------
    # Organization
    # ------------------------------------------------------------------

    def choose_org_id(self, organizations: list[Organization]) -> str | None:
        """Prompt among `organizations`, or ask for the id by hand when there are none.

        An empty manual entry gives None, and the configured org is used instead.
        """

        if not organizations:
            selected = self.fallback_to_manual_organization_id()
        else:
            selected = prompts.select_one(
                organizations,
                label_of=lambda o: f"{o.name} - {o.id}",
                value_of=lambda o: o.id,
                previous_default=_as_default(self.ctx.store.get(CONFIG_ORG)),
                message="Please choose an organization (type to filter):",
                announce_single=lambda o: f"Selected only organization: {o.name} - {o.id}",
                say=self.ctx.info,
            )
            if len(organizations) == 1:
                return selected

        if selected:
            self.ctx.info(f"Selected organization: {selected}")
        return selected

    def get_organizations_from_token(self) -> list[Organization] | None:
        """IMS organizations of the logged-in user; None when they cannot be fetched."""

        try:
            return self.ctx.identity.get_organizations()
        except IdentityError as exc:
            if getattr(exc, "code", None) == "CONTEXT_NOT_CONFIGURED":
                self.ctx.info("No IMS context found. Please run `aio login` first.")
            else:
                self.ctx.warn(str(exc))
            return None
        except httpx.HTTPError as exc:
            self.ctx.warn(f"Failed to list organizations: {exc}")
            return None

    def fallback_to_manual_organization_id(self) -> str | None:
        ctx = self.ctx
        ctx.warn("Could not find an organization ID automatically.")
        ctx.warn("Please enter your organization ID manually.")
        ctx.console.print(f"[dim]See {LINK_ORGID}[/dim]", highlight=False)
        if prompts.confirm("Would you like to open the link in your browser?", default=False):
            webbrowser.open(LINK_ORGID)
        return prompts.text("Manual organization ID:") or None

    # ------------------------------------------------------------------
    # Program / environment / site
    # ------------------------------------------------------------------

    def get_program_id(self) -> str | None:
        if not self.programs_cached:
            with self.ctx.spinner("retrieving programs of your organization"):
                programs = self.ctx.cloudmanager(self.org_id).list_programs()
            self.programs_cached = programs or []

            if not self.programs_cached:
                self.ctx.error("No programs found for the selected organization.")
                return None

        return prompts.select_one(
            self.programs_cached,
            label_of=lambda p: f"{p.id} - {p.name}",
            value_of=lambda p: p.id,
            previous_default=_as_default(self.ctx.store.get(CONFIG_PROGRAM)),
            message="Please choose a program (type to filter):",
            announce_single=lambda p: f"Selected only program: {p.id}",
            say=self.ctx.info,
        )

    def get_environment_id(self, program_id: str) -> str | None:
        with self.ctx.spinner(f"retrieving environments of program {program_id}"):
            environments = self.ctx.cloudmanager(self.org_id).list_environments(program_id)
        self.environments_cached = environments or []

        if not self.environments_cached:
            self.ctx.error(f"No environments found for program {program_id}")
            self.ctx.info("==> Please choose a different program")
            return None

        return prompts.select_one(
            self.environments_cached,
            label_of=lambda e: f"{e.id} {e.type} ({e.status}) - {e.name}",
            value_of=lambda e: e.id,
            previous_default=_as_default(self.ctx.store.get(CONFIG_ENVIRONMENT)),
            message="Please choose an environment (type to filter):",
            announce_single=lambda e: f"Selected only environment: {e.id}",
            say=self.ctx.info,
        )

    def get_site_id(self, program_id: str) -> str | None:
        with self.ctx.spinner(f"retrieving sites of program {program_id}"):
            sites = self.ctx.cloudmanager(self.org_id).list_sites(program_id)
        self.sites_cached = sites or []

        if not self.sites_cached:
            self.ctx.error(f"No Edge Delivery sites found for program {program_id}")
            self.ctx.info("==> Please choose a different program")
            return None

        return prompts.select_one(
            self.sites_cached,
            label_of=lambda s: f"{s.id} - {s.name}",
            value_of=lambda s: s.id,
            previous_default=_as_default(self.ctx.store.get(CONFIG_ENVIRONMENT)),
            message="Please choose an Edge Delivery site (type to filter):",
            announce_single=lambda s: f"Selected only Edge Delivery site: {s.id} - {s.name}",
            say=self.ctx.info,
        )
