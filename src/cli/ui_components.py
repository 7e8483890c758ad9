"""Rich components for the CLI.

Kept apart from the commands so tables and panels can be reused.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Selection


def print_banner(console: Console) -> None:
    title = Text("AEM Edge Functions", style="bold cyan")
    subtitle = Text("Cloud Manager setup • Fastly compute", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_selection_table(selection: Selection, *, api_endpoint: str | None) -> Table:
    """Table of the persisted selection and the endpoint the compute commands use."""

    target = "Edge Delivery site" if selection.edge_delivery else "Environment"

    table = Table(title="Edge Functions configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    def _value(v: str | None) -> str:
        return v if v else "[dim]not set[/dim]"

    table.add_row("Organization", _value(selection.org_id))
    table.add_row("Program", _value(selection.program_id))
    table.add_row("Program name", _value(selection.program_name))
    table.add_row(target, _value(selection.environment_id))
    table.add_row(f"{target} name", _value(selection.environment_name))
    table.add_row("API endpoint", _value(api_endpoint))
    return table
