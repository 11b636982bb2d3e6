# src/patternchart/cli/formatter.py
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from patternchart.core.errors import ConversionError

console = Console()


class ChartFormatter:
    """
    ChartFormatter: rendering helpers for the CLI.
    Responsible for manifests, conversion summaries and error panels.
    """

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def print_header(self, subtitle: str, version: str):
        self.console.print(Panel.fit(
            f"[bold cyan]patternchart v{version}[/bold cyan]\n"
            "══════════════════════════════════════════════════",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def show_manifest(self, manifest: str, title: str):
        if not manifest.strip():
            self.console.print(f"[dim]ℹ Pattern '{escape(title)}' has no deployable components.[/dim]")
            return
        syntax = Syntax(manifest.rstrip(), "yaml", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Rendered manifest: {escape(title)}", border_style="green"))

    def show_summary(self, chart_name: str, chart_version: str, output: Path, size: int):
        table = Table(title="Chart Package Report", show_lines=True, header_style="bold magenta")
        table.add_column("Chart", style="cyan")
        table.add_column("Version")
        table.add_column("Archive")
        table.add_column("Size", justify="right")
        table.add_row(chart_name, chart_version, str(output), f"{size} B")
        self.console.print(table)

    def show_error(self, error: Exception):
        if isinstance(error, ConversionError):
            body = (
                f"[bold red]{error.short_description}[/bold red] [dim]({error.code})[/dim]\n\n"
                f"{escape(str(error))}\n\n"
                f"[yellow]Remedy:[/yellow] {error.remedy}"
            )
        else:
            body = f"[bold red]{type(error).__name__}[/bold red]\n\n{escape(str(error))}"
        self.console.print(Panel(body, title="[bold red]Conversion Failed[/bold red]", border_style="red"))
