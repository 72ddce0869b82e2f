# regmirror/cli/ui/output.py
"""Output methods for CLI display."""

from __future__ import annotations

from typing import Iterable, Sequence

from rich.markup import escape

from .console import CHECK, CROSS, WARN, Panel, Table, console


class OutputMixin:
    """Mixin providing output methods for the UI class."""

    def header(self, title: str, subtitle: str = "") -> None:
        """Print a command header in a fitted box."""
        if subtitle:
            content = f"[bold]{escape(title)}[/bold]\n[dim]{escape(subtitle)}[/dim]"
        else:
            content = f"[bold]{escape(title)}[/bold]"
        console.print(Panel.fit(content, border_style="blue"))

    def section(self, title: str) -> None:
        console.print(f"\n[bold cyan]{escape(title)}[/bold cyan]")

    def step(self, num: int, total: int, msg: str) -> None:
        console.print(f"[bold blue][{num}/{total}][/bold blue] {escape(msg)}")

    def success(self, msg: str) -> None:
        console.print(f"[green]{CHECK}[/green] {escape(msg)}")

    def error(self, msg: str) -> None:
        console.print(f"[red]{CROSS}[/red] {escape(msg)}")

    def warning(self, msg: str, detail: str = "") -> None:
        detail_str = f" [dim]({escape(detail)})[/dim]" if detail else ""
        console.print(f"[yellow]{WARN}[/yellow] {escape(msg)}{detail_str}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{escape(msg)}[/dim]")

    def table(self, columns: Sequence[str], rows: Iterable[Sequence[object]], title: str = "") -> None:
        """Print rows as a table."""
        table = Table(title=title or None)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(escape(str(cell)) for cell in row))
        console.print(table)

    def summary_panel(self, content: str, title: str = "", style: str = "green") -> None:
        """Print a summary panel (typically at end of command)."""
        console.print(Panel(escape(content), title=title, border_style=style))
