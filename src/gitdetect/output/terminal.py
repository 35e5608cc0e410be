"""Rich terminal reporter — defect table and totals."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitdetect.findings.models import Report


def _lines(lines: List[int]) -> str:
    return ", ".join(str(n) for n in lines)


def render(report: Report, *, console: Optional[Console] = None) -> None:
    """Print the defects in *report* to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not report.defect_count:
        console.print()
        console.print("[bold green]✅ No secrets detected.[/bold green]")
        return

    console.print()
    table = Table(
        title="gitdetect Defects",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Repository", style="blue")
    table.add_column("File", style="magenta")
    table.add_column("Lines", justify="right", style="green")
    table.add_column("Tag", style="cyan", min_width=20)
    table.add_column("Verified", justify="center")

    for repo, file_defects in report.repositories.items():
        for file_name, defects in file_defects:
            for defect in defects:
                table.add_row(
                    escape(repo.label),
                    escape(file_name),
                    _lines(defect.lines),
                    escape(defect.tag),
                    "[bold red]live[/bold red]" if defect.additional_info else "-",
                )

    console.print(table)
    console.print()
    console.print(f"[dim]Repositories:[/dim]  {len(report.repositories)}")
    console.print(f"[bold]Defects:[/bold]       {report.defect_count}")
