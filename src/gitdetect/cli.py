"""gitdetect CLI — Typer application with scan and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from gitdetect import __version__
from gitdetect.config.schema import DEFAULT_GITHUB_HOSTNAME

if TYPE_CHECKING:
    from gitdetect.findings.models import Report

app = typer.Typer(
    name="gitdetect",
    help="Find secrets in GitHub repositories or local directories.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


# ── scan ──────────────────────────────────────────────────────────────────────


@app.command()
def scan(
    rule_config: str = typer.Option("", "--rule-config", help="Full path name of the detection rule configuration file."),
    access_token: str = typer.Option("", "--access-token", envvar="GITDETECT_ACCESS_TOKEN", help="GitHub access token."),
    output_dir: str = typer.Option("", "--output-dir", help="Working dir and report generation dir (default: cwd)."),
    github_hostname: str = typer.Option(DEFAULT_GITHUB_HOSTNAME, "--github-hostname", help="GitHub hostname."),
    repo_name: str = typer.Option(
        "", "--repo-name",
        help="<owner>/<name>[/<branch>], e.g. my-org/my-proj. Leave blank for a full GitHub scan.",
    ),
    last_modified_cutoff: int = typer.Option(
        0, "--last-modified-cutoff",
        help="Only scan repositories pushed in the last N days. 0 scans always.",
    ),
    local_scan_dir: str = typer.Option(
        "", "--local-scan-dir",
        help="Local directory to scan. When set, GitHub options are ignored.",
    ),
    debug_print_secrets: bool = typer.Option(
        False, "--debug-print-secrets",
        help="Print lines with detected secrets to stdout. Use with discretion.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Scan a local directory or GitHub repositories for secrets."""
    from gitdetect.config.loader import ConfigError, validate_parameters
    from gitdetect.config.schema import ScanParameters
    from gitdetect.findings.models import Report
    from gitdetect.logs import init_logging
    from gitdetect.output import terminal
    from gitdetect.runner import start_scanning
    from gitdetect.scanner.engine import ScanError

    params = ScanParameters(
        config_filename=rule_config,
        access_token=access_token,
        output_dir=output_dir,
        github_hostname=github_hostname,
        repo_name=repo_name,
        last_modified_cutoff=last_modified_cutoff,
        local_scan_dir=local_scan_dir,
        debug_print_secrets=debug_print_secrets,
    )

    # --- Validate parameters ---
    try:
        validate_parameters(params)
    except ConfigError as exc:
        _fail("Error initializing parameters", exc)

    try:
        init_logging(Path(params.output_dir), verbose=verbose)
    except OSError as exc:
        _fail("Cannot open log file", exc)
    report = Report(output_dir=Path(params.output_dir))

    # --- Run scan ---
    try:
        start_scanning(params, report)
    except ConfigError as exc:
        _fail("Config error", exc)
    except ScanError as exc:
        console.print(f"[bold red]Scanning failed:[/bold red] {escape(str(exc))}")
        _save_or_fail(report)
        raise typer.Exit(code=2) from exc

    # --- Output ---
    path = _save_or_fail(report)
    terminal.render(report, console=console)
    if verbose:
        console.print(f"[dim]Report written to {escape(str(path))}[/dim]")


def _fail(message: str, exc: Exception) -> NoReturn:
    console.print(f"[bold red]{message}:[/bold red] {escape(str(exc))}")
    raise typer.Exit(code=2) from exc


def _save_or_fail(report: Report) -> Path:
    from gitdetect.output.yaml_report import save_report

    try:
        return save_report(report)
    except OSError as exc:
        _fail("Cannot write report", exc)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Where to write the sample rule configuration"),
) -> None:
    """Generate a starter rule configuration file."""
    from gitdetect.config.defaults import SAMPLE_CONFIG_FILENAME, SAMPLE_CONFIG_YAML

    config_path = Path(output) if output else Path.cwd() / SAMPLE_CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {escape(str(config_path))} already exists")
        raise typer.Exit(code=1)

    config_path.write_text(SAMPLE_CONFIG_YAML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {escape(str(config_path))}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitdetect {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """gitdetect — find secrets with compound regex and entropy rules."""
