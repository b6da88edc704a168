"""Command-line interface for the PDP auditor."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List, Optional, TextIO

import click
import structlog
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pdpaudit import __version__
from pdpaudit.config import Config, find_config_file
from pdpaudit.container import DependencyContainer
from pdpaudit.observability import configure_logging
from pdpaudit.quality.auditor import FIELD_NAMES, AuditRow

console = Console()
logger = structlog.get_logger(__name__)


def load_config(config_path: Optional[Path], log_level: Optional[str] = None) -> Config:
    """Load the given YAML file, else a config.yaml in the working directory, else defaults."""
    config_path = config_path or find_config_file()
    config = Config.from_yaml(config_path) if config_path else Config()
    if log_level:
        config.monitoring.log_level = log_level
    return config


def read_urls(urls: tuple[str, ...], url_file: Optional[TextIO]) -> List[str]:
    """Command-line URLs first, then non-blank, non-comment lines from the file."""
    collected = [url.strip() for url in urls if url.strip()]
    if url_file is not None:
        for line in url_file:
            line = line.strip()
            if line and not line.startswith("#"):
                collected.append(line)
    return collected


def render_rows(rows: List[AuditRow]) -> Table:
    table = Table(title="PDP Audit")
    table.add_column("URL", style="cyan", overflow="fold")
    table.add_column("Score", justify="right")
    table.add_column("Result")
    table.add_column("Failing checks", style="yellow")

    for row in rows:
        audit = row.audit
        if audit.error:
            verdict = "[red]ERROR[/red]"
            failing = audit.error
        else:
            verdict = "[green]PASS[/green]" if audit.passed else "[red]FAIL[/red]"
            failing = ", ".join(name for name in FIELD_NAMES if not getattr(audit, name).ok) or "-"
        table.add_row(row.url, str(audit.score), verdict, failing)
    return table


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """pdpaudit - product detail page content auditor."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(Path(config) if config else None, log_level)
    configure_logging(ctx.obj["config"].monitoring)


@cli.command()
@click.argument("urls", nargs=-1)
@click.option("--file", "-f", "url_file", type=click.File("r"), help="File with one URL per line")
@click.option(
    "--resolve/--no-resolve",
    default=None,
    help="Look up a reference listing to improve suggestions (default from configuration)",
)
@click.option("--json", "as_json", is_flag=True, help="Print rows as JSON instead of a table")
@click.pass_context
def audit(
    ctx: click.Context,
    urls: tuple[str, ...],
    url_file: Optional[TextIO],
    resolve: Optional[bool],
    as_json: bool,
) -> None:
    """Audit one or more product page URLs."""
    config: Config = ctx.obj["config"]
    url_list = read_urls(urls, url_file)
    if not url_list:
        console.print("[red]Error: No URLs provided[/red]")
        sys.exit(1)

    if resolve is not None:
        config.reference.enabled = resolve

    async def run_audit() -> List[AuditRow]:
        container = DependencyContainer(config=config)
        async with container.lifecycle():
            pipeline = await container.get_pipeline()
            return await pipeline.audit_urls(url_list)

    rows = asyncio.run(run_audit())

    if as_json:
        click.echo(json.dumps({"rows": [row.to_dict() for row in rows]}, indent=2, ensure_ascii=False))
        return

    console.print(render_rows(rows))
    passed = sum(1 for row in rows if row.audit.passed)
    failed = sum(1 for row in rows if row.audit.error)
    console.print(
        Panel.fit(
            f"Audited: {len(rows)}\nPassed: {passed}\nFetch/parse failures: {failed}",
            title="Summary",
            border_style="green" if passed == len(rows) else "yellow",
        )
    )


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default from configuration)")
@click.option("--port", default=None, type=int, help="Port to bind to (default from configuration)")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Run the audit HTTP API."""
    from pdpaudit.web.main import run_web_server

    config: Config = ctx.obj["config"]
    if host:
        config.web.host = host
    if port:
        config.web.port = port

    console.print(f"[blue]Starting audit API on http://{config.web.host}:{config.web.port}[/blue]")
    run_web_server(config)


def main() -> Any:
    return cli(obj={})


if __name__ == "__main__":
    main()
