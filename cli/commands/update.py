"""Update command for downloading and compiling translations."""

import asyncio
import json
import re
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

app = typer.Typer()
console = Console()

# Anything outside the transient key alphabet
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def record_update(transients, config, project, wp_locale: str, result) -> None:
    """Remember the outcome of an update so ``tstats debug`` can list it."""
    from translation_stats.utils.logging import plain_text
    from translation_stats.utils.paths import file_prefix

    # The locale is user input and may be invalid, e.g. "pt PT"
    suffix = _UNSAFE_KEY_CHARS.sub("_", file_prefix(project.domain, wp_locale))
    key = f"{config.transients_prefix}update_{suffix}"
    transients.set_transient(
        key,
        {
            "project": project.full_path,
            "locale": wp_locale,
            "ok": result.ok,
            "updated_at": int(time.time()),
            "log": [plain_text(line) for line in result.log],
        },
        expiration=config.transient_expiration,
    )


@app.command("project")
def update_project(
    project_path: str = typer.Argument(
        ...,
        help="Project as '{type}/{slug}' (e.g., 'wp-plugins/akismet', 'wp/dev')",
    ),
    locales: list[str] = typer.Argument(..., help="WordPress locales (e.g., 'pt_PT')"),
    destination: Optional[Path] = typer.Option(
        None,
        "--destination",
        "-d",
        help="Directory for the language files",
    ),
    domain: Optional[str] = typer.Option(
        None,
        "--domain",
        help="File name prefix (default: slug for plugins/themes, none for core)",
    ),
    version: str = typer.Option(
        "stable",
        "--version",
        help="Plugin version to export ('stable' or 'dev')",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML config file",
    ),
    deadline: Optional[float] = typer.Option(
        None,
        "--deadline",
        help="Seconds each update may take",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print results as JSON",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append the step log of every update to this file",
    ),
):
    """Download a project translation and compile .mo and .json files."""
    from translation_stats.config import SyncConfig
    from translation_stats.debug import TransientStore
    from translation_stats.downloader import Project, RateLimitedClient, TranslationDownloader
    from translation_stats.pipeline import CatalogLocks, TranslationUpdater
    from translation_stats.utils.logging import get_logger, log_update_result, plain_text, setup_logging

    config = SyncConfig.load(
        config_file,
        destination=str(destination) if destination else None,
        deadline=deadline,
        log_file=str(log_file) if log_file else None,
    )
    setup_logging(level="DEBUG" if config.debug else config.log_level, log_file=config.log_file)
    logger = get_logger(__name__)

    try:
        project = Project.from_path(project_path, domain=domain, version=version)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)

    target_dir = config.destination_path
    target_dir.mkdir(parents=True, exist_ok=True)

    async def run_updates():
        async with RateLimitedClient.from_config(config) as client:
            updater = TranslationUpdater(
                TranslationDownloader(client, config.base_url),
                locks=CatalogLocks(),
                deadline=config.deadline,
            )
            return await asyncio.gather(
                *(updater.update_translation(target_dir, project, loc) for loc in locales)
            )

    results = asyncio.run(run_updates())

    transients = TransientStore(config.transients_dir)
    for wp_locale, result in zip(locales, results):
        log_update_result(logger, f"{project.full_path} ({wp_locale})", result)
        record_update(transients, config, project, wp_locale, result)

    if json_output:
        console.print_json(json.dumps(
            {loc: r.to_dict() for loc, r in zip(locales, results)},
            default=str,
        ))
    else:
        for wp_locale, result in zip(locales, results):
            status = "[green]OK[/green]" if result.ok else "[red]FAILED[/red]"
            console.print(f"\n[bold]{project.full_path} ({wp_locale})[/bold] {status}")
            for line in result.log:
                console.print(f"  {plain_text(line)}", markup=False, highlight=False)

    if not all(r.ok for r in results):
        raise typer.Exit(1)


@app.command("stats")
def catalog_stats(
    destination: Path = typer.Option(
        "./languages",
        "--destination",
        "-d",
        help="Directory with the language files",
    ),
):
    """Show statistics about the .po files in a directory."""
    from translation_stats.parser import POParser

    if not destination.exists():
        console.print(f"[red]Directory not found: {destination}[/red]")
        raise typer.Exit(1)

    po_files = sorted(destination.glob("*.po"))
    if not po_files:
        console.print(f"[yellow]No .po files in {destination}[/yellow]")
        return

    parser = POParser()

    table = Table(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Entries", justify="right")
    table.add_column("Translated", justify="right")
    table.add_column("Fuzzy", justify="right")
    table.add_column("%", justify="right")
    table.add_column(".mo")

    for po_file in po_files:
        stats = parser.get_file_stats(po_file)
        if "error" in stats:
            table.add_row(po_file.name, "[red]error[/red]", "", "", "", "")
            continue
        table.add_row(
            po_file.name,
            str(stats["total_entries"]),
            str(stats["translated"]),
            str(stats["fuzzy"]),
            str(stats["percent_translated"]),
            "yes" if stats["has_mo"] else "[yellow]no[/yellow]",
        )

    console.print(table)


@app.command("sample")
def show_samples(
    po_file: Path = typer.Argument(..., help="Path to a .po file"),
    count: int = typer.Option(10, "--count", "-n", help="Number of pairs to show"),
    include_fuzzy: bool = typer.Option(False, "--include-fuzzy", help="Include fuzzy translations"),
):
    """Show translation pairs from a .po file."""
    from itertools import islice

    from translation_stats.parser import POParser

    if not po_file.exists():
        console.print(f"[red]File not found: {po_file}[/red]")
        raise typer.Exit(1)

    parser = POParser(include_fuzzy=include_fuzzy)

    console.print(f"\n[bold]Translation pairs in {po_file.name}[/bold]\n")
    for i, pair in enumerate(islice(parser.parse_file(po_file), count), 1):
        context = f" [dim]({escape(pair.context)})[/dim]" if pair.context else ""
        console.print(f"[bold]#{i}[/bold]{context}")
        console.print(f"  [blue]Source:[/blue] {escape(pair.source[:100])}", highlight=False)
        console.print(f"  [green]Target:[/green] {escape(pair.target[:100])}", highlight=False)
