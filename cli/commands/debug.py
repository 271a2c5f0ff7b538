"""Debug information commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

app = typer.Typer()
console = Console()


def _reporter(config_file: Optional[Path]):
    from translation_stats.config import SyncConfig
    from translation_stats.debug import DebugReporter, SettingsStore, TransientStore

    config = SyncConfig.load(config_file)
    return DebugReporter(
        SettingsStore(config.settings_file),
        TransientStore(config.transients_dir),
        config,
    )


@app.command("show")
def show_debug(
    notice_type: str = typer.Option(
        "info",
        "--type",
        "-t",
        help="Notice type: error, warning, success or info",
    ),
    inline: bool = typer.Option(False, "--inline", help="Compact panel"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
):
    """Show server info, settings and cached transients."""
    reporter = _reporter(config_file)
    reporter.show(console, notice_type=notice_type, inline=inline, debug=True)


@app.command("setting")
def show_setting(
    setting_id: str = typer.Argument(..., help="Setting ID"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
):
    """Show the stored and default value of one setting."""
    from translation_stats.config import SyncConfig

    reporter = _reporter(config_file)
    options = reporter.settings.get_option(reporter.config.option_name) or {}
    field = SyncConfig.model_fields.get(setting_id)
    default = field.default if field is not None else None

    panel = reporter.setting_field(
        setting_id,
        options.get(setting_id, getattr(reporter.config, setting_id, None)),
        default,
        debug=True,
    )
    console.print(panel)
