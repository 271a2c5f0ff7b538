"""Main CLI entry point for Translation Stats."""

import typer
from rich.console import Console

from cli.commands import debug, locales, update

app = typer.Typer(
    name="tstats",
    help="Download WordPress translations and compile .mo/.json files",
    add_completion=False,
)

console = Console()

app.add_typer(update.app, name="update", help="Download and compile translations")
app.add_typer(locales.app, name="locales", help="Look up WordPress locales")
app.add_typer(debug.app, name="debug", help="Show debug information")


@app.command()
def version():
    """Show version information."""
    from translation_stats import __version__

    console.print(f"tstats version {__version__}")


if __name__ == "__main__":
    app()
