"""Locale lookup commands."""

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer()
console = Console()


@app.command("list")
def list_locales():
    """List the WordPress locales known to translate.wordpress.org."""
    from translation_stats.downloader import available_locales

    table = Table(show_header=True, header_style="bold")
    table.add_column("WP Locale")
    table.add_column("Slug")
    table.add_column("English Name")
    table.add_column("Native Name")

    for gp_locale in available_locales():
        table.add_row(
            gp_locale.wp_locale,
            gp_locale.slug,
            gp_locale.english_name,
            gp_locale.native_name,
        )

    console.print(table)


@app.command("show")
def show_locale(
    wp_locale: str = typer.Argument(..., help="WordPress locale (e.g., 'pt_PT')"),
):
    """Show translate.wordpress.org metadata for a locale."""
    from translation_stats.downloader import resolve_locale
    from translation_stats.errors import LocaleResolutionError

    try:
        locale = resolve_locale(wp_locale)
    except LocaleResolutionError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]{locale.english_name}[/bold] ({locale.native_name})\n")
    console.print(f"  WP locale: {locale.wp_locale}")
    console.print(f"  Slug: {locale.locale_slug}")
    console.print(f"  Subdomain: {locale.wporg_subdomain}")
    console.print(f"  Plural forms: {locale.plural_forms}", highlight=False)
