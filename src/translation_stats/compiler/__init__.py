"""Compile parsed catalogs to ``.mo`` and JSON files."""

from pathlib import Path

from ..downloader.locales import Locale
from ..downloader.projects import Project
from ..parser.po_parser import TranslationCatalog
from ..results import StepResult
from .json_writer import build_jed_document, make_json
from .mo_writer import generate_mo


async def compile_catalog(
    destination: str | Path,
    project: Project,
    locale: Locale,
    catalog: TranslationCatalog,
) -> StepResult[dict]:
    """Write the ``.mo`` file, then the JSON files, for a parsed catalog.

    The JSON files are skipped if the ``.mo`` file could not be written.
    """
    pofile = catalog.consume()

    mo = await generate_mo(destination, project, locale, pofile)
    if not mo.ok:
        return mo

    jsons = await make_json(destination, project, locale, pofile)
    log = mo.log + jsons.log
    if not jsons.ok:
        return StepResult.failure(log, jsons.error)

    return StepResult.success(log, {"mo": mo.data, "json": jsons.data})


__all__ = [
    "compile_catalog",
    "generate_mo",
    "make_json",
    "build_jed_document",
]
