"""JSON translation files for JavaScript, in the Jed 1.x layout WordPress loads.

Entries are grouped by the script they are referenced from; every script
gets ``{domain-}{wp_locale}-{md5(path)}.json``. A catalog without any
script references is written whole to ``{domain-}{wp_locale}.json``.
"""

import json
from collections import defaultdict
from html import escape
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
import polib

from ..downloader.locales import Locale
from ..downloader.projects import Project
from ..errors import WriteError
from ..results import StepResult
from ..utils.logging import get_logger
from ..utils.paths import (
    catalog_file_name,
    normalize_script_path,
    script_json_file_name,
)

logger = get_logger(__name__)

GENERATOR = "translation-stats"
JED_DOMAIN = "messages"
CONTEXT_SEPARATOR = "\x04"
CREATE_FAILED = "Could not create file."


def message_key(entry: polib.POEntry) -> str:
    if entry.msgctxt:
        return f"{entry.msgctxt}{CONTEXT_SEPARATOR}{entry.msgid}"
    return entry.msgid


def message_value(entry: polib.POEntry) -> list[str]:
    if entry.msgid_plural:
        return [entry.msgstr_plural[i] for i in sorted(entry.msgstr_plural)]
    return [entry.msgstr]


def script_references(entry: polib.POEntry) -> set[str]:
    """Normalized JavaScript files an entry is used in."""
    return {
        normalize_script_path(path)
        for path, _line in entry.occurrences
        if path.endswith(".js")
    }


def group_by_script(entries: Iterable[polib.POEntry]) -> dict[str, list[polib.POEntry]]:
    groups: dict[str, list[polib.POEntry]] = defaultdict(list)
    for entry in entries:
        for script in script_references(entry):
            groups[script].append(entry)
    return dict(groups)


def build_jed_document(
    entries: Iterable[polib.POEntry],
    locale: Locale,
    plural_forms: str,
    revision_date: Optional[str] = None,
    source: Optional[str] = None,
) -> dict:
    """Build one Jed locale data document."""
    messages: dict[str, object] = {
        "": {
            "domain": JED_DOMAIN,
            "lang": locale.wp_locale,
            "plural-forms": plural_forms,
        }
    }
    for entry in entries:
        messages[message_key(entry)] = message_value(entry)

    document: dict[str, object] = {
        "translation-revision-date": revision_date or "",
        "generator": GENERATOR,
    }
    if source is not None:
        document["source"] = source
    document["domain"] = JED_DOMAIN
    document["locale_data"] = {JED_DOMAIN: messages}
    return document


async def _write_json(path: Path, document: dict) -> None:
    content = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(content)


async def make_json(
    destination: str | Path,
    project: Project,
    locale: Locale,
    pofile: polib.POFile,
) -> StepResult[list[Path]]:
    """Write the JSON files for a compiled catalog.

    Logs one line per file. Stops at the first file that cannot be written.
    """
    destination = Path(destination)
    entries = [e for e in pofile.translated_entries() if not e.obsolete]
    plural_forms = pofile.metadata.get("Plural-Forms") or locale.plural_forms
    revision_date = pofile.metadata.get("PO-Revision-Date")

    groups = group_by_script(entries)
    if groups:
        targets = [
            (
                script_json_file_name(project.domain, locale.wp_locale, script),
                build_jed_document(groups[script], locale, plural_forms, revision_date, script),
            )
            for script in sorted(groups)
        ]
    else:
        targets = [
            (
                catalog_file_name(project.domain, locale.wp_locale, "json"),
                build_jed_document(entries, locale, plural_forms, revision_date),
            )
        ]

    log: list[str] = []
    written: list[Path] = []
    for file_name, document in targets:
        path = destination / file_name
        log.append(f"Saving file <code>{escape(file_name)}</code>…")
        try:
            await _write_json(path, document)
        except OSError as e:
            logger.warning(f"Could not write {path}: {e}")
            error = WriteError(CREATE_FAILED, target=str(path), cause=e)
            log[-1] = escape(str(error))
            return StepResult.failure(log, error)
        written.append(path)

    logger.debug(f"Wrote {len(written)} JSON files to {destination}")
    return StepResult.success(log, written)
