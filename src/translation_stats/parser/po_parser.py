"""PO file parsing into translation catalogs."""

from dataclasses import dataclass, field
from html import escape
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

import aiofiles
import polib

from ..downloader.locales import Locale
from ..downloader.projects import Project
from ..errors import ParseError
from ..results import StepResult
from ..utils.logging import get_logger
from ..utils.paths import catalog_file_name, catalog_path

logger = get_logger(__name__)

EXTRACT_FAILED = "Could not extract translations from file."


@dataclass
class TranslationPair:
    """A single source-target translation pair."""

    source: str  # Original English text
    target: str  # Translated text
    context: Optional[str] = None  # PO context (msgctxt)
    flags: list[str] = field(default_factory=list)  # PO flags (fuzzy, etc.)
    references: list[str] = field(default_factory=list)  # Source code references
    plural_source: Optional[str] = None  # msgid_plural if present

    @property
    def is_plural(self) -> bool:
        return self.plural_source is not None

    @property
    def is_fuzzy(self) -> bool:
        return "fuzzy" in self.flags


class TranslationCatalog:
    """Parsed ``.po`` file, read-only once created.

    Hands its entries to the compiler exactly once through :meth:`consume`.
    """

    def __init__(self, pofile: polib.POFile, source_path: Optional[Path] = None):
        self._pofile = pofile
        self.source_path = source_path
        self._consumed = False

    @property
    def metadata(self) -> Mapping[str, str]:
        return MappingProxyType(self._pofile.metadata)

    @property
    def plural_forms(self) -> Optional[str]:
        return self._pofile.metadata.get("Plural-Forms")

    @property
    def revision_date(self) -> Optional[str]:
        return self._pofile.metadata.get("PO-Revision-Date")

    @property
    def entries(self) -> tuple[polib.POEntry, ...]:
        return tuple(e for e in self._pofile if not e.obsolete)

    def translated_entries(self) -> list[polib.POEntry]:
        return [e for e in self._pofile.translated_entries() if not e.obsolete]

    def translations(self) -> dict[tuple[Optional[str], str], str | list[str]]:
        """Translated strings keyed by ``(context, msgid)``.

        Plural entries map to their forms in index order.
        """
        result: dict[tuple[Optional[str], str], str | list[str]] = {}
        for entry in self.translated_entries():
            if entry.msgid_plural:
                result[(entry.msgctxt, entry.msgid)] = [
                    entry.msgstr_plural[i] for i in sorted(entry.msgstr_plural)
                ]
            else:
                result[(entry.msgctxt, entry.msgid)] = entry.msgstr
        return result

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> polib.POFile:
        """Release the underlying PO file to the compiler.

        Raises:
            RuntimeError: If the catalog was already compiled
        """
        if self._consumed:
            raise RuntimeError("Translation catalog was already compiled")
        self._consumed = True
        return self._pofile

    def __len__(self) -> int:
        return len(self.entries)


def parse_po_text(text: str, source_path: Optional[Path] = None) -> TranslationCatalog:
    """Parse PO file contents.

    Raises:
        ValueError: If there is nothing to parse
        OSError: If polib reports a syntax error
    """
    if not text.strip():
        raise ValueError("file is empty")

    po = polib.pofile(text)
    if not len(po) and not po.metadata:
        raise ValueError("no entries or header found")

    return TranslationCatalog(po, source_path=source_path)


async def extract_translations(
    destination: str | Path,
    project: Project,
    locale: Locale,
) -> StepResult[TranslationCatalog]:
    """Parse the ``.po`` file written for this project and locale."""
    file_name = catalog_file_name(project.domain, locale.wp_locale, "po")
    path = catalog_path(destination, project.domain, locale.wp_locale, "po")
    log = f"Extracting translations from file <code>{escape(file_name)}</code>…"

    try:
        async with aiofiles.open(path, "rb") as f:
            raw = await f.read()
        catalog = parse_po_text(raw.decode("utf-8"), source_path=path)
    except (OSError, ValueError) as e:
        # UnicodeDecodeError is a ValueError
        logger.warning(f"Error parsing {path}: {e}")
        error = ParseError(EXTRACT_FAILED, cause=e)
        return StepResult.failure(escape(str(error)), error)

    logger.debug(f"Parsed {len(catalog)} entries from {path}")
    return StepResult.success(log, catalog)


class POParser:
    """Turns PO files into translation pairs and statistics."""

    def __init__(
        self,
        include_fuzzy: bool = False,
        include_obsolete: bool = False,
    ):
        """Initialize the parser.

        Args:
            include_fuzzy: Whether to include fuzzy translations
            include_obsolete: Whether to include obsolete entries
        """
        self.include_fuzzy = include_fuzzy
        self.include_obsolete = include_obsolete

    def parse_file(self, po_path: Path) -> Iterator[TranslationPair]:
        """Parse a single PO file, yielding translation pairs.

        Unreadable files are logged and yield nothing.
        """
        try:
            po = polib.pofile(str(po_path))
        except (OSError, ValueError) as e:
            logger.error(f"Error parsing {po_path}: {e}")
            return

        for entry in po:
            # Skip header entry
            if not entry.msgid:
                continue

            if entry.obsolete and not self.include_obsolete:
                continue

            if "fuzzy" in entry.flags and not self.include_fuzzy:
                continue

            if not entry.msgstr and not any(entry.msgstr_plural.values()):
                continue

            references = [f"{r[0]}:{r[1]}" if r[1] else r[0] for r in entry.occurrences]

            if entry.msgid_plural:
                plural_targets = [entry.msgstr_plural[i] for i in sorted(entry.msgstr_plural)]
                for idx, plural_str in enumerate(plural_targets):
                    if plural_str:
                        yield TranslationPair(
                            source=entry.msgid if idx == 0 else entry.msgid_plural,
                            target=plural_str,
                            context=entry.msgctxt,
                            flags=list(entry.flags),
                            references=references,
                            plural_source=entry.msgid_plural,
                        )
            else:
                yield TranslationPair(
                    source=entry.msgid,
                    target=entry.msgstr,
                    context=entry.msgctxt,
                    flags=list(entry.flags),
                    references=references,
                )

    def get_file_stats(self, po_path: Path) -> dict:
        """Get statistics about a PO file.

        Args:
            po_path: Path to PO file

        Returns:
            Dictionary with file statistics, or with an 'error' key
        """
        try:
            po = polib.pofile(str(po_path))
        except (OSError, ValueError) as e:
            logger.error(f"Error getting stats for {po_path}: {e}")
            return {"file": str(po_path), "error": str(e)}

        mo_path = Path(po_path).with_suffix(".mo")
        return {
            "file": str(po_path),
            "total_entries": len(po),
            "translated": len(po.translated_entries()),
            "untranslated": len(po.untranslated_entries()),
            "fuzzy": len(po.fuzzy_entries()),
            "obsolete": len(po.obsolete_entries()),
            "percent_translated": po.percent_translated(),
            "revision_date": po.metadata.get("PO-Revision-Date", ""),
            "has_mo": mo_path.exists(),
        }
