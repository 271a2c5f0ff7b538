"""Binary ``.mo`` output."""

from html import escape
from pathlib import Path

import aiofiles
import polib

from ..downloader.locales import Locale
from ..downloader.projects import Project
from ..errors import WriteError
from ..results import StepResult
from ..utils.logging import get_logger
from ..utils.paths import catalog_file_name, catalog_path

logger = get_logger(__name__)

CREATE_FAILED = "Could not create file."


async def generate_mo(
    destination: str | Path,
    project: Project,
    locale: Locale,
    pofile: polib.POFile,
) -> StepResult[Path]:
    """Compile the catalog to ``{domain-}{wp_locale}.mo``.

    polib writes translated entries sorted by msgid, so the same catalog
    always produces the same bytes.
    """
    file_name = catalog_file_name(project.domain, locale.wp_locale, "mo")
    path = catalog_path(destination, project.domain, locale.wp_locale, "mo")
    log = f"Saving file <code>{escape(file_name)}</code>…"

    try:
        data = pofile.to_binary()
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not write {path}: {e}")
        error = WriteError(CREATE_FAILED, target=str(path), cause=e)
        return StepResult.failure(escape(str(error)), error)

    logger.debug(f"Compiled {len(data)} bytes to {path}")
    return StepResult.success(log, path)
