"""Translation update pipeline.

Download a ``.po`` file, save it, parse it, then compile ``.mo`` and JSON
files. Every step runs once and adds its messages to the log; the first
failure stops the update. Running the update again recomputes every path
and overwrites every file, so a failed update is repaired by re-running it.
"""

import asyncio
from enum import Enum
from html import escape
from pathlib import Path
from typing import Awaitable, Callable, Optional

from ..compiler import compile_catalog
from ..downloader.fetcher import TranslationDownloader, write_po
from ..downloader.locales import GPLocale, resolve_locale
from ..downloader.projects import Project
from ..errors import (
    DownloadError,
    LocaleResolutionError,
    ParseError,
    TranslationError,
    WriteError,
)
from ..parser.po_parser import extract_translations
from ..results import StepResult, UpdateFailure, UpdateResult, UpdateSuccess
from ..utils.logging import get_logger
from ..utils.paths import catalog_path, lock_file_path
from .locking import CatalogLocks, LockTimeout

logger = get_logger(__name__)

SUCCESS_MESSAGE = "Translation updated successfully."
DEADLINE_EXCEEDED = "Deadline exceeded."


class UpdateState(str, Enum):
    """Pipeline states, in order."""

    RESOLVING_LOCALE = "resolving-locale"
    DOWNLOADING = "downloading"
    WRITING_PO = "writing-po"
    PARSING = "parsing"
    COMPILING = "compiling-mo-and-json"
    DONE = "done"
    ERROR = "error"


# Error raised when the deadline expires during a state
_TIMEOUT_ERRORS: dict[UpdateState, Callable[[str], TranslationError]] = {
    UpdateState.DOWNLOADING: lambda target: DownloadError(
        f"Download failed. {DEADLINE_EXCEEDED}"
    ),
    UpdateState.WRITING_PO: lambda target: WriteError(
        f"Could not create file. {DEADLINE_EXCEEDED}", target=target
    ),
    UpdateState.PARSING: lambda target: ParseError(
        f"Could not extract translations from file. {DEADLINE_EXCEEDED}"
    ),
    UpdateState.COMPILING: lambda target: WriteError(
        f"Could not create file. {DEADLINE_EXCEEDED}", target=target
    ),
}


def _remaining(deadline_at: Optional[float]) -> Optional[float]:
    if deadline_at is None:
        return None
    return max(deadline_at - asyncio.get_running_loop().time(), 0)


class TranslationUpdater:
    """Runs the download → save → parse → compile sequence for one project."""

    def __init__(
        self,
        downloader: TranslationDownloader,
        locks: Optional[CatalogLocks] = None,
        deadline: Optional[float] = None,
        extra_locales: Optional[dict[str, GPLocale]] = None,
    ):
        """Initialize the updater.

        Args:
            downloader: Downloader used for the remote ``.po`` export
            locks: Lock registry shared by concurrent updates
            deadline: Seconds the whole update may take, None for no limit
            extra_locales: Locale records in addition to the built-in table
        """
        self.downloader = downloader
        self.locks = locks or CatalogLocks()
        self.deadline = deadline
        self.extra_locales = extra_locales

    async def _run(
        self,
        state: UpdateState,
        step: Awaitable[StepResult],
        deadline_at: Optional[float],
        target: str = "",
    ) -> StepResult:
        logger.debug(f"Update state: {state.value}")
        if deadline_at is None:
            return await step

        try:
            return await asyncio.wait_for(step, timeout=_remaining(deadline_at))
        except asyncio.TimeoutError:
            error = _TIMEOUT_ERRORS[state](target)
            logger.warning(f"Deadline exceeded while {state.value}")
            return StepResult.failure(escape(str(error)), error)

    def _fail(
        self,
        log: list[str],
        result: StepResult,
        state: UpdateState,
    ) -> UpdateFailure:
        log.extend(result.log)
        logger.warning(f"Translation update failed while {state.value}: {result.error}")
        return UpdateFailure(log=tuple(log), error=result.error, step=state.value)

    async def update_translation(
        self,
        destination: str | Path,
        project: Project,
        wp_locale: str,
    ) -> UpdateResult:
        """Update one project translation.

        Args:
            destination: Local directory for the language files
            project: Project to update
            wp_locale: WordPress locale (e.g. 'pt_PT')

        Returns:
            UpdateSuccess with the log and the written paths, or
            UpdateFailure with the log up to and including the failure
        """
        log: list[str] = []
        deadline_at = None
        if self.deadline is not None:
            deadline_at = asyncio.get_running_loop().time() + self.deadline

        try:
            locale = resolve_locale(wp_locale, self.extra_locales)
        except LocaleResolutionError as e:
            return self._fail(
                log,
                StepResult.failure(escape(str(e)), e),
                UpdateState.RESOLVING_LOCALE,
            )

        logger.info(f"Updating {project.display_name} ({locale.wp_locale}) in {destination}")

        download = await self._run(
            UpdateState.DOWNLOADING,
            self.downloader.download(project, locale),
            deadline_at,
        )
        if not download.ok:
            return self._fail(log, download, UpdateState.DOWNLOADING)
        log.extend(download.log)

        po_path = catalog_path(destination, project.domain, locale.wp_locale, "po")
        mo_path = catalog_path(destination, project.domain, locale.wp_locale, "mo")
        lock_wait = _remaining(deadline_at)
        # Whether the deadline, not the lock's own wait timeout, bounds the wait
        deadline_bound = lock_wait is not None and lock_wait < self.locks.wait_timeout

        try:
            async with self.locks.hold(destination, locale.wp_locale, timeout=lock_wait):
                written = await self._run(
                    UpdateState.WRITING_PO,
                    write_po(destination, project, locale, download.data.body),
                    deadline_at,
                    target=str(po_path),
                )
                if not written.ok:
                    return self._fail(log, written, UpdateState.WRITING_PO)
                log.extend(written.log)

                extracted = await self._run(
                    UpdateState.PARSING,
                    extract_translations(destination, project, locale),
                    deadline_at,
                )
                if not extracted.ok:
                    return self._fail(log, extracted, UpdateState.PARSING)
                log.extend(extracted.log)

                compiled = await self._run(
                    UpdateState.COMPILING,
                    compile_catalog(destination, project, locale, extracted.data),
                    deadline_at,
                    target=str(mo_path),
                )
                if not compiled.ok:
                    return self._fail(log, compiled, UpdateState.COMPILING)
                log.extend(compiled.log)
        except (LockTimeout, OSError) as e:
            lock_path = str(lock_file_path(destination, locale.wp_locale))
            if isinstance(e, LockTimeout) and deadline_bound:
                error = _TIMEOUT_ERRORS[UpdateState.WRITING_PO](lock_path)
            else:
                error = WriteError("Could not create file.", target=lock_path, cause=e)
            return self._fail(
                log,
                StepResult.failure(escape(str(error)), error),
                UpdateState.WRITING_PO,
            )

        log.append(SUCCESS_MESSAGE)
        logger.info(f"Updated {project.display_name} ({locale.wp_locale})")
        return UpdateSuccess(
            log=tuple(log),
            data={"po": written.data, **compiled.data},
        )
