"""Downloads and stores ``.po`` files from translate.wordpress.org."""

import asyncio
from html import escape
from pathlib import Path

import aiofiles
import aiohttp

from ..errors import DownloadError, WriteError
from ..results import StepResult
from ..utils.logging import get_logger
from ..utils.paths import catalog_file_name, catalog_path
from .client import HTTPResponse, RateLimitedClient, ServerError
from .locales import Locale
from .projects import Project, build_export_url

logger = get_logger(__name__)

PO_CONTENT_TYPE = "application/octet-stream"

DOWNLOAD_FAILED = "Download failed. A valid URL was not provided."
CREATE_FAILED = "Could not create file."


class TranslationDownloader:
    """Fetches a project's ``.po`` export for one locale."""

    def __init__(self, client: RateLimitedClient, base_url: str):
        """Initialize the downloader.

        Args:
            client: Rate-limited HTTP client
            base_url: translate.wordpress.org base URL
        """
        self.client = client
        self.base_url = base_url

    def source_url(self, project: Project, locale: Locale) -> str:
        return build_export_url(project, locale, self.base_url)

    async def download(self, project: Project, locale: Locale) -> StepResult[HTTPResponse]:
        """Download the translation file.

        The response counts only when it is 2xx and its content type is
        exactly ``application/octet-stream``; the export endpoint answers
        with an HTML page otherwise.

        Returns:
            StepResult with the response, or a DownloadError
        """
        source = self.source_url(project, locale)
        log = f"Downloading translation from <code>{escape(source)}</code>…"

        try:
            response = await self.client.get_response(source)
        except (aiohttp.ClientError, asyncio.TimeoutError, ServerError) as e:
            logger.warning(f"Download of {source} failed: {e!r}")
            error = DownloadError(DOWNLOAD_FAILED, cause=e)
            return StepResult.failure(escape(str(error)), error)

        if not response.ok or response.content_type != PO_CONTENT_TYPE:
            logger.warning(
                f"Unexpected response from {source}: "
                f"HTTP {response.status}, content type {response.content_type!r}"
            )
            error = DownloadError(DOWNLOAD_FAILED)
            return StepResult.failure(escape(str(error)), error)

        logger.info(f"Downloaded {len(response.body)} bytes from {source}")
        return StepResult.success(log, response)


async def write_po(
    destination: str | Path,
    project: Project,
    locale: Locale,
    body: bytes,
) -> StepResult[Path]:
    """Save the downloaded body as ``{domain-}{wp_locale}.po``.

    Any existing file is overwritten.
    """
    file_name = catalog_file_name(project.domain, locale.wp_locale, "po")
    path = catalog_path(destination, project.domain, locale.wp_locale, "po")
    log = f"Saving file <code>{escape(file_name)}</code>…"

    try:
        async with aiofiles.open(path, "wb") as f:
            await f.write(body)
    except OSError as e:
        logger.warning(f"Could not write {path}: {e}")
        error = WriteError(CREATE_FAILED, target=str(path), cause=e)
        return StepResult.failure(escape(str(error)), error)

    logger.debug(f"Saved {len(body)} bytes to {path}")
    return StepResult.success(log, path)
