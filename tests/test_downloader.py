"""Tests for downloading and saving PO files."""

import asyncio

import aiohttp
import pytest

from translation_stats.downloader.fetcher import TranslationDownloader, write_po
from translation_stats.errors import DownloadError, ErrorKind, WriteError

from .fakes import PO_HELLO, FakeClient

BASE_URL = "https://translate.wordpress.org"


class TestTranslationDownloader:
    """Test the content-type and status checks."""

    @pytest.mark.asyncio
    async def test_success(self, core_project, pt_locale):
        client = FakeClient()
        result = await TranslationDownloader(client, BASE_URL).download(core_project, pt_locale)

        assert result.ok
        assert result.data.body == PO_HELLO
        assert client.calls == [
            "https://translate.wordpress.org/projects/wp/dev/pt/default/export-translations/?format=po"
        ]
        assert result.log == [
            "Downloading translation from <code>"
            "https://translate.wordpress.org/projects/wp/dev/pt/default/export-translations/?format=po"
            "</code>…"
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content_type",
        ["text/html; charset=UTF-8", "application/octet-stream; charset=binary", "text/x-gettext-translation"],
    )
    async def test_wrong_content_type(self, core_project, pt_locale, content_type):
        client = FakeClient(headers={"content-type": content_type})
        result = await TranslationDownloader(client, BASE_URL).download(core_project, pt_locale)

        assert not result.ok
        assert isinstance(result.error, DownloadError)
        assert result.error.kind == ErrorKind.DOWNLOAD
        assert result.log == ["Download failed. A valid URL was not provided."]

    @pytest.mark.asyncio
    async def test_missing_content_type(self, core_project, pt_locale):
        client = FakeClient(headers={})
        result = await TranslationDownloader(client, BASE_URL).download(core_project, pt_locale)
        assert isinstance(result.error, DownloadError)

    @pytest.mark.asyncio
    async def test_not_found(self, core_project, pt_locale):
        client = FakeClient(status=404)
        result = await TranslationDownloader(client, BASE_URL).download(core_project, pt_locale)
        assert isinstance(result.error, DownloadError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc",
        [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()],
    )
    async def test_network_failure(self, core_project, pt_locale, exc):
        client = FakeClient(exc=exc)
        result = await TranslationDownloader(client, BASE_URL).download(core_project, pt_locale)

        assert isinstance(result.error, DownloadError)
        assert result.error.cause is exc
        assert len(result.log) == 1
        assert result.log[0].startswith("Download failed.")


class TestWritePo:
    """Test saving the downloaded body."""

    @pytest.mark.asyncio
    async def test_writes_file(self, tmp_path, plugin_project, pt_locale):
        result = await write_po(tmp_path, plugin_project, pt_locale, PO_HELLO)

        assert result.ok
        assert result.data == tmp_path / "myplugin-pt_PT.po"
        assert result.data.read_bytes() == PO_HELLO
        assert result.log == ["Saving file <code>myplugin-pt_PT.po</code>…"]

    @pytest.mark.asyncio
    async def test_overwrites_existing(self, tmp_path, core_project, pt_locale):
        (tmp_path / "pt_PT.po").write_bytes(b"old content that is longer than the new one" * 10)
        result = await write_po(tmp_path, core_project, pt_locale, PO_HELLO)

        assert result.ok
        assert (tmp_path / "pt_PT.po").read_bytes() == PO_HELLO

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path, core_project, pt_locale):
        result = await write_po(tmp_path / "missing", core_project, pt_locale, PO_HELLO)

        assert not result.ok
        assert isinstance(result.error, WriteError)
        assert result.error.kind == ErrorKind.WRITE
        assert result.error.target.endswith("pt_PT.po")
        assert isinstance(result.error.cause, OSError)
        assert result.log[0].startswith("Could not create file.")
