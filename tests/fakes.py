"""Test doubles and sample catalogs."""

import asyncio
from typing import Optional

from translation_stats.downloader.client import HTTPResponse

PO_HELLO = """msgid ""
msgstr ""
"Content-Type: text/plain; charset=UTF-8\\n"
"Plural-Forms: nplurals=2; plural=n != 1;\\n"
"PO-Revision-Date: 2024-05-01 10:00:00+0000\\n"
"Language: pt_PT\\n"

msgid "Hello"
msgstr "Olá"
""".encode("utf-8")

PO_SCRIPTS = """msgid ""
msgstr ""
"Content-Type: text/plain; charset=UTF-8\\n"
"Plural-Forms: nplurals=2; plural=n != 1;\\n"
"PO-Revision-Date: 2024-05-01 10:00:00+0000\\n"

#: js/app.js:4
msgid "Save"
msgstr "Guardar"

#: js/app.min.js:1
msgctxt "verb"
msgid "Post"
msgstr "Publicar"

#: js/app.js:10 js/editor.js:2
msgid "%d item"
msgid_plural "%d items"
msgstr[0] "%d item"
msgstr[1] "%d itens"

#: includes/admin.php:5
msgid "Settings"
msgstr "Definições"

#: js/editor.js:7
msgid "Untranslated"
msgstr ""

#: js/editor.js:9
#, fuzzy
msgid "Draft"
msgstr "Rascunho"
""".encode("utf-8")

OCTET_STREAM = {"content-type": "application/octet-stream"}


class FakeClient:
    """Stands in for RateLimitedClient without touching the network."""

    def __init__(
        self,
        body: bytes = PO_HELLO,
        status: int = 200,
        headers: Optional[dict] = None,
        exc: Optional[BaseException] = None,
        delay: float = 0,
    ):
        self.body = body
        self.status = status
        self.headers = OCTET_STREAM if headers is None else headers
        self.exc = exc
        self.delay = delay
        self.calls: list[str] = []

    async def get_response(self, url: str) -> HTTPResponse:
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return HTTPResponse(url=url, status=self.status, headers=self.headers, body=self.body)

    async def __aenter__(self) -> "FakeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        pass
