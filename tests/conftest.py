"""Shared fixtures: a stub external compiler and a TestClient wired to it."""

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from latex_convert.config import Settings
from latex_convert.main import app, get_http_client, get_settings

FAKE_PDF = b"%PDF-1.5\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"
TEST_API_KEY = "test-secret-key"

HELLO_WORLD = r"\documentclass{article}\begin{document}Hello World\end{document}"
UNTERMINATED_ITEMIZE = (
    r"\documentclass{article}\begin{document}\begin{itemize}\item one\end{document}"
)


class StubCompiler:
    """Records outbound requests and answers like the external compiler.

    Documents containing an unmatched ``\\begin{itemize}`` are rejected
    with a compile log; everything else gets ``FAKE_PDF``.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = self._default

    @property
    def calls(self) -> int:
        return len(self.requests)

    def _default(self, request: httpx.Request) -> httpx.Response:
        body = request.content.decode("utf-8", errors="replace")
        body += request.url.params.get("text", "")
        if r"\begin{itemize}" in body and r"\end{itemize}" not in body:
            log = (
                "! LaTeX Error: \\begin{itemize} on input line 1 ended by "
                "\\end{document}.\n" + "l.1 ...\n" * 200
            )
            return httpx.Response(400, text=log)
        return httpx.Response(200, content=FAKE_PDF, headers={"Content-Type": "application/pdf"})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


@pytest.fixture
def settings():
    return Settings(api_key=TEST_API_KEY)


@pytest.fixture
def stub_compiler():
    return StubCompiler()


@pytest.fixture
def client(settings, stub_compiler):
    async def override_http_client():
        transport = httpx.MockTransport(stub_compiler)
        async with httpx.AsyncClient(transport=transport) as http_client:
            yield http_client

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = override_http_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
