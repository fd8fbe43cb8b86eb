"""Tests for the outbound compiler call."""

import asyncio

import httpx
import pytest

from latex_convert.compiler import compile_latex
from latex_convert.config import Settings
from latex_convert.errors import UpstreamError

from .conftest import FAKE_PDF, HELLO_WORLD


def _run(handler, settings, latex=HELLO_WORLD):
    async def go():
        transport = httpx.MockTransport(handler)
        async with httpx.AsyncClient(transport=transport) as client:
            return await compile_latex(client, latex, settings)

    return asyncio.run(go())


def test_multipart_request_shape():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=FAKE_PDF)

    assert _run(handler, Settings()) == FAKE_PDF
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://texlive.net/cgi-bin/latexcgi"
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="filecontents[]"; filename="document.tex"' in request.content
    assert b'name="engine"\r\n\r\npdflatex' in request.content
    assert b'name="return"\r\n\r\npdf' in request.content


def test_redirects_are_followed():
    def handler(request):
        if request.url.path == "/cgi-bin/latexcgi":
            return httpx.Response(302, headers={"Location": "https://texlive.net/out/document.pdf"})
        return httpx.Response(200, content=FAKE_PDF)

    assert _run(handler, Settings()) == FAKE_PDF


def test_error_status_raises_with_truncated_detail():
    def handler(request):
        return httpx.Response(500, text="x" * 2000)

    with pytest.raises(UpstreamError) as excinfo:
        _run(handler, Settings())
    assert excinfo.value.status_code == 400
    assert excinfo.value.details == "x" * 500


def test_success_without_pdf_is_a_failure():
    def handler(request):
        return httpx.Response(200, text="! Undefined control sequence.")

    with pytest.raises(UpstreamError) as excinfo:
        _run(handler, Settings())
    assert excinfo.value.details == "! Undefined control sequence."


def test_custom_compiler_url():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=FAKE_PDF)

    _run(handler, Settings(compiler_url="http://compiler.internal/latexcgi"))
    assert str(seen[0].url) == "http://compiler.internal/latexcgi"
