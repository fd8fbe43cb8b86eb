"""Calls to the external LaTeX compiler.

Exactly one outbound request is made per document. Failures are relayed to
the caller as ``UpstreamError`` and never retried: LaTeX errors are
deterministic, so a second attempt would only spend the upstream's budget.
"""

import logging

import httpx

from .config import UPSTREAM_URLENCODED, Settings
from .errors import UpstreamError

logger = logging.getLogger("latex_convert.compiler")

ENGINE = "pdflatex"
TEX_FILENAME = "document.tex"
PDF_MAGIC = b"%PDF"
MAX_DETAIL_CHARS = 500


def _multipart_request(client: httpx.AsyncClient, latex: str, settings: Settings) -> httpx.Request:
    # POST keeps large documents out of the URL.
    return client.build_request(
        "POST",
        settings.compiler_url,
        files={"filecontents[]": (TEX_FILENAME, latex.encode("utf-8"), "text/plain")},
        data={"filename[]": TEX_FILENAME, "engine": ENGINE, "return": "pdf"},
        headers={"Accept": "application/pdf"},
    )


def _urlencoded_request(client: httpx.AsyncClient, latex: str, settings: Settings) -> httpx.Request:
    return client.build_request(
        "GET",
        settings.compiler_url,
        params={"text": latex, "command": ENGINE},
        headers={"Accept": "application/pdf"},
    )


async def compile_latex(client: httpx.AsyncClient, latex: str, settings: Settings) -> bytes:
    """Send *latex* to the configured compiler and return the PDF bytes.

    Raises ``UpstreamError`` when the compiler answers with a non-2xx status,
    answers 2xx without a PDF, or does not answer within
    ``settings.upstream_timeout`` seconds. Transport failures (DNS,
    connection refused) propagate as ``httpx`` exceptions.
    """
    if settings.upstream_mode == UPSTREAM_URLENCODED:
        request = _urlencoded_request(client, latex, settings)
    else:
        request = _multipart_request(client, latex, settings)

    try:
        response = await client.send(request, follow_redirects=True)
    except httpx.TimeoutException:
        logger.error("LaTeX compiler timed out after %s seconds", settings.upstream_timeout)
        raise UpstreamError(f"Compilation timed out after {settings.upstream_timeout:g} seconds")

    if not response.is_success:
        detail = response.text[:MAX_DETAIL_CHARS]
        logger.error("LaTeX compilation failed (HTTP %d): %s", response.status_code, detail)
        raise UpstreamError(detail)

    pdf_bytes = response.content
    if not pdf_bytes.startswith(PDF_MAGIC):
        # Some compilers answer 200 with the compile log instead of a PDF.
        detail = response.text[:MAX_DETAIL_CHARS]
        logger.error("LaTeX compiler returned no PDF: %s", detail)
        raise UpstreamError(detail)

    logger.info("LaTeX compilation successful (%d bytes)", len(pdf_bytes))
    return pdf_bytes
