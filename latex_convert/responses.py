"""Tagged compile results and the single step that turns them into responses."""

import base64
from dataclasses import dataclass
from typing import Union

from fastapi import Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .errors import ProxyError
from .schemas import CompileResponse, ErrorResponse

PDF_MEDIA_TYPE = "application/pdf"
PDF_FILENAME = "document.pdf"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, x-api-key",
}


@dataclass(frozen=True)
class BinaryResult:
    pdf: bytes


@dataclass(frozen=True)
class JsonResult:
    body: BaseModel
    status_code: int = 200


CompileResult = Union[BinaryResult, JsonResult]


def pdf_data_uri(pdf: bytes) -> str:
    return f"data:{PDF_MEDIA_TYPE};base64,{base64.b64encode(pdf).decode('ascii')}"


def compile_result(pdf: bytes, wants_binary: bool) -> CompileResult:
    """Pick the response shape for a compiled PDF."""
    if wants_binary:
        return BinaryResult(pdf)
    return JsonResult(CompileResponse(pdfUrl=pdf_data_uri(pdf)))


def error_result(exc: ProxyError) -> JsonResult:
    return JsonResult(
        ErrorResponse(error=exc.error, details=exc.details),
        status_code=exc.status_code,
    )


def render(result: CompileResult) -> Response:
    """Write a compile result as an HTTP response carrying the CORS headers."""
    if isinstance(result, BinaryResult):
        return Response(
            content=result.pdf,
            media_type=PDF_MEDIA_TYPE,
            headers={
                **CORS_HEADERS,
                "Content-Disposition": f'attachment; filename="{PDF_FILENAME}"',
            },
        )
    return JSONResponse(
        status_code=result.status_code,
        content=result.body.model_dump(exclude_none=True),
        headers=CORS_HEADERS,
    )


def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)
