"""FastAPI application for the LaTeX compile proxy."""

import hmac
import json
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator, Optional

import httpx
from fastapi import Depends, FastAPI, Header, Query, Request, Response
from pydantic import ValidationError as PydanticValidationError

from . import __version__
from .compiler import compile_latex
from .config import Settings
from .errors import (
    LATEX_REQUIRED,
    LATEX_TOO_LARGE,
    AuthError,
    InternalError,
    ProxyError,
    ValidationError,
)
from .latex import MAX_LATEX_LENGTH, escape_special_chars, latex_length, well_formed
from .responses import compile_result, error_result, preflight, render
from .schemas import CompileRequest, HealthResponse

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("latex_convert.main")

# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    settings = Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)
    if settings.api_key:
        logger.warning(
            "x-api-key is only checked when supplied; requests without it are accepted"
        )
    else:
        logger.warning("LATEX_API_KEY is not set; any supplied x-api-key will be rejected")
    logger.info(
        "Compiler: %s (%s), escaping %s",
        settings.compiler_url,
        settings.upstream_mode,
        "on" if settings.escape_special_chars else "off",
    )
    return settings


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.upstream_timeout) as client:
        yield client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # invalid configuration aborts startup
    app.dependency_overrides.get(get_settings, get_settings)()
    yield


app = FastAPI(title="LaTeX Convert", version=__version__, lifespan=lifespan)


# ---------------------------------------------------------------------------
# Request checks
# ---------------------------------------------------------------------------

def wants_binary_response(format: Optional[str], accept: Optional[str]) -> bool:
    return format == "binary" or "application/pdf" in (accept or "")


def check_api_key(supplied: Optional[str], expected: Optional[str]) -> None:
    """Reject a supplied key that does not match; an absent key passes."""
    if not supplied:
        return
    if expected is None or not hmac.compare_digest(
        supplied.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Rejected request with invalid API key")
        raise AuthError()


def parse_compile_request(raw: bytes) -> CompileRequest:
    try:
        payload = json.loads(raw)
        if isinstance(payload, dict) and isinstance(payload.get("latex"), str):
            payload["latex"] = well_formed(payload["latex"])
        return CompileRequest.model_validate(payload)
    except (ValueError, PydanticValidationError):
        raise ValidationError(LATEX_REQUIRED) from None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, exc: ProxyError) -> Response:
    return render(error_result(exc))


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse()


@app.options("/latex-convert")
async def latex_convert_preflight():
    return preflight()


@app.post("/latex-convert")
async def latex_convert(
    request: Request,
    format: Optional[str] = Query(default=None),
    accept: Optional[str] = Header(default=None),
    x_api_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    wants_binary = wants_binary_response(format, accept)
    try:
        check_api_key(x_api_key, settings.api_key)

        req = parse_compile_request(await request.body())
        if latex_length(req.latex) > MAX_LATEX_LENGTH:
            raise ValidationError(LATEX_TOO_LARGE)

        latex = req.latex
        if settings.escape_special_chars:
            latex = escape_special_chars(latex)

        logger.info("Compiling LaTeX document (length %d)", len(latex))
        pdf_bytes = await compile_latex(client, latex, settings)
    except ProxyError:
        raise
    except Exception as exc:
        logger.exception("Error in latex-convert")
        raise InternalError(str(exc)) from exc

    return render(compile_result(pdf_bytes, wants_binary))
