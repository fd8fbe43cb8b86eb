"""Pydantic request/response models for the compile proxy."""

from typing import Optional

from pydantic import BaseModel, Field, StrictStr


# ---------------------------------------------------------------------------
# /latex-convert
# ---------------------------------------------------------------------------

class CompileRequest(BaseModel):
    latex: StrictStr = Field(min_length=1)


class CompileResponse(BaseModel):
    success: bool = True
    pdfUrl: str
    message: str = "PDF compiled successfully"


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


# ---------------------------------------------------------------------------
# /health
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "ok"
