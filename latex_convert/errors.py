"""Error taxonomy for the compile proxy.

Each error maps to exactly one HTTP status and a JSON body of the form
``{"error": ..., "details": ...}``. None of them is retried by the proxy.
"""

from typing import Optional

AUTH_FAILED = "Unauthorized: Invalid API key"
LATEX_REQUIRED = "Invalid request: latex field is required"
LATEX_TOO_LARGE = "LaTeX document too large (max 100KB)"
COMPILATION_FAILED = "LaTeX compilation failed. Please check your LaTeX syntax."
INTERNAL_ERROR = "Internal server error"


class ProxyError(Exception):
    """Base class for failures surfaced to the caller as a JSON error body.

    Attributes:
        status_code: HTTP status returned to the caller
        error: Short, stable error message
        details: Optional diagnostic text (upstream log excerpt, exception message)
    """

    status_code = 500

    def __init__(self, error: str, details: Optional[str] = None):
        self.error = error
        self.details = details
        super().__init__(error if details is None else f"{error} ({details})")


class AuthError(ProxyError):
    """Supplied API key does not match the configured secret."""

    status_code = 401

    def __init__(self):
        super().__init__(AUTH_FAILED)


class ValidationError(ProxyError):
    """Malformed, missing, or oversized input."""

    status_code = 400


class UpstreamError(ProxyError):
    """The external compiler rejected the document or gave up on it."""

    status_code = 400

    def __init__(self, details: Optional[str] = None):
        super().__init__(COMPILATION_FAILED, details)


class InternalError(ProxyError):
    """Anything unexpected; carries the raw exception message."""

    status_code = 500

    def __init__(self, details: Optional[str] = None):
        super().__init__(INTERNAL_ERROR, details)
