"""Service configuration loaded from the environment (and an optional .env)."""

import os
from typing import Literal, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# Upstream defaults
# ---------------------------------------------------------------------------

UPSTREAM_MULTIPART = "multipart"
UPSTREAM_URLENCODED = "urlencoded"

DEFAULT_COMPILER_URLS = {
    UPSTREAM_MULTIPART: "https://texlive.net/cgi-bin/latexcgi",
    UPSTREAM_URLENCODED: "https://latexonline.cc/compile",
}

# Wall-clock budget of the hosting platform; the proxy never waits longer.
DEFAULT_UPSTREAM_TIMEOUT = 30.0


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    api_key: Optional[str] = None
    upstream_mode: Literal["multipart", "urlencoded"] = UPSTREAM_MULTIPART
    compiler_url: Optional[str] = None
    escape_special_chars: bool = False
    upstream_timeout: float = Field(default=DEFAULT_UPSTREAM_TIMEOUT, gt=0)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @model_validator(mode="after")
    def _default_compiler_url(self) -> "Settings":
        if not self.compiler_url:
            self.compiler_url = DEFAULT_COMPILER_URLS[self.upstream_mode]
        return self

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from LATEX_* environment variables."""
        load_dotenv(find_dotenv(usecwd=True))
        values = {
            "api_key": os.getenv("LATEX_API_KEY"),
            "upstream_mode": (os.getenv("LATEX_UPSTREAM_MODE") or "").strip().lower(),
            "compiler_url": os.getenv("LATEX_COMPILER_URL"),
            "upstream_timeout": os.getenv("LATEX_UPSTREAM_TIMEOUT"),
            "log_level": (os.getenv("LOG_LEVEL") or "").upper(),
            "host": os.getenv("HOST"),
            "port": os.getenv("PORT"),
        }
        # empty values fall back to the field defaults; pydantic coerces the rest
        return cls(
            escape_special_chars=_env_flag("LATEX_ESCAPE_SPECIAL_CHARS"),
            **{name: value for name, value in values.items() if value},
        )
