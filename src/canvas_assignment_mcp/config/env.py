"""Environment configuration for the Canvas Assignment MCP Server.

Credentials and tuning knobs are read from environment variables
prefixed with CANVAS_ (or from a `.env` file in the working directory):

```bash
export CANVAS_API_TOKEN="1234~abcd..."
export CANVAS_DOMAIN="school.instructure.com"
export CANVAS_MAX_CONCURRENCY=4
export CANVAS_DISPLAY_TIMEZONE="America/New_York"
```

These are rendered to the AppConfig class and can be accessed like this:
```python
from canvas_assignment_mcp.config import load_config
cfg = load_config()
print(cfg.api_base)
```
"""

from __future__ import annotations

import re
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOOPBACK_OR_IP = re.compile(r"^(localhost|127\.|0\.|::1|\d+\.\d+\.\d+\.\d+)$")
_HOSTNAME = re.compile(r"^([a-zA-Z0-9-]+\.)+[a-zA-Z]{2,}$")


def is_valid_canvas_domain(domain: Optional[str]) -> bool:
    """True for a plausible public Canvas host name (not an IP or localhost)."""
    if not domain:
        return False
    if _LOOPBACK_OR_IP.match(domain):
        return False
    return bool(_HOSTNAME.match(domain))


class AppConfig(BaseSettings):
    """Application configuration settings loaded from environment variables.

    All environment variables are prefixed with CANVAS_ (e.g., CANVAS_DOMAIN).
    The token and domain may be left unset; the server still starts and
    every remote call then fails with a configuration error.
    """

    # ---- credentials ----
    api_token: Optional[str] = Field(
        default=None, description="Canvas API access token (Bearer)", repr=False
    )
    domain: Optional[str] = Field(
        default=None,
        description="Canvas host name, e.g. school.instructure.com",
    )

    # ---- network tuning ----
    timeout_seconds: float = Field(
        default=30, gt=0, description="Network request timeout in seconds"
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Connection retry attempts for each Canvas request",
    )

    # ---- search behavior ----
    page_size: int = Field(
        default=50, ge=1, le=100, description="Assignments fetched per course"
    )
    max_concurrency: int = Field(
        default=4,
        ge=1,
        le=16,
        description="Courses searched in parallel during an assignment search",
    )
    use_bucket_hints: bool = Field(
        default=True,
        description="Forward due-date bucket hints to Canvas for one-sided ranges",
    )
    strict_dates: bool = Field(
        default=False,
        description="Reject unparsable dueBefore/dueAfter instead of ignoring them",
    )

    # ---- presentation / diagnostics ----
    display_timezone: Optional[str] = Field(
        default=None,
        description="IANA time zone used to display dates; local time when unset",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level for the server process"
    )

    # pydantic-settings v2 config
    model_config = SettingsConfigDict(
        env_prefix="CANVAS_",
        case_sensitive=False,
        env_file=(".env",),  # will read if present
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ---- validators ----
    @field_validator("domain", mode="before")
    @classmethod
    def _normalize_domain(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        v = re.sub(r"^https?://", "", v).rstrip("/")
        if not v:
            return None
        if not is_valid_canvas_domain(v):
            raise ValueError(f"invalid Canvas domain: {v!r}")
        return v

    @field_validator("api_token", mode="before")
    @classmethod
    def _blank_token_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("display_timezone")
    @classmethod
    def _check_timezone(cls, v):
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone: {v!r}") from exc
        return v

    # ---- derived conveniences (no mutation) ----
    @property
    def api_base(self) -> str:
        """Base URL of the Canvas REST API for the configured domain."""
        return f"https://{self.domain}/api/v1"

    @property
    def is_configured(self) -> bool:
        """True when both a token and a domain are available."""
        return bool(self.api_token and self.domain)

    @property
    def display_tz(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.display_timezone) if self.display_timezone else None


def load_config() -> AppConfig:
    """Load and validate application configuration from environment variables.

    • All variables are prefixed with CANVAS_ (e.g., CANVAS_API_TOKEN).
    • Missing values fall back to the documented defaults.
    • A domain given as a URL is reduced to its host name.
    """
    return AppConfig()
