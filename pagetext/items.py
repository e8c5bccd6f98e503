"""Pydantic models passed between the engine's components."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ValidationError, field_validator

from pagetext.errors import InvalidInputError

SECURE_SCHEME = "https://"


class ReadinessState(Enum):
    UNCHECKED = "unchecked"
    NOT_READY = "not_ready"
    READY = "ready"


class ExtractionRequest(BaseModel):
    """The single URL a process extracts.  Immutable once built."""

    model_config = {"frozen": True}

    url: str

    @field_validator("url")
    @classmethod
    def _require_https(cls, v: str) -> str:
        if not v.startswith(SECURE_SCHEME):
            raise ValueError(f"URL must start with {SECURE_SCHEME!r}")
        return v

    @classmethod
    def from_url(cls, url: str | None) -> ExtractionRequest:
        """Validate *url* and build a request, or raise :class:`InvalidInputError`."""
        if not url:
            raise InvalidInputError("No URL given")
        try:
            return cls(url=url)
        except ValidationError as exc:
            raise InvalidInputError(f"Not an https:// URL: {url!r}", url=url) from exc


def normalize_content_type(raw: str | None) -> str:
    """Return the bare, lower-cased media type of a Content-Type header value.

    ``"Application/PDF; charset=binary"`` -> ``"application/pdf"``
    """
    if not raw:
        return ""
    return raw.split(";", 1)[0].strip().lower()


class NavigationOutcome(BaseModel):
    """Where navigation ended up and what the server said it returned."""

    model_config = {"frozen": True}

    final_url: str
    content_type: str = ""
    status: int = 0

    @field_validator("content_type", mode="before")
    @classmethod
    def _normalize_content_type(cls, v: str | None) -> str:
        return normalize_content_type(v)


class ExtractionResult(BaseModel):
    text: str
    url: str = ""
    strategy: str = ""
