"""
MarkNote — Pydantic Schemas
============================

What:  Pydantic models describing what the client may send and what the
       health endpoint returns.
Why:   Schemas are separate from SQLAlchemy models so that the set of fields
       a client can write is explicit. Only `title` and `content` exist on
       NoteInput; `id` and the timestamps are server-managed and any such
       field in a submission is dropped here, before the service sees it.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Input Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class NoteInput(BaseModel):
    """
    What:  The allow-listed fields of a create/update submission.
    Who:   Built by the create/update handlers from form data; consumed by
           NoteService, which applies the business rules (blank, too long).

    Missing fields become empty strings so that "missing" and "blank" fail
    validation the same way.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = Field(default="", description="Note title (1-200 characters)")
    content: str = Field(default="", description="Raw Markdown body")

    @field_validator("title", "content", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @classmethod
    def from_form(cls, form: Any) -> "NoteInput":
        """Build from a submitted form, keeping only the allow-listed keys."""
        return cls.model_validate({key: form.get(key) for key in cls.model_fields})


class SearchParams(BaseModel):
    """Query parameters accepted by the list view."""

    search: Optional[str] = Field(default=None, description="Case-insensitive substring filter")

    @property
    def term(self) -> Optional[str]:
        """The search term, or None when absent or blank."""
        if self.search is None or not self.search.strip():
            return None
        return self.search


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and container probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

