"""
Note Pad API: Pydantic Request/Response Schemas
=================================================

What:  Pydantic models defining the API contract.
Why:   Typed request parsing, automatic serialization, OpenAPI doc generation.
How:   FastAPI parses request bodies into NoteCreate/NoteUpdate and serializes
       NoteResponse. Business rules (empty title, length) live in NoteService
       so they hold for non-HTTP callers too; these models only check shape.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /notes. Both fields are required."""
    title: str = Field(description="Non-empty title, at most 255 characters")
    content: str = Field(description="Note body; an empty string is allowed")


class NoteUpdate(BaseModel):
    """
    Body of PUT/PATCH /notes/{id}.

    Only the fields present in the JSON body are changed; NoteService reads
    them through `model_dump(exclude_unset=True)`. Sending a field as null is
    rejected rather than treated as "leave unchanged".
    """
    title: Optional[str] = Field(default=None, description="Replacement title")
    content: Optional[str] = Field(default=None, description="Replacement body")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a note.
    Who:   Returned by every note endpoint except DELETE.

    from_attributes: built directly from SQLAlchemy result rows.
    """
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last changed (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    Standardized error body for every 4xx/5xx response.

    Example:
        {
            "error": "not found",
            "message": "note with ID '6f1c...' was not found",
            "details": null,
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Error tag: validation error, not found, storage error")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Body of GET /healthcheck."""
    status: str = Field(description="ok when the database answers, degraded otherwise")
    message: str = Field(description="Service banner")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
