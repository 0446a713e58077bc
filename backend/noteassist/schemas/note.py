"""
NoteAssist Backend — Note Request/Response Schemas
===================================================

What:  Pydantic models defining the notes API contract.
Why:   Strict input validation, automatic serialization, and OpenAPI doc generation.
How:   FastAPI validates request bodies against the input models and serializes
       responses through NoteResponse (camelCase on the wire).

Wire format:
    The frontend speaks camelCase (userId, createdAt, updatedAt); Python code
    uses snake_case. The alias generator bridges the two, and FastAPI
    serializes response models by alias.

    Owner fields are deliberately absent from the input models: a `userId`
    sent by the client is dropped during validation and the owner always
    comes from the verified identity.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes. Both fields are optional; defaults are applied
    by NoteService.
    """
    title: Optional[str] = Field(default=None, description="Note title")
    content: Optional[str] = Field(default=None, description="Note body")

    model_config = ConfigDict(extra="ignore")


class NoteUpdate(BaseModel):
    """
    Body of PUT /api/notes/{id}.

    Which fields count as "present" matters in merge mode, so NoteService
    reads `model_fields_set` rather than comparing against None.
    """
    title: Optional[str] = Field(default=None, description="New title")
    content: Optional[str] = Field(default=None, description="New body")

    model_config = ConfigDict(extra="ignore")


class NoteResponse(BaseModel):
    """
    What:  Full representation of a stored note.
    Who:   Returned by every notes endpoint that returns a body.
    """
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    user_id: str = Field(description="Owner identity (verified subject)")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last modified (UTC ISO 8601)")

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes; everything is stored in UTC.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
