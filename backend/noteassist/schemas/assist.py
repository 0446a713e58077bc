"""
NoteAssist Backend — Text Assist Schemas
=========================================

What:  Request/response models for POST /api/ai/{summarize,improve,ideas}.

Contract:
    - `text` is the input for all three operations.
    - `topic` is accepted by the ideas operation when `text` is missing, for
      clients built against the older idea-generation endpoint.
    - Presence and non-emptiness are checked by TextAssistService so that a
      missing field yields the same 400 envelope as an empty one.
    - The answer is always under `result`, whichever provider produced it.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AssistRequest(BaseModel):
    text: Optional[str] = Field(default=None, description="Text to transform")
    topic: Optional[str] = Field(
        default=None,
        description="Fallback input for idea generation when `text` is absent",
    )

    model_config = ConfigDict(extra="ignore")


class AssistResponse(BaseModel):
    result: str = Field(description="Text returned by the AI provider")
