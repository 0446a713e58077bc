"""
NoteAssist Backend — Text Assist Service
==========================================

What:  Summarize / improve / generate-ideas over caller-supplied text.
Why:   The three operations differ only in their instruction template, so
       they share one validate → build prompt → call provider path.
How:   Embeds the caller's text verbatim into a fixed template and hands the
       prompt to whichever LLMService the deployment configured.
Who:   Called by the /api/ai/* route handlers.

The service never touches the note store: it is a pure pass-through
transformation, so a provider failure leaves nothing behind.
"""

import logging
from enum import Enum
from typing import Optional

from noteassist.exceptions import ValidationError
from noteassist.services.llm_base import LLMService

logger = logging.getLogger(__name__)


class AssistOperation(str, Enum):
    SUMMARIZE = "summarize"
    IMPROVE = "improve"
    IDEAS = "ideas"


PROMPT_TEMPLATES = {
    AssistOperation.SUMMARIZE: "Summarize the following text:\n\n{text}",
    AssistOperation.IMPROVE: (
        "Improve the following text by making it more clear, concise, "
        "and professional:\n\n{text}"
    ),
    AssistOperation.IDEAS: (
        "Based on the following text, suggest some related ideas, "
        "questions to explore, or points to consider:\n\n{text}"
    ),
}


def build_prompt(operation: AssistOperation, text: str) -> str:
    # str.format would choke on braces inside the caller's text
    head, _, tail = PROMPT_TEMPLATES[operation].partition("{text}")
    return f"{head}{text}{tail}"


class TextAssistService:
    """Stateless; the provider is injected per call."""

    async def run(
        self,
        llm: LLMService,
        operation: AssistOperation,
        text: Optional[str],
    ) -> str:
        """
        Validate input, build the instruction and return the provider's text.

        Raises:
            ValidationError: `text` missing, empty or whitespace only (no provider call).
            UpstreamError:   Propagated from the provider adapter.
        """
        if text is None or not text.strip():
            raise ValidationError(message="No text provided", field="text")

        prompt = build_prompt(operation, text)
        logger.info("Assist %s: %d chars via %s", operation.value, len(text), llm.name)
        return await llm.generate(prompt)

    async def summarize(self, llm: LLMService, text: Optional[str]) -> str:
        return await self.run(llm, AssistOperation.SUMMARIZE, text)

    async def improve(self, llm: LLMService, text: Optional[str]) -> str:
        return await self.run(llm, AssistOperation.IMPROVE, text)

    async def ideas(
        self,
        llm: LLMService,
        text: Optional[str],
        topic: Optional[str] = None,
    ) -> str:
        """`topic` is only consulted when `text` is absent."""
        return await self.run(llm, AssistOperation.IDEAS, text if text is not None else topic)


assist_service = TextAssistService()
