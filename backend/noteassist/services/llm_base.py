"""
NoteAssist Backend — Abstract LLM Service Interface
=====================================================

What:  Abstract base class defining the contract for generative-text providers.
Why:   The assist endpoints must not care which provider answers them; the
       concrete adapter is a deployment choice (AI_PROVIDER).
How:   Concrete implementations inherit from LLMService and implement generate().
Who:   Called by TextAssistService for summarize / improve / ideas.

Implementations:
    - GeminiService:      Google Gemini through google-generativeai
    - OpenAIChatService:  any OpenAI-compatible chat-completions endpoint
"""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """
    Abstract interface: submit an instruction, receive text.

    Contract:
        - generate() accepts a fully built prompt and returns the provider's
          primary text result
        - Every provider-specific failure is translated into UpstreamError
        - Never retries; one call is one provider round trip
    """

    #: Short provider name reported by the health check.
    name: str = "unknown"

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Send the prompt to the provider and return the text it produced.

        Args:
            prompt: Complete instruction including the caller's text.

        Returns:
            str: The primary text result, stripped. Never empty.

        Raises:
            UpstreamError: Provider error, timeout, or a response without text.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the provider is reachable and the credentials are accepted.

        Returns True if reachable, False otherwise. Must not raise.
        """
        ...

    async def aclose(self) -> None:
        """Release pooled resources held by the adapter. Called on shutdown."""
        return None
