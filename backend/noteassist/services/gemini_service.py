"""
NoteAssist Backend — Google Gemini Service Implementation
==========================================================

What:  LLMService adapter for Google Gemini (template-prompt generative model).
Why:   Default AI provider; a single prompt in, a single text answer out.
How:   Configures the google-generativeai SDK once, keeps one GenerativeModel
       for the process, and calls generate_content_async per request.
Who:   Built once by services.providers.get_llm_service() when AI_PROVIDER=gemini.

Failure translation:
    The SDK raises a mix of google.api_core exceptions, ValueError (when the
    response was blocked and `.text` has nothing to return) and transport
    errors. All of them become UpstreamError; the original is logged.
"""

import logging
import time

import google.generativeai as genai
from starlette.concurrency import run_in_threadpool

from noteassist.exceptions import UpstreamError
from noteassist.middleware.request_id import request_id_var
from noteassist.services.llm_base import LLMService

logger = logging.getLogger(__name__)


class GeminiService(LLMService):
    """
    Google Gemini implementation of the text assist provider.

    The GenerativeModel object is reusable across concurrent requests, so one
    instance serves the whole process.
    """

    name = "gemini"

    def __init__(self, api_key: str, model_name: str, timeout: float = 60.0):
        # The SDK keeps the API key in module-level state
        if api_key:
            genai.configure(api_key=api_key)

        self.model_name = model_name
        self.timeout = timeout
        self.model = genai.GenerativeModel(model_name)

        logger.info("GeminiService initialized with model=%s", model_name)

    async def generate(self, prompt: str) -> str:
        """
        Send the prompt to Gemini and return `response.text`.

        Raises:
            UpstreamError: SDK/API failure, blocked prompt, or empty answer.
        """
        rid = request_id_var.get("")
        start_time = time.perf_counter()

        try:
            response = await self.model.generate_content_async(
                prompt,
                request_options={"timeout": self.timeout},
            )
            # .text raises ValueError when no candidate carries text
            # (safety block, empty candidate list)
            text = response.text
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "[%s] Gemini call failed after %.0fms: %s: %s",
                rid,
                duration_ms,
                type(e).__name__,
                str(e),
            )
            raise UpstreamError(
                context={"provider": self.name, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        text = (text or "").strip()
        if not text:
            logger.error("[%s] Gemini returned an empty response after %.0fms", rid, duration_ms)
            raise UpstreamError(
                message="The AI service returned an empty response",
                context={"provider": self.name},
            )

        logger.info(
            "[%s] Gemini call completed in %.0fms, returned %d chars",
            rid,
            duration_ms,
            len(text),
        )
        return text

    async def health_check(self) -> bool:
        """
        Lists available models (no token cost) to verify key and connectivity.
        """
        try:
            models = await run_in_threadpool(lambda: list(genai.list_models()))
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False

        target = f"models/{self.model_name}"
        if target not in [m.name for m in models]:
            logger.warning("Configured model %s not found in available models", target)
        return True
