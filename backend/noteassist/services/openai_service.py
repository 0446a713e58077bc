"""
NoteAssist Backend — OpenAI-Compatible Chat Service
=====================================================

What:  LLMService adapter for chat-completion style providers.
Why:   Some deployments point the assist endpoints at OpenAI or at a
       self-hosted server exposing the same /chat/completions API.
How:   One shared httpx.AsyncClient (connection pool) per process; each
       request posts a single user message and reads
       `choices[0].message.content`.
Who:   Built once by services.providers.get_llm_service() when AI_PROVIDER=openai.
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from noteassist.exceptions import UpstreamError
from noteassist.middleware.request_id import request_id_var
from noteassist.services.llm_base import LLMService

logger = logging.getLogger(__name__)


class OpenAIChatService(LLMService):
    """Chat-completions implementation of the text assist provider."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model_name: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.model_name = model_name
        self.client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )

        logger.info("OpenAIChatService initialized with model=%s base_url=%s", model_name, base_url)

    async def generate(self, prompt: str) -> str:
        rid = request_id_var.get("")
        payload: Dict[str, Any] = {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
        }
        start_time = time.perf_counter()

        try:
            response = await self.client.post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "[%s] Chat completion rejected with HTTP %d: %s",
                rid,
                e.response.status_code,
                e.response.text[:500],
            )
            raise UpstreamError(
                context={"provider": self.name, "status_code": e.response.status_code},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            # ValueError: body was not JSON
            logger.error("[%s] Chat completion failed: %s: %s", rid, type(e).__name__, str(e))
            raise UpstreamError(
                context={"provider": self.name, "error_type": type(e).__name__},
            ) from e

        text = self._extract_text(data)
        duration_ms = (time.perf_counter() - start_time) * 1000
        if not text:
            logger.error("[%s] Chat completion returned no text after %.0fms", rid, duration_ms)
            raise UpstreamError(
                message="The AI service returned an empty response",
                context={"provider": self.name},
            )

        logger.info(
            "[%s] Chat completion finished in %.0fms, returned %d chars",
            rid,
            duration_ms,
            len(text),
        )
        return text

    @staticmethod
    def _extract_text(data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return ""
        if not isinstance(content, str):
            return ""
        return content.strip()

    async def health_check(self) -> bool:
        try:
            response = await self.client.get("/models")
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Chat completion health check failed: %s", str(e))
            return False
        return True

    async def aclose(self) -> None:
        await self.client.aclose()
