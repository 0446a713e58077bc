"""
NoteAssist Backend — Process-Scoped Service Providers
======================================================

What:  Cached factories for the external-facing singletons.
Why:   The LLM adapter and the identity verifier hold SDK state and pooled
       HTTP connections; they are built once per process and injected into
       route handlers with FastAPI's Depends().
How:   functools.lru_cache turns each factory into a lazy singleton. The
       lifespan handler calls them at startup so construction errors show
       up in the startup log, and closes them on shutdown.

Testing:
    Routes depend on these functions, so tests swap implementations with
    `app.dependency_overrides[get_llm_service] = lambda: fake`.
"""

import logging
from functools import lru_cache

from noteassist.config import settings
from noteassist.services.identity_service import GoogleIdentityVerifier, IdentityVerifier
from noteassist.services.llm_base import LLMService

logger = logging.getLogger(__name__)


def build_llm_service(provider: str) -> LLMService:
    """
    Instantiate the adapter named by `provider` ("gemini" or "openai").

    Imports are local so a deployment only needs the SDK it actually uses
    importable at startup.
    """
    if provider == "gemini":
        from noteassist.services.gemini_service import GeminiService

        return GeminiService(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
            timeout=settings.ai_request_timeout,
        )
    if provider == "openai":
        from noteassist.services.openai_service import OpenAIChatService

        return OpenAIChatService(
            api_key=settings.openai_api_key,
            model_name=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.ai_request_timeout,
        )
    raise ValueError(f"Unknown AI provider '{provider}'. Expected 'gemini' or 'openai'.")


@lru_cache(maxsize=1)
def get_llm_service() -> LLMService:
    return build_llm_service(settings.ai_provider)


@lru_cache(maxsize=1)
def get_identity_verifier() -> IdentityVerifier:
    return GoogleIdentityVerifier(client_id=settings.google_client_id)


async def close_providers() -> None:
    """Close pooled clients of any provider built during this process."""
    if get_llm_service.cache_info().currsize:
        await get_llm_service().aclose()
        get_llm_service.cache_clear()
    get_identity_verifier.cache_clear()
