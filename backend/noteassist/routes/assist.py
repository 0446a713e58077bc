"""
NoteAssist Backend — Text Assist Route Handlers
=================================================

What:  POST /api/ai/summarize, /api/ai/improve, /api/ai/ideas.
How:   Thin handlers: resolve the (optional) identity and the provider
       singleton, delegate to TextAssistService, wrap the text in {"result"}.

Auth is governed by AI_REQUIRE_AUTH (see noteassist.auth.get_assist_user).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from noteassist.auth import get_assist_user
from noteassist.schemas.assist import AssistRequest, AssistResponse
from noteassist.schemas.common import ErrorResponse
from noteassist.services.assist_service import assist_service
from noteassist.services.identity_service import Identity
from noteassist.services.llm_base import LLMService
from noteassist.services.providers import get_llm_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["Text Assist"])

ASSIST_RESPONSES = {
    400: {"description": "No text provided", "model": ErrorResponse},
    401: {"description": "Missing bearer token", "model": ErrorResponse},
    403: {"description": "Invalid bearer token", "model": ErrorResponse},
    500: {"description": "AI provider failed", "model": ErrorResponse},
}


@router.post(
    "/summarize",
    response_model=AssistResponse,
    responses=ASSIST_RESPONSES,
    summary="Summarize text",
)
async def summarize(
    payload: Optional[AssistRequest] = None,
    user: Optional[Identity] = Depends(get_assist_user),
    llm: LLMService = Depends(get_llm_service),
) -> AssistResponse:
    payload = payload or AssistRequest()
    result = await assist_service.summarize(llm, payload.text)
    return AssistResponse(result=result)


@router.post(
    "/improve",
    response_model=AssistResponse,
    responses=ASSIST_RESPONSES,
    summary="Improve the clarity and tone of text",
)
async def improve(
    payload: Optional[AssistRequest] = None,
    user: Optional[Identity] = Depends(get_assist_user),
    llm: LLMService = Depends(get_llm_service),
) -> AssistResponse:
    payload = payload or AssistRequest()
    result = await assist_service.improve(llm, payload.text)
    return AssistResponse(result=result)


@router.post(
    "/ideas",
    response_model=AssistResponse,
    responses=ASSIST_RESPONSES,
    summary="Suggest related ideas and questions",
    description="Reads `text`; `topic` is accepted when `text` is absent.",
)
async def ideas(
    payload: Optional[AssistRequest] = None,
    user: Optional[Identity] = Depends(get_assist_user),
    llm: LLMService = Depends(get_llm_service),
) -> AssistResponse:
    payload = payload or AssistRequest()
    result = await assist_service.ideas(llm, payload.text, topic=payload.topic)
    return AssistResponse(result=result)
