"""
NoteAssist Backend — Notes Route Handlers
===========================================

What:  CRUD endpoints under /api/notes.
How:   Each handler receives the verified identity and a db session through
       Depends(), and delegates to NoteService with `user.id` as the owner.
Who:   Called by the note editor frontend.

Every route requires `Authorization: Bearer <Google ID token>`.
Error responses (401/403/404/500) are produced by the global handlers.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from noteassist.auth import get_current_user
from noteassist.database import get_db_session
from noteassist.schemas.common import ErrorResponse
from noteassist.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from noteassist.services.identity_service import Identity
from noteassist.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])

AUTH_RESPONSES = {
    401: {"description": "Missing bearer token", "model": ErrorResponse},
    403: {"description": "Invalid bearer token", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
NOT_FOUND_RESPONSE = {404: {"description": "Note not found", "model": ErrorResponse}}


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses=AUTH_RESPONSES,
    summary="List the caller's notes",
    description="Returns every note owned by the caller, most recently updated first.",
)
async def list_notes(
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    return await note_service.list_notes(db=db, user_id=user.id)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**AUTH_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Get one of the caller's notes",
)
async def get_note(
    note_id: str,
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db=db, user_id=user.id, note_id=note_id)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses=AUTH_RESPONSES,
    summary="Create a note",
    description=(
        "Creates a note owned by the caller. Missing title defaults to "
        "'Untitled Note', missing content to an empty string. Any userId in "
        "the body is ignored."
    ),
)
async def create_note(
    payload: Optional[NoteCreate] = None,
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(
        db=db,
        user_id=user.id,
        payload=payload or NoteCreate(),
    )


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**AUTH_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Update a note's title and content",
)
async def update_note(
    note_id: str,
    payload: Optional[NoteUpdate] = None,
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(
        db=db,
        user_id=user.id,
        note_id=note_id,
        payload=payload or NoteUpdate(),
    )


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses={**AUTH_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db=db, user_id=user.id, note_id=note_id)
    return Response(status_code=204)
