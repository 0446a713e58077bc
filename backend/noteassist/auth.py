"""
NoteAssist Backend — Authentication Dependencies
=================================================

What:  FastAPI dependencies that turn `Authorization: Bearer <token>` into a
       verified Identity.
How:   HTTPBearer(auto_error=False) extracts the token without raising, so the
       two failure modes stay distinct:
           no header / not Bearer / empty token  → UnauthorizedError (401)
           token present but rejected            → ForbiddenError (403)
       On success the identity is stored on `request.state.user` for the rest
       of the request.

Usage:
    @router.get("/notes")
    async def list_notes(user: Identity = Depends(get_current_user)):
        ...
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from noteassist.config import settings
from noteassist.exceptions import UnauthorizedError
from noteassist.services.identity_service import Identity, IdentityVerifier
from noteassist.services.providers import get_identity_verifier

bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Identity:
    """Require a verified identity."""
    if creds is None or not creds.credentials.strip():
        raise UnauthorizedError()

    identity = await verifier.verify(creds.credentials.strip())
    request.state.user = identity
    return identity


async def get_assist_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Optional[Identity]:
    """
    Identity for the assist routes, enforced only when AI_REQUIRE_AUTH is on.

    With the gate off, the routes are open and no token is inspected.
    """
    if not settings.ai_require_auth:
        return None
    return await get_current_user(request, creds, verifier)
