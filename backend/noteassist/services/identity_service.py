"""
NoteAssist Backend — Identity Verification Service
====================================================

What:  Verifies bearer ID tokens and derives the caller's identity.
Why:   The verified subject (`sub`) is the only source of a note's owner;
       nothing downstream trusts a user id from the request body or query.
How:   GoogleIdentityVerifier delegates signature, expiry, issuer and audience
       checks to google-auth's verify_oauth2_token. That call is blocking
       (it may fetch Google's signing certificates), so it runs in the
       threadpool instead of on the event loop.
Who:   Used by the `get_current_user` dependency in noteassist.auth.

Certificate caching:
    verify_oauth2_token downloads Google's public certificates through the
    transport it is given, on every call. The verifier hands it a
    CachingCertsRequest, which keeps the certificate response until the
    `max-age` Google sends in Cache-Control runs out. A token check is then
    a local signature check, not an extra HTTPS round trip.

Failure mapping:
    Any verification failure raises ForbiddenError. The reason is logged
    server-side; the client only learns that the token was rejected.
"""

import logging
import re
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import google.auth.exceptions
from google.auth import transport
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from starlette.concurrency import run_in_threadpool

from noteassist.exceptions import ForbiddenError

logger = logging.getLogger(__name__)

# Used when the certificate response carries no max-age
DEFAULT_CERTS_TTL_SECONDS = 3600

_MAX_AGE_RE = re.compile(r"max-age=(\d+)")


def _max_age(headers: Mapping[str, str]) -> int:
    for name, value in headers.items():
        if name.lower() == "cache-control":
            match = _MAX_AGE_RE.search(value)
            if match:
                return int(match.group(1))
    return DEFAULT_CERTS_TTL_SECONDS


class CachingCertsRequest(transport.Request):
    """
    google-auth transport that memoizes successful GET responses per URL.

    Only verify_oauth2_token uses this transport, and the only GET it makes
    is the certificate download, so the cache holds one entry in practice.
    Failed responses are never cached; the next call tries again.
    """

    def __init__(
        self,
        inner: Optional[transport.Request] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.inner = inner or google_requests.Request()
        self.clock = clock
        self._cache: Dict[str, Tuple[float, transport.Response]] = {}
        self._lock = threading.Lock()

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        if method != "GET":
            return self.inner(url, method=method, body=body, headers=headers, timeout=timeout, **kwargs)

        with self._lock:
            cached = self._cache.get(url)
            if cached is not None and cached[0] > self.clock():
                return cached[1]

        response = self.inner(url, method=method, body=body, headers=headers, timeout=timeout, **kwargs)
        if response.status == 200:
            ttl = _max_age(response.headers)
            with self._lock:
                self._cache[url] = (self.clock() + ttl, response)
            logger.debug("Cached %s for %ds", url, ttl)
        return response


@dataclass(frozen=True)
class Identity:
    """Verified caller. `id` is the identity provider's stable subject."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Identity":
        subject = claims.get("sub")
        if not subject:
            raise ForbiddenError(context={"reason": "token has no subject"})
        return cls(id=str(subject), email=claims.get("email"), name=claims.get("name"))


class IdentityVerifier(ABC):
    """Contract: bearer token in, verified Identity out, ForbiddenError otherwise."""

    @abstractmethod
    async def verify(self, token: str) -> Identity:
        ...


class GoogleIdentityVerifier(IdentityVerifier):
    """
    Verifies Google Sign-In ID tokens issued for our OAuth client.

    The certificate cache lives on `self._request` and is shared by every
    request thread; pass `transport_request` to swap the underlying HTTP
    transport.
    """

    def __init__(self, client_id: str, transport_request: Optional[transport.Request] = None):
        self.client_id = client_id
        self._request = CachingCertsRequest(inner=transport_request)
        if not client_id:
            logger.warning("GOOGLE_CLIENT_ID is empty; every token will be rejected")

    async def verify(self, token: str) -> Identity:
        if not self.client_id:
            raise ForbiddenError(context={"reason": "no client id configured"})

        try:
            claims = await run_in_threadpool(
                id_token.verify_oauth2_token,
                token,
                self._request,
                self.client_id,
            )
        except (ValueError, google.auth.exceptions.GoogleAuthError) as e:
            # ValueError: bad signature, expired, wrong audience/issuer, malformed
            # GoogleAuthError: certificate fetch failed, transport errors
            logger.warning("Token verification failed: %s: %s", type(e).__name__, str(e))
            raise ForbiddenError(context={"reason": type(e).__name__}) from e

        return Identity.from_claims(claims)
