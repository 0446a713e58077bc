"""
NoteAssist Backend — Identity Verification Tests
==================================================

What:  GoogleIdentityVerifier, mostly with verify_oauth2_token patched.
Why:   Real ID tokens expire within the hour and need network access to
       Google's certificate endpoint.
How:   TestCertificateCaching runs the real verify_oauth2_token over a
       recording transport, so certificate downloads can be counted.
"""

from unittest.mock import patch

import pytest
from google.auth import transport
from google.auth.exceptions import TransportError

from noteassist.exceptions import ForbiddenError
from noteassist.services.identity_service import (
    DEFAULT_CERTS_TTL_SECONDS,
    CachingCertsRequest,
    GoogleIdentityVerifier,
    Identity,
)

VERIFY = "noteassist.services.identity_service.id_token.verify_oauth2_token"
CLIENT_ID = "client-123.apps.googleusercontent.com"


class TestIdentityFromClaims:

    def test_uses_subject_as_id(self):
        identity = Identity.from_claims({"sub": "10987", "email": "a@b.c", "name": "A"})
        assert identity == Identity(id="10987", email="a@b.c", name="A")

    def test_optional_claims_may_be_absent(self):
        assert Identity.from_claims({"sub": "1"}) == Identity(id="1")

    @pytest.mark.parametrize("claims", [{}, {"sub": ""}, {"email": "a@b.c"}])
    def test_missing_subject_is_forbidden(self, claims):
        with pytest.raises(ForbiddenError):
            Identity.from_claims(claims)


class TestGoogleIdentityVerifier:

    @pytest.mark.asyncio
    async def test_valid_token(self):
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID)

        with patch(VERIFY, return_value={"sub": "abc", "email": "u@example.com"}) as verify:
            identity = await verifier.verify("good.jwt.token")

        assert identity.id == "abc"
        assert identity.email == "u@example.com"
        args = verify.call_args.args
        assert args[0] == "good.jwt.token"
        assert args[2] == CLIENT_ID

    @pytest.mark.asyncio
    async def test_rejected_token_is_forbidden(self):
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID)

        with patch(VERIFY, side_effect=ValueError("Token expired")):
            with pytest.raises(ForbiddenError) as exc_info:
                await verifier.verify("expired.jwt.token")

        assert exc_info.value.message == "Invalid token"
        assert exc_info.value.context["reason"] == "ValueError"

    @pytest.mark.asyncio
    async def test_certificate_fetch_failure_is_forbidden(self):
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID)

        with patch(VERIFY, side_effect=TransportError("certs unreachable")):
            with pytest.raises(ForbiddenError):
                await verifier.verify("some.jwt.token")

    @pytest.mark.asyncio
    async def test_token_without_subject_is_forbidden(self):
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID)

        with patch(VERIFY, return_value={"email": "u@example.com"}):
            with pytest.raises(ForbiddenError):
                await verifier.verify("odd.jwt.token")

    @pytest.mark.asyncio
    async def test_no_client_id_rejects_without_verifying(self):
        verifier = GoogleIdentityVerifier(client_id="")

        with patch(VERIFY) as verify:
            with pytest.raises(ForbiddenError):
                await verifier.verify("any.jwt.token")

        verify.assert_not_called()


CERTS_URL = "https://www.googleapis.com/oauth2/v1/certs"


class FakeCertsResponse(transport.Response):
    def __init__(self, status=200, headers=None, data=b"{}"):
        self._status = status
        self._headers = headers if headers is not None else {"Cache-Control": "public, max-age=300"}
        self._data = data

    @property
    def status(self):
        return self._status

    @property
    def headers(self):
        return self._headers

    @property
    def data(self):
        return self._data


class RecordingTransport(transport.Request):
    """Answers every request with a canned response and remembers the URLs."""

    def __init__(self, response=None):
        self.response = response or FakeCertsResponse()
        self.urls = []

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        self.urls.append(url)
        return self.response


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestCertificateCaching:
    """Real verify_oauth2_token, fake network underneath."""

    @pytest.mark.asyncio
    async def test_repeated_verifications_fetch_certs_once(self):
        inner = RecordingTransport()
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID, transport_request=inner)

        for _ in range(3):
            # Certificates are fetched before the (malformed) token is decoded
            with pytest.raises(ForbiddenError):
                await verifier.verify("a.b.c")

        assert inner.urls == [CERTS_URL]

    @pytest.mark.asyncio
    async def test_failed_fetch_is_not_cached(self):
        inner = RecordingTransport(FakeCertsResponse(status=503, data=b"unavailable"))
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID, transport_request=inner)

        for _ in range(2):
            with pytest.raises(ForbiddenError) as exc_info:
                await verifier.verify("a.b.c")
            assert exc_info.value.context["reason"] == "TransportError"

        assert inner.urls == [CERTS_URL, CERTS_URL]

    def test_entry_expires_after_max_age(self):
        inner = RecordingTransport()
        clock = FakeClock()
        request = CachingCertsRequest(inner=inner, clock=clock)

        request(CERTS_URL)
        clock.now += 299
        request(CERTS_URL)
        assert len(inner.urls) == 1

        clock.now += 2
        request(CERTS_URL)
        assert len(inner.urls) == 2

    def test_default_ttl_without_max_age(self):
        inner = RecordingTransport(FakeCertsResponse(headers={}))
        clock = FakeClock()
        request = CachingCertsRequest(inner=inner, clock=clock)

        request(CERTS_URL)
        clock.now += DEFAULT_CERTS_TTL_SECONDS - 1
        request(CERTS_URL)
        assert len(inner.urls) == 1

        clock.now += 2
        request(CERTS_URL)
        assert len(inner.urls) == 2

    def test_non_get_requests_pass_through(self):
        inner = RecordingTransport()
        request = CachingCertsRequest(inner=inner)

        request("https://oauth2.test/token", method="POST", body=b"x")
        request("https://oauth2.test/token", method="POST", body=b"x")

        assert len(inner.urls) == 2
