"""
NoteAssist Backend — Configuration & Health Tests
===================================================
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from noteassist.config import Settings
from noteassist.services.providers import build_llm_service


class TestSettings:

    def test_cors_origins_list(self):
        s = Settings(cors_origins=" http://a.test , http://b.test,,")
        assert s.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_default_cors_origins(self):
        s = Settings()
        assert "http://localhost:3000" in s.cors_origins_list
        assert "http://127.0.0.1:3000" in s.cors_origins_list

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_level="LOUD")

    def test_choices_are_case_insensitive(self):
        s = Settings(ai_provider="OpenAI", note_update_mode=" Merge ")
        assert s.ai_provider == "openai"
        assert s.note_update_mode == "merge"

    def test_unknown_provider_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(ai_provider="llama")

    def test_production_validation_lists_missing_values(self):
        s = Settings(google_client_id="", ai_provider="openai", openai_api_key="")

        with pytest.raises(ValueError) as exc_info:
            s.validate_required_for_production()

        message = str(exc_info.value)
        assert "GOOGLE_CLIENT_ID" in message
        assert "OPENAI_API_KEY" in message

    def test_production_validation_passes(self):
        s = Settings(google_client_id="cid", ai_provider="gemini", gemini_api_key="k")
        s.validate_required_for_production()


class TestProviderFactory:

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            build_llm_service("bogus")

    @pytest.mark.asyncio
    async def test_openai_provider(self):
        service = build_llm_service("openai")
        assert service.name == "openai"
        await service.aclose()


class TestHealthRoutes:

    @pytest.mark.asyncio
    async def test_api_test(self, test_client):
        response = await test_client.get("/api/test")

        assert response.status_code == 200
        assert response.json() == {"status": "API is working!"}

    @pytest.mark.asyncio
    async def test_health_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["ai_provider"] == "fake"

    @pytest.mark.asyncio
    async def test_health_degraded_when_provider_down(self, test_client, fake_llm):
        fake_llm.fail = True

        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["ai"] == "unavailable"
