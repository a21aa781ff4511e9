from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest
from algoz.core.exceptions import ConfigurationError
from algoz.core.settings import LLMProvider, settings
from algoz.services.llm_service import LLMService
from pydantic import SecretStr


def _service(handler, **overrides) -> LLMService:  # noqa: ANN001
    svc = LLMService(http_transport=httpx.MockTransport(handler))
    svc.cfg = settings.model_copy(
        update={"gemini_api_key": SecretStr("test-key"), "llm_provider": LLMProvider.gemini, **overrides}
    )
    return svc


def test_gemini_request_shape_and_text_extraction():
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["key"] = request.url.params["key"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": "## Bug found"}]}}]},
        )

    svc = _service(handler, gemini_model="gemini-1.5-pro")
    assert svc.generate("analyze this") == "## Bug found"

    assert ":generateContent" in captured["url"]
    assert "/models/gemini-1.5-pro" in captured["url"]
    assert captured["key"] == "test-key"
    body = captured["body"]
    assert body["contents"] == [{"parts": [{"text": "analyze this"}]}]
    assert body["generationConfig"] == {
        "temperature": 0.2,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 8192,
    }


def test_gemini_without_candidates_returns_empty_text():
    svc = _service(lambda _req: httpx.Response(200, json={"promptFeedback": {}}))
    assert svc.generate("hello") == ""


def test_gemini_http_error_propagates():
    svc = _service(lambda _req: httpx.Response(500, json={"error": {"message": "boom"}}))
    with pytest.raises(httpx.HTTPStatusError):
        svc.generate("hello")


def test_missing_gemini_key_is_a_configuration_error():
    def handler(_request: httpx.Request) -> httpx.Response:  # pragma: no cover - never reached
        raise AssertionError("no request expected")

    svc = _service(handler, gemini_api_key=None)
    with pytest.raises(ConfigurationError) as excinfo:
        svc.generate("hello")
    assert "GEMINI_API_KEY" in excinfo.value.message


def test_openai_provider_uses_injected_client():
    calls: list[dict] = []

    def create(**kwargs):  # noqa: ANN003, ANN202
        calls.append(kwargs)
        message = SimpleNamespace(content="explained")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    fake = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    svc = LLMService(openai_client=fake)  # type: ignore[arg-type]

    assert svc.generate("prompt", provider=LLMProvider.openai, temperature=0.5) == "explained"
    assert calls[0]["messages"] == [{"role": "user", "content": "prompt"}]
    assert calls[0]["temperature"] == 0.5


def test_openai_without_key_is_a_configuration_error():
    svc = LLMService()
    svc.cfg = settings.model_copy(update={"openai_api_key": None})
    with pytest.raises(ConfigurationError):
        svc.generate("prompt", provider=LLMProvider.openai)
