from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from openai import OpenAI

from algoz.core.exceptions import ConfigurationError
from algoz.core.settings import LLMProvider, settings

logger = logging.getLogger(__name__)


class LLMService:
    """
    Text generation for Algo-Z.
    - Gemini `generateContent` over plain HTTP (default).
    - OpenAI chat completions via the official SDK.
    One outbound call per prompt; credentials are checked at call time.
    """

    def __init__(
        self,
        *,
        openai_client: Optional[OpenAI] = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.cfg = settings
        self._openai_client: Optional[OpenAI] = openai_client
        self._http_transport = http_transport

    # ---------- internal helpers ----------

    @property
    def openai_client(self) -> OpenAI:
        if self._openai_client is None:
            api_key = self.cfg.openai_api_key.get_secret_value() if self.cfg.openai_api_key else ""
            if not api_key:
                raise ConfigurationError("OPENAI_API_KEY is not set", code="missing_openai_key")
            kwargs: dict[str, object] = {"api_key": api_key}
            if self.cfg.openai_base_url:
                kwargs["base_url"] = self.cfg.openai_base_url
            if self.cfg.openai_organization:
                kwargs["organization"] = self.cfg.openai_organization
            self._openai_client = OpenAI(**kwargs)
        return self._openai_client

    def _gemini_key(self) -> str:
        key = self.cfg.gemini_api_key.get_secret_value() if self.cfg.gemini_api_key else ""
        if not key:
            raise ConfigurationError(
                "GEMINI_API_KEY not found in environment variables", code="missing_gemini_key"
            )
        return key

    @staticmethod
    def _gemini_text(payload: dict[str, Any]) -> str:
        candidates = payload.get("candidates") or []
        if not candidates:
            return ""
        parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
        if not parts:
            return ""
        return (parts[0] or {}).get("text") or ""

    # ---------- Generation ----------

    def generate(
        self,
        prompt: str,
        *,
        provider: Optional[LLMProvider] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Single-turn text generation for a fully rendered prompt."""
        provider = provider or self.cfg.llm_provider
        temperature = temperature if temperature is not None else self.cfg.llm_temperature

        if provider == LLMProvider.gemini:
            return self._generate_gemini(prompt, temperature=temperature)

        if provider == LLMProvider.openai:
            resp = self.openai_client.chat.completions.create(
                model=self.cfg.openai_model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
            )
            return resp.choices[0].message.content or ""

        raise ValueError(f"Unsupported provider: {provider}")

    def _generate_gemini(self, prompt: str, *, temperature: float) -> str:
        key = self._gemini_key()
        url = f"{self.cfg.gemini_base_url.rstrip('/')}/models/{self.cfg.gemini_model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "topK": self.cfg.gemini_top_k,
                "topP": self.cfg.gemini_top_p,
                "maxOutputTokens": self.cfg.gemini_max_output_tokens,
            },
        }
        with httpx.Client(
            timeout=self.cfg.gemini_timeout_seconds, transport=self._http_transport
        ) as client:
            resp = client.post(url, params={"key": key}, json=body)
            resp.raise_for_status()
            return self._gemini_text(resp.json())


__all__ = ["LLMService"]
