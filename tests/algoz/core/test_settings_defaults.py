from algoz.core.settings import LLMProvider, Settings


def test_realtime_defaults():
    cfg = Settings()
    assert cfg.ws_path == "/ws"
    assert cfg.profile_refresh_interval_seconds == 15.0
    assert cfg.profile_refresh_fire_immediately is False
    assert cfg.ws_reconnect_max_attempts == 5
    assert cfg.ws_reconnect_interval_seconds == 2.0


def test_generation_defaults():
    cfg = Settings()
    assert cfg.llm_provider == LLMProvider.gemini
    assert cfg.llm_temperature == 0.2
    assert cfg.gemini_top_k == 40
    assert cfg.gemini_top_p == 0.95
    assert cfg.gemini_max_output_tokens == 8192


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PROFILE_REFRESH_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("ALGOZ_LLM_PROVIDER", "openai")
    cfg = Settings()
    assert cfg.profile_refresh_interval_seconds == 2.5
    assert cfg.llm_provider == LLMProvider.openai
