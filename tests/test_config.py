from a2a_planner.config import Settings, _parse_bool, _parse_list


def test_parse_list_variants():
    assert _parse_list('["*", "https://a.com"]') == ["*", "https://a.com"]
    assert _parse_list("https://a.com, https://b.com") == ["https://a.com", "https://b.com"]
    assert _parse_list("") == []
    assert _parse_list(["x"]) == ["x"]


def test_parse_bool_strips_comments():
    assert _parse_bool("false   # keep off") is False
    assert _parse_bool("YES") is True
    assert _parse_bool(0) is False


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "Gemini  # model provider")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.com,https://b.com")
    monkeypatch.setenv("MEMORY_ENABLED", "off")
    monkeypatch.setenv("PUSH_NOTIFICATIONS", "carrier-pigeon")
    monkeypatch.setenv("PUBLIC_URL", "https://planner.example/")
    s = Settings()
    assert s.llm_provider == "gemini"
    assert s.cors_allow_origins == ["https://a.com", "https://b.com"]
    assert s.memory_enabled is False
    assert s.push_notifications == "log"
    assert s.agent_url_base == "https://planner.example"


def test_defaults(monkeypatch):
    for key in ("LLM_PROVIDER", "MEMORY_LAST_MESSAGES", "AGENT_NAME"):
        monkeypatch.delenv(key, raising=False)
    s = Settings(_env_file=None)
    assert s.llm_provider == "echo"
    assert s.memory_last_messages == 10
    assert s.agent_name == "Planner Agent"
