import asyncio

import httpx
import pytest

from a2a_planner.errors import ProviderError, ProviderNotReady
from a2a_planner.providers import (
    NotReadyProvider,
    build_provider,
    call_provider,
    list_providers,
    split_system,
)


def test_builtin_providers_are_discovered():
    found = list_providers()
    for pid in ("echo", "gemini", "openai", "ollama"):
        assert found[pid] == "builtin"


def test_echo_is_ready_and_reflects_user_text():
    p = build_provider("echo")
    assert p.ready
    reply = asyncio.run(call_provider(p, [{"role": "system", "content": "sys"}, {"role": "user", "content": "ship v1"}]))
    assert "ship v1" in reply


def test_unknown_provider_falls_back_to_echo():
    assert build_provider("does-not-exist").id == "echo"


def test_alias_resolves_to_gemini(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_GENERATIVE_AI_API_KEY", raising=False)
    p = build_provider("google")
    assert p.id == "gemini"
    assert not p.ready
    with pytest.raises(ProviderNotReady):
        p.generate([{"role": "user", "content": "x"}])


def test_openai_without_key_is_not_ready(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    p = build_provider("openai")
    assert not p.ready
    assert "OPENAI_API_KEY" in p.reason


def test_not_ready_provider_raises_through_shim():
    with pytest.raises(ProviderNotReady):
        asyncio.run(call_provider(NotReadyProvider("x", "missing"), []))


def test_split_system():
    system, turns = split_system([
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
    ])
    assert system == "be brief"
    assert [t["role"] for t in turns] == ["user", "assistant"]


def test_ollama_chat(monkeypatch):
    from a2a_planner.provider_plugins import ollama

    captured = {}

    def fake_post(url, json=None, timeout=None):
        captured.update(url=url, json=json)
        return httpx.Response(200, json={"message": {"role": "assistant", "content": " A plan "}}, request=httpx.Request("POST", url))

    monkeypatch.setattr(ollama.httpx, "post", fake_post)
    p = ollama.Provider()
    messages = [{"role": "user", "content": "plan"}]
    assert p.generate(messages) == "A plan"
    assert captured["url"].endswith("/api/chat")
    assert captured["json"]["messages"] == messages
    assert captured["json"]["stream"] is False


def test_ollama_errors_raise(monkeypatch):
    from a2a_planner.provider_plugins import ollama

    def fake_post(url, json=None, timeout=None):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(ollama.httpx, "post", fake_post)
    with pytest.raises(ProviderError, match="connection refused"):
        ollama.Provider().generate([{"role": "user", "content": "plan"}])
